from ..extensions import db
from .user import utc_now

class Subject(db.Model):
    __tablename__ = "subject"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    code = db.Column(db.String(32), unique=True, nullable=False)
    credits = db.Column(db.Integer, nullable=False, default=0)
    # owner; deleting the user leaves the subject alone
    teacher_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now)

    teacher = db.relationship("User", back_populates="subjects")
    marks = db.relationship("Mark", back_populates="subject",
                            cascade="all, delete-orphan")

    def summary(self):
        return {"id": self.id, "name": self.name, "code": self.code, "credits": self.credits}

    def to_dict(self):
        d = self.summary()
        d["teacherId"] = self.teacher_id
        d["teacher"] = ({"id": self.teacher.id, "name": self.teacher.name,
                         "email": self.teacher.email} if self.teacher else None)
        d["createdAt"] = self.created_at.isoformat()
        return d
