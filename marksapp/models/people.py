from ..extensions import db
from .user import utc_now

class Student(db.Model):
    __tablename__ = "student"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    usn = db.Column(db.String(32), unique=True, nullable=False)   # university serial number
    name = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now)

    marks = db.relationship("Mark", back_populates="student",
                            cascade="all, delete-orphan")

    def summary(self):
        return {"id": self.id, "name": self.name, "usn": self.usn, "username": self.username}

    def to_dict(self):
        d = self.summary()
        d["createdAt"] = self.created_at.isoformat()
        return d
