from ..extensions import db

MIN_MARK = 0.0
MAX_MARK = 100.0

class Mark(db.Model):
    __tablename__ = "mark"
    id = db.Column(db.Integer, primary_key=True)
    value = db.Column(db.Float, nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False)
    subject_id = db.Column(db.Integer, db.ForeignKey("subject.id"), nullable=False)
    __table_args__ = (
        db.UniqueConstraint("student_id", "subject_id", name="uq_student_subject"),
        db.CheckConstraint("value >= 0 AND value <= 100", name="ck_value_0_100"),
    )

    student = db.relationship("Student", back_populates="marks")
    subject = db.relationship("Subject", back_populates="marks")

    def to_dict(self):
        return {
            "id": self.id,
            "value": self.value,
            "studentId": self.student_id,
            "subjectId": self.subject_id,
            "student": self.student.summary() if self.student else None,
            "subject": self.subject.summary() if self.subject else None,
        }
