import logging

from flask import jsonify, request
from sqlalchemy.orm import selectinload

from ...errors import ValidationError
from ...extensions import db
from ...models import Mark, Student, Subject
from ...models.mark import MAX_MARK, MIN_MARK
from ...security.gate import Action, enforce
from ...security.session import current_identity, login_required
from ..auth.routes import json_body, parse_int
from . import bp

logger = logging.getLogger(__name__)

def parse_id(raw, field):
    if raw is None:
        raise ValidationError("Missing required fields")
    return parse_int(raw, f"{field} must be an integer id")

def parse_value(raw):
    if raw is None or isinstance(raw, bool):
        raise ValidationError("Missing required fields")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError("Mark value must be a number") from None
    if not (MIN_MARK <= value <= MAX_MARK):
        raise ValidationError(f"Mark value must be between {MIN_MARK:g} and {MAX_MARK:g}")
    return value

@bp.get("")
@login_required
def list_marks():
    subject_id = request.args.get("subjectId", type=int)
    student_id = request.args.get("studentId", type=int)

    q = (Mark.query.join(Student)
         .options(selectinload(Mark.student), selectinload(Mark.subject)))
    if subject_id is not None:
        q = q.filter(Mark.subject_id == subject_id)
    if student_id is not None:
        q = q.filter(Mark.student_id == student_id)
    items = q.order_by(Student.name.asc()).all()
    return jsonify([m.to_dict() for m in items])

@bp.post("")
@login_required
def upsert_mark():
    ident = current_identity()
    data = json_body()
    student_id = parse_id(data.get("studentId"), "studentId")
    subject_id = parse_id(data.get("subjectId"), "subjectId")
    value = parse_value(data.get("value"))

    student = db.get_or_404(Student, student_id, description="Student not found")
    subject = db.get_or_404(Subject, subject_id, description="Subject not found")

    m = Mark.query.filter_by(student_id=student.id, subject_id=subject.id).one_or_none()
    if m is not None:
        enforce(ident, Action.UPDATE, m)
        m.value = value
        db.session.commit()
        logger.info("mark %s updated to %s by user %s", m.id, value, ident.user_id)
        return jsonify(m.to_dict())

    # ids only: the gate resolves the owner without touching subject.marks
    m = Mark(value=value, student_id=student.id, subject_id=subject.id)
    enforce(ident, Action.CREATE, m)
    db.session.add(m)
    db.session.commit()
    logger.info("mark %s created by user %s", m.id, ident.user_id)
    return jsonify(m.to_dict()), 201
