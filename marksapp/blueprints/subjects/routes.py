import logging

from flask import jsonify, request

from ...errors import Conflict, ValidationError
from ...extensions import db
from ...models import Subject, User
from ...security.gate import Action, enforce
from ...security.identity import Role
from ...security.session import current_identity, login_required
from ..auth.routes import json_body, parse_int
from . import bp

logger = logging.getLogger(__name__)

def parse_credits(raw):
    return parse_int(raw, "Credits must be a whole number")

def resolve_owner(identity, data):
    if identity.role is Role.TEACHER:
        return identity.user_id
    # admins create on behalf of a named teacher
    teacher_id = data.get("teacherId")
    if teacher_id is None:
        raise ValidationError("teacherId is required when an admin creates a subject")
    teacher = db.session.get(User, parse_int(teacher_id, "teacherId must reference an existing teacher"))
    if teacher is None or teacher.role is not Role.TEACHER:
        raise ValidationError("teacherId must reference an existing teacher")
    return teacher.id

def ensure_code_free(code, subject_id=None):
    q = Subject.query.filter(Subject.code == code)
    if subject_id is not None:
        q = q.filter(Subject.id != subject_id)
    if q.first():
        raise Conflict("Subject with this code already exists")

@bp.get("")
@login_required
def list_subjects():
    teacher_id = request.args.get("teacherId", type=int)
    q = Subject.query
    if teacher_id is not None:
        q = q.filter_by(teacher_id=teacher_id)
    items = q.order_by(Subject.name.asc()).all()
    return jsonify([s.to_dict() for s in items])

@bp.post("")
@login_required
def create_subject():
    ident = current_identity()
    data = json_body()
    name = str(data.get("name") or "").strip()
    code = str(data.get("code") or "").strip()
    if not name or not code or data.get("credits") is None:
        raise ValidationError("Missing required fields: name, code, credits")
    credits = parse_credits(data.get("credits"))

    s = Subject(name=name, code=code, credits=credits,
                teacher_id=resolve_owner(ident, data))
    enforce(ident, Action.CREATE, s)
    ensure_code_free(code)

    db.session.add(s)
    db.session.commit()
    logger.info("subject %s (%s) created for teacher %s", s.id, s.code, s.teacher_id)
    return jsonify(s.to_dict()), 201

@bp.get("/<int:subject_id>")
@login_required
def get_subject(subject_id):
    s = db.get_or_404(Subject, subject_id, description="Subject not found")
    enforce(current_identity(), Action.READ, s)
    return jsonify(s.to_dict())

@bp.patch("/<int:subject_id>")
@login_required
def update_subject(subject_id):
    s = db.get_or_404(Subject, subject_id, description="Subject not found")
    enforce(current_identity(), Action.UPDATE, s)
    data = json_body()

    if "name" in data:
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        s.name = name
    if "code" in data:
        code = str(data.get("code") or "").strip()
        if not code:
            raise ValidationError("Code cannot be empty")
        ensure_code_free(code, subject_id=s.id)
        s.code = code
    if "credits" in data:
        s.credits = parse_credits(data.get("credits"))

    db.session.commit()
    return jsonify(s.to_dict())

@bp.delete("/<int:subject_id>")
@login_required
def delete_subject(subject_id):
    s = db.get_or_404(Subject, subject_id, description="Subject not found")
    enforce(current_identity(), Action.DELETE, s)
    payload = s.to_dict()
    db.session.delete(s)   # marks go with it
    db.session.commit()
    logger.info("subject %s deleted by user %s", subject_id, current_identity().user_id)
    return jsonify(payload)
