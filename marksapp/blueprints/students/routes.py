import logging

from flask import jsonify
from sqlalchemy import or_

from ...errors import Conflict, ValidationError
from ...extensions import db
from ...models import Student
from ...security.gate import Action, enforce
from ...security.session import current_identity, login_required
from ..auth.routes import json_body
from . import bp

logger = logging.getLogger(__name__)

@bp.get("")
@login_required
def list_students():
    items = Student.query.order_by(Student.name.asc()).all()
    return jsonify([s.to_dict() for s in items])

@bp.post("")
@login_required
def create_student():
    data = json_body()
    username = str(data.get("username") or "").strip()
    usn = str(data.get("usn") or "").strip()
    name = str(data.get("name") or "").strip()
    if not username or not usn or not name:
        raise ValidationError("Missing required fields")

    s = Student(username=username, usn=usn, name=name)
    enforce(current_identity(), Action.CREATE, s)

    exists = Student.query.filter(or_(Student.usn == usn, Student.username == username)).first()
    if exists:
        raise Conflict("Student with this USN or username already exists")
    db.session.add(s)
    db.session.commit()
    logger.info("student %s created by user %s", s.id, current_identity().user_id)
    return jsonify(s.to_dict()), 201
