import logging

from email_validator import validate_email, EmailNotValidError
from flask import current_app, jsonify, request
from werkzeug.security import check_password_hash, generate_password_hash

from ...errors import Conflict, ValidationError
from ...extensions import db
from ...models.user import User
from ...security.identity import Identity, Role
from ...security.session import current_identity, login_required
from . import bp

logger = logging.getLogger(__name__)

def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return data

def parse_int(raw, message):
    # JSON numbers: 3 and 3.0 pass, 3.5 and true do not
    if isinstance(raw, bool):
        raise ValidationError(message)
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValidationError(message)
        return int(raw)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(message) from None

def normalize_email(raw):
    try:
        return validate_email(raw, check_deliverability=False).normalized.lower()
    except EmailNotValidError:
        raise ValidationError("Invalid email address") from None

def create_user(email, name, password, role=Role.TEACHER):
    email = normalize_email(str(email or "").strip())
    name = str(name or "").strip()
    if len(name) < 2:
        raise ValidationError("Name must be at least 2 characters")
    password = str(password or "")
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters")
    if User.query.filter_by(email=email).one_or_none():
        raise Conflict("Email already in use")
    u = User(email=email, name=name, password_hash=generate_password_hash(password),
             role=Role.parse(role))
    db.session.add(u)
    db.session.commit()
    return u

def _set_auth_cookie(resp, token):
    cfg = current_app.config
    resp.set_cookie(
        cfg["AUTH_COOKIE_NAME"], token,
        max_age=int(cfg["AUTH_TOKEN_TTL"]),
        httponly=True,
        secure=cfg.get("AUTH_COOKIE_SECURE", False),
        samesite="Lax",
        path="/",
    )

@bp.post("/register")
def register():
    data = json_body()
    u = create_user(data.get("email"), data.get("name"), data.get("password"))
    logger.info("registered user %s", u.id)
    return jsonify(message="User registered successfully", user=u.to_dict()), 201

@bp.post("/login")
def login():
    data = json_body()
    raw_email = str(data.get("email") or "").strip()
    password = str(data.get("password") or "")
    if not raw_email or not password:
        raise ValidationError("Missing required fields (email, password)")

    try:
        email = normalize_email(raw_email)
    except ValidationError:
        email = None
    u = User.query.filter_by(email=email).one_or_none() if email else None
    if not u or not check_password_hash(u.password_hash, password):
        logger.info("failed login for %s", raw_email)
        return jsonify(message="Invalid email or password"), 401

    token = current_app.extensions["marks_tokens"].issue(Identity.from_user(u))
    resp = jsonify(message="Login successful", user=u.to_dict())
    _set_auth_cookie(resp, token)
    return resp

@bp.post("/logout")
def logout():
    # tokens are stateless: dropping the cookie is all there is
    resp = jsonify(message="Logout successful")
    resp.delete_cookie(current_app.config["AUTH_COOKIE_NAME"], path="/",
                       httponly=True, samesite="Lax")
    return resp

@bp.get("/session")
@login_required
def session():
    return jsonify(user=current_identity().to_dict())
