import logging

from flask import Flask, jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .errors import ConfigError, MarksError
from .extensions import db, migrate
from .security.session import SessionResolver
from .security.tokens import TokenService

logger = logging.getLogger(__name__)

def register_error_handlers(app):
    @app.errorhandler(MarksError)
    def marks_error(e):
        return jsonify(message=e.message), e.status_code

    @app.errorhandler(IntegrityError)
    def integrity_error(e):
        db.session.rollback()
        logger.warning("integrity error: %s", e.orig)
        return jsonify(message="Conflict with existing data"), 409

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify(message=e.description), e.code

    @app.errorhandler(Exception)
    def unexpected_error(e):
        logger.exception("unhandled error")
        return jsonify(message="Internal Server Error"), 500

def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)
    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))

    if not app.config.get("SECRET_KEY"):
        raise ConfigError("SECRET_KEY is not configured; refusing to start")

    tokens = TokenService.from_config(app.config)
    app.extensions["marks_tokens"] = tokens
    app.extensions["marks_session"] = SessionResolver(
        tokens, cookie_name=app.config.get("AUTH_COOKIE_NAME", "auth_token"))

    db.init_app(app)
    migrate.init_app(app, db)

    from . import models

    from .blueprints.auth import bp as auth_bp
    from .blueprints.students import bp as students_bp
    from .blueprints.subjects import bp as subjects_bp
    from .blueprints.marks import bp as marks_bp
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(students_bp, url_prefix="/api/students")
    app.register_blueprint(subjects_bp, url_prefix="/api/subjects")
    app.register_blueprint(marks_bp, url_prefix="/api/marks")
    register_error_handlers(app)

    from .commands import register_commands
    register_commands(app)

    return app
