import pytest

from config import TestConfig
from marksapp import create_app
from marksapp.blueprints.auth.routes import create_user
from marksapp.extensions import db
from marksapp.security.identity import Role

PASSWORD = "secret123"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(email, name="Some Teacher", role=Role.TEACHER, password=PASSWORD):
        with app.app_context():
            return create_user(email, name, password, role=role).id
    return _make


@pytest.fixture
def login_as(app, make_user):
    """Create a user and return a test client holding its auth cookie."""
    def _login(email, role=Role.TEACHER, name="Some Teacher"):
        make_user(email, name=name, role=role)
        c = app.test_client()
        resp = c.post("/api/auth/login", json={"email": email, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return c
    return _login
