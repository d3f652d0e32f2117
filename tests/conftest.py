import pytest
from fastapi.testclient import TestClient

from database import init_db
from main import create_app
from models import User
from security import hash_password
from settings import Settings

SECRET = "test-secret"


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", jwt_secret_key=SECRET, log_level="WARNING")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app):
    init_db(app.state.engine)
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session):
    def _make(email="alice@mail.com", password="secret123", **extra):
        user = User(email=email, password=hash_password(password), **extra)
        db_session.add(user)
        db_session.commit()
        return user

    return _make


def signup(client, email="alice@mail.com", password="secret123", **extra):
    resp = client.post("/api/signup", json={"email": email, "password": password, **extra})
    assert resp.status_code == 201, resp.text
    return resp.json()["accessToken"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    return bearer(signup(client, "alice@mail.com"))


@pytest.fixture
def bob(client):
    return bearer(signup(client, "bob@mail.com"))
