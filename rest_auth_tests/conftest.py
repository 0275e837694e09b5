"""
Shared fixtures: an app per test backed by its own SQLite file.
"""
import pytest
from fastapi.testclient import TestClient

from rest_auth.config import Settings
from rest_auth.db import init_db
from rest_auth.main import create_app
from rest_auth.models import Account, Role
from rest_auth.service import AccountService

PASSWORD = "pw123456"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET="test-access-secret",
        REFRESH_JWT_SECRET="test-refresh-secret",
        HOST="test-host",
        LOG_DIR=str(tmp_path / "logs"),
    )


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
    yield session
    session.close()


@pytest.fixture
def service(db_session, settings):
    return AccountService(db_session, settings)


@pytest.fixture
def register(client):
    """Register an account through the API and return the response JSON."""
    def _register(email, name="test", password=PASSWORD):
        resp = client.put("/api/auth/create", json={
            "name": name,
            "email": email,
            "password": password,
            "passwordOld": password,
        })
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _register


@pytest.fixture
def auth_headers(client):
    def _auth_headers(email, password=PASSWORD):
        resp = client.post("/api/auth/login", json={"login": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return _auth_headers


@pytest.fixture
def promote(app):
    """Make an account ADMIN directly in the store."""
    def _promote(email):
        session = app.state.session_factory()
        try:
            account = session.query(Account).filter(Account.email == email).first()
            account.role = Role.ADMIN
            session.commit()
        finally:
            session.close()
    return _promote
