import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import portal.models  # noqa: F401
from portal.core.config import settings
from portal.core.rate_limit import limiter
from portal.db.base import Base
from portal.db.init_db import seed_default_admin
from portal.db.session import get_db
from portal.main import app
from portal.services.sessions import MemorySessionStore
from portal.services.settings_flags import set_registration_open

ADMIN_EMAIL = "admin@tournament.com"
ADMIN_PASSWORD = "admin123!"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def engine(tmp_path):
    # use a temporary SQLite database per test
    eng = create_engine(
        f"sqlite:///{tmp_path / 'test.sqlite'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture(autouse=True)
def reset_rate_limit():
    # Counters are per process; start every test with a clean slate
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", ADMIN_PASSWORD)
    return path


@pytest.fixture
def test_app(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    previous_store = app.state.session_store
    app.dependency_overrides[get_db] = override_get_db
    app.state.session_store = MemorySessionStore(ttl_minutes=60)
    yield app
    app.dependency_overrides.clear()
    app.state.session_store = previous_store


@pytest.fixture
def make_client(test_app):
    # Each client keeps its own cookie jar, i.e. its own browser session
    def _make():
        return TestClient(test_app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def registration_open(session):
    set_registration_open(session, True)


@pytest.fixture
def admin_client(make_client, session):
    seed_default_admin(session)
    c = make_client()
    r = c.post("/api/admin/login", json={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    return c


def signup(client, email="leader@example.com", password="secret1", name="Leader", discord_id="leader#0001"):
    r = client.post(
        "/api/auth/signup",
        json={"name": name, "email": email, "discordId": discord_id, "password": password},
    )
    assert r.status_code == 200, r.text
    return r.json()["user"]


def register(client, team_name="Night Owls", members=None, proof=None):
    if members is None:
        members = [{"ign": f"player{i}", "discord": f"p{i}#1"} for i in range(1, 6)]
    files = {"paymentProof": proof} if proof else None
    return client.post(
        "/api/teams/register",
        data={"teamName": team_name, "members": json.dumps(members)},
        files=files,
    )


@pytest.fixture
def user_client(make_client):
    c = make_client()
    c.user = signup(c)
    return c
