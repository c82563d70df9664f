import pytest

from portal.core import errors
from portal.core.roles import KIND_ADMIN, KIND_USER
from portal.core.security import hash_password, verify_password
from portal.crud import crud_credentials
from portal.schemas.auth import SignupRequest
from portal.services import identity
from portal.services.identity import SessionContext
from portal.services.sessions import MemorySessionStore


@pytest.fixture
def store():
    return MemorySessionStore(ttl_minutes=60)


@pytest.fixture
def user(session):
    u = crud_credentials.create(
        session, KIND_USER, "secret1", name="Ana", email=" A@X.com ", discord_id="ana#1"
    )
    session.commit()
    return u


@pytest.fixture
def admin(session):
    a = crud_credentials.create(session, KIND_ADMIN, "adminpass", email="boss@x.com")
    session.commit()
    return a


def test_password_hash_is_salted_and_verifies():
    h1 = hash_password("secret1")
    h2 = hash_password("secret1")
    assert h1 != h2
    assert "secret1" not in h1
    assert verify_password("secret1", h1)
    assert not verify_password("secret2", h1)


def test_emails_are_normalized(session, user):
    assert user.email == "a@x.com"
    assert crud_credentials.find_by_email(session, KIND_USER, "A@x.COM").id == user.id


def test_kinds_do_not_overlap(session, user):
    assert crud_credentials.find_by_email(session, KIND_ADMIN, "a@x.com") is None


def test_unknown_kind(session):
    with pytest.raises(ValueError):
        crud_credentials.find_by_email(session, "superuser", "a@x.com")


def test_bad_password_and_unknown_email_fail_identically(session, user):
    with pytest.raises(errors.AuthenticationError) as wrong_pw:
        identity.authenticate(session, KIND_USER, "a@x.com", "nope")
    with pytest.raises(errors.AuthenticationError) as no_user:
        identity.authenticate(session, KIND_USER, "ghost@x.com", "secret1")
    assert wrong_pw.value.detail == no_user.value.detail == "Invalid email or password"
    assert wrong_pw.value.status_code == 401


def test_login_binds_slot_and_rotates_sid(session, store, user):
    old_sid = store.create({})
    ctx = SessionContext(sid=old_sid, data={})

    principal, sid = identity.login(session, store, ctx, KIND_USER, "a@x.com", "secret1")

    assert principal.id == user.id
    assert sid != old_sid
    assert store.read(old_sid) is None
    assert store.read(sid) == {"user_id": user.id}


def test_admin_login_keeps_user_slot(session, store, user, admin):
    _, sid = identity.login(session, store, SessionContext(), KIND_USER, "a@x.com", "secret1")
    ctx = SessionContext(sid=sid, data=store.read(sid))
    _, sid2 = identity.login(session, store, ctx, KIND_ADMIN, "boss@x.com", "adminpass")

    assert store.read(sid2) == {"user_id": user.id, "admin_id": admin.id}


def test_admin_logout_clears_only_admin_slot(session, store, user, admin):
    sid = store.create({"user_id": user.id, "admin_id": admin.id})
    ctx = SessionContext(sid=sid, data=store.read(sid))

    assert identity.logout(store, ctx, KIND_ADMIN) == sid
    assert store.read(sid) == {"user_id": user.id}


def test_user_logout_destroys_session_and_is_idempotent(store):
    sid = store.create({"user_id": 1})
    ctx = SessionContext(sid=sid, data={"user_id": 1})

    assert identity.logout(store, ctx, KIND_USER) is None
    assert store.read(sid) is None
    assert identity.logout(store, ctx, KIND_USER) is None
    assert identity.logout(store, SessionContext(), KIND_ADMIN) is None


def test_require(session, user):
    assert identity.require(session, SessionContext(sid="s", data={"user_id": user.id}), KIND_USER).id == user.id

    with pytest.raises(errors.AuthenticationError, match="Authentication required"):
        identity.require(session, SessionContext(), KIND_USER)
    with pytest.raises(errors.AuthenticationError, match="Admin authentication required"):
        identity.require(session, SessionContext(sid="s", data={"user_id": user.id}), KIND_ADMIN)
    with pytest.raises(errors.AuthenticationError, match="User not found"):
        identity.require(session, SessionContext(sid="s", data={"user_id": 999}), KIND_USER)


def test_signup_rejects_duplicate_email(session, store, user):
    data = SignupRequest(name="Other", email="a@x.com", discordId="o#2", password="secret1")
    with pytest.raises(errors.ConflictError, match="already exists"):
        identity.signup(session, store, SessionContext(), data)
