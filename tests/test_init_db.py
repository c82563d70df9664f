from portal.core.config import settings
from portal.core.roles import KIND_ADMIN
from portal.core.security import verify_password
from portal.crud import crud_credentials
from portal.db.init_db import init_db, seed_default_admin, seed_registration_flag
from portal.models.admin import Admin
from portal.models.setting import REGISTRATION_OPEN_KEY
from portal.services.settings_flags import get_setting, set_registration_open


def test_seed_default_admin_once(session):
    assert seed_default_admin(session) is True
    assert seed_default_admin(session) is False
    assert session.query(Admin).count() == 1

    admin = crud_credentials.find_by_email(session, KIND_ADMIN, settings.DEFAULT_ADMIN_EMAIL)
    assert admin.password_hash != settings.DEFAULT_ADMIN_PASSWORD
    assert verify_password(settings.DEFAULT_ADMIN_PASSWORD, admin.password_hash)


def test_no_seed_when_an_admin_exists(session):
    crud_credentials.create(session, KIND_ADMIN, "rotated-pass", email="ops@x.com")
    session.commit()
    assert seed_default_admin(session) is False
    assert crud_credentials.find_by_email(session, KIND_ADMIN, settings.DEFAULT_ADMIN_EMAIL) is None


def test_registration_flag_seed(session):
    assert seed_registration_flag(session, None) is False
    assert get_setting(session, REGISTRATION_OPEN_KEY) is None

    assert seed_registration_flag(session, True) is True
    assert get_setting(session, REGISTRATION_OPEN_KEY) == "true"


def test_registration_flag_seed_never_overwrites(session):
    set_registration_open(session, False)
    assert seed_registration_flag(session, True) is False
    assert get_setting(session, REGISTRATION_OPEN_KEY) == "false"


def test_init_db_on_fresh_engine(engine, session, monkeypatch):
    monkeypatch.setattr(settings, "REGISTRATION_OPEN_ON_BOOT", True)
    init_db(engine)
    init_db(engine)
    assert session.query(Admin).count() == 1
    assert get_setting(session, REGISTRATION_OPEN_KEY) == "true"
