import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.core.roles import KIND_ADMIN
from portal.crud import crud_credentials
from portal.db.base import Base
from portal.db.session import engine as default_engine
from portal.models.setting import REGISTRATION_OPEN_KEY, Setting

# IMPORTANTE: esto "registra" los modelos antes de crear tablas
import portal.models  # noqa: F401

logger = logging.getLogger(__name__)


def seed_default_admin(db: Session) -> bool:
    if crud_credentials.count(db, KIND_ADMIN) > 0:
        return False

    crud_credentials.create(
        db,
        KIND_ADMIN,
        settings.DEFAULT_ADMIN_PASSWORD,
        email=settings.DEFAULT_ADMIN_EMAIL,
    )
    db.commit()
    logger.warning(
        "Seeded default admin %s. Rotate it now: Scripts/reset_admin_password.py",
        settings.DEFAULT_ADMIN_EMAIL,
    )
    return True


def seed_registration_flag(db: Session, is_open: Optional[bool]) -> bool:
    # Sólo si falta; nunca pisa lo que haya puesto un admin
    if is_open is None or db.get(Setting, REGISTRATION_OPEN_KEY) is not None:
        return False
    db.add(Setting(key=REGISTRATION_OPEN_KEY, value="true" if is_open else "false"))
    db.commit()
    logger.info("Seeded %s=%s", REGISTRATION_OPEN_KEY, is_open)
    return True


def init_db(engine: Engine = default_engine):
    """Create tables and seed bootstrap rows. Run once before serving."""
    Base.metadata.create_all(bind=engine)
    with Session(bind=engine) as db:
        seed_default_admin(db)
        seed_registration_flag(db, settings.REGISTRATION_OPEN_ON_BOOT)
