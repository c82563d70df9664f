# portal/services/settings_flags.py
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.models.setting import REGISTRATION_OPEN_KEY, Setting

logger = logging.getLogger(__name__)


def get_setting(db: Session, key: str) -> Optional[str]:
    row = db.get(Setting, key)
    return row.value if row else None


def set_setting(db: Session, key: str, value: str) -> None:
    """Upsert on the primary key. Commits."""
    row = db.get(Setting, key)
    if row:
        row.value = value
        db.commit()
        return

    db.add(Setting(key=key, value=value))
    try:
        db.commit()
    except IntegrityError:
        # Otro request lo insertó entre medias: actualizamos
        db.rollback()
        row = db.get(Setting, key)
        row.value = value
        db.commit()


def is_registration_open(db: Session) -> bool:
    # Sin valor = cerrado
    return get_setting(db, REGISTRATION_OPEN_KEY) == "true"


def set_registration_open(db: Session, is_open: bool) -> bool:
    set_setting(db, REGISTRATION_OPEN_KEY, "true" if is_open else "false")
    logger.info("Registration %s", "opened" if is_open else "closed")
    return is_open
