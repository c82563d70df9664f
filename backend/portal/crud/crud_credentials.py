# portal/crud/crud_credentials.py
from typing import Optional, Union

from sqlalchemy.orm import Session

from portal.core.roles import KIND_ADMIN, KIND_USER
from portal.core.security import hash_password
from portal.models.admin import Admin
from portal.models.user import User

Principal = Union[User, Admin]

MODEL_BY_KIND = {
    KIND_USER: User,
    KIND_ADMIN: Admin,
}


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _model(kind: str):
    try:
        return MODEL_BY_KIND[kind]
    except KeyError:
        raise ValueError(f"Unknown principal kind: {kind}")


def find_by_email(db: Session, kind: str, email: str) -> Optional[Principal]:
    model = _model(kind)
    return db.query(model).filter(model.email == normalize_email(email)).first()


def get_by_id(db: Session, kind: str, principal_id: int) -> Optional[Principal]:
    return db.get(_model(kind), principal_id)


def count(db: Session, kind: str) -> int:
    return db.query(_model(kind)).count()


def create(db: Session, kind: str, password: str, **fields) -> Principal:
    """Insert a principal with a hashed password. Caller commits."""
    model = _model(kind)
    fields["email"] = normalize_email(fields.get("email", ""))
    principal = model(password_hash=hash_password(password), **fields)
    db.add(principal)
    db.flush()
    return principal


def set_password(db: Session, principal: Principal, password: str) -> None:
    principal.password_hash = hash_password(password)
    db.flush()
