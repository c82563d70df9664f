# portal/services/identity.py
"""
Login, logout and principal resolution on top of the session store.

Session data has one slot per principal kind (`user_id`, `admin_id`). A slot
holds a single id; logging in as a kind overwrites only that slot.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.core import errors
from portal.core.roles import KIND_ADMIN, KIND_USER, SESSION_SLOTS
from portal.core.security import dummy_verify, verify_password
from portal.crud import crud_credentials
from portal.crud.crud_credentials import Principal
from portal.models.user import User
from portal.schemas.auth import SignupRequest
from portal.services.sessions import SessionStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = {
    KIND_USER: "Invalid email or password",
    KIND_ADMIN: "Invalid admin credentials",
}
AUTH_REQUIRED = {
    KIND_USER: "Authentication required",
    KIND_ADMIN: "Admin authentication required",
}
PRINCIPAL_MISSING = {
    KIND_USER: "User not found",
    KIND_ADMIN: "Admin not found",
}


@dataclass
class SessionContext:
    """The caller's session as resolved from the request. `sid` is None for anonymous callers."""

    sid: Optional[str] = None
    data: dict = field(default_factory=dict)


def authenticate(db: Session, kind: str, email: str, password: str) -> Principal:
    principal = crud_credentials.find_by_email(db, kind, email)
    if principal is None:
        dummy_verify()
        ok = False
    else:
        ok = verify_password(password, principal.password_hash)

    if not ok:
        # Mismo mensaje para "no existe" y "contraseña mal"
        logger.info("Failed %s login for %s", kind, crud_credentials.normalize_email(email))
        raise errors.AuthenticationError(INVALID_CREDENTIALS[kind])
    return principal


def _bind(store: SessionStore, ctx: SessionContext, kind: str, principal_id: int) -> str:
    data = dict(ctx.data)
    data[SESSION_SLOTS[kind]] = principal_id
    # Nuevo sid en cada login
    if ctx.sid:
        store.destroy(ctx.sid)
    return store.create(data)


def login(
    db: Session, store: SessionStore, ctx: SessionContext, kind: str, email: str, password: str
) -> tuple[Principal, str]:
    principal = authenticate(db, kind, email, password)
    sid = _bind(store, ctx, kind, principal.id)
    logger.info("%s %s logged in", kind.capitalize(), principal.email)
    return principal, sid


def signup(db: Session, store: SessionStore, ctx: SessionContext, data: SignupRequest) -> tuple[User, str]:
    if crud_credentials.find_by_email(db, KIND_USER, data.email):
        raise errors.ConflictError("User already exists with this email")

    try:
        user = crud_credentials.create(
            db,
            KIND_USER,
            data.password,
            name=data.name,
            email=data.email,
            discord_id=data.discord_id,
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise errors.ConflictError("User already exists with this email")
    db.refresh(user)

    sid = _bind(store, ctx, KIND_USER, user.id)
    logger.info("New user %s signed up", user.email)
    return user, sid


def logout(store: SessionStore, ctx: SessionContext, kind: str) -> Optional[str]:
    """Returns the sid still in use after logout, or None if the session is gone."""
    if not ctx.sid:
        return None

    if kind == KIND_USER:
        store.destroy(ctx.sid)
        return None

    data = dict(ctx.data)
    data.pop(SESSION_SLOTS[kind], None)
    store.write(ctx.sid, data)
    return ctx.sid


def resolve(db: Session, ctx: SessionContext, kind: str) -> Optional[Principal]:
    principal_id = ctx.data.get(SESSION_SLOTS[kind])
    if principal_id is None:
        return None
    return crud_credentials.get_by_id(db, kind, int(principal_id))


def require(db: Session, ctx: SessionContext, kind: str) -> Principal:
    if ctx.data.get(SESSION_SLOTS[kind]) is None:
        raise errors.AuthenticationError(AUTH_REQUIRED[kind])
    principal = resolve(db, ctx, kind)
    if principal is None:
        raise errors.AuthenticationError(PRINCIPAL_MISSING[kind])
    return principal
