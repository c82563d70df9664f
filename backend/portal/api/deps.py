from typing import Optional

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.core.roles import KIND_ADMIN, KIND_USER
from portal.core.security import create_session_token, decode_session_token
from portal.db.session import get_db
from portal.models.admin import Admin
from portal.models.user import User
from portal.services import identity
from portal.services.identity import SessionContext
from portal.services.sessions import SessionStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_session_context(
    request: Request,
    response: Response,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: SessionStore = Depends(get_session_store),
) -> SessionContext:
    # Cookie primero; Bearer para clientes que no usan cookies
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    from_cookie = bool(token)
    if not token and creds is not None and creds.scheme.lower() == "bearer":
        token = creds.credentials
    if not token:
        return SessionContext()

    sid = decode_session_token(token)
    if sid is None:
        return SessionContext()

    data = store.read(sid)
    if data is None:
        return SessionContext()

    # Sesión deslizante: cada request renueva la caducidad
    store.touch(sid)
    if from_cookie:
        set_session_cookie(response, sid)
    return SessionContext(sid=sid, data=data)


def get_current_user(
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
) -> User:
    return identity.require(db, ctx, KIND_USER)


def get_current_admin(
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
) -> Admin:
    return identity.require(db, ctx, KIND_ADMIN)


def get_optional_user(
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
) -> Optional[User]:
    return identity.resolve(db, ctx, KIND_USER)


def get_optional_admin(
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
) -> Optional[Admin]:
    return identity.resolve(db, ctx, KIND_ADMIN)


def _drop_session_cookie(response: Response) -> None:
    # Sólo un Set-Cookie de sesión por respuesta; gana el último
    prefix = f"{settings.SESSION_COOKIE_NAME}=".encode()
    response.raw_headers = [
        (k, v) for k, v in response.raw_headers
        if not (k.lower() == b"set-cookie" and v.startswith(prefix))
    ]


def set_session_cookie(response: Response, sid: str) -> str:
    _drop_session_cookie(response)
    token = create_session_token(sid)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.SESSION_EXPIRE_MIN * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return token


def clear_session_cookie(response: Response) -> None:
    _drop_session_cookie(response)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
