from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from portal.api.deps import (
    clear_session_cookie,
    get_current_user,
    get_session_context,
    get_session_store,
    set_session_cookie,
)
from portal.core.config import settings
from portal.core.rate_limit import limiter
from portal.core.roles import KIND_USER
from portal.db.session import get_db
from portal.models.user import User
from portal.schemas.auth import CurrentUserOut, LoginRequest, SignupRequest, UserSessionOut
from portal.schemas.base import MessageOut
from portal.services import identity
from portal.services.identity import SessionContext
from portal.services.sessions import SessionStore

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=UserSessionOut)
@limiter.limit(settings.SIGNUP_RATE_LIMIT)
def signup(
    request: Request,
    data: SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    ctx: SessionContext = Depends(get_session_context),
):
    user, sid = identity.signup(db, store, ctx, data)
    token = set_session_cookie(response, sid)
    return {"user": user, "access_token": token}


@router.post("/login", response_model=UserSessionOut)
def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    ctx: SessionContext = Depends(get_session_context),
):
    user, sid = identity.login(db, store, ctx, KIND_USER, data.email, data.password)
    token = set_session_cookie(response, sid)
    return {"user": user, "access_token": token}


@router.post("/logout", response_model=MessageOut)
def logout(
    response: Response,
    store: SessionStore = Depends(get_session_store),
    ctx: SessionContext = Depends(get_session_context),
):
    identity.logout(store, ctx, KIND_USER)
    clear_session_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=CurrentUserOut)
def current_user(user: User = Depends(get_current_user)):
    return {"user": user}
