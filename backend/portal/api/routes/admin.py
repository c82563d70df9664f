from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from portal.api.deps import (
    get_current_admin,
    get_session_context,
    get_session_store,
    set_session_cookie,
)
from portal.core.roles import KIND_ADMIN
from portal.db.session import get_db
from portal.models.admin import Admin
from portal.schemas.auth import AdminCheckOut, AdminLoginRequest, AdminSessionOut
from portal.schemas.base import MessageOut
from portal.schemas.settings import RegistrationToggleOut, RegistrationToggleRequest
from portal.schemas.team import RejectRequest, TeamListOut
from portal.services import identity, team_lifecycle
from portal.services.identity import SessionContext
from portal.services.sessions import SessionStore
from portal.services.settings_flags import set_registration_open

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login", response_model=AdminSessionOut)
def admin_login(
    data: AdminLoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    ctx: SessionContext = Depends(get_session_context),
):
    admin, sid = identity.login(db, store, ctx, KIND_ADMIN, data.username, data.password)
    token = set_session_cookie(response, sid)
    return {"message": "Admin logged in successfully", "admin": admin, "access_token": token}


@router.post("/logout", response_model=MessageOut)
def admin_logout(
    store: SessionStore = Depends(get_session_store),
    ctx: SessionContext = Depends(get_session_context),
):
    # Sólo vacía el hueco de admin; la sesión de usuario sigue viva
    identity.logout(store, ctx, KIND_ADMIN)
    return {"message": "Admin logged out successfully"}


@router.get("/check", response_model=AdminCheckOut)
def admin_check(admin: Admin = Depends(get_current_admin)):
    return {"is_admin": True}


@router.get("/teams", response_model=TeamListOut)
def list_teams(admin: Admin = Depends(get_current_admin), db: Session = Depends(get_db)):
    return {"teams": team_lifecycle.list_all(db)}


@router.post("/teams/{team_id}/approve", response_model=MessageOut)
def approve_team(team_id: int, admin: Admin = Depends(get_current_admin), db: Session = Depends(get_db)):
    team_lifecycle.approve(db, team_id)
    return {"message": "Team approved successfully"}


@router.post("/teams/{team_id}/reject", response_model=MessageOut)
def reject_team(
    team_id: int,
    payload: Optional[RejectRequest] = None,
    admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    team_lifecycle.reject(db, team_id, payload.reason if payload else None)
    return {"message": "Team rejected successfully"}


@router.delete("/teams/{team_id}", response_model=MessageOut)
def delete_team(team_id: int, admin: Admin = Depends(get_current_admin), db: Session = Depends(get_db)):
    team_lifecycle.delete(db, team_id)
    return {"message": "Team deleted successfully"}


@router.post("/settings/registration-toggle", response_model=RegistrationToggleOut)
def toggle_registration(
    payload: RegistrationToggleRequest,
    admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    is_open = set_registration_open(db, payload.registration_open)
    return {"message": "Registration status updated", "registration_open": is_open}
