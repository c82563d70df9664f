# portal/services/team_lifecycle.py
"""
Team registration state machine.

    (none) --register--> pending --approve--> approved
                            |                    |
                            +------reject--------+--> rejected --register--> pending (same row)

`delete` removes the row entirely, so the leader starts over with no history.
At most one live (pending/approved) team per leader; the partial unique index
`uq_team_live_leader` enforces it in the database, the checks here only give
nicer errors.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from portal.core import errors
from portal.core.config import settings
from portal.models.admin import Admin
from portal.models.team import (
    LIVE_STATUSES,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    Team,
)
from portal.models.user import User
from portal.schemas.team import TeamMember
from portal.services import uploads
from portal.services.settings_flags import is_registration_open

logger = logging.getLogger(__name__)

REGISTRATION_CLOSED = "Registration is currently closed"
DUPLICATE_TEAM = "You have already registered a team"
TEAM_NOT_FOUND = "No team found"

REGISTERED_MESSAGE = "Team registered successfully! Awaiting payment approval."
RESUBMITTED_MESSAGE = "Team resubmitted successfully! Awaiting payment approval."


def parse_members(raw: Any) -> list[TeamMember]:
    """
    Accepts the JSON string sent by the form (or an already decoded list)
    and returns the members in submission order.
    """
    if isinstance(raw, (str, bytes)) or raw is None:
        try:
            data = json.loads(raw or "[]")
        except ValueError:
            raise errors.ValidationError("Invalid member data format")
    else:
        data = raw

    if not isinstance(data, list) or len(data) == 0:
        raise errors.ValidationError("At least one team member is required")
    if len(data) > settings.MAX_TEAM_MEMBERS:
        raise errors.ValidationError(f"Maximum {settings.MAX_TEAM_MEMBERS} members allowed")

    members: list[TeamMember] = []
    for i, item in enumerate(data, start=1):
        if isinstance(item, TeamMember):
            item = item.model_dump()
        if not isinstance(item, dict):
            raise errors.ValidationError(f"Invalid data for member {i}")

        ign = item.get("ign")
        if not isinstance(ign, str) or ign.strip() == "":
            raise errors.ValidationError(f"IGN is required for member {i}")

        discord = item.get("discord")
        if discord is not None and not isinstance(discord, str):
            raise errors.ValidationError(f"Discord must be text for member {i}")

        members.append(TeamMember(ign=ign, discord=discord))
    return members


def _members_json(members: list[TeamMember]) -> str:
    return json.dumps([m.model_dump(exclude_none=True) for m in members])


def _live_team(db: Session, leader_id: int) -> Optional[Team]:
    return (
        db.query(Team)
        .filter(Team.leader_id == leader_id)
        .filter(Team.status.in_(LIVE_STATUSES))
        .first()
    )


def _latest_team(db: Session, leader_id: int, for_update: bool = False) -> Optional[Team]:
    q = db.query(Team).filter(Team.leader_id == leader_id)
    if for_update:
        q = q.with_for_update()
    return q.order_by(Team.created_at.desc(), Team.id.desc()).first()


def _get_team_or_404(db: Session, team_id: int) -> Team:
    team = db.get(Team, team_id)
    if team is None:
        raise errors.NotFoundError("Team not found")
    return team


def register_team(
    db: Session,
    leader_id: int,
    team_name: Optional[str],
    members: Any,
    proof_upload: Optional[UploadFile] = None,
) -> tuple[Team, bool]:
    """
    Create a pending team for `leader_id`, or overwrite the leader's latest
    rejected team in place. Returns (team, resubmitted).
    """
    if not is_registration_open(db):
        raise errors.ValidationError(REGISTRATION_CLOSED)

    name = (team_name or "").strip()
    if not name:
        raise errors.ValidationError("Team name is required")

    parsed = parse_members(members)

    if _live_team(db, leader_id) is not None:
        raise errors.ConflictError(DUPLICATE_TEAM)

    proof = uploads.read_proof(proof_upload)

    previous = _latest_team(db, leader_id, for_update=True)
    resubmission = previous is not None and previous.status == STATUS_REJECTED

    filename = uploads.save_proof(proof) if proof else None
    try:
        if resubmission:
            team = previous
            team.team_name = name
            team.members_json = _members_json(parsed)
            team.payment_proof_path = filename
            team.status = STATUS_PENDING
            team.rejection_reason = None
        else:
            team = Team(
                team_name=name,
                leader_id=leader_id,
                members_json=_members_json(parsed),
                payment_proof_path=filename,
                status=STATUS_PENDING,
                rejection_reason=None,
            )
            db.add(team)
        db.commit()
    except IntegrityError:
        # Otro request del mismo líder ganó la carrera
        db.rollback()
        uploads.remove_proof(filename)
        raise errors.ConflictError(DUPLICATE_TEAM)
    except Exception:
        db.rollback()
        uploads.remove_proof(filename)
        raise

    db.refresh(team)
    logger.info(
        "Team %s (id=%s) %s by leader %s",
        team.team_name,
        team.id,
        "resubmitted" if resubmission else "registered",
        leader_id,
    )
    return team, resubmission


def get_my_team(db: Session, leader_id: int) -> Team:
    """The leader's live team, or their most recent one if none is live."""
    team = _live_team(db, leader_id) or _latest_team(db, leader_id)
    if team is None:
        raise errors.NotFoundError(TEAM_NOT_FOUND)
    return team


def list_all(db: Session) -> list[Team]:
    # Sin paginación: volumen de torneo (decenas / pocos cientos)
    return (
        db.query(Team)
        .options(joinedload(Team.leader))
        .order_by(Team.created_at.desc(), Team.id.desc())
        .all()
    )


def approve(db: Session, team_id: int) -> Team:
    # No se comprueba el estado previo: aprobar dos veces es un éxito más.
    team = _get_team_or_404(db, team_id)
    team.status = STATUS_APPROVED
    try:
        db.commit()
    except IntegrityError:
        # Aprobar un rechazado cuando el líder ya tiene otro vivo
        db.rollback()
        raise errors.ConflictError("Leader already has another active team")
    db.refresh(team)
    logger.info("Team %s approved", team_id)
    return team


def reject(db: Session, team_id: int, reason: Optional[str] = None) -> Team:
    team = _get_team_or_404(db, team_id)
    team.status = STATUS_REJECTED
    team.rejection_reason = reason
    db.commit()
    db.refresh(team)
    logger.info("Team %s rejected (reason=%r)", team_id, reason)
    return team


def delete(db: Session, team_id: int) -> None:
    team = _get_team_or_404(db, team_id)
    db.delete(team)
    db.commit()
    logger.info("Team %s deleted", team_id)


def check_proof_access(
    db: Session,
    filename: str,
    user: Optional[User] = None,
    admin: Optional[Admin] = None,
) -> None:
    """Admins read any proof; a user only the one attached to their own live team."""
    if admin is not None:
        return
    if user is None:
        raise errors.AuthenticationError("Authentication required")

    team = _live_team(db, user.id)
    if team is None or team.payment_proof_path != filename:
        logger.warning("User %s denied access to proof %s", user.id, filename)
        raise errors.AuthorizationError("Access denied")
