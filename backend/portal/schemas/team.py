from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from portal.schemas.auth import UserOut
from portal.schemas.base import CamelModel


class TeamMember(BaseModel):
    ign: str
    discord: Optional[str] = None


class TeamOut(CamelModel):
    id: int
    team_name: str
    leader_id: int
    # Tal cual se guardó: [{"ign": ..., "discord": ...}] en el mismo orden
    members: list[dict]
    payment_proof_path: Optional[str] = None
    status: str
    rejection_reason: Optional[str] = None
    created_at: datetime


class TeamWithLeaderOut(TeamOut):
    leader: UserOut


class RegisterTeamOut(CamelModel):
    team: TeamOut
    message: str


class TeamListOut(CamelModel):
    teams: list[TeamWithLeaderOut]


class RejectRequest(CamelModel):
    reason: Optional[str] = None
