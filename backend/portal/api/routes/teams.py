from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from portal.api.deps import get_current_user
from portal.db.session import get_db
from portal.models.user import User
from portal.schemas.team import RegisterTeamOut, TeamOut
from portal.services import team_lifecycle

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.post("/register", response_model=RegisterTeamOut)
def register_team(
    team_name: Optional[str] = Form(None, alias="teamName"),
    members: Optional[str] = Form(None),
    payment_proof: Optional[UploadFile] = File(None, alias="paymentProof"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    team, resubmitted = team_lifecycle.register_team(
        db, user.id, team_name, members, payment_proof
    )
    message = (
        team_lifecycle.RESUBMITTED_MESSAGE if resubmitted else team_lifecycle.REGISTERED_MESSAGE
    )
    return {"team": team, "message": message}


@router.get("/my-team", response_model=TeamOut)
def my_team(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return team_lifecycle.get_my_team(db, user.id)
