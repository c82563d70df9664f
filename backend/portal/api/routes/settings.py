from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.db.session import get_db
from portal.schemas.settings import RegistrationStatusOut
from portal.services.settings_flags import is_registration_open

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/registration-open", response_model=RegistrationStatusOut)
def registration_open(db: Session = Depends(get_db)):
    return {"registration_open": is_registration_open(db)}
