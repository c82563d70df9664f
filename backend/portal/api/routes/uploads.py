from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from portal.api.deps import get_optional_admin, get_optional_user
from portal.core import errors
from portal.db.session import get_db
from portal.models.admin import Admin
from portal.models.user import User
from portal.services import team_lifecycle, uploads

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.get("/{filename}")
def get_proof(
    filename: str,
    user: Optional[User] = Depends(get_optional_user),
    admin: Optional[Admin] = Depends(get_optional_admin),
    db: Session = Depends(get_db),
):
    team_lifecycle.check_proof_access(db, filename, user=user, admin=admin)

    path = uploads.resolve_proof_path(filename)
    if path is None or not path.is_file():
        raise errors.NotFoundError("File not found")
    return FileResponse(path)
