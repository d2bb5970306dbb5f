from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..services.dashboard import recruiter_stats
from ..utils.roles import recruiter_or_admin

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats")
def dashboard_stats(db: Session = Depends(get_db), user=Depends(recruiter_or_admin)):
    return {"success": True, "stats": recruiter_stats(db, user)}
