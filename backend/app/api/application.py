from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import applications as application_service
from ..utils.dependencies import get_current_user
from ..utils.roles import candidate_only

router = APIRouter(prefix="/applications", tags=["Applications"])


class ApplicationStatusUpdate(BaseModel):
    status: str


@router.post("/jobs/{job_id:int}", status_code=201)
def apply_for_job(job_id: int, db: Session = Depends(get_db), user=Depends(candidate_only)):
    application = application_service.apply_for_job(db, user, job_id)
    return {"success": True, "message": "Application submitted successfully", "application": application}


@router.get("/me")
def my_applications(db: Session = Depends(get_db), user=Depends(candidate_only)):
    return {"success": True, "applications": application_service.list_applications_by_candidate(db, user)}


@router.get("/job/{job_id:int}")
def applications_for_job(job_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"success": True, "applications": application_service.list_applications_by_job(db, user, job_id)}


@router.get("/{application_id:int}")
def application_details(application_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"success": True, "application": application_service.get_application(db, user, application_id)}


@router.patch("/{application_id:int}/status")
def update_application_status(
    application_id: int,
    payload: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    application = application_service.update_application_status(db, user, application_id, payload.status)
    return {"success": True, "message": "Application status updated", "application": application}
