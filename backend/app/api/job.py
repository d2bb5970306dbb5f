from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..services import jobs as job_service
from ..utils.dependencies import get_current_user, get_optional_user
from ..utils.roles import recruiter_only

router = APIRouter(prefix="/jobs", tags=["Jobs"])


class JobCreate(BaseModel):
    title: str = Field(min_length=2, max_length=150)
    description: str = Field(min_length=1)
    location: str | None = Field(default=None, max_length=100)
    salary_range: str | None = Field(default=None, max_length=50)
    requirements: list[str] | None = None
    visibility: str | None = None  # PUBLIC / PRIVATE


class JobUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=2, max_length=150)
    description: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, max_length=100)
    salary_range: str | None = Field(default=None, max_length=50)
    requirements: list[str] | None = None
    visibility: str | None = None
    status: str | None = None  # DRAFT / ONGOING / CLOSED


class JobStatusChange(BaseModel):
    status: str


@router.post("", status_code=201)
def create_job(payload: JobCreate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    job = job_service.create_job(db, user, payload.model_dump())
    return {"success": True, "message": "Job created successfully", "job": job}


@router.get("/mine")
def list_my_jobs(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"success": True, "jobs": job_service.list_jobs_by_recruiter(db, user)}


@router.get("/public")
def list_public_jobs(db: Session = Depends(get_db)):
    # The only listing open to anonymous visitors.
    return {"success": True, "jobs": job_service.list_public_jobs(db)}


@router.get("/organization/{org_id:int}")
def list_organization_jobs(org_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"success": True, "jobs": job_service.list_jobs_by_organization(db, org_id, user)}


@router.get("/{job_id:int}")
def get_job(job_id: int, db: Session = Depends(get_db), user: User | None = Depends(get_optional_user)):
    return {"success": True, "job": job_service.get_job(db, job_id, user)}


@router.put("/{job_id:int}")
def update_job(
    job_id: int,
    payload: JobUpdate,
    db: Session = Depends(get_db),
    user=Depends(recruiter_only),
):
    job = job_service.update_job(db, job_id, user, payload.model_dump(exclude_unset=True))
    return {"success": True, "message": "Job updated successfully", "job": job}


@router.patch("/{job_id:int}/status")
def change_job_status(
    job_id: int,
    payload: JobStatusChange,
    db: Session = Depends(get_db),
    user=Depends(recruiter_only),
):
    job = job_service.change_job_status(db, job_id, user, payload.status)
    return {"success": True, "message": "Job status updated", "job": job}


@router.delete("/{job_id:int}")
def delete_job(job_id: int, db: Session = Depends(get_db), user=Depends(recruiter_only)):
    return {"success": True, **job_service.delete_job(db, job_id, user)}
