"""Job postings: creation, ownership-gated edits, status lifecycle and listings."""
import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models.enums import JobStatus, JobVisibility, Role
from ..models.job import Job
from ..models.organization import Organization
from ..models.user import User
from ..utils.error_handlers import (
    ForbiddenError,
    NotFoundError,
    get_error_message,
    handle_database_error,
)
from ..utils.validation import validate_enum, validate_string_field, validate_string_list
from .permissions import ensure_member_or_admin, ensure_role, has_role, is_member
from .projections import job_to_public, organization_summary
from .transitions import ensure_job_transition

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "location", "salary_range", "requirements", "visibility", "status")


def _get_job(db: Session, job_id: int) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError(get_error_message("job_not_found"))
    return job


def _get_owned_job(db: Session, job_id: int, recruiter: User, action: str) -> Job:
    job = _get_job(db, job_id)
    if job.recruiter_id != recruiter.id:
        logger.warning("User %s tried to %s job %s owned by %s", recruiter.id, action, job.id, job.recruiter_id)
        raise ForbiddenError(f"Unauthorized to {action} this job.")
    return job


def is_publicly_listed(job: Job) -> bool:
    return job.visibility == JobVisibility.PUBLIC.value and job.status == JobStatus.ONGOING.value


def can_view_job(job: Job, viewer: User | None) -> bool:
    """Public ongoing jobs are open to anyone; everything else stays inside the organization."""
    if is_publicly_listed(job):
        return True
    if viewer is None:
        return False
    return (
        viewer.id == job.recruiter_id
        or has_role(viewer, Role.ADMIN)
        or is_member(viewer, job.organization_id)
    )


def _clean_title(value: Any) -> str:
    return validate_string_field(value, "Title", min_length=2, max_length=150)


def _clean_description(value: Any) -> str:
    return validate_string_field(value, "Description", min_length=1, max_length=20000)


def create_job(db: Session, recruiter: User, fields: dict) -> dict:
    ensure_role(recruiter, Role.RECRUITER, message="Only recruiters can create jobs.")
    if not recruiter.organization_id:
        raise ForbiddenError(get_error_message("no_organization"))

    visibility = fields.get("visibility")
    job = Job(
        title=_clean_title(fields.get("title")),
        description=_clean_description(fields.get("description")),
        location=validate_string_field(fields.get("location"), "Location", max_length=100, required=False),
        salary_range=validate_string_field(fields.get("salary_range"), "Salary range", max_length=50, required=False),
        requirements=json.dumps(validate_string_list(fields.get("requirements"), "Requirements"), ensure_ascii=False),
        visibility=validate_enum(visibility, JobVisibility, "Visibility") if visibility else JobVisibility.PUBLIC.value,
        status=JobStatus.DRAFT.value,
        recruiter_id=recruiter.id,
        # Copied once; later membership changes do not move existing jobs.
        organization_id=recruiter.organization_id,
    )
    try:
        db.add(job)
        db.commit()
        db.refresh(job)
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating job") from e

    logger.info("Recruiter %s created job %s in organization %s", recruiter.id, job.id, job.organization_id)
    return job_to_public(job)


def get_job(db: Session, job_id: int, viewer: User | None = None) -> dict:
    job = (
        db.query(Job)
        .options(joinedload(Job.recruiter), joinedload(Job.organization))
        .filter(Job.id == job_id)
        .first()
    )
    # Hidden jobs look exactly like missing ones to outsiders.
    if not job or not can_view_job(job, viewer):
        raise NotFoundError(get_error_message("job_not_found"))
    return job_to_public(job, include_relations=True)


def update_job(db: Session, job_id: int, recruiter: User, patch: dict) -> dict:
    job = _get_owned_job(db, job_id, recruiter, "update")

    changes = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS and v is not None}
    if "title" in changes:
        job.title = _clean_title(changes["title"])
    if "description" in changes:
        job.description = _clean_description(changes["description"])
    if "location" in changes:
        job.location = validate_string_field(changes["location"], "Location", max_length=100, required=False)
    if "salary_range" in changes:
        job.salary_range = validate_string_field(changes["salary_range"], "Salary range", max_length=50, required=False)
    if "requirements" in changes:
        job.requirements = json.dumps(validate_string_list(changes["requirements"], "Requirements"), ensure_ascii=False)
    if "visibility" in changes:
        job.visibility = validate_enum(changes["visibility"], JobVisibility, "Visibility")
    if "status" in changes:
        new_status = validate_enum(changes["status"], JobStatus, "Status")
        ensure_job_transition(job.status, new_status)
        job.status = new_status

    db.commit()
    db.refresh(job)
    logger.info("Recruiter %s updated job %s (%s)", recruiter.id, job.id, ", ".join(sorted(changes)) or "no changes")
    return job_to_public(job)


def change_job_status(db: Session, job_id: int, recruiter: User, new_status: Any) -> dict:
    job = _get_owned_job(db, job_id, recruiter, "change status of")
    status_value = validate_enum(new_status, JobStatus, "Status")
    ensure_job_transition(job.status, status_value)

    previous = job.status
    job.status = status_value
    db.commit()
    db.refresh(job)
    logger.info("Job %s status %s -> %s", job.id, previous, job.status)
    return job_to_public(job)


def delete_job(db: Session, job_id: int, recruiter: User) -> dict:
    job = _get_owned_job(db, job_id, recruiter, "delete")
    application_count = len(job.applications)
    try:
        # Applications go with the job (relationship cascade).
        db.delete(job)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "deleting job") from e

    logger.info("Recruiter %s deleted job %s and %d application(s)", recruiter.id, job_id, application_count)
    return {"message": "Job deleted successfully", "deleted_job_id": job_id}


def _newest_first(q):
    return q.order_by(Job.created_at.desc(), Job.id.desc())


def list_jobs_by_recruiter(db: Session, recruiter: User) -> list[dict]:
    ensure_role(recruiter, Role.RECRUITER, message="Only recruiters can view their jobs.")
    jobs = _newest_first(db.query(Job).filter(Job.recruiter_id == recruiter.id)).all()
    return [job_to_public(j) for j in jobs]


def list_jobs_by_organization(db: Session, org_id: int, viewer: User) -> list[dict]:
    org = db.query(Organization).filter(Organization.id == org_id).first()
    if not org:
        raise NotFoundError(get_error_message("organization_not_found"))
    ensure_member_or_admin(viewer, org.id)

    jobs = _newest_first(db.query(Job).filter(Job.organization_id == org.id)).all()
    return [job_to_public(j) for j in jobs]


def list_public_jobs(db: Session) -> list[dict]:
    jobs = _newest_first(
        db.query(Job)
        .options(joinedload(Job.organization))
        .filter(
            Job.visibility == JobVisibility.PUBLIC.value,
            Job.status == JobStatus.ONGOING.value,
        )
    ).all()
    items = []
    for job in jobs:
        payload = job_to_public(job)
        summary = organization_summary(job.organization)
        payload["organization"] = {"name": summary["name"], "slug": summary["slug"]} if summary else None
        items.append(payload)
    return items
