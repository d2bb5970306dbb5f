"""Candidate applications and their recruiter-driven status pipeline."""
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models.application import Application
from ..models.enums import ApplicationStatus, JobStatus, Role
from ..models.job import Job
from ..models.user import User
from ..utils.error_handlers import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    get_error_message,
    handle_database_error,
)
from ..utils.validation import validate_enum
from .permissions import ensure_role, has_role
from .projections import application_to_public, job_to_public, organization_summary, user_summary
from .transitions import ensure_application_transition

logger = logging.getLogger(__name__)


def _newest_first(q):
    return q.order_by(Application.created_at.desc(), Application.id.desc())


def _already_applied(db: Session, job_id: int, candidate_id: int) -> bool:
    return (
        db.query(Application.id)
        .filter(Application.job_id == job_id, Application.candidate_id == candidate_id)
        .first()
        is not None
    )


def apply_for_job(db: Session, candidate: User, job_id: int) -> dict:
    ensure_role(candidate, Role.CANDIDATE, message="Only candidates can apply for jobs.")

    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError(get_error_message("job_not_found"))
    if job.status != JobStatus.ONGOING.value:
        raise ValidationError(get_error_message("job_closed"))

    # Fast path with a friendly message; the unique constraint below is authoritative.
    if _already_applied(db, job.id, candidate.id):
        raise ConflictError(get_error_message("already_applied"))

    application = Application(job_id=job.id, candidate_id=candidate.id, status=ApplicationStatus.APPLIED.value)
    try:
        db.add(application)
        db.commit()
        db.refresh(application)
    except IntegrityError:
        db.rollback()
        raise ConflictError(get_error_message("already_applied")) from None
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating application") from e

    logger.info("Candidate %s applied to job %s (application %s)", candidate.id, job.id, application.id)
    return application_to_public(application)


def list_applications_by_job(db: Session, recruiter: User, job_id: int) -> list[dict]:
    ensure_role(recruiter, Role.RECRUITER, message="Only recruiters can view job applications.")
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError(get_error_message("job_not_found"))
    if job.recruiter_id != recruiter.id:
        raise ForbiddenError("Unauthorized to view applications for this job.")

    applications = _newest_first(
        db.query(Application)
        .options(joinedload(Application.candidate))
        .filter(Application.job_id == job.id)
    ).all()

    items = []
    for a in applications:
        payload = application_to_public(a)
        payload["candidate"] = user_summary(a.candidate)
        items.append(payload)
    return items


def list_applications_by_candidate(db: Session, candidate: User) -> list[dict]:
    ensure_role(candidate, Role.CANDIDATE, message="Only candidates can view their applications.")
    applications = _newest_first(
        db.query(Application)
        .options(joinedload(Application.job).joinedload(Job.organization))
        .filter(Application.candidate_id == candidate.id)
    ).all()

    items = []
    for a in applications:
        payload = application_to_public(a)
        org = organization_summary(a.job.organization) if a.job else None
        payload["job"] = {
            "id": a.job.id,
            "title": a.job.title,
            "organization": {"name": org["name"], "slug": org["slug"]} if org else None,
        } if a.job else None
        items.append(payload)
    return items


def _get_application(db: Session, application_id: int) -> Application:
    application = (
        db.query(Application)
        .options(joinedload(Application.job), joinedload(Application.candidate))
        .filter(Application.id == application_id)
        .first()
    )
    if not application:
        raise NotFoundError(get_error_message("application_not_found"))
    return application


def update_application_status(db: Session, recruiter: User, application_id: int, new_status: Any) -> dict:
    application = _get_application(db, application_id)
    if not has_role(recruiter, Role.RECRUITER) or application.job.recruiter_id != recruiter.id:
        logger.warning("User %s denied status change on application %s", recruiter.id, application.id)
        raise ForbiddenError("Unauthorized to update this application.")

    status_value = validate_enum(new_status, ApplicationStatus, "Status")
    ensure_application_transition(application.status, status_value)

    previous = application.status
    application.status = status_value
    db.commit()
    db.refresh(application)
    logger.info("Application %s status %s -> %s", application.id, previous, application.status)
    return application_to_public(application)


def can_view_application(application: Application, user: User) -> bool:
    if has_role(user, Role.RECRUITER):
        return application.job.recruiter_id == user.id
    if has_role(user, Role.CANDIDATE):
        return application.candidate_id == user.id
    return False


def get_application(db: Session, user: User, application_id: int) -> dict:
    application = _get_application(db, application_id)
    if not can_view_application(application, user):
        raise ForbiddenError("Unauthorized to view this application.")

    payload = application_to_public(application)
    payload["candidate"] = user_summary(application.candidate)
    payload["job"] = job_to_public(application.job, include_relations=True)
    return payload
