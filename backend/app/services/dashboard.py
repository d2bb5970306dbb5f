from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..models.application import Application
from ..models.enums import ApplicationStatus, JobStatus, Role
from ..models.job import Job
from ..models.user import User
from .permissions import ensure_role
from .projections import application_to_public, user_summary

RECENT_APPLICATIONS_LIMIT = 10


def recruiter_stats(db: Session, user: User) -> dict:
    """Read-only rollup of the caller's jobs and the applications they received."""
    ensure_role(user, Role.RECRUITER, Role.ADMIN)

    job_counts = dict(
        db.query(Job.status, func.count(Job.id))
        .filter(Job.recruiter_id == user.id)
        .group_by(Job.status)
        .all()
    )

    stage_rows = dict(
        db.query(Application.status, func.count(Application.id))
        .join(Job, Application.job_id == Job.id)
        .filter(Job.recruiter_id == user.id)
        .group_by(Application.status)
        .all()
    )
    applications_by_stage = {stage.value: int(stage_rows.get(stage.value, 0)) for stage in ApplicationStatus}

    recent = (
        db.query(Application)
        .join(Job, Application.job_id == Job.id)
        .options(joinedload(Application.candidate), joinedload(Application.job))
        .filter(Job.recruiter_id == user.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .limit(RECENT_APPLICATIONS_LIMIT)
        .all()
    )
    recent_items = []
    for a in recent:
        payload = application_to_public(a)
        payload["candidate"] = user_summary(a.candidate)
        payload["job"] = {"id": a.job.id, "title": a.job.title}
        recent_items.append(payload)

    return {
        "total_jobs": int(sum(job_counts.values())),
        "active_jobs": int(job_counts.get(JobStatus.ONGOING.value, 0)),
        "draft_jobs": int(job_counts.get(JobStatus.DRAFT.value, 0)),
        "closed_jobs": int(job_counts.get(JobStatus.CLOSED.value, 0)),
        "total_applications": int(sum(applications_by_stage.values())),
        "applications_by_stage": applications_by_stage,
        "recent_applications": recent_items,
    }
