"""
Status transition tables for jobs and applications.

Each table maps a current status to the set of statuses it may move to.
Writing the current status again is always an allowed no-op.
"""
from ..models.enums import ApplicationStatus, JobStatus
from ..utils.error_handlers import ValidationError

JOB_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.DRAFT: frozenset({JobStatus.ONGOING, JobStatus.CLOSED}),
    JobStatus.ONGOING: frozenset({JobStatus.CLOSED}),
    # Closed postings may be re-opened, but never go back to draft.
    JobStatus.CLOSED: frozenset({JobStatus.ONGOING}),
}

_PIPELINE = [
    ApplicationStatus.APPLIED,
    ApplicationStatus.SCREENING,
    ApplicationStatus.INTERVIEW,
    ApplicationStatus.SHORTLISTED,
    ApplicationStatus.OFFER,
    ApplicationStatus.HIRED,
]
TERMINAL_APPLICATION_STATUSES = frozenset({ApplicationStatus.HIRED, ApplicationStatus.REJECTED})


def _build_application_transitions() -> dict[ApplicationStatus, frozenset[ApplicationStatus]]:
    table: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {}
    for index, stage in enumerate(_PIPELINE):
        if stage in TERMINAL_APPLICATION_STATUSES:
            table[stage] = frozenset()
            continue
        # Forward moves may skip stages; rejection is possible from any open stage.
        table[stage] = frozenset(_PIPELINE[index + 1:]) | {ApplicationStatus.REJECTED}
    table[ApplicationStatus.REJECTED] = frozenset()
    return table


APPLICATION_TRANSITIONS = _build_application_transitions()


def can_transition_job(current: str, requested: str) -> bool:
    current_status, requested_status = JobStatus(current), JobStatus(requested)
    return current_status == requested_status or requested_status in JOB_TRANSITIONS[current_status]


def can_transition_application(current: str, requested: str) -> bool:
    current_status, requested_status = ApplicationStatus(current), ApplicationStatus(requested)
    return current_status == requested_status or requested_status in APPLICATION_TRANSITIONS[current_status]


def ensure_job_transition(current: str, requested: str) -> None:
    if not can_transition_job(current, requested):
        raise ValidationError(f"Job status cannot change from {current} to {requested}")


def ensure_application_transition(current: str, requested: str) -> None:
    if not can_transition_application(current, requested):
        raise ValidationError(f"Application status cannot change from {current} to {requested}")
