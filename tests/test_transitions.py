import pytest

from backend.app.models.enums import ApplicationStatus, JobStatus
from backend.app.services.transitions import (
    APPLICATION_TRANSITIONS,
    TERMINAL_APPLICATION_STATUSES,
    can_transition_application,
    can_transition_job,
    ensure_application_transition,
    ensure_job_transition,
)
from backend.app.utils.error_handlers import ValidationError


@pytest.mark.parametrize(
    "current,requested,allowed",
    [
        ("DRAFT", "ONGOING", True),
        ("DRAFT", "CLOSED", True),
        ("ONGOING", "CLOSED", True),
        ("CLOSED", "ONGOING", True),
        ("ONGOING", "DRAFT", False),
        ("CLOSED", "DRAFT", False),
        ("ONGOING", "ONGOING", True),
    ],
)
def test_job_transitions(current, requested, allowed):
    assert can_transition_job(current, requested) is allowed


def test_every_job_status_has_a_row():
    from backend.app.services.transitions import JOB_TRANSITIONS

    assert set(JOB_TRANSITIONS) == set(JobStatus)


def test_application_forward_moves_may_skip_stages():
    assert can_transition_application("APPLIED", "SCREENING")
    assert can_transition_application("APPLIED", "OFFER")
    assert can_transition_application("SHORTLISTED", "HIRED")
    assert not can_transition_application("INTERVIEW", "SCREENING")
    assert not can_transition_application("OFFER", "APPLIED")


def test_rejection_from_any_open_stage():
    for stage in ApplicationStatus:
        if stage in TERMINAL_APPLICATION_STATUSES:
            continue
        assert can_transition_application(stage.value, "REJECTED"), stage


def test_terminal_stages_do_not_move():
    for stage in TERMINAL_APPLICATION_STATUSES:
        assert APPLICATION_TRANSITIONS[stage] == frozenset()
    assert not can_transition_application("HIRED", "REJECTED")
    assert not can_transition_application("REJECTED", "APPLIED")
    assert can_transition_application("HIRED", "HIRED")


def test_ensure_helpers_raise_validation_error():
    ensure_job_transition("DRAFT", "ONGOING")
    ensure_application_transition("APPLIED", "INTERVIEW")
    with pytest.raises(ValidationError) as exc:
        ensure_job_transition("CLOSED", "DRAFT")
    assert exc.value.status_code == 400
    with pytest.raises(ValidationError):
        ensure_application_transition("REJECTED", "HIRED")
