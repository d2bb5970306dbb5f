from .application import Application
from .enums import ApplicationStatus, JobStatus, JobVisibility, Plan, Role
from .job import Job
from .organization import Organization
from .user import User

__all__ = [
    "Application",
    "ApplicationStatus",
    "Job",
    "JobStatus",
    "JobVisibility",
    "Organization",
    "Plan",
    "Role",
    "User",
]
