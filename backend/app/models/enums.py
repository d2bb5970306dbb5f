import enum


class Role(str, enum.Enum):
    CANDIDATE = "CANDIDATE"
    RECRUITER = "RECRUITER"
    HIRING_MANAGER = "HIRING_MANAGER"
    ADMIN = "ADMIN"


class Plan(str, enum.Enum):
    FREE = "FREE"
    STARTER = "STARTER"
    PROFESSIONAL = "PROFESSIONAL"
    ENTERPRISE = "ENTERPRISE"


class JobVisibility(str, enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class JobStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ONGOING = "ONGOING"
    CLOSED = "CLOSED"


class ApplicationStatus(str, enum.Enum):
    # Declaration order is the pipeline order (see services/transitions.py).
    APPLIED = "APPLIED"
    SCREENING = "SCREENING"
    INTERVIEW = "INTERVIEW"
    SHORTLISTED = "SHORTLISTED"
    OFFER = "OFFER"
    HIRED = "HIRED"
    REJECTED = "REJECTED"
