from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import JobStatus, JobVisibility


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(150), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(100), nullable=True)
    salary_range = Column(String(50), nullable=True)
    requirements = Column(Text, nullable=True)  # JSON string list, order preserved
    visibility = Column(String(20), nullable=False, default=JobVisibility.PUBLIC.value)
    status = Column(String(20), nullable=False, default=JobStatus.DRAFT.value)
    recruiter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    recruiter = relationship("User", back_populates="jobs")
    organization = relationship("Organization", back_populates="jobs")
    # Deleting a job also removes its applications at ORM level.
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
