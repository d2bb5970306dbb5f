from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .enums import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # store hashed password
    first_name = Column(String(120), nullable=True)
    last_name = Column(String(120), nullable=True)
    role = Column(String(32), nullable=False, default=Role.CANDIDATE.value)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=True, index=True)
    verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    organization = relationship("Organization", back_populates="users")
    jobs = relationship("Job", back_populates="recruiter")
    applications = relationship("Application", back_populates="candidate")
