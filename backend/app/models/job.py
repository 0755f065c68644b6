from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        Index("ix_jobs_status_created", "status", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    job_title = Column(String(255), nullable=False)
    employment_type = Column(Text, nullable=False)  # JSON string list
    work_mode = Column(Text, nullable=False)  # JSON string list
    salary_min = Column(Float, nullable=False)
    salary_max = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    company_name = Column(String(255), nullable=False, index=True)
    company_logo = Column(String(500), nullable=True)
    company_url = Column(String(500), nullable=True)
    roles_and_responsibilities = Column(Text, nullable=False)
    experience_min = Column(Float, nullable=False)
    experience_max = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    employer = relationship("User", back_populates="jobs")
    # Ordered as submitted; searched row-wise by the location filter.
    locations = relationship(
        "JobLocation",
        back_populates="job",
        order_by="JobLocation.position",
        cascade="all, delete-orphan",
    )


class JobLocation(Base):
    __tablename__ = "job_locations"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    location = Column(String(255), nullable=False, index=True)

    job = relationship("Job", back_populates="locations")
