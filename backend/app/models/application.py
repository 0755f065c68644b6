from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    # Opaque reference; not checked against jobs.id and not a foreign key.
    job_id = Column(String(64), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    linkedin_url = Column(String(500), nullable=True)
    # Relative to the uploads mount, e.g. "uploads/1700000000000-cv.pdf"
    resume_path = Column(String(500), nullable=True)
    status = Column(String(50), nullable=False, default="pending")
    submitted_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
