from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # store hashed password
    role = Column(String(20), nullable=False, default="user")  # user / employer / admin
    company_name = Column(String(255), nullable=True)  # employers only
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationships
    jobs = relationship("Job", back_populates="employer")
