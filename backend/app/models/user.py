"""
User - account for a job seeker or an employer
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from backend.app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    # role: jobseeker | employer
    role = Column(String(20), nullable=False, default="jobseeker")
    full_name = Column(String(200), default="")
    is_active = Column(Integer, default=1)

    created_at = Column(DateTime, default=datetime.utcnow)
