"""
Job - a posting owned by one employer
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from backend.app.db.base import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    job_title = Column(String(255), nullable=False)
    job_description = Column(Text, nullable=False)
    job_image = Column(Text, default="")  # data URL or URL
    experience = Column(String(255), default="")
    skills = Column(Text, default="")
    contact_number = Column(String(50), default="")
    address = Column(String(255), default="")
    barangay = Column(String(100), default="")
    company_name = Column(String(255), default="")
    applicant_limit = Column(Integer, default=0)  # 0 = unlimited
    job_status = Column(String(20), default="open")  # open | closed
    job_type = Column(String(20), default="full-time")  # full-time | part-time

    created_at = Column(DateTime, nullable=True, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)
