"""
Application - one seeker's submission to one job.
Display fields are denormalized copies taken at apply time.
"""
import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text

from backend.app.db.base import Base


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    seeker_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    employer_id = Column(Integer, nullable=True, index=True)

    # Seeker snapshot
    full_name = Column(String(200), default="")
    email = Column(String(255), default="")
    contact_number = Column(String(50), default="")
    desired_job = Column(String(200), default="")
    experience = Column(Text, default="")
    education = Column(String(100), default="")
    skills = Column(Text, default="")
    cover_letter = Column(Text, default="")
    profile_image = Column(Text, default="")
    resume_link = Column(Text, default="")  # data URL or URL
    resume_name = Column(String(255), default="")

    # Job snapshot
    position_applied = Column(String(255), default="")
    job_title = Column(String(255), default="")
    company_name = Column(String(255), default="")
    company_address = Column(String(255), default="")
    company_barangay = Column(String(100), default="")
    job_contact_number = Column(String(50), default="")

    # pending | scheduled | accepted | rejected
    status = Column(String(20), default="pending", index=True)
    applied_at = Column(DateTime, nullable=True)
    scheduled_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)

    # Outcome metadata, each meaningful for one status only
    rejection_reason = Column(Text, nullable=True)
    rejection_comment = Column(Text, nullable=True)
    acceptance_requirements = Column(Text, nullable=True)
    interview_details = Column(Text, nullable=True)

    # Any other raw fields (legacy aliases such as job, name, phone, resumeURL)
    extra = Column(JSON, default=dict)
