"""
Employer profile - company details read by job postings, plus an optional business document
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base import Base


class EmployerProfile(Base):
    __tablename__ = "employer_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    company_name = Column(String(255), default="")
    address = Column(String(255), default="")
    barangay = Column(String(100), default="")
    contact_person = Column(String(200), default="")
    contact_number = Column(String(50), default="")
    position_hiring_for = Column(String(200), default="")

    # Same storage modes as seeker files: inline data URL or blob URL
    document_base64 = Column(Text, nullable=True)
    document_name = Column(String(255), nullable=True)
    document_url = Column(String(1024), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    user = relationship("User", backref="employer_profile")
