"""
Seeker profile and files - two records keyed by the same user
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    full_name = Column(String(200), default="")
    email = Column(String(255), default="")
    phone = Column(String(50), default="")
    contact_number = Column(String(50), default="")  # mirror of phone, read by job postings
    age = Column(String(10), default="")
    gender = Column(String(50), default="")
    address = Column(String(255), default="")
    barangay = Column(String(100), default="")
    desired_job = Column(String(200), default="")
    experience = Column(Text, default="")
    education = Column(String(100), default="")
    skills = Column(Text, default="")  # comma-separated free text
    cover_letter = Column(Text, default="")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    user = relationship("User", backref="seeker_profile")


class UserFiles(Base):
    __tablename__ = "user_files"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # storage_backend=inline: data URLs; local/s3: *_url holds the blob reference
    photo_base64 = Column(Text, nullable=True)
    photo_name = Column(String(255), nullable=True)
    photo_url = Column(String(1024), nullable=True)
    resume_base64 = Column(Text, nullable=True)
    resume_name = Column(String(255), nullable=True)
    resume_url = Column(String(1024), nullable=True)

    updated_at = Column(DateTime, nullable=True)
