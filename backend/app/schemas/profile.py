"""
Profile Pydantic schemas - form fields of a seeker profile and the files record
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ProfileForm(BaseModel):
    """Editable profile fields. Every field is a string; unset is ""."""
    fullName: str = ""
    email: str = ""
    phone: str = ""
    age: str = ""
    gender: str = ""
    address: str = ""
    barangay: str = ""
    desiredJob: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""
    coverLetter: str = ""

    model_config = {"extra": "ignore"}


class UserFilesPayload(BaseModel):
    photoBase64: Optional[str] = None
    photoName: Optional[str] = None
    photoUrl: Optional[str] = None
    resumeBase64: Optional[str] = None
    resumeName: Optional[str] = None
    resumeUrl: Optional[str] = None
    updatedAt: Optional[datetime] = None


class ProfileResponse(BaseModel):
    profile: ProfileForm
    skillList: List[str] = Field(default_factory=list)
    initials: str = ""
    files: Optional[UserFilesPayload] = None
    lastUpdated: Optional[datetime] = None
    message: Optional[str] = None


def skill_list(skills: str | None) -> list[str]:
    """Split comma-separated skills, dropping blanks."""
    return [s.strip() for s in (skills or "").split(",") if s.strip()]


def initials(full_name: str | None) -> str:
    """Up to two initials from the full name, "JS" when empty."""
    parts = [p for p in (full_name or "").split(" ") if p]
    return "".join(p[0] for p in parts[:2]) or "JS"


def profile_model_to_form(profile) -> ProfileForm:
    """Convert UserProfile DB model to ProfileForm, substituting "" for unset fields"""
    return ProfileForm(
        fullName=profile.full_name or "",
        email=profile.email or "",
        phone=profile.phone or profile.contact_number or "",
        age=profile.age or "",
        gender=profile.gender or "",
        address=profile.address or "",
        barangay=profile.barangay or "",
        desiredJob=profile.desired_job or "",
        experience=profile.experience or "",
        education=profile.education or "",
        skills=profile.skills or "",
        coverLetter=profile.cover_letter or "",
    )


def form_to_profile_dict(form: ProfileForm) -> dict:
    """Convert ProfileForm to DB model kwargs"""
    return {
        "full_name": form.fullName,
        "email": form.email,
        "phone": form.phone,
        "contact_number": form.phone,
        "age": form.age,
        "gender": form.gender,
        "address": form.address,
        "barangay": form.barangay,
        "desired_job": form.desiredJob,
        "experience": form.experience,
        "education": form.education,
        "skills": form.skills,
        "cover_letter": form.coverLetter,
    }


def files_model_to_payload(files) -> UserFilesPayload:
    """Convert UserFiles DB model to UserFilesPayload"""
    return UserFilesPayload(
        photoBase64=files.photo_base64,
        photoName=files.photo_name,
        photoUrl=files.photo_url,
        resumeBase64=files.resume_base64,
        resumeName=files.resume_name,
        resumeUrl=files.resume_url,
        updatedAt=files.updated_at,
    )
