"""
Application schemas - raw record shape, projected views, and action payloads
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

# Column attribute -> record key
_RECORD_FIELDS = {
    "id": "id",
    "seeker_id": "seekerId",
    "job_id": "jobId",
    "employer_id": "employerId",
    "full_name": "fullName",
    "email": "email",
    "contact_number": "contactNumber",
    "desired_job": "desiredJob",
    "experience": "experience",
    "education": "education",
    "skills": "skills",
    "cover_letter": "coverLetter",
    "profile_image": "profileImage",
    "resume_link": "resumeLink",
    "resume_name": "resumeName",
    "position_applied": "positionApplied",
    "job_title": "jobTitle",
    "company_name": "companyName",
    "company_address": "companyAddress",
    "company_barangay": "companyBarangay",
    "job_contact_number": "jobContactNumber",
    "status": "status",
    "applied_at": "appliedAt",
    "scheduled_at": "scheduledAt",
    "updated_at": "updatedAt",
    "rejection_reason": "rejectionReason",
    "rejection_comment": "rejectionComment",
    "acceptance_requirements": "acceptanceRequirements",
    "interview_details": "interviewDetails",
}


def application_to_record(app) -> dict:
    """
    Materialize an Application row as a raw camelCase record.
    Extra fields go underneath; a column only overrides them when it is set.
    """
    record: dict[str, Any] = dict(app.extra or {})
    for attr, key in _RECORD_FIELDS.items():
        value = getattr(app, attr)
        if value is not None or key not in record:
            record[key] = value
    return record


class SeekerApplicationItem(BaseModel):
    id: str
    jobId: Optional[str] = ""
    jobTitle: str
    companyName: str
    status: str
    appliedAt: Optional[datetime] = None
    scheduledAt: Optional[datetime] = None
    rejectionReason: str = ""
    rejectionComment: str = ""
    acceptanceRequirements: str = ""
    interviewDetails: str = ""
    companyAddress: Optional[str] = ""
    companyBarangay: Optional[str] = ""
    jobContactNumber: Optional[str] = ""
    resumeName: Optional[str] = ""

    model_config = {"extra": "ignore"}


class EmployerApplicationItem(BaseModel):
    id: str
    seekerId: Any = ""
    fullName: str = ""
    email: str = ""
    contactNumber: str = ""
    resumeLink: str = ""
    resumeName: str = ""
    jobId: str = ""
    positionApplied: str = ""
    status: str = "pending"
    appliedAt: Optional[datetime] = None
    scheduledAt: Optional[datetime] = None
    profileImage: str = ""
    coverLetter: str = ""

    model_config = {"extra": "ignore"}


class StatusCounts(BaseModel):
    total: int = 0
    pending: int = 0
    scheduled: int = 0
    accepted: int = 0
    rejected: int = 0


class SeekerApplicationsResponse(BaseModel):
    items: List[SeekerApplicationItem] = Field(default_factory=list)


class EmployerApplicationsResponse(BaseModel):
    items: List[EmployerApplicationItem] = Field(default_factory=list)
    counts: StatusCounts = Field(default_factory=StatusCounts)


class ApplyIn(BaseModel):
    jobId: str


class ConfirmIn(BaseModel):
    """Accept/reject need an explicit confirmation flag."""
    confirm: bool = False


class AcceptIn(ConfirmIn):
    acceptanceRequirements: Optional[str] = None


class RejectIn(ConfirmIn):
    rejectionReason: Optional[str] = None
    rejectionComment: Optional[str] = None


class ScheduleIn(BaseModel):
    date: str = ""  # YYYY-MM-DD
    time: str = ""  # HH:MM
    interviewDetails: Optional[str] = None


class StatusUpdateResponse(BaseModel):
    id: str
    status: str
    scheduledAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    message: str = ""


class ApplyResponse(BaseModel):
    id: str
    jobId: str
    status: str = "pending"
    message: str = ""


class MessageResponse(BaseModel):
    message: str
