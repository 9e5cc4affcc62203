"""
Job posting schemas
"""
from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel


class JobIn(BaseModel):
    """Create/update payload. applicantLimit "" means no limit."""
    jobTitle: str = ""
    jobDescription: str = ""
    jobImage: str = ""
    experience: str = ""
    skills: str = ""
    contactNumber: str = ""
    address: str = ""
    barangay: str = ""
    applicantLimit: Union[int, str] = ""
    jobStatus: Literal["open", "closed"] = "open"
    jobType: Literal["full-time", "part-time"] = "full-time"

    model_config = {"extra": "ignore"}


class JobPayload(BaseModel):
    id: str
    employerId: int
    jobTitle: str
    jobDescription: str
    jobImage: str = ""
    experience: str = ""
    skills: str = ""
    contactNumber: str = ""
    address: str = ""
    barangay: str = ""
    companyName: str = ""
    applicantLimit: int = 0
    jobStatus: str = "open"
    jobType: str = "full-time"
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


def job_to_record(job) -> dict:
    """Materialize a Job row as a camelCase record"""
    return {
        "id": job.id,
        "employerId": job.employer_id,
        "jobTitle": job.job_title,
        "jobDescription": job.job_description,
        "jobImage": job.job_image or "",
        "experience": job.experience or "",
        "skills": job.skills or "",
        "contactNumber": job.contact_number or "",
        "address": job.address or "",
        "barangay": job.barangay or "",
        "companyName": job.company_name or "",
        "applicantLimit": job.applicant_limit or 0,
        "jobStatus": job.job_status or "open",
        "jobType": job.job_type or "full-time",
        "createdAt": job.created_at,
        "updatedAt": job.updated_at,
    }
