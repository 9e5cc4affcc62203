"""
Employer profile schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class EmployerProfileForm(BaseModel):
    companyName: str = ""
    address: str = ""
    barangay: str = ""
    contactPerson: str = ""
    contactNumber: str = ""
    positionHiringFor: str = ""

    model_config = {"extra": "ignore"}


class EmployerProfileResponse(BaseModel):
    profile: EmployerProfileForm
    initials: str = ""
    documentName: Optional[str] = None
    hasDocument: bool = False
    lastUpdated: Optional[datetime] = None
    message: Optional[str] = None


def employer_model_to_form(profile) -> EmployerProfileForm:
    return EmployerProfileForm(
        companyName=profile.company_name or "",
        address=profile.address or "",
        barangay=profile.barangay or "",
        contactPerson=profile.contact_person or "",
        contactNumber=profile.contact_number or "",
        positionHiringFor=profile.position_hiring_for or "",
    )


def employer_form_to_dict(form: EmployerProfileForm) -> dict:
    return {
        "company_name": form.companyName.strip(),
        "address": form.address,
        "barangay": form.barangay,
        "contact_person": form.contactPerson,
        "contact_number": form.contactNumber,
        "position_hiring_for": form.positionHiringFor,
    }
