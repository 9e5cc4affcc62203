"""
Employer profile endpoints - company details and business document
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_change_feed, get_current_employer, get_db
from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.user import User
from backend.app.schemas.employer_profile import (
    EmployerProfileForm,
    EmployerProfileResponse,
    employer_model_to_form,
)
from backend.app.schemas.profile import initials
from backend.app.services.change_feed import ChangeFeed
from backend.app.services.employer_profile_service import EmployerProfileService
from backend.app.services.file_encoding import UploadedFile
from backend.app.utils.downloads import file_download

logger = get_logger("api.employer.profile")
router = APIRouter(prefix="/employer/profile", tags=["employer"])


def _response(profile, message: str | None = None) -> EmployerProfileResponse:
    form = employer_model_to_form(profile)
    return EmployerProfileResponse(
        profile=form,
        initials=initials(form.companyName),
        documentName=profile.document_name,
        hasDocument=bool(profile.document_base64 or profile.document_url),
        lastUpdated=profile.updated_at,
        message=message,
    )


@router.get("", response_model=EmployerProfileResponse)
def get_employer_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
):
    """Company details. Created from the account name on first access."""
    return _response(EmployerProfileService.get_or_create_profile(db, current_user))


@router.put("", response_model=EmployerProfileResponse)
def update_employer_profile(
    companyName: str = Form(""),
    address: str = Form(""),
    barangay: str = Form(""),
    contactPerson: str = Form(""),
    contactNumber: str = Form(""),
    positionHiringFor: str = Form(""),
    document: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Save company details (multipart) and an optional PDF/DOC/DOCX business document."""
    form = EmployerProfileForm(
        companyName=companyName,
        address=address,
        barangay=barangay,
        contactPerson=contactPerson,
        contactNumber=contactNumber,
        positionHiringFor=positionHiringFor,
    )
    upload = None
    if document is not None and document.filename:
        upload = UploadedFile(
            filename=document.filename,
            content_type=document.content_type or "",
            data=document.file.read(),
        )
    try:
        profile = EmployerProfileService.save_profile(db, current_user, form, document=upload, feed=feed)
    except ValidationFailed as e:
        logger.warning("Employer profile rejected user_id=%s reason=%s", current_user.id, str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (SQLAlchemyError, RuntimeError):
        logger.exception("Employer profile save error user_id=%s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating profile",
        )
    return _response(profile, message="Profile updated successfully!")


@router.get("/document")
def download_document(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
):
    try:
        downloaded = EmployerProfileService.read_document(db, current_user)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except RuntimeError:
        logger.exception("Document download error user_id=%s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error downloading document",
        )
    return file_download(downloaded.data, downloaded.filename, downloaded.content_type)
