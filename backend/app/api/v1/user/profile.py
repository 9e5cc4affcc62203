"""
Profile endpoints - GET and PUT the current user's profile fields and files
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_change_feed, get_current_user, get_db
from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.user import User
from backend.app.schemas.profile import ProfileForm, ProfileResponse, UserFilesPayload, initials, skill_list
from backend.app.services.change_feed import ChangeFeed
from backend.app.services.file_encoding import UploadedFile
from backend.app.services.profile_service import ProfileService
from backend.app.utils.downloads import file_download

logger = get_logger("api.user.profile")
router = APIRouter()


def _to_upload(upload: UploadFile | None) -> UploadedFile | None:
    """Multipart part -> UploadedFile. An empty file input arrives with no filename."""
    if upload is None or not upload.filename:
        return None
    return UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type or "",
        data=upload.file.read(),
    )


@router.get("", response_model=ProfileResponse)
def get_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get current user's profile. Creates an empty one on first access."""
    form, files, last_updated = ProfileService.load_profile(db, current_user)
    return ProfileResponse(
        profile=form,
        skillList=skill_list(form.skills),
        initials=initials(form.fullName),
        files=files,
        lastUpdated=last_updated,
    )


@router.put("", response_model=ProfileResponse)
def update_profile(
    fullName: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    age: str = Form(""),
    gender: str = Form(""),
    address: str = Form(""),
    barangay: str = Form(""),
    desiredJob: str = Form(""),
    experience: str = Form(""),
    education: str = Form(""),
    skills: str = Form(""),
    coverLetter: str = Form(""),
    photo: UploadFile | None = File(None),
    resume: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """
    Save profile fields and optional photo/resume (multipart).
    Files are checked for size and type before anything is written.
    """
    form = ProfileForm(
        fullName=fullName,
        email=email,
        phone=phone,
        age=age,
        gender=gender,
        address=address,
        barangay=barangay,
        desiredJob=desiredJob,
        experience=experience,
        education=education,
        skills=skills,
        coverLetter=coverLetter,
    )
    try:
        result = ProfileService.save_profile(
            db,
            current_user,
            form,
            photo=_to_upload(photo),
            resume=_to_upload(resume),
            feed=feed,
        )
    except ValidationFailed as e:
        logger.warning("Profile save rejected user_id=%s reason=%s", current_user.id, str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (SQLAlchemyError, RuntimeError):
        logger.exception("Profile save error user_id=%s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating profile",
        )

    saved = result["profile"]
    return ProfileResponse(
        profile=saved,
        skillList=skill_list(saved.skills),
        initials=initials(saved.fullName),
        files=result["files"],
        lastUpdated=result["updated_at"],
        message="Profile updated successfully!",
    )


@router.get("/files", response_model=UserFilesPayload | None)
def get_files(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Current files record, or null if nothing was uploaded yet."""
    _, files, _ = ProfileService.load_profile(db, current_user)
    return files


@router.get("/files/{kind}")
def download_file(
    kind: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Download the stored photo or resume under its original file name."""
    try:
        downloaded = ProfileService.read_file(db, current_user, kind)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except RuntimeError:
        logger.exception("File download error user_id=%s kind=%s", current_user.id, kind)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error downloading file",
        )
    return file_download(downloaded.data, downloaded.filename, downloaded.content_type)
