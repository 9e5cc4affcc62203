"""
Employer profile service - company details and the optional business document.
Job postings copy company name, address and barangay from this record.
"""
import mimetypes
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.config import COLLECTION_EMPLOYERS, settings
from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.employer_profile import EmployerProfile
from backend.app.models.user import User
from backend.app.schemas.employer_profile import EmployerProfileForm, employer_form_to_dict
from backend.app.services import blob_storage
from backend.app.services.change_feed import ChangeFeed, change_feed
from backend.app.services.file_encoding import (
    DOCUMENT,
    DownloadedFile,
    UploadedFile,
    data_url_mime,
    decode_data_url,
    encode_data_url,
    validate_upload,
)

logger = get_logger("services.employer_profile")

UNKNOWN_COMPANY = "Unknown Company"


class EmployerProfileService:
    @staticmethod
    def get_profile(db: Session, employer_id: int) -> EmployerProfile | None:
        return db.query(EmployerProfile).filter(EmployerProfile.user_id == employer_id).first()

    @staticmethod
    def get_or_create_profile(db: Session, user: User) -> EmployerProfile:
        """Existing profile, or a new one named after the account"""
        profile = EmployerProfileService.get_profile(db, user.id)
        if not profile:
            profile = EmployerProfile(user_id=user.id, company_name=user.full_name or "")
            db.add(profile)
            db.commit()
            db.refresh(profile)
        return profile

    @staticmethod
    def company_details(db: Session, employer: User) -> dict:
        """Values a new job posting takes from its employer."""
        profile = EmployerProfileService.get_profile(db, employer.id)
        if profile is None:
            return {
                "company_name": employer.full_name or UNKNOWN_COMPANY,
                "address": "",
                "barangay": "",
                "contact_number": "",
            }
        return {
            "company_name": profile.company_name or employer.full_name or UNKNOWN_COMPANY,
            "address": profile.address or "",
            "barangay": profile.barangay or "",
            "contact_number": profile.contact_number or "",
        }

    @staticmethod
    def _store_document(user: User, document: UploadedFile) -> dict:
        if settings.storage_backend == "inline":
            return {
                "document_base64": encode_data_url(document, max_chars=settings.max_encoded_chars),
                "document_url": None,
                "document_name": document.filename,
            }
        stored = blob_storage.store_blob(document.data, document.filename, user.id, document.content_type)
        return {"document_base64": None, "document_url": stored["url"], "document_name": document.filename}

    @staticmethod
    def save_profile(
        db: Session,
        user: User,
        form: EmployerProfileForm,
        document: UploadedFile | None = None,
        feed: ChangeFeed | None = None,
    ) -> EmployerProfile:
        """
        Save company details and, when given, a new business document.
        Raises ValidationFailed before any write.
        """
        if not (form.companyName or "").strip():
            raise ValidationFailed("Company name is required.")
        doc_values = {}
        if document is not None:
            validate_upload(DOCUMENT, document)
            doc_values = EmployerProfileService._store_document(user, document)

        replaced_url = None
        try:
            profile = EmployerProfileService.get_or_create_profile(db, user)
            if doc_values and profile.document_url != doc_values["document_url"]:
                replaced_url = profile.document_url
            for key, value in {**employer_form_to_dict(form), **doc_values}.items():
                setattr(profile, key, value)
            # Account name follows the company name
            user.full_name = profile.company_name
            profile.updated_at = datetime.utcnow()
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            blob_storage.delete_blob(doc_values.get("document_url"))
            logger.exception("Employer profile save failed user_id=%s", user.id)
            raise

        blob_storage.delete_blob(replaced_url)
        db.refresh(profile)
        logger.info("Employer profile saved user_id=%s document=%s", user.id, bool(doc_values))
        (feed or change_feed).publish(COLLECTION_EMPLOYERS, str(user.id))
        return profile

    @staticmethod
    def read_document(db: Session, user: User) -> DownloadedFile:
        profile = EmployerProfileService.get_profile(db, user.id)
        if profile is None or not (profile.document_base64 or profile.document_url):
            raise NotFound("No document uploaded")
        name = profile.document_name or "document"
        guessed = mimetypes.guess_type(name)[0] or "application/octet-stream"
        if profile.document_base64:
            return DownloadedFile(
                name, data_url_mime(profile.document_base64, guessed), decode_data_url(profile.document_base64)
            )
        try:
            data = blob_storage.load_blob(profile.document_url)
        except FileNotFoundError as e:
            raise NotFound("Stored document is missing") from e
        return DownloadedFile(name, guessed, data)
