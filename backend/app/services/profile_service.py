"""
Profile service - load/save a seeker's profile fields and files.
Profile fields and files live in two records (user_profiles, user_files)
keyed by the same user.
"""
import mimetypes
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.config import COLLECTION_PROFILES, COLLECTION_USER_FILES, settings
from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.profile import UserFiles, UserProfile
from backend.app.models.user import User
from backend.app.schemas.profile import (
    ProfileForm,
    UserFilesPayload,
    files_model_to_payload,
    form_to_profile_dict,
    profile_model_to_form,
)
from backend.app.services import blob_storage
from backend.app.services.change_feed import ChangeFeed, change_feed
from backend.app.services.file_encoding import (
    PHOTO,
    RESUME,
    DownloadedFile,
    UploadedFile,
    data_url_mime,
    decode_data_url,
    encode_data_url,
    validate_upload,
)

logger = get_logger("services.profile")


class ProfileService:
    @staticmethod
    def get_or_create_profile(db: Session, user: User) -> UserProfile:
        """Get existing profile or create one seeded from the account"""
        profile = db.query(UserProfile).filter(UserProfile.user_id == user.id).first()
        if not profile:
            profile = UserProfile(user_id=user.id, full_name=user.full_name or "", email=user.email or "")
            db.add(profile)
            db.commit()
            db.refresh(profile)
        return profile

    @staticmethod
    def get_files(db: Session, user_id: int) -> UserFiles | None:
        return db.query(UserFiles).filter(UserFiles.user_id == user_id).first()

    @staticmethod
    def load_profile(db: Session, user: User) -> tuple[ProfileForm, UserFilesPayload | None, datetime | None]:
        """Form fields ("" for unset), files payload if any, and last update time."""
        profile = ProfileService.get_or_create_profile(db, user)
        files = ProfileService.get_files(db, user.id)
        return (
            profile_model_to_form(profile),
            files_model_to_payload(files) if files else None,
            profile.updated_at,
        )

    @staticmethod
    def _prepare_files(photo: UploadedFile | None, resume: UploadedFile | None) -> dict[str, UploadedFile]:
        """Validate every new file (raw size, MIME) before anything is encoded or written."""
        pending = {}
        for kind, upload in ((PHOTO, photo), (RESUME, resume)):
            if upload is None:
                continue
            validate_upload(kind, upload)
            pending[kind] = upload
        return pending

    @staticmethod
    def _encode_files(user: User, pending: dict[str, UploadedFile]) -> dict:
        """Column values for the user_files record. Inline: data URLs (capped); otherwise blob URLs."""
        values = {}
        if settings.storage_backend == "inline":
            for kind, upload in pending.items():
                values[f"{kind}_base64"] = encode_data_url(upload, max_chars=settings.max_encoded_chars)
                values[f"{kind}_url"] = None
                values[f"{kind}_name"] = upload.filename
            return values
        stored_urls: list[str] = []
        for kind, upload in pending.items():
            try:
                stored = blob_storage.store_blob(upload.data, upload.filename, user.id, upload.content_type)
            except RuntimeError:
                # Nothing was saved; drop blobs written earlier in this call
                for url in stored_urls:
                    blob_storage.delete_blob(url)
                raise
            stored_urls.append(stored["url"])
            values[f"{kind}_url"] = stored["url"]
            values[f"{kind}_base64"] = None
            values[f"{kind}_name"] = upload.filename
        return values

    @staticmethod
    def save_profile(
        db: Session,
        user: User,
        form: ProfileForm,
        photo: UploadedFile | None = None,
        resume: UploadedFile | None = None,
        feed: ChangeFeed | None = None,
    ) -> dict:
        """
        Save profile fields and any new files.

        Raises ValidationFailed (empty full name, rejected file) before any write.
        Returns {"profile", "files", "updated_at"}; files is re-read from the
        persisted record, not echoed from the input.
        """
        feed = feed or change_feed
        if not (form.fullName or "").strip():
            raise ValidationFailed("Full name is required.")

        pending = ProfileService._prepare_files(photo, resume)
        file_values = ProfileService._encode_files(user, pending) if pending else {}

        now = datetime.utcnow()
        replaced_blobs: list[str] = []
        try:
            profile = ProfileService.get_or_create_profile(db, user)
            for key, value in form_to_profile_dict(form).items():
                setattr(profile, key, value)
            profile.updated_at = now
            db.commit()

            if file_values:
                files = ProfileService.get_files(db, user.id)
                if files is None:
                    files = UserFiles(user_id=user.id)
                    db.add(files)
                for kind in pending:
                    old_url = getattr(files, f"{kind}_url", None)
                    if old_url and old_url != file_values.get(f"{kind}_url"):
                        replaced_blobs.append(old_url)
                for key, value in file_values.items():
                    setattr(files, key, value)
                files.updated_at = now
                db.commit()
        except SQLAlchemyError:
            db.rollback()
            for kind in pending:
                blob_storage.delete_blob(file_values.get(f"{kind}_url"))
            logger.exception("Profile save failed user_id=%s", user.id)
            raise

        for url in replaced_blobs:
            blob_storage.delete_blob(url)

        db.refresh(profile)
        files = ProfileService.get_files(db, user.id)
        logger.info(
            "Profile saved user_id=%s files=%s storage=%s",
            user.id,
            ",".join(sorted(pending)) or "-",
            settings.storage_backend,
        )
        feed.publish(COLLECTION_PROFILES, str(user.id))
        if pending:
            feed.publish(COLLECTION_USER_FILES, str(user.id))
        return {
            "profile": profile_model_to_form(profile),
            "files": files_model_to_payload(files) if files else None,
            "updated_at": profile.updated_at,
        }

    @staticmethod
    def read_file(db: Session, user: User, kind: str) -> DownloadedFile:
        """Materialize a stored photo/resume back to bytes for download."""
        if kind not in (PHOTO, RESUME):
            raise ValidationFailed(f"Unknown file kind: {kind}")
        files = ProfileService.get_files(db, user.id)
        if files is None:
            raise NotFound(f"No {kind} uploaded")
        name = getattr(files, f"{kind}_name") or kind
        inline = getattr(files, f"{kind}_base64")
        url = getattr(files, f"{kind}_url")
        guessed = mimetypes.guess_type(name)[0] or "application/octet-stream"
        if inline:
            return DownloadedFile(name, data_url_mime(inline, guessed), decode_data_url(inline))
        if url:
            try:
                data = blob_storage.load_blob(url)
            except FileNotFoundError as e:
                raise NotFound(f"Stored {kind} is missing") from e
            return DownloadedFile(name, guessed, data)
        raise NotFound(f"No {kind} uploaded")
