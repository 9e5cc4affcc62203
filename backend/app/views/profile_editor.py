"""
Profile editor - the seeker's profile page state: read-only view, edit mode
with pending field edits and files, save and cancel.
"""
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.user import User
from backend.app.schemas.profile import ProfileForm, UserFilesPayload, skill_list
from backend.app.services.change_feed import ChangeFeed
from backend.app.services.file_encoding import PHOTO, RESUME, DownloadedFile, UploadedFile, validate_upload
from backend.app.services.profile_service import ProfileService
from backend.app.views.notifications import NotificationSlot

logger = get_logger("views.profile_editor")


class ProfileEditor:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        user_id: int,
        feed: ChangeFeed | None = None,
        notices: NotificationSlot | None = None,
    ):
        self._session_factory = session_factory
        self._user_id = user_id
        self._feed = feed
        self.notices = notices or NotificationSlot()
        self.form = ProfileForm()
        self.files: UserFilesPayload | None = None
        self.last_updated: datetime | None = None
        self.editing = False
        self.loading = False
        self.pending_photo: UploadedFile | None = None
        self.pending_resume: UploadedFile | None = None

    @property
    def skills(self) -> list[str]:
        return skill_list(self.form.skills)

    def _user(self, db: Session) -> User:
        user = db.get(User, self._user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def load(self) -> None:
        """Replace form state with the persisted profile."""
        db = self._session_factory()
        try:
            form, files, last_updated = ProfileService.load_profile(db, self._user(db))
        except (SQLAlchemyError, NotFound):
            logger.exception("Profile load failed user_id=%s", self._user_id)
            self.notices.error("Failed to load profile")
            return
        finally:
            db.close()
        self.form = form
        self.files = files
        self.last_updated = last_updated

    def begin_edit(self) -> None:
        self.notices.clear()
        self.editing = True

    def set_field(self, name: str, value: str) -> None:
        if name not in ProfileForm.model_fields:
            raise ValidationFailed(f"Unknown profile field: {name}")
        setattr(self.form, name, value if value is not None else "")

    def _attach(self, kind: str, upload: UploadedFile) -> bool:
        try:
            validate_upload(kind, upload)
        except ValidationFailed as e:
            self.notices.error(str(e))
            return False
        setattr(self, f"pending_{kind}", upload)
        self.notices.clear()
        return True

    def attach_photo(self, upload: UploadedFile) -> bool:
        return self._attach(PHOTO, upload)

    def attach_resume(self, upload: UploadedFile) -> bool:
        return self._attach(RESUME, upload)

    def _discard_edits(self) -> None:
        self.editing = False
        self.pending_photo = None
        self.pending_resume = None

    def save(self) -> bool:
        """Persist edits. On failure the message is kept and state is untouched."""
        self.notices.clear()
        if not (self.form.fullName or "").strip():
            self.notices.error("Full name is required.")
            return False

        self.loading = True
        db = self._session_factory()
        try:
            result = ProfileService.save_profile(
                db,
                self._user(db),
                self.form,
                photo=self.pending_photo,
                resume=self.pending_resume,
                feed=self._feed,
            )
        except ValidationFailed as e:
            self.notices.error(str(e))
            return False
        except (SQLAlchemyError, RuntimeError, NotFound) as e:
            logger.exception("Profile save failed user_id=%s", self._user_id)
            self.notices.error(f"Error updating profile: {e}")
            return False
        finally:
            self.loading = False
            db.close()

        self.form = result["profile"]
        if result["files"] is not None:
            self.files = result["files"]
        self.last_updated = result["updated_at"]
        self._discard_edits()
        self.notices.success("Profile updated successfully!")
        return True

    def cancel(self) -> None:
        """Drop field edits and pending files, then reload the persisted state."""
        self._discard_edits()
        self.notices.clear()
        self.load()

    def download(self, kind: str) -> DownloadedFile | None:
        db = self._session_factory()
        try:
            return ProfileService.read_file(db, self._user(db), kind)
        except (ValidationFailed, NotFound) as e:
            self.notices.error(str(e))
            return None
        except (SQLAlchemyError, RuntimeError):
            logger.exception("File download failed user_id=%s kind=%s", self._user_id, kind)
            self.notices.error("Error downloading file")
            return None
        finally:
            db.close()
