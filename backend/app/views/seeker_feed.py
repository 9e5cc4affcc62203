"""
Seeker's live list of their own applications.
"""
import threading
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.config import COLLECTION_APPLICATIONS, STATUS_PENDING
from backend.app.core.errors import NotFound
from backend.app.core.logging_config import get_logger
from backend.app.models.user import User
from backend.app.services.application_service import ApplicationService
from backend.app.services.change_feed import ChangeEvent, ChangeFeed, Unsubscribe, change_feed
from backend.app.services.projections import project_seeker_feed
from backend.app.views.notifications import NotificationSlot

logger = get_logger("views.seeker_feed")

Listener = Callable[[list[dict]], None]


class SeekerApplicationFeed:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        seeker_id: int,
        feed: ChangeFeed | None = None,
        notices: NotificationSlot | None = None,
    ):
        self._session_factory = session_factory
        self._seeker_id = seeker_id
        self._feed = feed or change_feed
        self._lock = threading.RLock()
        self._unsubscribe: Unsubscribe | None = None
        self._listeners: list[Listener] = []
        self.notices = notices or NotificationSlot()
        self.items: list[dict] = []
        self.loading = True
        self.error: str | None = None
        self.closed = False

    def start(self) -> "SeekerApplicationFeed":
        self._unsubscribe = self._feed.subscribe(COLLECTION_APPLICATIONS, self._on_change)
        self.refresh()
        return self

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _on_change(self, event: ChangeEvent) -> None:
        if not self.closed:
            self.refresh()

    def refresh(self) -> None:
        """Re-read and re-project. Errors leave a message and stop loading; no retry."""
        db = self._session_factory()
        try:
            records = ApplicationService.list_seeker_records(db, self._seeker_id)
        except SQLAlchemyError:
            logger.exception("Seeker feed load failed seeker_id=%s", self._seeker_id)
            with self._lock:
                self.error = "Failed to load applications"
                self.loading = False
            return
        finally:
            db.close()
        with self._lock:
            self.items = project_seeker_feed(records)
            self.error = None
            self.loading = False
            snapshot = list(self.items)
        for listener in list(self._listeners):
            listener(snapshot)

    def get(self, application_id: str) -> dict | None:
        with self._lock:
            return next((a for a in self.items if a["id"] == application_id), None)

    def cancel(self, application_id: str) -> bool:
        """Delete the application if it is pending; otherwise only a message."""
        self.notices.clear()
        item = self.get(application_id)
        if item is not None and item.get("status") != STATUS_PENDING:
            self.notices.error("You can only cancel pending applications.")
            return False

        self.notices.info("Canceling application...")
        db = self._session_factory()
        try:
            seeker = db.get(User, self._seeker_id)
            if seeker is None:
                raise NotFound("User not found")
            result = ApplicationService.cancel_application(db, seeker, application_id, feed=self._feed)
        except NotFound as e:
            self.notices.error(f"Error canceling application: {e}")
            return False
        except SQLAlchemyError as e:
            logger.exception("Cancel failed application_id=%s", application_id)
            self.notices.error(f"Error canceling application: {e}")
            return False
        finally:
            db.close()

        if not result["success"]:
            self.notices.error(result["message"])
            return False
        with self._lock:
            self.items = [a for a in self.items if a["id"] != application_id]
        self.notices.success(result["message"])
        return True

    def close(self) -> None:
        """Unsubscribe; later events are ignored."""
        self.closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()
