"""
Employer's live list of applicants across their job postings.

Two dependent stages: the employer's jobs, then the whole applications
collection filtered to those jobs. Until the jobs stage has loaded once the
list is empty. Either stage updating re-runs the filter.
"""
import threading
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.config import (
    COLLECTION_APPLICATIONS,
    COLLECTION_JOBS,
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    STATUS_SCHEDULED,
)
from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.user import User
from backend.app.schemas.job import job_to_record
from backend.app.services.application_service import ApplicationService
from backend.app.services.change_feed import ChangeEvent, ChangeFeed, Unsubscribe, change_feed
from backend.app.services.job_service import JobService
from backend.app.services.projections import (
    compose_schedule,
    filter_applications,
    project_employer_feed,
    status_counts,
)
from backend.app.services.status_service import StatusService
from backend.app.views.notifications import NotificationSlot

logger = get_logger("views.employer_feed")

Listener = Callable[[list[dict]], None]


class EmployerApplicationFeed:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        employer_id: int,
        feed: ChangeFeed | None = None,
        notices: NotificationSlot | None = None,
    ):
        self._session_factory = session_factory
        self._employer_id = employer_id
        self._feed = feed or change_feed
        self._lock = threading.RLock()
        self._unsubscribes: list[Unsubscribe] = []
        self._listeners: list[Listener] = []
        self._records: list[dict] = []
        self.notices = notices or NotificationSlot()
        self.jobs: dict[str, dict] = {}
        self.jobs_loaded = False
        self.items: list[dict] = []
        self.loading = True
        self.error: str | None = None
        self.closed = False

    def start(self) -> "EmployerApplicationFeed":
        self._unsubscribes.append(self._feed.subscribe(COLLECTION_JOBS, self._on_jobs))
        self.refresh_jobs()
        self._unsubscribes.append(self._feed.subscribe(COLLECTION_APPLICATIONS, self._on_applications))
        self.refresh_applications()
        return self

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _on_jobs(self, event: ChangeEvent) -> None:
        if not self.closed:
            self.refresh_jobs()

    def _on_applications(self, event: ChangeEvent) -> None:
        if not self.closed:
            self.refresh_applications()

    def refresh_jobs(self) -> None:
        db = self._session_factory()
        try:
            jobs = {j.id: job_to_record(j) for j in JobService.list_employer_jobs(db, self._employer_id)}
        except SQLAlchemyError:
            # Jobs keep their last known value
            logger.exception("Employer jobs load failed employer_id=%s", self._employer_id)
            with self._lock:
                self.error = "Failed to load applications"
                self.loading = False
            return
        finally:
            db.close()
        with self._lock:
            self.jobs = jobs
            self.jobs_loaded = True
        self._recompute()

    def refresh_applications(self) -> None:
        db = self._session_factory()
        try:
            records = ApplicationService.list_all_records(db)
        except SQLAlchemyError:
            logger.exception("Employer applications load failed employer_id=%s", self._employer_id)
            with self._lock:
                self.error = "Failed to load applications"
                self.loading = False
            return
        finally:
            db.close()
        with self._lock:
            self._records = records
            self.loading = False
            self.error = None
        self._recompute()

    def _recompute(self) -> None:
        with self._lock:
            self.items = project_employer_feed(self._records, self.jobs) if self.jobs_loaded else []
            snapshot = list(self.items)
        for listener in list(self._listeners):
            listener(snapshot)

    def filtered(self, status: str = "all", search: str = "") -> list[dict]:
        with self._lock:
            items = list(self.items)
        return filter_applications(items, status=status, search=search)

    def counts(self) -> dict[str, int]:
        with self._lock:
            return status_counts(self.items)

    def get(self, application_id: str) -> dict | None:
        with self._lock:
            return next((a for a in self.items if a["id"] == application_id), None)

    def update_status(
        self,
        application_id: str,
        new_status: str,
        scheduled_at: datetime | None = None,
        **metadata,
    ) -> bool:
        """Write through the status handler, then patch the local list without waiting for the feed."""
        db = self._session_factory()
        try:
            employer = db.get(User, self._employer_id)
            if employer is None:
                raise NotFound("User not found")
            result = StatusService.transition(
                db, employer, application_id, new_status, scheduled_at=scheduled_at, feed=self._feed, **metadata
            )
        except (ValidationFailed, NotFound) as e:
            self.notices.error(str(e))
            return False
        except SQLAlchemyError:
            logger.exception("Status update failed application_id=%s", application_id)
            self.notices.error("Failed to update status")
            return False
        finally:
            db.close()

        if not result["success"]:
            self.notices.error(result["message"])
            return False
        with self._lock:
            self.items = [
                {**a, "status": new_status, "scheduledAt": scheduled_at or a.get("scheduledAt")}
                if a["id"] == application_id
                else a
                for a in self.items
            ]
        self.notices.success(result["message"])
        return True

    def accept(self, application_id: str, confirmed: bool, acceptance_requirements: str | None = None) -> bool:
        self.notices.clear()
        if not confirmed:
            self.notices.error("Please confirm before accepting this applicant.")
            return False
        return self.update_status(application_id, STATUS_ACCEPTED, acceptance_requirements=acceptance_requirements)

    def reject(
        self,
        application_id: str,
        confirmed: bool,
        rejection_reason: str | None = None,
        rejection_comment: str | None = None,
    ) -> bool:
        self.notices.clear()
        if not confirmed:
            self.notices.error("Please confirm before rejecting this applicant.")
            return False
        return self.update_status(
            application_id,
            STATUS_REJECTED,
            rejection_reason=rejection_reason,
            rejection_comment=rejection_comment,
        )

    def schedule(self, application_id: str, date: str, time: str, interview_details: str | None = None) -> bool:
        self.notices.clear()
        try:
            scheduled_at = compose_schedule(date, time)
        except ValidationFailed as e:
            self.notices.error(str(e))
            return False
        return self.update_status(
            application_id, STATUS_SCHEDULED, scheduled_at=scheduled_at, interview_details=interview_details
        )

    def close(self) -> None:
        self.closed = True
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes.clear()
        self._listeners.clear()
