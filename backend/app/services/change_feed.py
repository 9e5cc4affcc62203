"""
Change feed - in-process publish/subscribe per collection.

Services publish a ChangeEvent after every committed write; live views subscribe
to the collections they render and re-read the store on each event.
Callbacks run on the publishing thread, in subscription order.
"""
import itertools
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from backend.app.core.logging_config import get_logger

logger = get_logger("services.change_feed")

Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class ChangeEvent:
    collection: str
    doc_id: str
    # added | modified | removed
    kind: str
    at: datetime = field(default_factory=datetime.utcnow)


class ChangeFeed:
    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._subscribers: dict[str, dict[int, Callable[[ChangeEvent], None]]] = {}

    def subscribe(self, collection: str, callback: Callable[[ChangeEvent], None]) -> Unsubscribe:
        """Register callback for events on collection. Returns an idempotent unsubscribe."""
        with self._lock:
            token = next(self._ids)
            self._subscribers.setdefault(collection, {})[token] = callback
        logger.debug("Subscribed collection=%s token=%s", collection, token)

        def unsubscribe() -> None:
            with self._lock:
                subs = self._subscribers.get(collection)
                if subs is not None and subs.pop(token, None) is not None:
                    logger.debug("Unsubscribed collection=%s token=%s", collection, token)

        return unsubscribe

    def publish(self, collection: str, doc_id: str, kind: str = "modified") -> ChangeEvent:
        """Deliver an event to every current subscriber of collection."""
        event = ChangeEvent(collection=collection, doc_id=str(doc_id), kind=kind)
        with self._lock:
            callbacks = list(self._subscribers.get(collection, {}).values())
        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                # Subscriber errors never reach the publisher
                logger.exception(
                    "Change feed callback failed collection=%s doc_id=%s kind=%s",
                    collection,
                    doc_id,
                    kind,
                )
        return event

    def subscriber_count(self, collection: str) -> int:
        with self._lock:
            return len(self._subscribers.get(collection, {}))

    def reset(self) -> None:
        """Drop all subscribers."""
        with self._lock:
            self._subscribers.clear()


change_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    """Dependency returning the process-wide change feed."""
    return change_feed
