# fintrack/core/live.py
"""
In-process change feed.

The CRUD layer publishes ``(collection, owner_id)`` after every committed
write; subscribers get a callback per notification and decide for themselves
how to re-read the store. Callbacks run synchronously on the event loop and
must not block.
"""
import logging
import uuid
from collections import defaultdict
from typing import Callable, Dict, Iterable, Optional, Set, Tuple

logger = logging.getLogger(__name__)

FINANCIAL_RECORDS = "financial_records"
FIXED_SETTINGS = "fixed_settings"
DEBT_STATUS = "debt_status"
GOALS = "goals"
MOTIVATION_LOGS = "motivation_logs"

ALL_COLLECTIONS = (FINANCIAL_RECORDS, FIXED_SETTINGS, DEBT_STATUS, GOALS, MOTIVATION_LOGS)

ChangeCallback = Callable[[str, uuid.UUID], None]


class Subscription:
    """Cancellable handle returned by RecordFeed.subscribe."""

    def __init__(self, feed: "RecordFeed", keys: Tuple[Tuple[str, uuid.UUID], ...], callback: ChangeCallback):
        self._feed = feed
        self._keys = keys
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self._feed._remove(self)


class RecordFeed:
    def __init__(self):
        self._subscribers: Dict[Tuple[str, uuid.UUID], Set[Subscription]] = defaultdict(set)

    def subscribe(
        self,
        collections: Iterable[str],
        owner_id: uuid.UUID,
        callback: ChangeCallback,
    ) -> Subscription:
        if isinstance(collections, str):
            collections = (collections,)
        keys = tuple((name, owner_id) for name in collections)
        subscription = Subscription(self, keys, callback)
        for key in keys:
            self._subscribers[key].add(subscription)
        logger.debug("Subscribed %s to %s", owner_id, [k[0] for k in keys])
        return subscription

    def publish(self, collection: str, owner_id: Optional[uuid.UUID]) -> int:
        """Notify subscribers of a change; returns how many were called."""
        if owner_id is None:
            return 0
        notified = 0
        for subscription in list(self._subscribers.get((collection, owner_id), ())):
            if not subscription.active:
                continue
            try:
                subscription.callback(collection, owner_id)
            except Exception:
                # one broken listener must not stop the write path
                logger.exception("Change callback failed for %s/%s", collection, owner_id)
            notified += 1
        return notified

    def subscriber_count(self, collection: str, owner_id: uuid.UUID) -> int:
        return len(self._subscribers.get((collection, owner_id), ()))

    def _remove(self, subscription: Subscription) -> None:
        for key in subscription._keys:
            bucket = self._subscribers.get(key)
            if bucket is None:
                continue
            bucket.discard(subscription)
            if not bucket:
                del self._subscribers[key]


# Process-wide feed used by the CRUD layer and the live dashboard
record_feed = RecordFeed()
