# fintrack/utils/live_session.py
import asyncio
import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from fintrack.core.live import ALL_COLLECTIONS, RecordFeed, Subscription
from fintrack.utils.charts import ChartRegistry

logger = logging.getLogger(__name__)

SnapshotLoader = Callable[[], Awaitable[Dict[str, Any]]]
Sender = Callable[[Dict[str, Any]], Awaitable[None]]


def error_detail(exc: BaseException) -> str:
    if isinstance(exc, SQLAlchemyError):
        return "Data store unavailable, please try again"
    return "Internal server error"


class LiveDashboardSession:
    """
    Pushes a freshly recomputed dashboard after every change to the owner's data.

    Notifications only mark the session dirty. A single render loop reloads the
    snapshot and, if another change landed while it was loading, drops that
    result and loads again, so a stale render is never sent.
    """

    def __init__(self, owner_id: uuid.UUID, feed: RecordFeed, load_snapshot: SnapshotLoader, send: Sender):
        self.owner_id = owner_id
        self.feed = feed
        self.load_snapshot = load_snapshot
        self.send = send
        self.registry = ChartRegistry()
        self.sequence = 0
        self.discarded = 0
        self._dirty = asyncio.Event()
        self._closed = False
        self.error: Optional[BaseException] = None
        self._subscription: Optional[Subscription] = None

    def _on_change(self, collection: str, owner_id: uuid.UUID) -> None:
        logger.debug("Change in %s for %s", collection, owner_id)
        self.request_refresh()

    def request_refresh(self) -> None:
        """Manual refresh; same effect as a change notification."""
        self._dirty.set()

    def start(self) -> None:
        self._subscription = self.feed.subscribe(ALL_COLLECTIONS, self.owner_id, self._on_change)
        # initial snapshot
        self._dirty.set()

    async def render_once(self) -> bool:
        """Load and send one snapshot; returns False if it was superseded."""
        self._dirty.clear()
        snapshot = await self.load_snapshot()
        if self._dirty.is_set() or self._closed:
            self.discarded += 1
            return False

        for payload in snapshot.get("charts", []):
            self.registry.replace(payload["chart_id"], payload)
        self.sequence += 1
        await self.send({
            **snapshot,
            "type": "snapshot",
            "sequence": self.sequence,
            "charts": self.registry.snapshot(),
        })
        return True

    async def run(self) -> None:
        """
        Render until closed. A failed load ends the session: the client gets
        an error message and no further snapshots.
        """
        self.start()
        try:
            while not self._closed:
                await self._dirty.wait()
                if self._closed:
                    break
                try:
                    await self.render_once()
                except Exception as exc:
                    logger.exception(f"Live dashboard render failed for {self.owner_id}: {exc}")
                    self.error = exc
                    await self.send({"type": "error", "detail": error_detail(exc)})
                    break
        finally:
            self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.cancel()
        self.registry.clear()
        # wake the loop so run() can exit
        self._dirty.set()
        logger.info("Live dashboard closed for %s after %d renders", self.owner_id, self.sequence)
