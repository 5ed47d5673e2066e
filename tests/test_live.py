import asyncio
import uuid

from fastapi import WebSocketDisconnect
from sqlalchemy.exc import OperationalError

from fintrack.core.live import ALL_COLLECTIONS, FINANCIAL_RECORDS, GOALS, RecordFeed
from fintrack.utils.charts import chart
from fintrack.api.v1.routes.dashboard import receive_refreshes
from fintrack.utils.live_session import LiveDashboardSession


async def _wait_for(condition, attempts=200):
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


def test_feed_delivers_only_to_matching_owner_and_collection():
    feed = RecordFeed()
    alice, bob = uuid.uuid4(), uuid.uuid4()
    seen = []
    feed.subscribe(FINANCIAL_RECORDS, alice, lambda collection, owner: seen.append((collection, owner)))

    assert feed.publish(FINANCIAL_RECORDS, bob) == 0
    assert feed.publish(GOALS, alice) == 0
    assert feed.publish(FINANCIAL_RECORDS, alice) == 1
    assert feed.publish(FINANCIAL_RECORDS, None) == 0
    assert seen == [(FINANCIAL_RECORDS, alice)]


def test_cancelled_subscription_stops_receiving():
    feed = RecordFeed()
    owner = uuid.uuid4()
    calls = []
    handle = feed.subscribe(ALL_COLLECTIONS, owner, lambda *args: calls.append(args))
    handle.cancel()
    handle.cancel()
    assert feed.publish(GOALS, owner) == 0
    assert calls == []
    assert feed.subscriber_count(GOALS, owner) == 0


def test_failing_listener_does_not_block_others():
    feed = RecordFeed()
    owner = uuid.uuid4()
    calls = []

    def broken(collection, owner_id):
        raise RuntimeError("boom")

    feed.subscribe(GOALS, owner, broken)
    feed.subscribe(GOALS, owner, lambda *args: calls.append(args))
    assert feed.publish(GOALS, owner) == 2
    assert len(calls) == 1


async def test_session_pushes_snapshot_on_every_change():
    feed = RecordFeed()
    owner = uuid.uuid4()
    sent = []

    async def load():
        return {"charts": [chart("time_flow", "line", [], [])]}

    async def send(message):
        sent.append(message)

    session = LiveDashboardSession(owner, feed, load, send)
    task = asyncio.create_task(session.run())

    await _wait_for(lambda: len(sent) == 1)
    feed.publish(FINANCIAL_RECORDS, owner)
    await _wait_for(lambda: len(sent) == 2)

    assert [m["sequence"] for m in sent] == [1, 2]
    assert sent[-1]["type"] == "snapshot"
    assert session.registry.get("time_flow").version == 2

    session.close()
    await asyncio.wait_for(task, timeout=1)
    assert feed.subscriber_count(FINANCIAL_RECORDS, owner) == 0


async def test_change_during_load_supersedes_render():
    feed = RecordFeed()
    owner = uuid.uuid4()
    sent = []
    loads = []

    async def load():
        loads.append(len(loads))
        if len(loads) == 1:
            # a write lands while the first snapshot is being read
            feed.publish(GOALS, owner)
        return {"charts": [], "load": len(loads)}

    async def send(message):
        sent.append(message)

    session = LiveDashboardSession(owner, feed, load, send)
    session.start()

    assert await session.render_once() is False
    assert sent == []
    assert await session.render_once() is True
    assert sent[0]["load"] == 2
    assert session.discarded == 1
    session.close()


async def test_failed_load_sends_error_and_ends_session():
    feed = RecordFeed()
    owner = uuid.uuid4()
    sent = []

    async def load():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    async def send(message):
        sent.append(message)

    session = LiveDashboardSession(owner, feed, load, send)
    await asyncio.wait_for(session.run(), timeout=1)

    assert sent == [{"type": "error", "detail": "Data store unavailable, please try again"}]
    assert isinstance(session.error, OperationalError)
    assert feed.subscriber_count(FINANCIAL_RECORDS, owner) == 0
    # later changes no longer trigger renders
    assert feed.publish(FINANCIAL_RECORDS, owner) == 0


async def test_unexpected_render_error_is_reported_generically():
    sent = []

    async def load():
        raise RuntimeError("chart builder bug")

    async def send(message):
        sent.append(message)

    session = LiveDashboardSession(uuid.uuid4(), RecordFeed(), load, send)
    await asyncio.wait_for(session.run(), timeout=1)
    assert sent == [{"type": "error", "detail": "Internal server error"}]


class _ScriptedSocket:
    def __init__(self, messages):
        self.messages = list(messages)

    async def receive_text(self):
        if not self.messages:
            raise WebSocketDisconnect(code=1000)
        return self.messages.pop(0)


async def test_client_messages_request_refresh_until_disconnect():
    owner = uuid.uuid4()
    session = LiveDashboardSession(owner, RecordFeed(), None, None)
    refreshes = []
    session.request_refresh = lambda: refreshes.append(owner)

    await asyncio.wait_for(receive_refreshes(_ScriptedSocket(["refresh", "refresh"]), session), timeout=1)
    assert refreshes == [owner, owner]
