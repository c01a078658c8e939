"""
Tests for the Answer Streamer and the Update Broadcaster.
"""

from __future__ import annotations

import asyncio

import pytest

from backend.app.engine.broadcaster import INQUIRY_UPDATED, UpdateBroadcaster
from backend.app.engine.errors import NotFoundError, NotReadyError
from backend.app.engine.inquiry_store import InquiryStore
from backend.app.engine.session_store import SessionStore
from backend.app.engine.streamer import AnswerStreamer
from backend.app.schema.inquiry_schema import InquiryPhase

ANSWER = "Revenue grew steadily."


# Fixtures

@pytest.fixture
def store() -> InquiryStore:
    return InquiryStore(SessionStore())


def _new_inquiry(store: InquiryStore, question: str = "sales"):
    session_id = store._sessions.create_session().id
    return store.create_inquiry(session_id, question)


def _complete(store: InquiryStore, inquiry_id: str, answer: str = ANSWER):
    store.advance(inquiry_id, InquiryPhase.PROCESSING)
    store.advance(inquiry_id, InquiryPhase.TIME_FRAME_SET, time_frame="Last 6 months")
    store.advance(inquiry_id, InquiryPhase.SQL_GENERATED, sql="SELECT 1")
    store.advance(inquiry_id, InquiryPhase.DATA_RETRIEVED, table_data=[])
    return store.advance(inquiry_id, InquiryPhase.DONE, textual_answer=answer)


async def _collect(chars) -> list[str]:
    return [c async for c in chars]


# Streamer tests

class TestAnswerStreamer:
    def test_missing_inquiry(self, store: InquiryStore):
        streamer = AnswerStreamer(store, char_delay=0)
        with pytest.raises(NotFoundError):
            streamer.open("nonexistent")

    def test_not_ready_before_done(self, store: InquiryStore):
        streamer = AnswerStreamer(store, char_delay=0)
        inquiry = _new_inquiry(store)

        with pytest.raises(NotReadyError, match="processing not complete"):
            streamer.open(inquiry.id)

        for phase in (
            InquiryPhase.PROCESSING,
            InquiryPhase.TIME_FRAME_SET,
            InquiryPhase.SQL_GENERATED,
            InquiryPhase.DATA_RETRIEVED,
        ):
            store.advance(inquiry.id, phase)
            with pytest.raises(NotReadyError):
                streamer.open(inquiry.id)

    def test_stream_equals_answer(self, store: InquiryStore):
        streamer = AnswerStreamer(store, char_delay=0)
        inquiry = _new_inquiry(store)
        _complete(store, inquiry.id)

        chunks = asyncio.run(_collect(streamer.open(inquiry.id)))

        assert chunks == list(ANSWER)
        assert "".join(chunks) == ANSWER

    def test_each_call_replays_from_start(self, store: InquiryStore):
        streamer = AnswerStreamer(store, char_delay=0.001)
        inquiry = _new_inquiry(store)
        _complete(store, inquiry.id)

        async def scenario():
            first = streamer.open(inquiry.id)
            head = [await first.__anext__() for _ in range(5)]
            second = await _collect(streamer.open(inquiry.id))
            rest = await _collect(first)
            return head + rest, second

        first, second = asyncio.run(scenario())
        assert "".join(first) == ANSWER
        assert "".join(second) == ANSWER

    def test_consumer_close_stops_stream(self, store: InquiryStore):
        streamer = AnswerStreamer(store, char_delay=0.001)
        inquiry = _new_inquiry(store)
        _complete(store, inquiry.id)

        async def scenario():
            chars = streamer.open(inquiry.id)
            got = [await chars.__anext__() for _ in range(3)]
            await chars.aclose()
            with pytest.raises(StopAsyncIteration):
                await chars.__anext__()
            return got

        assert asyncio.run(scenario()) == list(ANSWER[:3])

    def test_cancelled_consumer_releases_timer(self, store: InquiryStore):
        streamer = AnswerStreamer(store, char_delay=10.0)
        inquiry = _new_inquiry(store)
        _complete(store, inquiry.id)

        async def scenario():
            task = asyncio.create_task(_collect(streamer.open(inquiry.id)))
            await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            return task

        task = asyncio.run(scenario())
        assert task.cancelled()

    def test_empty_answer_streams_nothing(self, store: InquiryStore):
        streamer = AnswerStreamer(store, char_delay=0)
        inquiry = _new_inquiry(store)
        _complete(store, inquiry.id, answer="")

        assert asyncio.run(_collect(streamer.open(inquiry.id))) == []


# Broadcaster tests

class TestUpdateBroadcaster:
    def test_publish_without_subscribers(self, store: InquiryStore):
        broadcaster = UpdateBroadcaster()
        assert broadcaster.publish(_new_inquiry(store)) == 0

    def test_fan_out_to_every_subscriber(self, store: InquiryStore):
        broadcaster = UpdateBroadcaster()
        first, second = broadcaster.subscribe(), broadcaster.subscribe()
        inquiry = _new_inquiry(store)

        assert broadcaster.publish(inquiry) == 2

        for sub in (first, second):
            event = sub.queue.get_nowait()
            assert event["event"] == INQUIRY_UPDATED
            assert event["data"]["id"] == inquiry.id
            assert event["data"]["sessionId"] == inquiry.session_id
            assert event["data"]["status"] == "created"

    def test_no_replay_for_late_subscriber(self, store: InquiryStore):
        broadcaster = UpdateBroadcaster()
        broadcaster.publish(_new_inquiry(store))
        late = broadcaster.subscribe()
        assert late.queue.empty()

    def test_unsubscribe(self, store: InquiryStore):
        broadcaster = UpdateBroadcaster()
        sub = broadcaster.subscribe()
        assert broadcaster.subscriber_count == 1

        broadcaster.unsubscribe(sub)
        broadcaster.unsubscribe(sub)

        assert broadcaster.subscriber_count == 0
        assert broadcaster.publish(_new_inquiry(store)) == 0
        assert sub.queue.empty()

    def test_full_queue_only_affects_that_subscriber(self, store: InquiryStore):
        broadcaster = UpdateBroadcaster(queue_size=1)
        slow, fast = broadcaster.subscribe(), broadcaster.subscribe()
        inquiry = _new_inquiry(store)

        assert broadcaster.publish(inquiry) == 2
        fast.queue.get_nowait()

        updated = store.advance(inquiry.id, InquiryPhase.PROCESSING)
        assert broadcaster.publish(updated) == 1

        assert slow.queue.qsize() == 1
        assert slow.queue.get_nowait()["data"]["status"] == "created"
        assert fast.queue.get_nowait()["data"]["status"] == "processing"

    def test_per_subscriber_order_matches_publish_order(self, store: InquiryStore):
        broadcaster = UpdateBroadcaster()
        sub = broadcaster.subscribe()
        inquiry = _new_inquiry(store)
        broadcaster.publish(inquiry)
        for phase in (InquiryPhase.PROCESSING, InquiryPhase.TIME_FRAME_SET):
            broadcaster.publish(store.advance(inquiry.id, phase))

        phases = [sub.queue.get_nowait()["data"]["phase"] for _ in range(3)]
        assert phases == ["created", "processing", "time_frame_set"]
