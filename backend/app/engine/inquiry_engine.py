"""
Inquiry Engine

Facade the routes talk to.  It owns the session registry, inquiry
store, broadcaster, pipeline and streamer for one application
instance, and implements the request-level operations:

* create / look up sessions
* submit a question (create + fire-and-forget processing)
* read inquiries and open answer streams

Nothing here is a module-level global; :func:`create_app` builds one
engine per app and tests build their own.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Optional

from backend.app.config import AppConfig
from backend.app.engine.base_store import BaseInquiryStore, BaseSessionStore
from backend.app.engine.broadcaster import UpdateBroadcaster
from backend.app.engine.classifier import KeywordClassifier, StageClassifier
from backend.app.engine.inquiry_store import InquiryStore
from backend.app.engine.pipeline import InquiryPipeline
from backend.app.engine.session_store import SessionStore
from backend.app.engine.streamer import AnswerStreamer
from backend.app.schema.inquiry_schema import Inquiry
from backend.app.schema.session_schema import Session

logger = logging.getLogger(__name__)


class InquiryEngine:
    """Request-level operations over sessions and inquiries."""

    def __init__(
        self,
        sessions: BaseSessionStore,
        inquiries: BaseInquiryStore,
        broadcaster: UpdateBroadcaster,
        pipeline: InquiryPipeline,
        streamer: AnswerStreamer,
    ) -> None:
        self.sessions = sessions
        self.inquiries = inquiries
        self.broadcaster = broadcaster
        self.pipeline = pipeline
        self.streamer = streamer

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        classifier: Optional[StageClassifier] = None,
    ) -> "InquiryEngine":
        """Wire the in-memory components together."""
        sessions = SessionStore()
        inquiries = InquiryStore(sessions)
        broadcaster = UpdateBroadcaster(queue_size=config.subscriber_queue_size)
        pipeline = InquiryPipeline(
            store=inquiries,
            broadcaster=broadcaster,
            classifier=classifier or KeywordClassifier(),
            delay_scale=config.delay_scale,
            phase_timeout=config.phase_timeout_seconds,
        )
        streamer = AnswerStreamer(inquiries, char_delay=config.stream_char_delay)
        return cls(sessions, inquiries, broadcaster, pipeline, streamer)

    # ── Sessions ──────────────────────────────────────────

    def create_session(self) -> Session:
        return self.sessions.create_session()

    def get_session(self, session_id: str) -> Session:
        return self.sessions.get_session(session_id)

    # ── Inquiries ─────────────────────────────────────────

    def submit(self, session_id: str, question: str) -> Inquiry:
        """Create an inquiry and hand it to the pipeline.

        Returns as soon as the inquiry is stored; processing continues
        on the event loop.  Must be called from a coroutine.
        """
        inquiry = self.inquiries.create_inquiry(session_id, question)
        self.broadcaster.publish(inquiry)
        self.pipeline.schedule(inquiry.id)
        return inquiry

    def get_inquiry(self, inquiry_id: str) -> Inquiry:
        return self.inquiries.get_inquiry(inquiry_id)

    def list_inquiries(self, session_id: str) -> list[Inquiry]:
        return self.inquiries.list_for_session(session_id)

    def open_stream(self, inquiry_id: str) -> AsyncIterator[str]:
        return self.streamer.open(inquiry_id)

    async def shutdown(self) -> None:
        await self.pipeline.shutdown()
