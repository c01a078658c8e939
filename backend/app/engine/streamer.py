"""
Answer Streamer

Replays the narrative of a finished inquiry one character at a time,
simulating incremental generation.  Every call to :meth:`open` gets an
independent generator that starts from the first character.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from backend.app.engine.base_store import BaseInquiryStore
from backend.app.engine.errors import NotReadyError
from backend.app.schema.inquiry_schema import InquiryStatus

logger = logging.getLogger(__name__)


class AnswerStreamer:
    """Character-by-character transfer of ``textual_answer``."""

    def __init__(self, store: BaseInquiryStore, char_delay: float = 0.05) -> None:
        self._store = store
        self._char_delay = char_delay

    def open(self, inquiry_id: str) -> AsyncIterator[str]:
        """Validate the inquiry and return a lazy character stream.

        Validation happens eagerly so callers can answer with an error
        before any streaming response has started.

        Raises
        ------
        NotFoundError
            If the inquiry does not exist.
        NotReadyError
            If the inquiry has not reached ``done``.
        """
        inquiry = self._store.get_inquiry(inquiry_id)
        if inquiry.status != InquiryStatus.DONE:
            logger.info(
                "Stream request failed: inquiry %s not complete (status: %s).",
                inquiry_id, inquiry.status.value,
            )
            raise NotReadyError("Inquiry processing not complete")

        logger.info("Starting stream for inquiry %s.", inquiry_id)
        return self._emit(inquiry_id, inquiry.textual_answer or "")

    async def _emit(self, inquiry_id: str, answer: str) -> AsyncIterator[str]:
        total = len(answer)
        logger.info("Stream started: %d characters to stream.", total)

        sent = 0
        last_logged = 0
        try:
            for char in answer:
                await asyncio.sleep(self._char_delay)
                yield char
                sent += 1

                percent = sent * 100 // total
                if percent >= last_logged + 25:
                    last_logged = percent - percent % 25
                    logger.info(
                        "Stream progress: %d%% (%d/%d characters).", last_logged, sent, total,
                    )
        finally:
            if sent == total:
                logger.info("Stream completed for inquiry %s.", inquiry_id)
            else:
                logger.info(
                    "Stream for inquiry %s stopped by consumer after %d/%d characters.",
                    inquiry_id, sent, total,
                )
