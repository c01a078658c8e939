"""
Inquiry Store: In-Memory Persistence Layer

Thread-safe in-memory store for analytics inquiries.  The store owns
every inquiry record; sessions only keep the list of ids, so an
inquiry can be looked up without knowing its session.

Writers take a per-record lock, readers always receive a deep copy
so a half-applied phase is never observed.  Data is lost when the
process exits.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any

from backend.app.engine.base_store import BaseInquiryStore, BaseSessionStore
from backend.app.engine.errors import InvalidInputError, NotFoundError
from backend.app.schema.inquiry_schema import (
    PHASE_ORDER,
    Inquiry,
    InquiryPhase,
    status_for_phase,
)

logger = logging.getLogger(__name__)

# Fields owned by the store itself; phases may not overwrite them.
_PROTECTED_FIELDS = frozenset({
    "id", "session_id", "question", "status", "phase", "created", "updated",
})


class InquiryStore(BaseInquiryStore):
    """Thread-safe in-memory store for inquiries."""

    def __init__(self, sessions: BaseSessionStore) -> None:
        self._sessions = sessions
        self._inquiries: dict[str, Inquiry] = {}
        self._record_locks: dict[str, threading.Lock] = {}
        self._rw_lock = threading.RLock()

    # CRUD

    def create_inquiry(self, session_id: str, question: str) -> Inquiry:
        if not self._sessions.exists(session_id):
            raise NotFoundError(f"Session '{session_id}' not found.")
        if not question or not question.strip():
            raise InvalidInputError("Question is required.")

        now = datetime.now(timezone.utc)
        inquiry = Inquiry(
            id=str(uuid.uuid4()),
            session_id=session_id,
            question=question,
            created=now,
            updated=now,
        )
        with self._rw_lock:
            self._inquiries[inquiry.id] = inquiry
            self._record_locks[inquiry.id] = threading.Lock()
        self._sessions.attach_inquiry(session_id, inquiry.id)

        logger.info(
            "Inquiry %s created for session %s: %r", inquiry.id, session_id, question,
        )
        return inquiry.model_copy(deep=True)

    def get_inquiry(self, inquiry_id: str) -> Inquiry:
        with self._lock_for(inquiry_id):
            return self._inquiries[inquiry_id].model_copy(deep=True)

    def list_for_session(self, session_id: str) -> list[Inquiry]:
        session = self._sessions.get_session(session_id)
        return [self.get_inquiry(inquiry_id) for inquiry_id in session.inquiries]

    def count(self) -> int:
        with self._rw_lock:
            return len(self._inquiries)

    # State transitions

    def advance(self, inquiry_id: str, phase: InquiryPhase, **fields: Any) -> Inquiry:
        with self._lock_for(inquiry_id):
            inquiry = self._inquiries[inquiry_id]

            expected = self._next_phase(inquiry.phase)
            if phase != expected:
                raise ValueError(
                    f"Inquiry '{inquiry_id}' cannot move from '{inquiry.phase.value}' "
                    f"to '{phase.value}' (expected '{expected.value if expected else None}')."
                )

            for name, value in fields.items():
                if name in _PROTECTED_FIELDS or name not in Inquiry.model_fields:
                    raise ValueError(f"Field '{name}' cannot be set by a phase.")
                if value is None and getattr(inquiry, name) is not None:
                    raise ValueError(f"Field '{name}' is already populated and cannot be cleared.")

            # Validated; build the next record and swap it in whole.
            advanced = inquiry.model_copy(
                update={
                    **fields,
                    "phase": phase,
                    "status": status_for_phase(phase),
                    "updated": max(datetime.now(timezone.utc), inquiry.updated),
                },
                deep=True,
            )
            self._inquiries[inquiry_id] = advanced
            return advanced.model_copy(deep=True)

    # Lifecycle utilities

    def reset(self) -> None:
        """Clear all inquiries.  Intended for test teardown."""
        with self._rw_lock:
            self._inquiries.clear()
            self._record_locks.clear()
            logger.info("Inquiry store reset.")

    # Internal helpers

    def _lock_for(self, inquiry_id: str) -> threading.Lock:
        with self._rw_lock:
            lock = self._record_locks.get(inquiry_id)
        if lock is None:
            raise NotFoundError(f"Inquiry '{inquiry_id}' not found.")
        return lock

    @staticmethod
    def _next_phase(current: InquiryPhase) -> InquiryPhase | None:
        """Return the phase after *current*, or ``None`` at the end."""
        idx = PHASE_ORDER.index(current)
        if idx + 1 < len(PHASE_ORDER):
            return PHASE_ORDER[idx + 1]
        return None
