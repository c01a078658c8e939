"""
Session Store: In-Memory Registry

Thread-safe in-memory store for client sessions.  All data lives in a
Python ``dict`` keyed by session ID and is lost when the process exits.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone

from backend.app.engine.base_store import BaseSessionStore
from backend.app.engine.errors import NotFoundError
from backend.app.schema.session_schema import Session

logger = logging.getLogger(__name__)


class SessionStore(BaseSessionStore):
    """Thread-safe in-memory store for sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._rw_lock = threading.RLock()

    def create_session(self) -> Session:
        session = Session(id=str(uuid.uuid4()), created=datetime.now(timezone.utc))
        with self._rw_lock:
            self._sessions[session.id] = session
        logger.info("Session %s created.", session.id)
        return session.model_copy(deep=True)

    def get_session(self, session_id: str) -> Session:
        with self._rw_lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise NotFoundError(f"Session '{session_id}' not found.")
            return session.model_copy(deep=True)

    def attach_inquiry(self, session_id: str, inquiry_id: str) -> None:
        with self._rw_lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise NotFoundError(f"Session '{session_id}' not found.")
            session.inquiries.append(inquiry_id)

    def exists(self, session_id: str) -> bool:
        with self._rw_lock:
            return session_id in self._sessions

    def count(self) -> int:
        with self._rw_lock:
            return len(self._sessions)

    def reset(self) -> None:
        """Clear all sessions.  Intended for test teardown."""
        with self._rw_lock:
            self._sessions.clear()
            logger.info("Session store reset.")
