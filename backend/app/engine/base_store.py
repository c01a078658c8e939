"""
Base Stores
===========

Abstract contracts for session and inquiry persistence.

The pipeline, streamer and routes depend only on these interfaces, so
the in-memory implementations can later be swapped for a database
without touching processing logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from backend.app.schema.inquiry_schema import Inquiry, InquiryPhase
from backend.app.schema.session_schema import Session


class BaseSessionStore(ABC):
    """Registry of client sessions."""

    @abstractmethod
    def create_session(self) -> Session:
        """Create and persist a fresh session with no inquiries."""

    @abstractmethod
    def get_session(self, session_id: str) -> Session:
        """Return a snapshot of the session.

        Raises
        ------
        NotFoundError
            If no session has this id.
        """

    @abstractmethod
    def attach_inquiry(self, session_id: str, inquiry_id: str) -> None:
        """Append *inquiry_id* to the session's inquiry list."""

    @abstractmethod
    def exists(self, session_id: str) -> bool:
        """Return ``True`` if the session is registered."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored sessions."""


class BaseInquiryStore(ABC):
    """Owner of every inquiry record."""

    @abstractmethod
    def create_inquiry(self, session_id: str, question: str) -> Inquiry:
        """Create an inquiry in the ``created`` phase under *session_id*.

        Raises
        ------
        NotFoundError
            If the session does not exist.
        InvalidInputError
            If *question* is empty.
        """

    @abstractmethod
    def get_inquiry(self, inquiry_id: str) -> Inquiry:
        """Return a snapshot of the inquiry, or raise ``NotFoundError``."""

    @abstractmethod
    def advance(self, inquiry_id: str, phase: InquiryPhase, **fields: Any) -> Inquiry:
        """Move the inquiry to *phase* and set *fields* atomically.

        *phase* must be the direct successor of the current phase.
        Returns a snapshot taken while the record lock is held.
        """

    @abstractmethod
    def list_for_session(self, session_id: str) -> list[Inquiry]:
        """Return snapshots of a session's inquiries in submission order."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored inquiries."""
