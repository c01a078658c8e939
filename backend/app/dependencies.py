"""
FastAPI dependencies.

Routes receive the per-application :class:`InquiryEngine` through
``Depends(get_engine)`` instead of importing a module-level instance.
"""

from __future__ import annotations

from fastapi.requests import HTTPConnection

from backend.app.engine.inquiry_engine import InquiryEngine


def get_engine(connection: HTTPConnection) -> InquiryEngine:
    """Return the engine stored on ``app.state`` (HTTP and WebSocket)."""
    return connection.app.state.engine
