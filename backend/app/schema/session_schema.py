"""
Session Schema

A session groups the inquiries submitted by one client.  Sessions live
for the lifetime of the process and are only ever mutated by appending
inquiry ids.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import Field

from backend.app.schema.inquiry_schema import CamelModel


class Session(CamelModel):
    id: str = Field(..., description="Opaque session token (UUID).")
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    inquiries: list[str] = Field(
        default_factory=list,
        description="Inquiry ids in submission order.",
    )


class SessionCreateResponse(CamelModel):
    session_id: str


class SessionValidateResponse(CamelModel):
    session_id: str
    valid: bool = True
