"""
Inquiry API Routes

Read access to inquiries and the character stream of a finished
answer.

Endpoints
---------
GET    /api/inquiries/{id}          - current inquiry record
GET    /api/inquiries/{id}/stream   - stream ``textualAnswer`` (text/plain)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from backend.app.dependencies import get_engine
from backend.app.engine.errors import NotFoundError, NotReadyError
from backend.app.engine.inquiry_engine import InquiryEngine
from backend.app.schema.inquiry_schema import Inquiry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/inquiries", tags=["inquiries"])


@router.get("/{inquiry_id}", response_model=Inquiry)
def get_inquiry(inquiry_id: str, engine: InquiryEngine = Depends(get_engine)) -> Inquiry:
    """Return the inquiry as currently known (fields fill in over time)."""
    try:
        return engine.get_inquiry(inquiry_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Inquiry not found")


@router.get("/{inquiry_id}/stream")
def stream_inquiry(
    inquiry_id: str, engine: InquiryEngine = Depends(get_engine),
) -> StreamingResponse:
    """Stream the narrative one character per chunk.

    Only available once the inquiry is ``done``.  Each request replays
    the whole answer; closing the connection stops the stream.
    """
    try:
        chars = engine.open_stream(inquiry_id)
    except NotFoundError:
        logger.info("Stream request failed: inquiry %s not found.", inquiry_id)
        raise HTTPException(status_code=404, detail="Inquiry not found")
    except NotReadyError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return StreamingResponse(
        chars,
        media_type="text/plain",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
