"""
Session API Routes

A session groups the questions asked from one dashboard tab.  The
frontend keeps the session id in local storage and checks it with the
``validate`` endpoint before reusing it.

Endpoints
---------
POST   /api/sessions                        - create a session
GET    /api/sessions/{id}                   - session record
GET    /api/sessions/{id}/validate          - 200 if the session exists
GET    /api/sessions/{id}/inquiries         - inquiries of a session
POST   /api/sessions/{id}/inquiries         - submit a question (202)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.app.dependencies import get_engine
from backend.app.engine.errors import InvalidInputError, NotFoundError
from backend.app.engine.inquiry_engine import InquiryEngine
from backend.app.schema.inquiry_schema import (
    InquiryCreateRequest,
    InquiryCreateResponse,
    InquiryListResponse,
)
from backend.app.schema.session_schema import (
    Session,
    SessionCreateResponse,
    SessionValidateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post("", response_model=SessionCreateResponse, status_code=201)
def create_session(engine: InquiryEngine = Depends(get_engine)) -> SessionCreateResponse:
    """Create a new, empty session."""
    session = engine.create_session()
    return SessionCreateResponse(session_id=session.id)


@router.get("/{session_id}", response_model=Session)
def get_session(session_id: str, engine: InquiryEngine = Depends(get_engine)) -> Session:
    """Return a session with the ids of its inquiries."""
    try:
        return engine.get_session(session_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


@router.get("/{session_id}/validate", response_model=SessionValidateResponse)
def validate_session(
    session_id: str, engine: InquiryEngine = Depends(get_engine),
) -> SessionValidateResponse:
    """Let a client check whether a stored session id is still known."""
    if not engine.sessions.exists(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return SessionValidateResponse(session_id=session_id)


@router.get("/{session_id}/inquiries", response_model=InquiryListResponse)
def list_inquiries(
    session_id: str, engine: InquiryEngine = Depends(get_engine),
) -> InquiryListResponse:
    """List every inquiry of a session in submission order."""
    try:
        items = engine.list_inquiries(session_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    return InquiryListResponse(inquiries=items, total=len(items))


@router.post(
    "/{session_id}/inquiries",
    response_model=InquiryCreateResponse,
    status_code=202,
)
async def submit_inquiry(
    session_id: str,
    request: InquiryCreateRequest,
    engine: InquiryEngine = Depends(get_engine),
) -> InquiryCreateResponse:
    """Submit a question for background processing.

    Returns immediately with the inquiry id; progress is pushed over
    the ``/ws`` channel and can be polled via ``/api/inquiries/{id}``.
    """
    logger.info("New inquiry submitted for session %s: %r", session_id, request.question)
    try:
        inquiry = engine.submit(session_id, request.question)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("Failed to submit inquiry for session %s: %s", session_id, exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return InquiryCreateResponse(inquiry_id=inquiry.id)
