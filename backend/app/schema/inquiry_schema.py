"""
Inquiry Schema

Pydantic models for the natural-language analytics inquiry lifecycle.

An inquiry moves through six ordered phases:

    created → processing → time_frame_set → sql_generated → data_retrieved → done

Clients only see three coarse statuses (``created``, ``processing``,
``done``); the four intermediate phases all report ``processing``.
Fields are populated progressively and never cleared once set.

All models serialise with camelCase keys (``sessionId``, ``tableData``,
``chartConfig`` ...) so the wire format matches the dashboard frontend.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Enums
class InquiryStatus(str, Enum):
    """Client-visible lifecycle status."""

    CREATED    = "created"
    PROCESSING = "processing"
    DONE       = "done"


class InquiryPhase(str, Enum):
    """Internal pipeline phase; finer grained than :class:`InquiryStatus`."""

    CREATED        = "created"
    PROCESSING     = "processing"
    TIME_FRAME_SET = "time_frame_set"
    SQL_GENERATED  = "sql_generated"
    DATA_RETRIEVED = "data_retrieved"
    DONE           = "done"


# Canonical ordering; each phase is reachable only from its predecessor.
PHASE_ORDER: list[InquiryPhase] = [
    InquiryPhase.CREATED,
    InquiryPhase.PROCESSING,
    InquiryPhase.TIME_FRAME_SET,
    InquiryPhase.SQL_GENERATED,
    InquiryPhase.DATA_RETRIEVED,
    InquiryPhase.DONE,
]


def status_for_phase(phase: InquiryPhase) -> InquiryStatus:
    """Collapse an internal phase to the status exposed to clients."""
    if phase == InquiryPhase.CREATED:
        return InquiryStatus.CREATED
    if phase == InquiryPhase.DONE:
        return InquiryStatus.DONE
    return InquiryStatus.PROCESSING


class SubjectTable(str, Enum):
    """Mock datasets an inquiry can be answered from."""

    SALES     = "sales"
    CUSTOMERS = "customers"
    PRODUCTS  = "products"


class ChartType(str, Enum):
    BAR        = "bar"
    LINE       = "line"
    MULTI_BAR  = "multiBar"
    MULTI_LINE = "multiLine"
    PIE        = "pie"


# Chart recommendation
class AxisConfig(CamelModel):
    """The subject (x) axis of a chart."""

    key: str = ""
    label: str = ""


class SeriesConfig(CamelModel):
    """One value (y) axis of a chart."""

    key: str
    label: str
    color: str = "#8884d8"


class ChartConfig(CamelModel):
    x_axis: AxisConfig = Field(default_factory=AxisConfig)
    y_axes: list[SeriesConfig] = Field(default_factory=list)


class ChartSelection(BaseModel):
    """Chart type plus axis configuration picked for a subject table."""

    chart_type: ChartType
    chart_config: ChartConfig


# Inquiry entity
class Inquiry(CamelModel):
    """Full representation of one question-to-answer processing unit."""

    id: str = Field(..., description="Unique inquiry identifier (UUID).")
    session_id: str = Field(..., description="Owning session.")
    question: str = Field(..., description="Original question text.")
    status: InquiryStatus = InquiryStatus.CREATED
    phase: InquiryPhase = InquiryPhase.CREATED
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    time_frame: Optional[str] = None
    sql: Optional[str] = None
    table_data: Optional[list[dict[str, Any]]] = None
    chart_type: Optional[ChartType] = None
    chart_config: Optional[ChartConfig] = None
    textual_answer: Optional[str] = None


# API request / response models
class InquiryCreateRequest(BaseModel):
    """Payload to submit a question under a session.

    Emptiness is checked by the store so the API answers 400, not 422.
    """

    question: str = Field(
        "",
        description="Free-text business question.",
        examples=["What are our sales trends?"],
    )


class InquiryCreateResponse(CamelModel):
    inquiry_id: str


class InquiryListResponse(BaseModel):
    """Response for listing the inquiries of a session."""

    inquiries: list[Inquiry] = Field(default_factory=list)
    total: int = 0


class InquiryEvent(BaseModel):
    """WebSocket message pushed after every inquiry mutation."""

    event: str = "inquiry_updated"
    data: dict[str, Any]
