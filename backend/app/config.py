"""
Application Configuration

Runtime knobs for the mock analytics backend.  Defaults reproduce the
demo timings; every field can be overridden through an ``ANALYTICS_*``
environment variable.
"""

from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

ENV_PREFIX = "ANALYTICS_"


class AppConfig(BaseModel):
    """Configuration for the analytics backend.

    Environment variables take precedence over constructor values, e.g.
    ``ANALYTICS_DELAY_SCALE=0`` disables the simulated latency.
    """

    delay_scale: float = Field(
        default=1.0,
        ge=0.0,
        description="Multiplier applied to every simulated pipeline delay (0 disables them).",
    )
    stream_char_delay: float = Field(
        default=0.05,
        ge=0.0,
        description="Seconds between two streamed characters.",
    )
    phase_timeout_seconds: Optional[float] = Field(
        default=30.0,
        gt=0.0,
        description="Upper bound for one classifier call within a phase; None waits forever.",
    )
    subscriber_queue_size: int = Field(
        default=1000,
        ge=1,
        description="Per-subscriber event buffer before events are dropped.",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins.",
    )
    log_level: str = Field(default="INFO")

    @model_validator(mode="before")
    @classmethod
    def apply_env_overrides(cls, data: Any) -> Any:
        """Merge environment variable overrides into the input.

        Overrides go through the same field validation as constructor
        values, so out-of-range settings raise ``ValidationError``.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)

        for name in ("delay_scale", "stream_char_delay", "subscriber_queue_size"):
            value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if value is not None:
                data[name] = value

        timeout = os.environ.get(f"{ENV_PREFIX}PHASE_TIMEOUT_SECONDS")
        if timeout is not None:
            data["phase_timeout_seconds"] = (
                None if timeout.strip().lower() in ("", "none", "0") else timeout
            )

        origins = os.environ.get(f"{ENV_PREFIX}CORS_ORIGINS")
        if origins:
            data["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

        log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
        if log_level:
            data["log_level"] = log_level.upper()

        return data
