"""
Inquiry Processing Pipeline

Drives one inquiry from ``created`` to ``done`` as an asyncio task:

1. **Enter processing**: status flips to ``processing``
2. **Time-frame resolution**: fixed analysis window label
3. **Query synthesis**: classifier picks the subject table, SQL is templated
4. **Data retrieval**: mock rows, chart selection, optional monthly pivot
5. **Narrative synthesis**: templated paragraph, status flips to ``done``

Each step commits its fields through the store and broadcasts the new
snapshot before the next ``await``, so observers always see phases in
order.  Simulated latency separates the steps; ``delay_scale=0``
removes it without changing the ordering.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Optional, TypeVar

from backend.app.engine.base_store import BaseInquiryStore
from backend.app.engine.broadcaster import UpdateBroadcaster
from backend.app.engine.classifier import StageClassifier
from backend.app.engine.mock_data import (
    TIME_FRAME_LABEL,
    build_narrative,
    build_sql,
    get_table,
)
from backend.app.engine.transforms import (
    TIME_AXIS_KEY,
    fallback_selection,
    to_monthly_series,
)
from backend.app.schema.inquiry_schema import Inquiry, InquiryPhase, SubjectTable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PhaseTimeoutError(Exception):
    """A pipeline phase exceeded ``phase_timeout``."""


@dataclass(frozen=True)
class PhaseDelays:
    """Simulated latency ranges in seconds, before scaling."""

    time_frame: tuple[float, float] = (1.0, 2.0)
    sql: tuple[float, float] = (2.0, 3.0)
    data: tuple[float, float] = (1.0, 2.0)
    settle: tuple[float, float] = (0.5, 0.5)
    answer: tuple[float, float] = (2.0, 3.0)


class InquiryPipeline:
    """Runs inquiries through the ordered processing phases.

    The pipeline is the single writer for an inquiry while its task is
    running; readers see the snapshots the store hands out.
    """

    def __init__(
        self,
        store: BaseInquiryStore,
        broadcaster: UpdateBroadcaster,
        classifier: StageClassifier,
        delay_scale: float = 1.0,
        phase_timeout: Optional[float] = None,
        delays: PhaseDelays = PhaseDelays(),
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._classifier = classifier
        self._delay_scale = delay_scale
        self._phase_timeout = phase_timeout
        self._delays = delays
        self._rng = rng or random.Random()
        self._tasks: set[asyncio.Task] = set()

    # ── Scheduling ────────────────────────────────────────

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    def schedule(self, inquiry_id: str) -> asyncio.Task:
        """Start processing in the background and return immediately.

        Must be called from inside the running event loop.
        """
        task = asyncio.get_running_loop().create_task(
            self.run(inquiry_id), name=f"inquiry-{inquiry_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    async def shutdown(self) -> None:
        """Cancel every in-flight inquiry task and wait for them."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("Cancelled %d in-flight inquiry task(s).", len(tasks))

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.info("Task %s cancelled.", task.get_name())
            return
        exc = task.exception()
        if exc is not None and not isinstance(exc, PhaseTimeoutError):
            logger.error(
                "Task %s failed; inquiry will not reach 'done'.",
                task.get_name(), exc_info=exc,
            )

    # ── Phases ────────────────────────────────────────────

    async def run(self, inquiry_id: str) -> Inquiry:
        """Process one inquiry end to end and return the final snapshot.

        Raises ``PhaseTimeoutError`` if a classifier call stalls; the
        inquiry is then left in ``processing``.
        """
        logger.info("Starting inquiry processing: %s", inquiry_id)
        inquiry = self._commit(inquiry_id, InquiryPhase.PROCESSING)

        await self._resolve_time_frame(inquiry_id)
        table = await self._synthesize_query(inquiry_id, inquiry.question)
        await self._retrieve_data(inquiry_id, table)
        final = await self._synthesize_narrative(inquiry_id, table)

        logger.info(
            "Inquiry %s completed with status: %s (answer length %d characters).",
            inquiry_id, final.status.value, len(final.textual_answer or ""),
        )
        return final

    async def _resolve_time_frame(self, inquiry_id: str) -> Inquiry:
        await self._simulate("time frame identification", self._delays.time_frame)
        inquiry = self._commit(inquiry_id, InquiryPhase.TIME_FRAME_SET, time_frame=TIME_FRAME_LABEL)
        logger.info("Inquiry %s time frame set to: %s", inquiry_id, TIME_FRAME_LABEL)
        return inquiry

    async def _synthesize_query(self, inquiry_id: str, question: str) -> SubjectTable:
        await self._simulate("SQL generation", self._delays.sql)
        table = await self._bounded(
            "query synthesis", inquiry_id,
            asyncio.to_thread(self._classifier.select_table, question),
        )
        sql = build_sql(table)
        self._commit(inquiry_id, InquiryPhase.SQL_GENERATED, sql=sql)
        logger.info("Inquiry %s SQL generated from table '%s': %.50s...", inquiry_id, table.value, sql)
        return table

    async def _retrieve_data(self, inquiry_id: str, table: SubjectTable) -> Inquiry:
        await self._simulate("data retrieval", self._delays.data)
        rows = get_table(table)

        try:
            selection = await self._bounded(
                "chart selection", inquiry_id,
                asyncio.to_thread(self._classifier.select_chart, table),
            )
            table_data = rows
            if table == SubjectTable.PRODUCTS and selection.chart_config.x_axis.key == TIME_AXIS_KEY:
                table_data = to_monthly_series(rows)
        except PhaseTimeoutError:
            raise
        except Exception as exc:
            logger.warning(
                "Error processing data for inquiry %s, falling back to raw rows: %s",
                inquiry_id, exc, exc_info=True,
            )
            table_data = rows
            selection = fallback_selection(rows)

        inquiry = self._commit(
            inquiry_id,
            InquiryPhase.DATA_RETRIEVED,
            table_data=table_data,
            chart_type=selection.chart_type,
            chart_config=selection.chart_config,
        )
        logger.info(
            "Inquiry %s data retrieved: %d rows, chart %s (x=%s, y=%s).",
            inquiry_id,
            len(table_data),
            selection.chart_type.value,
            selection.chart_config.x_axis.key,
            ", ".join(y.key for y in selection.chart_config.y_axes),
        )
        return inquiry

    async def _synthesize_narrative(self, inquiry_id: str, table: SubjectTable) -> Inquiry:
        await self._simulate("result settling", self._delays.settle)
        await self._simulate("textual answer generation", self._delays.answer)
        return self._commit(inquiry_id, InquiryPhase.DONE, textual_answer=build_narrative(table))

    # ── Helpers ───────────────────────────────────────────

    def _commit(self, inquiry_id: str, phase: InquiryPhase, **fields: Any) -> Inquiry:
        """Apply a phase through the store, then broadcast the snapshot."""
        inquiry = self._store.advance(inquiry_id, phase, **fields)
        self._broadcaster.publish(inquiry)
        logger.info("Inquiry %s moved to phase: %s", inquiry_id, phase.value)
        return inquiry

    async def _simulate(self, label: str, bounds: tuple[float, float]) -> None:
        delay = self._rng.uniform(*bounds) * self._delay_scale
        logger.debug("Simulating %s for %.0fms", label, delay * 1000)
        await asyncio.sleep(delay)

    async def _bounded(self, label: str, inquiry_id: str, step: Awaitable[T]) -> T:
        """Await *step* under the phase timeout.  Simulated latency is not counted."""
        if self._phase_timeout is None:
            return await step
        try:
            return await asyncio.wait_for(step, timeout=self._phase_timeout)
        except asyncio.TimeoutError:
            logger.error(
                "Inquiry %s stalled in %s for more than %.1fs; leaving it in processing.",
                inquiry_id, label, self._phase_timeout,
            )
            raise PhaseTimeoutError(f"{label} exceeded {self._phase_timeout}s") from None
