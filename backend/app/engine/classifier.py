"""
Stage Classifier

Maps a free-text question to a subject table and picks a chart for
that table.  This stands in for a real NLP model: the default
:class:`KeywordClassifier` matches keywords and falls back to a random
choice, and tests substitute a deterministic subclass.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Optional

from backend.app.schema.inquiry_schema import (
    AxisConfig,
    ChartConfig,
    ChartSelection,
    ChartType,
    SeriesConfig,
    SubjectTable,
)

logger = logging.getLogger(__name__)

# Checked in order; the first table with a matching keyword wins.
TABLE_KEYWORDS: list[tuple[SubjectTable, tuple[str, ...]]] = [
    (SubjectTable.SALES, ("sales", "revenue", "profit")),
    (SubjectTable.CUSTOMERS, ("customer", "client")),
    (SubjectTable.PRODUCTS, ("product", "subscription")),
]


class StageClassifier(ABC):
    """Contract for question → table / chart heuristics."""

    @abstractmethod
    def select_table(self, question: str) -> SubjectTable:
        """Choose the subject table that answers *question*."""

    @abstractmethod
    def select_chart(self, table: SubjectTable) -> ChartSelection:
        """Choose the chart type and axes used to display *table*."""


def match_table(question: str) -> Optional[SubjectTable]:
    """Return the table whose keywords appear in *question*, if any."""
    lowered = question.lower()
    for table, keywords in TABLE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return table
    return None


class KeywordClassifier(StageClassifier):
    """Keyword table matching with coin-flip chart selection.

    Parameters
    ----------
    rng : random.Random | None
        Source of randomness.  Pass a seeded instance for repeatable
        choices.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def select_table(self, question: str) -> SubjectTable:
        table = match_table(question)
        if table is None:
            table = self._rng.choice(list(SubjectTable))
            logger.info("No keyword match for %r, picked table '%s' at random.", question, table.value)
        return table

    def select_chart(self, table: SubjectTable) -> ChartSelection:
        if table == SubjectTable.SALES:
            chart_type = ChartType.MULTI_LINE if self._rng.random() > 0.5 else ChartType.MULTI_BAR
            config = ChartConfig(
                x_axis=AxisConfig(key="month", label="Month"),
                y_axes=[
                    SeriesConfig(key="revenue", label="Revenue ($)", color="#8884d8"),
                    SeriesConfig(key="expenses", label="Expenses ($)", color="#82ca9d"),
                    SeriesConfig(key="profit", label="Profit ($)", color="#ffc658"),
                ],
            )
        elif table == SubjectTable.CUSTOMERS:
            # Bar and pie share the same axes.
            chart_type = ChartType.BAR if self._rng.random() > 0.5 else ChartType.PIE
            config = ChartConfig(
                x_axis=AxisConfig(key="name", label="Customer"),
                y_axes=[SeriesConfig(key="annualSpend", label="Annual Spend ($)", color="#8884d8")],
            )
        else:
            chart_type = ChartType.BAR if self._rng.random() > 0.5 else ChartType.LINE
            config = ChartConfig(
                x_axis=AxisConfig(key="name", label="Product"),
                y_axes=[SeriesConfig(key="unitPrice", label="Unit Price ($)", color="#8884d8")],
            )
            # Half of the line charts switch to the monthly sales series.
            if chart_type == ChartType.LINE and self._rng.random() > 0.5:
                chart_type = ChartType.MULTI_LINE
                config = ChartConfig(
                    x_axis=AxisConfig(key="month", label="Month"),
                    y_axes=[SeriesConfig(key="sales", label="Monthly Sales", color="#8884d8")],
                )

        return ChartSelection(chart_type=chart_type, chart_config=config)
