"""
Shared fixtures for the analytics backend tests.
"""

from __future__ import annotations

import os
import time

import pytest

from backend.app.engine.classifier import StageClassifier
from backend.app.schema.inquiry_schema import (
    AxisConfig,
    ChartConfig,
    ChartSelection,
    ChartType,
    SeriesConfig,
    SubjectTable,
)


class FixedClassifier(StageClassifier):
    """Deterministic classifier: always the same table and chart."""

    def __init__(
        self,
        table: SubjectTable = SubjectTable.SALES,
        chart_type: ChartType = ChartType.MULTI_LINE,
        x_key: str = "month",
        y_key: str = "revenue",
        table_delay: float = 0.0,
    ) -> None:
        self.table = table
        self.chart_type = chart_type
        self.x_key = x_key
        self.y_key = y_key
        self.table_delay = table_delay
        self.questions: list[str] = []

    def select_table(self, question: str) -> SubjectTable:
        self.questions.append(question)
        if self.table_delay:
            time.sleep(self.table_delay)
        return self.table

    def select_chart(self, table: SubjectTable) -> ChartSelection:
        return ChartSelection(
            chart_type=self.chart_type,
            chart_config=ChartConfig(
                x_axis=AxisConfig(key=self.x_key, label=self.x_key.title()),
                y_axes=[SeriesConfig(key=self.y_key, label=self.y_key, color="#8884d8")],
            ),
        )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep ANALYTICS_* overrides from the shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("ANALYTICS_"):
            monkeypatch.delenv(key)
    yield


@pytest.fixture
def make_classifier():
    return FixedClassifier
