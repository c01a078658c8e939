"""
Table Transforms

Reshape mock rows to fit the chart picked for an inquiry.  The only
real reshaping is the product catalog → monthly time series pivot;
the fallback chart helper covers anything that cannot be reshaped.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from backend.app.engine.errors import TransformError
from backend.app.engine.mock_data import MONTHS
from backend.app.schema.inquiry_schema import (
    AxisConfig,
    ChartConfig,
    ChartSelection,
    ChartType,
    SeriesConfig,
)

TIME_AXIS_KEY = "month"
FALLBACK_COLOR = "#8884d8"


def to_monthly_series(
    products: Sequence[Mapping[str, Any]],
    months: Sequence[str] = MONTHS,
) -> list[dict[str, Any]]:
    """Pivot a product catalog into one row per month.

    Each output row is ``{"month": <label>, <product name>: <units>, ...}``.
    The row count always equals ``len(months)``; products only add
    columns.  A product whose series is shorter than *months* is left
    out of the later rows.

    Raises
    ------
    TransformError
        If a row is not a mapping or no product carries a monthly series.
    """
    series: list[tuple[str, Sequence[Any]]] = []
    for row in products:
        if not isinstance(row, Mapping):
            raise TransformError(f"Expected a product mapping, got {type(row).__name__}.")
        name = row.get("name")
        monthly = row.get("monthlySales")
        if name and isinstance(monthly, (list, tuple)):
            series.append((str(name), monthly))

    if not series:
        raise TransformError("No product carries a monthly sales series.")

    result: list[dict[str, Any]] = []
    for idx, month in enumerate(months):
        point: dict[str, Any] = {TIME_AXIS_KEY: month}
        for name, monthly in series:
            if idx < len(monthly):
                point[name] = monthly[idx]
        result.append(point)
    return result


def fallback_selection(rows: Sequence[Mapping[str, Any]]) -> ChartSelection:
    """Minimal bar chart built from the first two keys of the first row."""
    keys = list(rows[0].keys()) if rows else []
    x_key = keys[0] if keys else ""
    y_key = keys[1] if len(keys) > 1 else x_key
    return ChartSelection(
        chart_type=ChartType.BAR,
        chart_config=ChartConfig(
            x_axis=AxisConfig(key=x_key, label=x_key),
            y_axes=[SeriesConfig(key=y_key, label=y_key, color=FALLBACK_COLOR)],
        ),
    )
