"""Typed view of the v8 chart endpoint payload.

Only the parts needed to build OHLCV rows are modelled; everything else in
the payload (meta, events, ...) is ignored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _ChartModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class QuoteSeries(_ChartModel):
    """Parallel OHLCV arrays, aligned with the block's timestamps."""

    open: list[float | None] = Field(default_factory=list)
    high: list[float | None] = Field(default_factory=list)
    low: list[float | None] = Field(default_factory=list)
    close: list[float | None] = Field(default_factory=list)
    volume: list[float | None] = Field(default_factory=list)


class AdjCloseSeries(_ChartModel):
    adjclose: list[float | None] = Field(default_factory=list)


class Indicators(_ChartModel):
    quote: list[QuoteSeries] = Field(default_factory=list)
    adjclose: list[AdjCloseSeries] = Field(default_factory=list)


class ChartResult(_ChartModel):
    """Result block for one symbol."""

    timestamp: list[int] = Field(default_factory=list)
    indicators: Indicators = Field(default_factory=Indicators)


class ChartError(_ChartModel):
    code: str | None = None
    description: str | None = None


class Chart(_ChartModel):
    result: list[ChartResult] | None = None
    error: ChartError | None = None


class ChartResponse(_ChartModel):
    chart: Chart


def _at(values: list[Any], index: int) -> Any:
    """Return values[index], or None when the array is too short."""
    return values[index] if index < len(values) else None


def chart_rows(result: ChartResult) -> list[list[Any]]:
    """Assemble raw 7-value rows [timestamp, open, high, low, close, adj_close, volume].

    The adjusted close falls back to the close when no adjclose series is
    present. Rows are returned as-is, including ones with null values.
    """
    rows: list[list[Any]] = []
    for series_index, quote in enumerate(result.indicators.quote):
        adjclose = None
        if series_index < len(result.indicators.adjclose):
            adjclose = result.indicators.adjclose[series_index].adjclose

        for i, timestamp in enumerate(result.timestamp):
            close = _at(quote.close, i)
            adj_close = _at(adjclose, i) if adjclose is not None else None
            rows.append([
                timestamp,
                _at(quote.open, i),
                _at(quote.high, i),
                _at(quote.low, i),
                close,
                adj_close if adj_close is not None else close,
                _at(quote.volume, i),
            ])
    return rows
