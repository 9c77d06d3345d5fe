from __future__ import annotations
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import date
from enum import StrEnum


class Period(StrEnum):
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    YEAR_TO_DATE = "YTD"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"


class Timespan(StrEnum):
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"


class Sample(BaseModel):
    """
    One OHLCV aggregate bar.

    `timestamp` is epoch milliseconds (UTC) and `close` is required; missing
    open/high/low/volume default to 0. Polygon short keys
    (t, o, h, l, c, v) are accepted as aliases. `synthetic` marks points
    produced by upsampling; their high/low are cosmetic only.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: int = Field(alias="t")
    open: float = Field(default=0.0, alias="o")
    high: float = Field(default=0.0, alias="h")
    low: float = Field(default=0.0, alias="l")
    close: float = Field(alias="c")
    volume: float = Field(default=0.0, alias="v")
    synthetic: bool = False

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, v):
        if isinstance(v, float):
            return int(v)
        return v

    @field_validator("open", "high", "low", "volume", mode="before")
    @classmethod
    def _coerce_missing(cls, v):
        return 0.0 if v is None else v


def _missing_close(row) -> bool:
    """Raw bars without a close price cannot be plotted and are skipped."""
    if not isinstance(row, dict):
        return False
    return row.get("c", row.get("close")) is None


class AggregatesResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ticker: Optional[str] = None
    status: Optional[str] = None
    results_count: int = Field(default=0, alias="resultsCount")
    results: List[Sample] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def _coerce_results(cls, v):
        if v is None:
            return []
        return [row for row in v if not _missing_close(row)]


class FetchWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    date_from: date
    date_to: date
    timespan: Timespan
    multiplier: int = Field(default=1, ge=1)
