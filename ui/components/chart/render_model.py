import logging
from dataclasses import dataclass
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from schemas.prices import Period, Sample
from utils.dates import axis_label, tooltip_title

logger = logging.getLogger(__name__)

AXIS_PADDING = 0.05
MIN_AXIS_PADDING = 0.01


@dataclass(frozen=True)
class PriceDelta:
    change: float
    percent: Optional[float]

    @property
    def rising(self) -> bool:
        return self.change >= 0


@dataclass(frozen=True)
class ChartModel:
    labels: tuple[str, ...]
    values: tuple[float, ...]
    titles: tuple[str, ...]
    delta: Optional[PriceDelta]
    y_min: float
    y_max: float


def price_delta(first: float, last: float) -> PriceDelta:
    """Change from `first` to `last`; percent is None when `first` is zero."""
    change = last - first
    percent = change / first * 100 if first else None
    return PriceDelta(change=change, percent=percent)


def axis_bounds(values: Sequence[float]) -> tuple[float, float]:
    """
    Padded price-axis bounds.

    Adds 5% of the value range on both sides (at least 1% of the largest
    magnitude so a flat line still gets a band). The chart sets these as the
    explicit axis min/max so pixel mapping does not depend on the renderer's
    own tick rounding.
    """
    if not values:
        return 0.0, 1.0
    lo, hi = min(values), max(values)
    pad = max((hi - lo) * AXIS_PADDING, max(abs(lo), abs(hi)) * MIN_AXIS_PADDING)
    if pad == 0:
        pad = 1.0
    return lo - pad, hi + pad


def build_series(series: Sequence[Sample], period: Period, tz: Optional[ZoneInfo] = None) -> ChartModel:
    """
    Convert a normalized series into labelled chart data.

    Args:
        series: Normalized samples (not mutated).
        period: Active period, selects the label and title format.
        tz: Display time zone; defaults to the configured one.

    Returns:
        ChartModel with one label/value/title per sample, padded axis bounds
        and the first-to-last close delta (None for fewer than two samples).
    """
    labels = tuple(axis_label(s.timestamp, period, tz) for s in series)
    titles = tuple(tooltip_title(s.timestamp, period, tz) for s in series)
    values = tuple(float(s.close) for s in series)
    delta = price_delta(values[0], values[-1]) if len(values) >= 2 else None
    y_min, y_max = axis_bounds(values)

    logger.debug(f"build_series: period={period}, points={len(values)}, delta={delta}")
    return ChartModel(
        labels=labels,
        values=values,
        titles=titles,
        delta=delta,
        y_min=y_min,
        y_max=y_max,
    )
