"""
Resampling of raw price bars to a fixed chart density.

Long series are stride-sampled down to roughly `target` points, short ones
are filled in with linearly interpolated synthetic points so the line has
enough vertices to look continuous. Synthetic points carry `synthetic=True`
and only their close/open prices are meaningful; their high/low get a small
random jitter for display.
"""
import logging
import math
import random
from typing import Optional, Sequence

from config import settings
from schemas.prices import Period, Sample

logger = logging.getLogger(__name__)

DEFAULT_TARGET = 110
JITTER = 0.5


def downsample(samples: Sequence[Sample], target: int) -> list[Sample]:
    """
    Keep every `ceil(n / target)`-th sample plus the first and last ones.

    Args:
        samples: Ascending samples, `len(samples) > target`.
        target: Desired number of points.

    Returns:
        Stride-sampled list; first and last entries are the original endpoints.
    """
    n = len(samples)
    rate = math.ceil(n / target)
    kept = [s for i, s in enumerate(samples) if i % rate == 0]
    if (n - 1) % rate != 0:
        kept.append(samples[-1])
    logger.debug(f"downsample: n={n}, rate={rate}, kept={len(kept)}")
    return kept


def interpolate(start: Sample, end: Sample, count: int, rng: random.Random) -> list[Sample]:
    """
    Build `count` synthetic samples strictly between two real ones.

    Prices and volume are blended linearly, timestamps evenly spaced.
    Fewer points are produced when the two timestamps are too close to fit
    `count` distinct integer timestamps between them.
    """
    span = end.timestamp - start.timestamp
    count = max(0, min(count, span - 1))
    out: list[Sample] = []
    for i in range(1, count + 1):
        frac = i / (count + 1)
        price = start.close + (end.close - start.close) * frac
        out.append(Sample(
            timestamp=start.timestamp + span * i // (count + 1),
            open=price,
            high=price + rng.random() * JITTER,
            low=price - rng.random() * JITTER,
            close=price,
            volume=start.volume + (end.volume - start.volume) * frac,
            synthetic=True,
        ))
    return out


def upsample(samples: Sequence[Sample], target: int, rng: random.Random) -> list[Sample]:
    """
    Insert `floor((target - n) / (n - 1))` synthetic points into every gap.

    Args:
        samples: Ascending samples, `2 <= len(samples) < target`.
        target: Desired number of points.
        rng: Source of the cosmetic high/low jitter.

    Returns:
        Real and synthetic samples interleaved in timestamp order.
    """
    n = len(samples)
    per_gap = (target - n) // (n - 1)
    if per_gap == 0:
        return list(samples)

    out: list[Sample] = [samples[0]]
    for left, right in zip(samples, samples[1:]):
        out.extend(interpolate(left, right, per_gap, rng))
        out.append(right)
    logger.debug(f"upsample: n={n}, per_gap={per_gap}, total={len(out)}")
    return out


def normalize(
    raw_samples: Sequence[Sample],
    period: Period,
    target: int = DEFAULT_TARGET,
    rng: Optional[random.Random] = None,
) -> tuple[Sample, ...]:
    """
    Resample raw bars to about `target` points.

    Input must already be sorted ascending by timestamp. Fewer than two
    samples are returned as they are; callers treat that as "insufficient
    data". The function has no side effects besides drawing jitter from `rng`
    (a `random.Random` seeded with `CHART_JITTER_SEED` when not supplied).

    Args:
        raw_samples: Ascending samples with unique timestamps.
        period: Active chart period (used for diagnostics only).
        target: Desired density.
        rng: Random source for synthetic high/low jitter.

    Returns:
        Tuple of samples with strictly ascending timestamps whose first and
        last entries are the first and last input samples.
    """
    samples = list(raw_samples)
    n = len(samples)
    logger.debug(f"normalize: period={period}, n={n}, target={target}")

    if n < 2 or n == target:
        return tuple(samples)
    if n > target:
        return tuple(downsample(samples, target))

    if rng is None:
        rng = random.Random(settings.CHART_JITTER_SEED)
    return tuple(upsample(samples, target, rng))


def describe(series: Sequence[Sample]) -> dict:
    """Summary counts used by the chart details dialog."""
    synthetic = sum(1 for s in series if s.synthetic)
    return {
        "points": len(series),
        "real": len(series) - synthetic,
        "synthetic": synthetic,
        "first_ts": series[0].timestamp if series else None,
        "last_ts": series[-1].timestamp if series else None,
    }
