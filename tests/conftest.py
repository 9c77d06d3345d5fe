from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from schemas.prices import Sample

BASE_TS = int(datetime(2024, 1, 5, 14, 30, tzinfo=timezone.utc).timestamp() * 1000)
MINUTE_MS = 60_000


def samples_from_closes(closes, start=BASE_TS, step=5 * MINUTE_MS):
    return [
        Sample(timestamp=start + i * step, open=c, high=c + 1, low=c - 1, close=c, volume=1000 + i)
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def make_samples():
    return samples_from_closes


@pytest.fixture
def utc():
    return ZoneInfo("UTC")
