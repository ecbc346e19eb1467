"""Historical data interval constants and classification."""

from enum import Enum


INTERVAL_1_MIN = "1m"
INTERVAL_2_MIN = "2m"
INTERVAL_5_MIN = "5m"
INTERVAL_15_MIN = "15m"
INTERVAL_30_MIN = "30m"
INTERVAL_90_MIN = "90m"
INTERVAL_1_HOUR = "1h"
INTERVAL_1_DAY = "1d"
INTERVAL_1_WEEK = "1wk"
INTERVAL_1_MONTH = "1mo"
INTERVAL_6_MONTH = "6mo"

# Served by the v8 chart endpoint
CHART_INTERVALS = [
    INTERVAL_1_MIN,
    INTERVAL_2_MIN,
    INTERVAL_5_MIN,
    INTERVAL_15_MIN,
    INTERVAL_30_MIN,
    INTERVAL_90_MIN,
    INTERVAL_1_HOUR,
    INTERVAL_6_MONTH,
]

# Served by the v7 CSV download endpoint
DOWNLOAD_INTERVALS = [
    INTERVAL_1_DAY,
    INTERVAL_1_WEEK,
    INTERVAL_1_MONTH,
]


class IntervalKind(Enum):
    INTRADAY = "intraday"
    DAILY_OR_COARSER = "daily_or_coarser"
    INVALID = "invalid"


def classify_interval(interval: str) -> IntervalKind:
    """Decide which endpoint serves an interval."""
    if interval in CHART_INTERVALS:
        return IntervalKind.INTRADAY
    if interval in DOWNLOAD_INTERVALS:
        return IntervalKind.DAILY_OR_COARSER
    return IntervalKind.INVALID
