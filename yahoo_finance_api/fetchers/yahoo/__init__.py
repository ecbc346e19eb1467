"""Yahoo Finance fetcher module."""

from .client import CURRENCY_SYMBOL_SUFFIX, YahooFinanceClient
from .intervals import CHART_INTERVALS, DOWNLOAD_INTERVALS, IntervalKind, classify_interval

__all__ = [
    "CURRENCY_SYMBOL_SUFFIX",
    "YahooFinanceClient",
    "CHART_INTERVALS",
    "DOWNLOAD_INTERVALS",
    "IntervalKind",
    "classify_interval",
]
