"""Data models for Yahoo Finance results and configuration."""

from .chart import ChartResponse
from .config import ClientConfig, EndpointsConfig
from .results import DividendData, HistoricalData, Quote, SearchResult, SplitData

__all__ = [
    "ChartResponse",
    "ClientConfig",
    "EndpointsConfig",
    "DividendData",
    "HistoricalData",
    "Quote",
    "SearchResult",
    "SplitData",
]
