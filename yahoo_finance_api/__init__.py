"""Client library for Yahoo Finance quotes, historical prices and symbol search."""

from .errors import (
    CrumbNotFoundError,
    DecodeError,
    InvalidArgumentError,
    InvalidValueError,
    YahooFinanceError,
)
from .fetchers.yahoo import YahooFinanceClient
from .models import DividendData, HistoricalData, Quote, SearchResult, SplitData
from .normalizers import ResultDecoder, ValueMapper, ValueType

__version__ = "0.1.0"

__all__ = [
    "CrumbNotFoundError",
    "DecodeError",
    "InvalidArgumentError",
    "InvalidValueError",
    "YahooFinanceError",
    "YahooFinanceClient",
    "DividendData",
    "HistoricalData",
    "Quote",
    "SearchResult",
    "SplitData",
    "ResultDecoder",
    "ValueMapper",
    "ValueType",
]
