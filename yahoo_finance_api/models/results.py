"""Result records returned by the API client.

All records are immutable once decoded from a response.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class HistoricalData(_Record):
    """One OHLCV bar for a trading interval."""

    date: datetime = Field(description="Start of the interval (UTC)")
    open: float
    high: float
    low: float
    close: float
    adj_close: float = Field(description="Close adjusted for splits and dividends")
    volume: int


class DividendData(_Record):
    """Dividend payment event."""

    date: datetime
    dividends: float | None = Field(default=None, description="Dividend amount per share")


class SplitData(_Record):
    """Stock split event."""

    date: datetime
    stock_splits: str = Field(description="Split ratio (e.g., '4:1')")


class SearchResult(_Record):
    """Symbol search suggestion."""

    symbol: str
    name: str
    exch: str = Field(description="Exchange code (e.g., 'NMS')")
    type: str = Field(description="Security type code (e.g., 'S' for stock)")
    exch_disp: str | None = Field(default=None, description="Exchange display name")
    type_disp: str | None = Field(default=None, description="Security type display name")


class Quote(_Record):
    """Quote snapshot for a single symbol.

    Field names are the snake_case form of the upstream quote keys. Anything
    the upstream payload omits is None.
    """

    symbol: str

    # Identification
    short_name: str | None = None
    long_name: str | None = None
    quote_type: str | None = None
    quote_source_name: str | None = None
    currency: str | None = None
    financial_currency: str | None = None
    language: str | None = None
    region: str | None = None
    market: str | None = None
    market_state: str | None = None
    message_board_id: str | None = None
    tradeable: bool | None = None

    # Exchange
    exchange: str | None = None
    full_exchange_name: str | None = None
    exchange_timezone_name: str | None = None
    exchange_timezone_short_name: str | None = None
    exchange_data_delayed_by: int | None = None
    gmt_off_set_milliseconds: int | None = None
    source_interval: int | None = None
    price_hint: int | None = None

    # Regular session
    regular_market_price: float | None = None
    regular_market_change: float | None = None
    regular_market_change_percent: float | None = None
    regular_market_open: float | None = None
    regular_market_day_high: float | None = None
    regular_market_day_low: float | None = None
    regular_market_previous_close: float | None = None
    regular_market_volume: int | None = None
    regular_market_time: datetime | None = None

    # Extended hours
    pre_market_price: float | None = None
    pre_market_change: float | None = None
    pre_market_change_percent: float | None = None
    pre_market_time: datetime | None = None
    post_market_price: float | None = None
    post_market_change: float | None = None
    post_market_change_percent: float | None = None
    post_market_time: datetime | None = None

    # Order book
    bid: float | None = None
    bid_size: int | None = None
    ask: float | None = None
    ask_size: int | None = None
    open_interest: int | None = None

    # Ranges and averages
    fifty_two_week_low: float | None = None
    fifty_two_week_high: float | None = None
    fifty_two_week_low_change: float | None = None
    fifty_two_week_low_change_percent: float | None = None
    fifty_two_week_high_change: float | None = None
    fifty_two_week_high_change_percent: float | None = None
    fifty_day_average: float | None = None
    fifty_day_average_change: float | None = None
    fifty_day_average_change_percent: float | None = None
    two_hundred_day_average: float | None = None
    two_hundred_day_average_change: float | None = None
    two_hundred_day_average_change_percent: float | None = None
    average_daily_volume_10_day: int | None = None
    average_daily_volume_3_month: int | None = None

    # Fundamentals
    market_cap: int | None = None
    shares_outstanding: int | None = None
    book_value: float | None = None
    price_to_book: float | None = None
    eps_trailing_twelve_months: float | None = None
    eps_forward: float | None = None
    trailing_pe: float | None = None
    forward_pe: float | None = None
    dividend_date: datetime | None = None
    dividend_rate: float | None = None
    dividend_yield: float | None = None
    trailing_annual_dividend_rate: float | None = None
    trailing_annual_dividend_yield: float | None = None
    earnings_timestamp: datetime | None = None
    earnings_timestamp_start: datetime | None = None
    earnings_timestamp_end: datetime | None = None
