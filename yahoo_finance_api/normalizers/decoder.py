"""Decoding of Yahoo Finance response bodies into result records."""

import csv
import io
import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from yahoo_finance_api.errors import CrumbNotFoundError, DecodeError, InvalidValueError
from yahoo_finance_api.models.chart import ChartResponse, chart_rows
from yahoo_finance_api.models.results import (
    DividendData,
    HistoricalData,
    Quote,
    SearchResult,
    SplitData,
)

from .values import ValueMapper, ValueType


logger = logging.getLogger(__name__)


HISTORICAL_DATA_HEADER = ["Date", "Open", "High", "Low", "Close", "Adj Close", "Volume"]
DIVIDEND_DATA_HEADER = ["Date", "Dividends"]
SPLIT_DATA_HEADER = ["Date", "Stock Splits"]

SEARCH_RESULT_FIELDS = ["symbol", "name", "exch", "type"]

CRUMB_PATTERN = re.compile(r'"CrumbStore"\s*:\s*\{\s*"crumb"\s*:\s*"(?P<crumb>(?:[^"\\]|\\.)+)"\s*\}')

# Values the CSV download endpoint uses for "no data"
CSV_NULL_VALUES = {"", "null"}

# Upstream quote key -> (Quote attribute, value type)
QUOTE_FIELDS: dict[str, tuple[str, ValueType]] = {
    "symbol": ("symbol", ValueType.STRING),
    "shortName": ("short_name", ValueType.STRING),
    "longName": ("long_name", ValueType.STRING),
    "quoteType": ("quote_type", ValueType.STRING),
    "quoteSourceName": ("quote_source_name", ValueType.STRING),
    "currency": ("currency", ValueType.STRING),
    "financialCurrency": ("financial_currency", ValueType.STRING),
    "language": ("language", ValueType.STRING),
    "region": ("region", ValueType.STRING),
    "market": ("market", ValueType.STRING),
    "marketState": ("market_state", ValueType.STRING),
    "messageBoardId": ("message_board_id", ValueType.STRING),
    "tradeable": ("tradeable", ValueType.BOOL),
    "exchange": ("exchange", ValueType.STRING),
    "fullExchangeName": ("full_exchange_name", ValueType.STRING),
    "exchangeTimezoneName": ("exchange_timezone_name", ValueType.STRING),
    "exchangeTimezoneShortName": ("exchange_timezone_short_name", ValueType.STRING),
    "exchangeDataDelayedBy": ("exchange_data_delayed_by", ValueType.INT),
    "gmtOffSetMilliseconds": ("gmt_off_set_milliseconds", ValueType.INT),
    "sourceInterval": ("source_interval", ValueType.INT),
    "priceHint": ("price_hint", ValueType.INT),
    "regularMarketPrice": ("regular_market_price", ValueType.FLOAT),
    "regularMarketChange": ("regular_market_change", ValueType.FLOAT),
    "regularMarketChangePercent": ("regular_market_change_percent", ValueType.FLOAT),
    "regularMarketOpen": ("regular_market_open", ValueType.FLOAT),
    "regularMarketDayHigh": ("regular_market_day_high", ValueType.FLOAT),
    "regularMarketDayLow": ("regular_market_day_low", ValueType.FLOAT),
    "regularMarketPreviousClose": ("regular_market_previous_close", ValueType.FLOAT),
    "regularMarketVolume": ("regular_market_volume", ValueType.INT),
    "regularMarketTime": ("regular_market_time", ValueType.DATE),
    "preMarketPrice": ("pre_market_price", ValueType.FLOAT),
    "preMarketChange": ("pre_market_change", ValueType.FLOAT),
    "preMarketChangePercent": ("pre_market_change_percent", ValueType.FLOAT),
    "preMarketTime": ("pre_market_time", ValueType.DATE),
    "postMarketPrice": ("post_market_price", ValueType.FLOAT),
    "postMarketChange": ("post_market_change", ValueType.FLOAT),
    "postMarketChangePercent": ("post_market_change_percent", ValueType.FLOAT),
    "postMarketTime": ("post_market_time", ValueType.DATE),
    "bid": ("bid", ValueType.FLOAT),
    "bidSize": ("bid_size", ValueType.INT),
    "ask": ("ask", ValueType.FLOAT),
    "askSize": ("ask_size", ValueType.INT),
    "openInterest": ("open_interest", ValueType.INT),
    "fiftyTwoWeekLow": ("fifty_two_week_low", ValueType.FLOAT),
    "fiftyTwoWeekHigh": ("fifty_two_week_high", ValueType.FLOAT),
    "fiftyTwoWeekLowChange": ("fifty_two_week_low_change", ValueType.FLOAT),
    "fiftyTwoWeekLowChangePercent": ("fifty_two_week_low_change_percent", ValueType.FLOAT),
    "fiftyTwoWeekHighChange": ("fifty_two_week_high_change", ValueType.FLOAT),
    "fiftyTwoWeekHighChangePercent": ("fifty_two_week_high_change_percent", ValueType.FLOAT),
    "fiftyDayAverage": ("fifty_day_average", ValueType.FLOAT),
    "fiftyDayAverageChange": ("fifty_day_average_change", ValueType.FLOAT),
    "fiftyDayAverageChangePercent": ("fifty_day_average_change_percent", ValueType.FLOAT),
    "twoHundredDayAverage": ("two_hundred_day_average", ValueType.FLOAT),
    "twoHundredDayAverageChange": ("two_hundred_day_average_change", ValueType.FLOAT),
    "twoHundredDayAverageChangePercent": ("two_hundred_day_average_change_percent", ValueType.FLOAT),
    "averageDailyVolume10Day": ("average_daily_volume_10_day", ValueType.INT),
    "averageDailyVolume3Month": ("average_daily_volume_3_month", ValueType.INT),
    "marketCap": ("market_cap", ValueType.INT),
    "sharesOutstanding": ("shares_outstanding", ValueType.INT),
    "bookValue": ("book_value", ValueType.FLOAT),
    "priceToBook": ("price_to_book", ValueType.FLOAT),
    "epsTrailingTwelveMonths": ("eps_trailing_twelve_months", ValueType.FLOAT),
    "epsForward": ("eps_forward", ValueType.FLOAT),
    "trailingPE": ("trailing_pe", ValueType.FLOAT),
    "forwardPE": ("forward_pe", ValueType.FLOAT),
    "dividendDate": ("dividend_date", ValueType.DATE),
    "dividendRate": ("dividend_rate", ValueType.FLOAT),
    "dividendYield": ("dividend_yield", ValueType.FLOAT),
    "trailingAnnualDividendRate": ("trailing_annual_dividend_rate", ValueType.FLOAT),
    "trailingAnnualDividendYield": ("trailing_annual_dividend_yield", ValueType.FLOAT),
    "earningsTimestamp": ("earnings_timestamp", ValueType.DATE),
    "earningsTimestampStart": ("earnings_timestamp_start", ValueType.DATE),
    "earningsTimestampEnd": ("earnings_timestamp_end", ValueType.DATE),
}


def _snippet(text: str) -> str:
    return text[:500]


class ResultDecoder:
    """Turns raw response bodies into result records.

    All knowledge of the upstream payload shapes lives here.
    """

    def __init__(self, value_mapper: ValueMapper | None = None):
        self.value_mapper = value_mapper or ValueMapper()

    # -- crumb -------------------------------------------------------------

    def extract_crumb(self, html: str) -> str:
        """Extract the crumb token embedded in a quote page.

        Raises:
            CrumbNotFoundError: If the page does not contain a CrumbStore entry
        """
        match = CRUMB_PATTERN.search(html)
        if not match:
            raise CrumbNotFoundError("Could not find crumb in quote page", _snippet(html))

        # The crumb is a JSON string literal, "/" may arrive as \u002F
        raw_crumb = match.group("crumb")
        try:
            return json.loads(f'"{raw_crumb}"')
        except json.JSONDecodeError as e:
            raise CrumbNotFoundError(f"Invalid crumb value: {raw_crumb}", _snippet(html)) from e

    # -- quotes ------------------------------------------------------------

    def transform_quotes(self, body: str) -> list[Quote]:
        data = self._load_json(body)
        quote_response = data.get("quoteResponse") if isinstance(data, dict) else None
        results = quote_response.get("result") if isinstance(quote_response, dict) else None
        if not isinstance(results, list):
            raise DecodeError("Quote response missing 'quoteResponse.result' list", _snippet(body))

        return [self.create_quote(item) for item in results]

    def create_quote(self, item: dict[str, Any]) -> Quote:
        if not isinstance(item, dict):
            raise DecodeError(f"Quote entry is not an object: {item!r}")

        values: dict[str, Any] = {}
        for key, raw_value in item.items():
            if key not in QUOTE_FIELDS:
                continue
            attribute, value_type = QUOTE_FIELDS[key]
            values[attribute] = self._map_field(key, raw_value, value_type)

        if not values.get("symbol"):
            raise DecodeError(f"Quote entry without symbol: {str(item)[:200]}")

        return Quote(**values)

    # -- historical data ---------------------------------------------------

    def transform_historical_data_result(self, body: str) -> list[HistoricalData]:
        """Decode historical prices from either a CSV download or a chart JSON body."""
        if body.lstrip().startswith("{"):
            return self.transform_chart_result(body)

        records = []
        dropped = 0
        for row in self._read_csv(body, HISTORICAL_DATA_HEADER):
            if any(value in CSV_NULL_VALUES for value in row):
                dropped += 1
                continue
            records.append(self.create_historical_data(row))

        if dropped:
            logger.debug(f"Dropped {dropped} historical rows with null values")
        return records

    def transform_chart_result(self, body: str) -> list[HistoricalData]:
        """Decode the v8 chart endpoint payload.

        Rows with any null value are dropped.

        Raises:
            DecodeError: If chart.result is missing or chart.error is set
        """
        data = self._load_json(body)
        try:
            response = ChartResponse.model_validate(data)
        except ValidationError as e:
            raise DecodeError(f"Unexpected chart response structure: {e}", _snippet(body)) from e

        chart = response.chart
        if chart.error is not None and (chart.error.code or chart.error.description):
            description = chart.error.description or chart.error.code
            raise DecodeError(f"Chart endpoint returned an error: {description}", _snippet(body))
        if chart.result is None:
            raise DecodeError("Chart response missing 'chart.result'", _snippet(body))

        records = []
        dropped = 0
        for result in chart.result:
            for row in chart_rows(result):
                if any(value is None for value in row):
                    dropped += 1
                    continue
                records.append(self.create_historical_data(row))

        if dropped:
            logger.debug(f"Dropped {dropped} chart rows with null values")
        return records

    def create_historical_data(self, row: list[Any]) -> HistoricalData:
        """Build a record from [date, open, high, low, close, adj_close, volume]."""
        if len(row) != len(HISTORICAL_DATA_HEADER):
            raise DecodeError(f"Expected {len(HISTORICAL_DATA_HEADER)} values, got {len(row)}: {row!r}")

        date, open_, high, low, close, adj_close, volume = (
            self._map_field(name, value, value_type)
            for name, value, value_type in zip(
                HISTORICAL_DATA_HEADER,
                row,
                [ValueType.DATE] + [ValueType.FLOAT] * 5 + [ValueType.INT],
            )
        )
        return HistoricalData(
            date=date,
            open=open_,
            high=high,
            low=low,
            close=close,
            adj_close=adj_close,
            volume=volume,
        )

    def transform_dividend_data_result(self, body: str) -> list[DividendData]:
        return [
            DividendData(
                date=self._map_field("Date", row[0], ValueType.DATE),
                dividends=self._map_field("Dividends", self._csv_value(row[1]), ValueType.FLOAT),
            )
            for row in self._read_csv(body, DIVIDEND_DATA_HEADER)
        ]

    def transform_split_data_result(self, body: str) -> list[SplitData]:
        """Decode split CSV; rows without a ratio are dropped."""
        records = []
        dropped = 0
        for row in self._read_csv(body, SPLIT_DATA_HEADER):
            ratio = self._csv_value(row[1].strip())
            if ratio is None:
                dropped += 1
                continue
            records.append(SplitData(
                date=self._map_field("Date", row[0], ValueType.DATE),
                stock_splits=self._map_field("Stock Splits", ratio, ValueType.STRING),
            ))

        if dropped:
            logger.debug(f"Dropped {dropped} split rows without a ratio")
        return records

    # -- search ------------------------------------------------------------

    def transform_search_result(self, body: str) -> list[SearchResult]:
        data = self._load_json(body)
        result_set = data.get("ResultSet") if isinstance(data, dict) else None
        items = result_set.get("Result") if isinstance(result_set, dict) else None
        if not isinstance(items, list):
            raise DecodeError("Search response missing 'ResultSet.Result' list", _snippet(body))

        return [self.create_search_result(item) for item in items]

    def create_search_result(self, item: dict[str, Any]) -> SearchResult:
        missing = [name for name in SEARCH_RESULT_FIELDS if name not in item]
        if missing:
            raise DecodeError(f"Search result is missing fields: {', '.join(missing)}")

        return SearchResult(
            symbol=str(item["symbol"]),
            name=str(item["name"]),
            exch=str(item["exch"]),
            type=str(item["type"]),
            exch_disp=item.get("exchDisp"),
            type_disp=item.get("typeDisp"),
        )

    # -- helpers -----------------------------------------------------------

    def _map_field(self, name: str, raw_value: Any, value_type: ValueType) -> Any:
        try:
            return self.value_mapper.map_value(raw_value, value_type)
        except InvalidValueError as e:
            raise DecodeError(f"Invalid value for field '{name}': {e}") from e

    @staticmethod
    def _csv_value(value: str) -> str | None:
        return None if value in CSV_NULL_VALUES else value

    @staticmethod
    def _load_json(body: str) -> Any:
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Failed to parse JSON: {e}", _snippet(body)) from e

    @staticmethod
    def _read_csv(body: str, expected_header: list[str]) -> list[list[str]]:
        """Parse a CSV body, validating its header line.

        Returns the data rows with surrounding whitespace stripped.
        """
        reader = csv.reader(io.StringIO(body.strip()))
        rows = [[value.strip() for value in row] for row in reader if row]
        if not rows:
            raise DecodeError("Empty CSV response", _snippet(body))

        header, data_rows = rows[0], rows[1:]
        if header != expected_header:
            raise DecodeError(
                f"CSV header did not match, expected {','.join(expected_header)}, "
                f"given {','.join(header)}",
                _snippet(body),
            )

        for row in data_rows:
            if len(row) != len(expected_header):
                raise DecodeError(
                    f"CSV row has {len(row)} columns, expected {len(expected_header)}: {row!r}",
                    _snippet(body),
                )

        return data_rows
