"""Yahoo Finance HTTP client."""

import logging
import warnings
from datetime import date, datetime, timezone
from typing import Any
from urllib.parse import quote, quote_plus

import httpx

from yahoo_finance_api.errors import InvalidArgumentError
from yahoo_finance_api.models.config import ClientConfig
from yahoo_finance_api.models.results import (
    DividendData,
    HistoricalData,
    Quote,
    SearchResult,
    SplitData,
)
from yahoo_finance_api.normalizers.decoder import ResultDecoder

from .intervals import (
    CHART_INTERVALS,
    DOWNLOAD_INTERVALS,
    INTERVAL_1_MONTH,
    IntervalKind,
    classify_interval,
)


logger = logging.getLogger(__name__)


CURRENCY_SYMBOL_SUFFIX = "=X"

FILTER_DIVIDENDS = "div"
FILTER_EARNINGS = "earn"
FILTER_HISTORICAL = "history"
FILTER_SPLITS = "split"


DateLike = datetime | date


def _to_utc(value: DateLike) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime (naive means UTC)."""
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class YahooFinanceClient:
    """Client for Yahoo Finance quote, chart, download and search endpoints.

    Uses an injected httpx.Client when given; otherwise one is created from
    the config on first use and closed by close().
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        decoder: ResultDecoder | None = None,
        config: ClientConfig | None = None,
    ):
        self.config = config or ClientConfig()
        self.decoder = decoder or ResultDecoder()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.config.timeout,
                headers=dict(self.config.headers),
                follow_redirects=self.config.follow_redirects,
            )
            logger.debug(f"Created HTTP client headers={self.config.get_safe_headers()}")
        return self._client

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "YahooFinanceClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        cookies: httpx.Cookies | None = None,
    ) -> httpx.Response:
        """Issue a GET request; HTTP errors propagate unchanged."""
        headers = {}
        if cookies is not None:
            cookie_header = "; ".join(f"{cookie.name}={cookie.value}" for cookie in cookies.jar)
            if cookie_header:
                headers["Cookie"] = cookie_header

        logger.debug(f"GET {url} params={params}")
        response = self._get_client().get(url, params=params, headers=headers)
        response.raise_for_status()

        if cookies is not None:
            cookies.extract_cookies(response)
        return response

    # -- search ------------------------------------------------------------

    def search(self, term: str) -> list[SearchResult]:
        """Search for symbols matching a free-text term."""
        url = self.config.endpoints.search.format(term=quote_plus(term))
        response = self._get(url, params=self.config.endpoints.search_params)
        results = self.decoder.transform_search_result(response.text)
        logger.info(f"Search '{term}': {len(results)} results")
        return results

    # -- historical data ---------------------------------------------------

    def get_historical_quote_data(
        self,
        symbol: str,
        interval: str,
        start: DateLike,
        end: DateLike,
    ) -> list[HistoricalData]:
        """Get OHLCV bars for a symbol between two dates.

        Intraday intervals (and 6mo) are served by the chart endpoint, daily,
        weekly and monthly ones by the CSV download endpoint.

        Raises:
            InvalidArgumentError: If start is after end or the interval is unknown
        """
        start, end = self._validate_dates(start, end)

        match classify_interval(interval):
            case IntervalKind.INTRADAY:
                body = self._fetch_with_crumb(
                    symbol,
                    page="chart",
                    url=self.config.endpoints.chart,
                    params={
                        "symbol": symbol,
                        "period1": int(start.timestamp()),
                        "period2": int(end.timestamp()),
                        "interval": interval,
                        "events": "|".join([FILTER_DIVIDENDS, FILTER_SPLITS, FILTER_EARNINGS]),
                    },
                )
                records = self.decoder.transform_chart_result(body)
            case IntervalKind.DAILY_OR_COARSER:
                body = self._fetch_download(symbol, interval, start, end, FILTER_HISTORICAL)
                records = self.decoder.transform_historical_data_result(body)
            case IntervalKind.INVALID:
                allowed = CHART_INTERVALS + DOWNLOAD_INTERVALS
                raise InvalidArgumentError(
                    f"Interval must be one of: {', '.join(CHART_INTERVALS)} (chart) "
                    f"or {', '.join(DOWNLOAD_INTERVALS)} (download), got '{interval}'",
                    allowed_values=allowed,
                )

        records.sort(key=lambda record: record.date)
        logger.info(f"Historical data {symbol} {interval}: {len(records)} rows")
        return records

    def get_historical_data(
        self,
        symbol: str,
        interval: str,
        start: DateLike,
        end: DateLike,
    ) -> list[HistoricalData]:
        """Deprecated alias of get_historical_quote_data()."""
        warnings.warn(
            "get_historical_data() is deprecated, use get_historical_quote_data() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.get_historical_quote_data(symbol, interval, start, end)

    def get_historical_dividend_data(
        self,
        symbol: str,
        start: DateLike,
        end: DateLike,
    ) -> list[DividendData]:
        """Get dividend events, sorted by date ascending."""
        start, end = self._validate_dates(start, end)
        body = self._fetch_download(symbol, INTERVAL_1_MONTH, start, end, FILTER_DIVIDENDS)

        # Upstream order is not guaranteed
        records = sorted(self.decoder.transform_dividend_data_result(body), key=lambda r: r.date)
        logger.info(f"Dividend data {symbol}: {len(records)} events")
        return records

    def get_historical_split_data(
        self,
        symbol: str,
        start: DateLike,
        end: DateLike,
    ) -> list[SplitData]:
        """Get stock split events, sorted by date ascending."""
        start, end = self._validate_dates(start, end)
        body = self._fetch_download(symbol, INTERVAL_1_MONTH, start, end, FILTER_SPLITS)

        records = sorted(self.decoder.transform_split_data_result(body), key=lambda r: r.date)
        logger.info(f"Split data {symbol}: {len(records)} events")
        return records

    # -- quotes ------------------------------------------------------------

    def get_quote(self, symbol: str) -> Quote | None:
        """Get the quote for a single symbol, or None if Yahoo has none."""
        quotes = self.get_quotes([symbol])
        return quotes[0] if quotes else None

    def get_quotes(self, symbols: list[str]) -> list[Quote]:
        """Get quotes for one or more symbols in a single request."""
        response = self._get(self.config.endpoints.quote, params={"symbols": ",".join(symbols)})
        return self.decoder.transform_quotes(response.text)

    def get_exchange_rate(self, from_currency: str, to_currency: str) -> Quote | None:
        """Get the exchange rate quote for two ISO 4217 codes (e.g., 'USD', 'GBP')."""
        quotes = self.get_exchange_rates([[from_currency, to_currency]])
        return quotes[0] if quotes else None

    def get_exchange_rates(self, currency_pairs: list[list[str]]) -> list[Quote]:
        """Get exchange rate quotes for currency pairs like [["USD", "GBP"]]."""
        symbols = ["".join(pair) + CURRENCY_SYMBOL_SUFFIX for pair in currency_pairs]
        return self.get_quotes(symbols)

    # -- internals ---------------------------------------------------------

    def _validate_dates(self, start: DateLike, end: DateLike) -> tuple[datetime, datetime]:
        start_utc, end_utc = _to_utc(start), _to_utc(end)
        if start_utc > end_utc:
            raise InvalidArgumentError(
                f"Start date must be before end date, got {start_utc.isoformat()} > {end_utc.isoformat()}"
            )
        return start_utc, end_utc

    def _fetch_download(
        self,
        symbol: str,
        interval: str,
        start: datetime,
        end: datetime,
        events: str,
    ) -> str:
        return self._fetch_with_crumb(
            symbol,
            page="history",
            url=self.config.endpoints.download,
            params={
                "period1": int(start.timestamp()),
                "period2": int(end.timestamp()),
                "interval": interval,
                "events": events,
            },
        )

    def _fetch_with_crumb(self, symbol: str, page: str, url: str, params: dict[str, Any]) -> str:
        """Fetch a data endpoint that requires a cookie and crumb.

        The quote page is requested first to obtain the session cookie and
        the crumb; both are only used for this call. The shared client's
        cookie jar is emptied for the handshake and restored afterwards, so
        session cookies never leak into other calls.
        """
        client = self._get_client()
        saved_cookies = httpx.Cookies(client.cookies)
        client.cookies.clear()

        cookies = httpx.Cookies(self.config.cookies)
        encoded_symbol = quote(symbol, safe="")
        try:
            page_url = self.config.endpoints.quote_page.format(symbol=encoded_symbol, page=page)
            page_response = self._get(page_url, params={"p": symbol}, cookies=cookies)
            crumb = self.decoder.extract_crumb(page_response.text)

            data_url = url.format(symbol=encoded_symbol)
            response = self._get(data_url, params={**params, "crumb": crumb}, cookies=cookies)
            return response.text
        finally:
            client.cookies = saved_cookies
