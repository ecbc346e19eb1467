import logging
from datetime import date, datetime, timezone

import httpx
import pytest

from yahoo_finance_api.errors import CrumbNotFoundError, DecodeError, InvalidArgumentError
from yahoo_finance_api.fetchers.yahoo import CHART_INTERVALS, DOWNLOAD_INTERVALS, YahooFinanceClient
from yahoo_finance_api.models.config import ClientConfig

from conftest import read_fixture


START = datetime(2024, 1, 1, tzinfo=timezone.utc)
END = datetime(2024, 1, 31, tzinfo=timezone.utc)


# -- validation ----------------------------------------------------------------


def test_start_after_end_rejected_before_network(client, fake_yahoo):
    with pytest.raises(InvalidArgumentError, match="Start date"):
        client.get_historical_quote_data("AAPL", "1d", END, START)
    with pytest.raises(InvalidArgumentError):
        client.get_historical_dividend_data("AAPL", END, START)
    with pytest.raises(InvalidArgumentError):
        client.get_historical_split_data("AAPL", END, START)
    assert fake_yahoo.requests == []


def test_start_equal_end_accepted(client):
    client.get_historical_quote_data("AAPL", "1d", START, START)


@pytest.mark.parametrize("interval", ["1s", "4h", "1y", "", "1D"])
def test_invalid_interval_lists_allowed_values(client, fake_yahoo, interval):
    with pytest.raises(InvalidArgumentError) as exc_info:
        client.get_historical_quote_data("AAPL", interval, START, END)

    message = str(exc_info.value)
    for allowed in CHART_INTERVALS + DOWNLOAD_INTERVALS:
        assert allowed in message
    assert exc_info.value.allowed_values == CHART_INTERVALS + DOWNLOAD_INTERVALS
    assert fake_yahoo.requests == []


# -- historical data -----------------------------------------------------------


@pytest.mark.parametrize("interval", CHART_INTERVALS)
def test_chart_intervals_use_chart_endpoint(client, fake_yahoo, interval):
    records = client.get_historical_quote_data("AAPL", interval, START, END)

    assert len(records) == 2
    assert fake_yahoo.paths() == ["/quote/AAPL/chart", "/v8/finance/chart/AAPL"]

    params = fake_yahoo.requests[1].url.params
    assert params["symbol"] == "AAPL"
    assert params["interval"] == interval
    assert params["period1"] == str(int(START.timestamp()))
    assert params["period2"] == str(int(END.timestamp()))
    assert params["events"] == "div|split|earn"
    assert params["crumb"] == "Xf5/kD0qQ.a"


@pytest.mark.parametrize("interval", DOWNLOAD_INTERVALS)
def test_download_intervals_use_download_endpoint(client, fake_yahoo, interval):
    records = client.get_historical_quote_data("AAPL", interval, START, END)

    assert len(records) == 3
    assert fake_yahoo.paths() == ["/quote/AAPL/history", "/v7/finance/download/AAPL"]
    params = fake_yahoo.requests[1].url.params
    assert params["interval"] == interval
    assert params["events"] == "history"
    assert params["crumb"] == "Xf5/kD0qQ.a"


def test_historical_data_sorted_ascending(client):
    records = client.get_historical_quote_data("AAPL", "1d", START, END)
    dates = [r.date for r in records]
    assert dates == sorted(dates)
    assert dates[0] == datetime(2024, 1, 2, tzinfo=timezone.utc)


def test_priming_request_targets_quote_page(client, fake_yahoo):
    client.get_historical_quote_data("AAPL", "1d", START, END)
    page_request = fake_yahoo.requests[0]
    assert page_request.url.host == "finance.yahoo.com"
    assert page_request.url.params["p"] == "AAPL"


def test_session_cookie_reused_for_data_request(client, fake_yahoo):
    client.get_historical_quote_data("AAPL", "1d", START, END)
    assert "B=session123" in fake_yahoo.requests[1].headers["cookie"]


def test_session_cookie_not_shared_between_calls(client, fake_yahoo):
    client.get_historical_quote_data("AAPL", "1d", START, END)
    client.get_historical_quote_data("MSFT", "1d", START, END)
    client.get_quote("AAPL")

    second_page_request = fake_yahoo.requests[2]
    assert second_page_request.url.path == "/quote/MSFT/history"
    assert "cookie" not in second_page_request.headers
    assert "B=session123" in fake_yahoo.requests[3].headers["cookie"]
    assert "cookie" not in fake_yahoo.requests[4].headers


def test_handshake_restores_client_cookies(fake_yahoo):
    with httpx.Client(transport=httpx.MockTransport(fake_yahoo)) as http_client:
        http_client.cookies.set("pref", "dark")
        client = YahooFinanceClient(client=http_client)

        client.get_historical_dividend_data("AAPL", START, END)

        assert "pref=dark" not in fake_yahoo.requests[0].headers.get("cookie", "")
        assert dict(http_client.cookies) == {"pref": "dark"}


def test_symbol_is_url_encoded_in_path(client, fake_yahoo):
    client.get_historical_quote_data("^GSPC", "1d", START, END)
    assert fake_yahoo.requests[0].url.raw_path.startswith(b"/quote/%5EGSPC/history")
    assert fake_yahoo.requests[1].url.raw_path.startswith(b"/v7/finance/download/%5EGSPC")


def test_naive_and_date_inputs_treated_as_utc(client, fake_yahoo):
    client.get_historical_quote_data("AAPL", "1d", date(2024, 1, 1), datetime(2024, 1, 31))
    params = fake_yahoo.requests[1].url.params
    assert params["period1"] == str(int(START.timestamp()))
    assert params["period2"] == str(int(END.timestamp()))


def test_missing_crumb_aborts_before_data_request(client, fake_yahoo):
    fake_yahoo.quote_page = read_fixture("quote_page_no_crumb.html")

    with pytest.raises(CrumbNotFoundError):
        client.get_historical_quote_data("AAPL", "5m", START, END)

    assert fake_yahoo.paths() == ["/quote/AAPL/chart"]


def test_chart_error_propagates(client, fake_yahoo):
    fake_yahoo.chart = read_fixture("chart_error.json")
    with pytest.raises(DecodeError, match="delisted"):
        client.get_historical_quote_data("NOPE", "1m", START, END)


def test_http_errors_propagate_unchanged(fake_yahoo):
    def handler(request):
        return httpx.Response(503, text="Service Unavailable")

    with httpx.Client(transport=httpx.MockTransport(handler)) as http_client:
        client = YahooFinanceClient(client=http_client)
        with pytest.raises(httpx.HTTPStatusError):
            client.get_quotes(["AAPL"])


def test_get_historical_data_is_deprecated_alias(client):
    with pytest.warns(DeprecationWarning):
        records = client.get_historical_data("AAPL", "1d", START, END)
    assert len(records) == 3


# -- dividends / splits --------------------------------------------------------


def test_dividends_sorted_ascending(client, fake_yahoo):
    records = client.get_historical_dividend_data("AAPL", START, END)

    assert [r.date.month for r in records] == [2, 5, 8, 11]
    params = fake_yahoo.requests[1].url.params
    assert params["events"] == "div"
    assert params["interval"] == "1mo"


def test_splits_sorted_ascending(client, fake_yahoo):
    records = client.get_historical_split_data("AAPL", START, END)

    assert [r.stock_splits for r in records] == ["2:1", "7:1", "4:1"]
    assert fake_yahoo.requests[1].url.params["events"] == "split"


# -- quotes --------------------------------------------------------------------


def test_get_quote_returns_single_quote(client, fake_yahoo):
    quote = client.get_quote("AAPL")

    assert quote is not None
    assert quote.symbol == "AAPL"
    assert fake_yahoo.requests[0].url.params["symbols"] == "AAPL"


def test_get_quote_returns_none_for_empty_result(client, fake_yahoo):
    fake_yahoo.quotes = '{"quoteResponse": {"result": [], "error": null}}'
    assert client.get_quote("AAPL") is None


def test_get_quotes_joins_symbols(client, fake_yahoo):
    client.get_quotes(["AAPL", "MSFT", "^GSPC"])
    assert fake_yahoo.requests[0].url.params["symbols"] == "AAPL,MSFT,^GSPC"


def test_get_exchange_rates_builds_currency_symbols(client, fake_yahoo):
    client.get_exchange_rates([["USD", "GBP"]])

    assert len(fake_yahoo.requests) == 1
    assert fake_yahoo.requests[0].url.path == "/v7/finance/quote"
    assert fake_yahoo.requests[0].url.params["symbols"] == "USDGBP=X"


def test_get_exchange_rate_multiple_pairs(client, fake_yahoo):
    client.get_exchange_rates([["USD", "GBP"], ["EUR", "JPY"]])
    assert fake_yahoo.requests[0].url.params["symbols"] == "USDGBP=X,EURJPY=X"


def test_get_exchange_rate_returns_first_quote(client, fake_yahoo):
    quote = client.get_exchange_rate("USD", "GBP")
    assert quote is not None
    assert fake_yahoo.requests[0].url.params["symbols"] == "USDGBP=X"


# -- search --------------------------------------------------------------------


def test_search_embeds_encoded_term(client, fake_yahoo):
    results = client.search("apple inc")

    assert [r.symbol for r in results] == ["AAPL", "APLE"]
    request = fake_yahoo.requests[0]
    assert request.url.host == "finance.yahoo.com"
    assert b"searchTerm=apple+inc" in request.url.raw_path
    assert request.url.params["region"] == "US"


# -- lifecycle -----------------------------------------------------------------


def test_injected_client_not_closed():
    http_client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    with YahooFinanceClient(client=http_client):
        pass
    assert not http_client.is_closed
    http_client.close()


def test_owned_client_created_from_config_and_closed():
    client = YahooFinanceClient()
    http_client = client._get_client()
    assert "Mozilla" in http_client.headers["User-Agent"]
    client.close()
    assert http_client.is_closed


def test_owned_client_creation_logs_headers_without_cookie(caplog):
    config = ClientConfig(headers={"User-Agent": "test-agent", "Cookie": "B=secret"})
    client = YahooFinanceClient(config=config)

    with caplog.at_level(logging.DEBUG, logger="yahoo_finance_api.fetchers.yahoo.client"):
        client._get_client()
    client.close()

    assert "test-agent" in caplog.text
    assert "secret" not in caplog.text
