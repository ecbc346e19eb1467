from pathlib import Path

import httpx
import pytest

from yahoo_finance_api.fetchers.yahoo import YahooFinanceClient


FIXTURES = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class FakeYahoo:
    """Routes requests to canned fixture bodies and records them."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.quote_page = read_fixture("quote_page.html")
        self.quotes = read_fixture("quotes.json")
        self.search = read_fixture("search.json")
        self.chart = read_fixture("chart.json")
        self.downloads = {
            "history": read_fixture("history.csv"),
            "div": read_fixture("dividends.csv"),
            "split": read_fixture("splits.csv"),
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith("/quote/"):
            return httpx.Response(
                200,
                text=self.quote_page,
                headers={"Set-Cookie": "B=session123; Path=/; Domain=.yahoo.com"},
            )
        if path.startswith("/v8/finance/chart/"):
            return httpx.Response(200, text=self.chart)
        if path.startswith("/v7/finance/download/"):
            return httpx.Response(200, text=self.downloads[request.url.params["events"]])
        if path == "/v7/finance/quote":
            return httpx.Response(200, text=self.quotes)
        if "searchassist" in path:
            return httpx.Response(200, text=self.search)
        return httpx.Response(404, text="Not Found")

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def fake_yahoo() -> FakeYahoo:
    return FakeYahoo()


@pytest.fixture
def client(fake_yahoo):
    http_client = httpx.Client(transport=httpx.MockTransport(fake_yahoo))
    yield YahooFinanceClient(client=http_client)
    http_client.close()
