"""Configuration models for the Yahoo Finance client."""

from typing import Any

from pydantic import BaseModel, Field


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

SEARCH_ASSIST_URL = (
    "https://finance.yahoo.com/_finance_doubledown/api/resource/searchassist;"
    "gossipConfig=%7B%22queryKey%22:%22query%22,%22resultAccessor%22:%22ResultSet.Result%22,"
    "%22suggestionTitleAccessor%22:%22symbol%22,%22suggestionMeta%22:[%22symbol%22],"
    "%22url%22:%7B%22query%22:%7B%22region%22:%22US%22,%22lang%22:%22en-US%22%7D%7D%7D;"
    "searchTerm={term}"
)


class EndpointsConfig(BaseModel):
    """Upstream endpoint URLs.

    Placeholders: {term} is the URL-encoded search term, {symbol} the
    URL-encoded ticker symbol, {page} either 'chart' or 'history'.
    """

    search: str = Field(default=SEARCH_ASSIST_URL)
    search_params: dict[str, str] = Field(default_factory=lambda: {
        "device": "desktop",
        "intl": "us",
        "lang": "en-US",
        "partner": "none",
        "region": "US",
        "site": "finance",
        "tz": "UTC",
        "returnMeta": "true",
    })
    quote: str = Field(default="https://query1.finance.yahoo.com/v7/finance/quote")
    chart: str = Field(default="https://query1.finance.yahoo.com/v8/finance/chart/{symbol}")
    download: str = Field(default="https://query1.finance.yahoo.com/v7/finance/download/{symbol}")
    quote_page: str = Field(default="https://finance.yahoo.com/quote/{symbol}/{page}")


class ClientConfig(BaseModel):
    """Yahoo Finance client configuration."""

    endpoints: EndpointsConfig = Field(default_factory=EndpointsConfig)
    headers: dict[str, str] = Field(default_factory=lambda: {"User-Agent": DEFAULT_USER_AGENT})
    cookies: dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=30.0, ge=1.0)
    follow_redirects: bool = Field(default=True)

    @classmethod
    def from_yaml(cls, data: dict[str, Any] | None) -> "ClientConfig":
        """Create config from parsed YAML data."""
        data = data or {}
        config_data = {
            "headers": data.get("headers"),
            "cookies": data.get("cookies"),
            "timeout": data.get("timeout"),
            "follow_redirects": data.get("follow_redirects"),
        }

        if "endpoints" in data:
            config_data["endpoints"] = EndpointsConfig(**(data["endpoints"] or {}))

        # Filter out None values so defaults apply
        config_data = {k: v for k, v in config_data.items() if v is not None}

        return cls(**config_data)

    def get_safe_headers(self) -> dict[str, str]:
        """Get headers dict safe for logging (no cookies)."""
        return {k: v for k, v in self.headers.items() if k.lower() != "cookie"}
