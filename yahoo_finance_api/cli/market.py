"""Market data CLI commands."""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, Optional

import httpx
import typer
from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from yahoo_finance_api.config import load_config, load_config_file
from yahoo_finance_api.errors import YahooFinanceError
from yahoo_finance_api.fetchers.yahoo import YahooFinanceClient
from yahoo_finance_api.models.config import ClientConfig
from yahoo_finance_api.storage import dump_records, write_jsonl


app = typer.Typer(help="Quotes, historical prices and symbol search")
console = Console()

logger = logging.getLogger(__name__)

DATE_FORMATS = ["%Y-%m-%d"]

JsonOption = Annotated[bool, typer.Option("--json", help="Print results as JSON")]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Write results to a JSONL file"),
]
StartOption = Annotated[
    datetime,
    typer.Option("--start", "-s", formats=DATE_FORMATS, help="Start date (YYYY-MM-DD, UTC)"),
]
EndOption = Annotated[
    datetime,
    typer.Option("--end", "-e", formats=DATE_FORMATS, help="End date (YYYY-MM-DD, UTC)"),
]


def setup_logging(verbose: bool = False) -> None:
    """Setup logging with rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def load_client_config(config_path: Path | None) -> ClientConfig:
    """Load client config from an explicit file, the default file, or defaults."""
    if config_path is not None:
        return ClientConfig.from_yaml(load_config_file(config_path))
    try:
        return ClientConfig.from_yaml(load_config("yahoo"))
    except FileNotFoundError:
        logger.debug("No yahoo.yaml config found, using defaults")
        return ClientConfig()


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a YAML client config"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
) -> None:
    setup_logging(verbose)
    try:
        ctx.obj = load_client_config(config)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _run(ctx: typer.Context, fetch: Callable[[YahooFinanceClient], list[Any]]) -> list[Any]:
    """Run a client call, turning library and transport errors into exit code 1."""
    try:
        with YahooFinanceClient(config=ctx.obj) as client:
            return fetch(client)
    except (YahooFinanceError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.debug("Request failed", exc_info=True)
        raise typer.Exit(1)


def _emit(
    records: list[BaseModel],
    columns: list[str],
    title: str,
    as_json: bool,
    output: Path | None,
) -> None:
    if output is not None:
        count = write_jsonl(records, output)
        console.print(f"[green]✓[/green] Wrote {count} records to {output}")
        return

    if as_json:
        typer.echo(dump_records(records, indent=True).decode())
        return

    if not records:
        console.print("[yellow]No results[/yellow]")
        return

    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for record in records:
        data = record.model_dump(mode="json")
        table.add_row(*("" if data.get(column) is None else str(data[column]) for column in columns))
    console.print(table)


@app.command("quote")
def quote(
    ctx: typer.Context,
    symbols: Annotated[list[str], typer.Argument(help="Ticker symbols (e.g., AAPL MSFT)")],
    as_json: JsonOption = False,
    output: OutputOption = None,
) -> None:
    """Show quotes for one or more symbols.

    Example:
        yahoo-finance market quote AAPL MSFT
    """
    quotes = _run(ctx, lambda client: client.get_quotes(symbols))
    _emit(
        quotes,
        ["symbol", "short_name", "regular_market_price", "currency", "market_state", "exchange"],
        "Quotes",
        as_json,
        output,
    )


@app.command("fx")
def exchange_rate(
    ctx: typer.Context,
    from_currency: Annotated[str, typer.Argument(help="Base currency (e.g., USD)")],
    to_currency: Annotated[str, typer.Argument(help="Quote currency (e.g., GBP)")],
    as_json: JsonOption = False,
    output: OutputOption = None,
) -> None:
    """Show the exchange rate between two currencies."""
    quotes = _run(ctx, lambda client: client.get_exchange_rates([[from_currency.upper(), to_currency.upper()]]))
    _emit(quotes, ["symbol", "regular_market_price", "regular_market_time"], "Exchange rate", as_json, output)


@app.command("search")
def search(
    ctx: typer.Context,
    term: Annotated[str, typer.Argument(help="Company name or symbol fragment")],
    as_json: JsonOption = False,
    output: OutputOption = None,
) -> None:
    """Search for symbols."""
    results = _run(ctx, lambda client: client.search(term))
    _emit(results, ["symbol", "name", "exch_disp", "type_disp"], f"Search: {term}", as_json, output)


@app.command("history")
def history(
    ctx: typer.Context,
    symbol: Annotated[str, typer.Argument(help="Ticker symbol")],
    start: StartOption,
    end: EndOption,
    interval: Annotated[
        str,
        typer.Option("--interval", "-i", help="1m, 2m, 5m, 15m, 30m, 90m, 1h, 6mo, 1d, 1wk or 1mo"),
    ] = "1d",
    as_json: JsonOption = False,
    output: OutputOption = None,
) -> None:
    """Show historical prices.

    Example:
        yahoo-finance market history AAPL --start 2024-01-01 --end 2024-02-01
    """
    rows = _run(ctx, lambda client: client.get_historical_quote_data(symbol, interval, start, end))
    _emit(
        rows,
        ["date", "open", "high", "low", "close", "adj_close", "volume"],
        f"{symbol} ({interval})",
        as_json,
        output,
    )


@app.command("dividends")
def dividends(
    ctx: typer.Context,
    symbol: Annotated[str, typer.Argument(help="Ticker symbol")],
    start: StartOption,
    end: EndOption,
    as_json: JsonOption = False,
    output: OutputOption = None,
) -> None:
    """Show dividend history."""
    events = _run(ctx, lambda client: client.get_historical_dividend_data(symbol, start, end))
    _emit(events, ["date", "dividends"], f"{symbol} dividends", as_json, output)


@app.command("splits")
def splits(
    ctx: typer.Context,
    symbol: Annotated[str, typer.Argument(help="Ticker symbol")],
    start: StartOption,
    end: EndOption,
    as_json: JsonOption = False,
    output: OutputOption = None,
) -> None:
    """Show stock split history."""
    events = _run(ctx, lambda client: client.get_historical_split_data(symbol, start, end))
    _emit(events, ["date", "stock_splits"], f"{symbol} splits", as_json, output)


if __name__ == "__main__":
    app()
