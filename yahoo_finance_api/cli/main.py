"""CLI entry point for yahoo-finance."""

import typer

from .market import app as market_app

app = typer.Typer(
    name="yahoo-finance",
    help="Yahoo Finance quotes, historical prices and symbol search.",
    no_args_is_help=True,
)

# Register subcommands
app.add_typer(market_app, name="market", help="Market data queries")


if __name__ == "__main__":
    app()
