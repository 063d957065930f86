"""
Command-line interface for RevStox.

Import NSE daily price CSV files, check them before import, and browse
stocks and analytics through the interactive menu.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from revstox.db import get_session_factory
from revstox.menu import MainMenu, run_import_flow
from revstox.services.import_report import preview_csv, validate_csv
from revstox.settings import get_settings
from revstox.wiring import Services, build_services

app = typer.Typer(
    name="revstox",
    help="RevStox - stock data import and analytics",
    add_completion=False,
)
console = Console()


def get_services() -> Services:
    return build_services(get_session_factory())


def _resolve_path(path: Optional[str]) -> Path:
    if path is None or not path.strip():
        return get_settings().default_csv_path
    return Path(path.strip()).expanduser()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """RevStox - stock data import and analytics."""
    level = logging.DEBUG if verbose else get_settings().log_level
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command("import")
def import_prices(
    path: Optional[str] = typer.Argument(None, help="CSV file (defaults to the configured sample file)"),
    symbol: Optional[str] = typer.Option(None, "--symbol", "-s", help="Only import rows for this symbol"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Validate, preview and import a daily price CSV file."""
    csv_path = _resolve_path(path)
    target = symbol.strip().upper() if symbol and symbol.strip() else None

    succeeded = run_import_flow(get_services(), console, csv_path, symbol=target, assume_yes=yes)
    if succeeded is False:
        raise typer.Exit(code=1)


@app.command()
def validate(
    path: Optional[str] = typer.Argument(None, help="CSV file to check"),
) -> None:
    """Check that a CSV file is readable and has the expected header."""
    csv_path = _resolve_path(path)
    if validate_csv(csv_path):
        console.print(f"[green]CSV file is valid:[/green] {csv_path}")
        return
    console.print(f"[red]CSV file validation failed:[/red] {csv_path}")
    raise typer.Exit(code=1)


@app.command()
def preview(
    path: Optional[str] = typer.Argument(None, help="CSV file to summarize"),
) -> None:
    """Show the header and data row count of a CSV file."""
    console.print(preview_csv(_resolve_path(path)))


@app.command()
def menu() -> None:
    """Start the interactive menu."""
    MainMenu(get_services(), console, get_settings()).loop()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
