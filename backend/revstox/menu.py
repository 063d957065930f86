from __future__ import annotations

import datetime as dt
import logging
import os
import platform
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.rule import Rule
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from revstox.services.import_report import preview_csv, render_import_run, validate_csv
from revstox.settings import Settings
from revstox.wiring import Services

logger = logging.getLogger(__name__)

APP_NAME = "RevStox"
APP_VERSION = "1.0.0"
DEFAULT_LIMIT = 10


def _ask(text: str) -> str:
    return typer.prompt(text, default="", show_default=False).strip()


def _ask_symbol(console: Console, text: str = "Enter stock symbol") -> Optional[str]:
    symbol = _ask(text).upper()
    if not symbol:
        console.print("[red]Symbol cannot be empty![/red]")
        return None
    return symbol


def _ask_date(console: Console, text: str) -> Optional[dt.date]:
    raw = _ask(f"{text} (YYYY-MM-DD)")
    if not raw:
        console.print("[red]Date cannot be empty![/red]")
        return None
    try:
        return dt.date.fromisoformat(raw)
    except ValueError:
        console.print("[red]Invalid date format! Please use YYYY-MM-DD format.[/red]")
        return None


def _ask_limit(console: Console) -> int:
    raw = _ask(f"Enter number of records to display (default {DEFAULT_LIMIT})")
    if not raw:
        return DEFAULT_LIMIT
    try:
        return max(1, int(raw))
    except ValueError:
        console.print(f"Invalid number. Using default limit of {DEFAULT_LIMIT}.")
        return DEFAULT_LIMIT


def _ask_decimal(console: Console, text: str) -> tuple[bool, Optional[Decimal]]:
    """(provided, value) ; provided=False si l'utilisateur laisse vide."""
    raw = _ask(text)
    if not raw:
        return False, None
    try:
        return True, Decimal(raw.replace(",", ""))
    except InvalidOperation:
        console.print("Invalid market cap format.")
        return False, None


def _fmt(value: object) -> str:
    return "N/A" if value is None else str(value)


def run_import_flow(
    services: Services,
    console: Console,
    path: Path,
    *,
    symbol: Optional[str] = None,
    assume_yes: bool = False,
) -> Optional[bool]:
    """
    validate -> preview -> confirmation -> import.
    Renvoie None si annulé, sinon le statut global de l'import.
    """
    console.print(f"Starting CSV import from: {path}")

    if not validate_csv(path):
        console.print("[red]CSV file validation failed![/red]")
        return False

    console.print(preview_csv(path))

    if not assume_yes and not typer.confirm("Do you want to proceed with import?", default=False):
        console.print("CSV import cancelled.")
        return None

    if symbol:
        run = services.imports.run_for_symbol(path, symbol)
    else:
        run = services.imports.run(path)

    style = "green" if run.succeeded else "yellow"
    console.print(render_import_run(run), style=style)
    return run.succeeded


class _Menu(ABC):
    title = ""
    options: tuple[tuple[str, str], ...] = ()

    def __init__(self, services: Services, console: Console, settings: Settings) -> None:
        self.services = services
        self.console = console
        self.settings = settings

    @abstractmethod
    def handlers(self) -> dict[int, Callable[[], None]]: ...

    def loop(self) -> None:
        handlers = self.handlers()
        while True:
            self.console.print()
            self.console.print(f"[bold]=== {self.title} ===[/bold]")
            for key, label in self.options:
                self.console.print(f"{key}. {label}")

            raw = _ask("Enter your choice")
            try:
                choice = int(raw)
            except ValueError:
                self.console.print("Invalid input! Please enter a number.")
                continue

            if choice == 0:
                return

            handler = handlers.get(choice)
            if handler is None:
                self.console.print("Invalid choice! Please try again.")
                continue

            try:
                handler()
            except (ValueError, KeyError, SQLAlchemyError) as e:
                logger.exception("Error in %s: %s", self.title, e)
                self.console.print(f"[red]An error occurred: {e}[/red]")


class StockMenu(_Menu):
    title = "STOCK MANAGEMENT MENU"
    options = (
        ("1", "Import CSV Data"),
        ("2", "View All Stocks"),
        ("3", "Search Stock by Symbol"),
        ("4", "Add New Stock"),
        ("5", "Update Stock Information"),
        ("6", "Delete Stock"),
        ("7", "Get Latest Price"),
        ("8", "Get Price History"),
        ("9", "Get Stock Summary"),
        ("10", "Get Available Symbols"),
        ("0", "Back"),
    )

    def handlers(self) -> dict[int, Callable[[], None]]:
        return {
            1: self.import_csv,
            2: self.view_all,
            3: self.search,
            4: self.add,
            5: self.update,
            6: self.delete,
            7: self.latest_price,
            8: self.price_history,
            9: self.summary,
            10: self.available_symbols,
        }

    def import_csv(self) -> None:
        raw = _ask("Enter CSV file path (or press Enter for default)")
        path = Path(raw).expanduser() if raw else self.settings.default_csv_path
        run_import_flow(self.services, self.console, path)

    def view_all(self) -> None:
        stocks = self.services.stocks.list_stocks()
        if not stocks:
            self.console.print("No stocks found in the database.")
            return

        table = Table(title="All Stocks")
        for col in ("Symbol", "Company Name", "Sector", "Market Cap"):
            table.add_column(col)
        for s in stocks:
            table.add_row(s.symbol, _fmt(s.company_name), _fmt(s.sector), _fmt(s.market_cap))
        self.console.print(table)
        self.console.print(f"Total stocks: {len(stocks)}")

    def search(self) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        stock = self.services.stocks.get_stock(symbol)
        if stock is None:
            self.console.print(f"Stock not found: {symbol}")
            return
        self.console.print(f"Symbol: {stock.symbol}")
        self.console.print(f"Company Name: {_fmt(stock.company_name)}")
        self.console.print(f"Sector: {_fmt(stock.sector)}")
        self.console.print(f"Market Cap: {_fmt(stock.market_cap)}")
        self.console.print(f"Created: {_fmt(stock.created_at)}")
        self.console.print(f"Updated: {_fmt(stock.updated_at)}")

    def add(self) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        if self.services.stocks.stock_exists(symbol):
            self.console.print(f"Stock already exists: {symbol}")
            return

        company = _ask("Enter company name") or None
        sector = _ask("Enter sector") or None
        _, market_cap = _ask_decimal(self.console, "Enter market cap (or press Enter to skip)")

        self.services.stocks.add_or_update_stock(symbol, company, sector, market_cap)
        self.console.print(f"Stock added successfully: {symbol}")

    def update(self) -> None:
        symbol = _ask_symbol(self.console, "Enter stock symbol to update")
        if symbol is None:
            return
        existing = self.services.stocks.get_stock(symbol)
        if existing is None:
            self.console.print(f"Stock not found: {symbol}")
            return

        self.console.print(f"Current company name: {_fmt(existing.company_name)}")
        self.console.print(f"Current sector: {_fmt(existing.sector)}")
        self.console.print(f"Current market cap: {_fmt(existing.market_cap)}")

        company = _ask("Enter new company name (or press Enter to keep current)") or existing.company_name
        sector = _ask("Enter new sector (or press Enter to keep current)") or existing.sector
        provided, market_cap = _ask_decimal(self.console, "Enter new market cap (or press Enter to keep current)")
        if not provided:
            market_cap = existing.market_cap

        if self.services.stocks.update_stock_info(symbol, company, sector, market_cap) is None:
            self.console.print(f"Failed to update stock: {symbol}")
        else:
            self.console.print(f"Stock updated successfully: {symbol}")

    def delete(self) -> None:
        symbol = _ask_symbol(self.console, "Enter stock symbol to delete")
        if symbol is None:
            return
        if not self.services.stocks.stock_exists(symbol):
            self.console.print(f"Stock not found: {symbol}")
            return
        if not typer.confirm(f"Are you sure you want to delete {symbol}?", default=False):
            self.console.print("Delete operation cancelled.")
            return
        self.services.stocks.delete_stock(symbol)
        self.console.print(f"Stock deleted successfully: {symbol}")

    def latest_price(self) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        p = self.services.stocks.latest_price(symbol)
        if p is None:
            self.console.print(f"No price data found for: {symbol}")
            return
        self.console.print(f"=== LATEST PRICE FOR {symbol} ===")
        for label, value in (
            ("Date", p.trade_date.isoformat()),
            ("Open", p.open),
            ("High", p.high),
            ("Low", p.low),
            ("Close", p.close),
            ("Volume", p.volume),
            ("VWAP", p.vwap),
            ("Turnover", p.turnover),
        ):
            self.console.print(f"{label}: {_fmt(value)}")

    def price_history(self) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        limit = _ask_limit(self.console)
        history = self.services.stocks.price_history(symbol)
        if not history:
            self.console.print(f"No price history found for: {symbol}")
            return

        table = Table(title=f"Price history for {symbol}")
        for col in ("Date", "Open", "High", "Low", "Close", "Volume"):
            table.add_column(col, justify="right")
        for p in history[:limit]:
            table.add_row(p.trade_date.isoformat(), str(p.open), str(p.high), str(p.low), str(p.close), _fmt(p.volume))
        self.console.print(table)
        self.console.print(f"Showing {min(limit, len(history))} of {len(history)} total records")

    def summary(self) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        self.console.print(self.services.stocks.stock_summary(symbol))

    def available_symbols(self) -> None:
        symbols = self.services.stocks.available_symbols()
        if not symbols:
            self.console.print("No symbols found in the database.")
            return
        for i in range(0, len(symbols), 5):
            self.console.print("\t".join(symbols[i:i + 5]))
        self.console.print(f"Total symbols: {len(symbols)}")


class AnalyticsMenu(_Menu):
    title = "STOCK ANALYTICS MENU"
    options = (
        ("1", "Calculate Analytics for Stock"),
        ("2", "View Stock Analytics"),
        ("3", "Calculate Daily Volatility"),
        ("4", "Calculate Daily Price Changes"),
        ("5", "Calculate Moving Averages"),
        ("6", "Calculate Price Gaps"),
        ("7", "Compare Stock Performance"),
        ("8", "Get Top Performers"),
        ("9", "Rank Stocks by Volatility"),
        ("10", "Rank Stocks by Volume"),
        ("11", "Generate Analytics Summary"),
        ("12", "Cleanup Old Analytics"),
        ("0", "Back"),
    )

    def handlers(self) -> dict[int, Callable[[], None]]:
        return {
            1: self.calculate,
            2: self.view,
            3: lambda: self._series("Daily Volatility (%)", self.services.analytics.daily_volatility),
            4: lambda: self._series("Daily Price Change (%)", self.services.analytics.daily_price_changes),
            5: self.moving_averages,
            6: lambda: self._series("Price Gap", self.services.analytics.price_gaps),
            7: self.compare,
            8: self.top_performers,
            9: self.rank_volatility,
            10: self.rank_volume,
            11: self.summary,
            12: self.cleanup,
        }

    def calculate(self) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        if not self.services.stocks.stock_exists(symbol):
            self.console.print(f"Stock not found: {symbol}")
            return
        raw = _ask("Enter analysis date (YYYY-MM-DD, Enter for today)")
        try:
            day = dt.date.fromisoformat(raw) if raw else dt.date.today()
        except ValueError:
            self.console.print("Invalid date format! Using today's date.")
            day = dt.date.today()

        self.console.print(f"Calculating analytics for {symbol} on {day.isoformat()}...")
        if self.services.analytics.calculate_and_store(symbol, day) is None:
            self.console.print("Failed to calculate analytics. Check if price data exists for the specified date.")
        else:
            self.console.print("Analytics calculated and stored successfully!")

    def view(self) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        limit = _ask_limit(self.console)
        items = self.services.analytics.get_analytics(symbol)
        if not items:
            self.console.print(f"No analytics data found for: {symbol}")
            return

        table = Table(title=f"Analytics for {symbol}")
        for col in ("Date", "Volatility %", "Change %", "Gap", "MA 7", "MA 30", "Category"):
            table.add_column(col)
        for a in items[:limit]:
            table.add_row(
                a.analysis_date.isoformat(),
                _fmt(a.daily_volatility),
                _fmt(a.daily_price_change),
                _fmt(a.price_gap),
                _fmt(a.moving_avg_7),
                _fmt(a.moving_avg_30),
                a.volatility_category,
            )
        self.console.print(table)
        self.console.print(f"Showing {min(limit, len(items))} of {len(items)} total records")

    def _series(self, label: str, fetch: Callable[[str], list]) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        limit = _ask_limit(self.console)
        points = fetch(symbol)
        if not points:
            self.console.print(f"No data found for: {symbol}")
            return

        table = Table(title=f"{label} for {symbol}")
        table.add_column("Date")
        table.add_column(label, justify="right")
        for p in points[:limit]:
            table.add_row(p.trade_date.isoformat(), _fmt(p.value))
        self.console.print(table)
        self.console.print(f"Showing {min(limit, len(points))} of {len(points)} total records")

    def moving_averages(self) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        limit = _ask_limit(self.console)
        points = self.services.analytics.moving_averages(symbol)
        if not points:
            self.console.print(f"No moving average data found for: {symbol}")
            return

        table = Table(title=f"Moving averages for {symbol}")
        for col in ("Date", "Close", "MA 7", "MA 30", "MA 90"):
            table.add_column(col, justify="right")
        for p in points[:limit]:
            table.add_row(p.trade_date.isoformat(), str(p.close), str(p.moving_avg_7), str(p.moving_avg_30), str(p.moving_avg_90))
        self.console.print(table)

    def _performance_table(self, title: str, rows: list) -> None:
        table = Table(title=title)
        for col in ("Rank", "Symbol", "Avg Volatility %", "Avg Change %", "Avg Volume Trend %"):
            table.add_column(col)
        for i, r in enumerate(rows, start=1):
            table.add_row(str(i), r.symbol, _fmt(r.avg_volatility), _fmt(r.avg_price_change), _fmt(r.avg_volume_trend))
        self.console.print(table)

    def compare(self) -> None:
        since = _ask_date(self.console, "Enter start date")
        if since is None:
            return
        rows = self.services.analytics.compare_performance(since)
        if not rows:
            self.console.print(f"No performance data found from: {since.isoformat()}")
            return
        self._performance_table(f"Stock performance from {since.isoformat()}", rows)

    def top_performers(self) -> None:
        since = _ask_date(self.console, "Enter start date")
        if since is None:
            return
        limit = _ask_limit(self.console)
        rows = self.services.analytics.top_performers(since, limit)
        if not rows:
            self.console.print(f"No performance data found from: {since.isoformat()}")
            return
        self._performance_table(f"Top {limit} performers from {since.isoformat()}", rows)

    def rank_volatility(self) -> None:
        since = _ask_date(self.console, "Enter start date")
        if since is None:
            return
        rows = self.services.analytics.rank_by_volatility(since)
        if not rows:
            self.console.print(f"No volatility data found from: {since.isoformat()}")
            return
        self._performance_table(f"Volatility ranking from {since.isoformat()}", rows)

    def rank_volume(self) -> None:
        since = _ask_date(self.console, "Enter start date")
        if since is None:
            return
        rows = self.services.analytics.rank_by_volume(since)
        if not rows:
            self.console.print(f"No volume data found from: {since.isoformat()}")
            return
        table = Table(title=f"Volume ranking from {since.isoformat()}")
        for col in ("Rank", "Symbol", "Avg Volume", "Max Volume"):
            table.add_column(col)
        for i, r in enumerate(rows, start=1):
            table.add_row(str(i), r.symbol, _fmt(r.avg_volume), _fmt(r.max_volume))
        self.console.print(table)

    def summary(self) -> None:
        symbol = _ask_symbol(self.console)
        if symbol is None:
            return
        if not self.services.stocks.stock_exists(symbol):
            self.console.print(f"Stock not found: {symbol}")
            return
        since = _ask_date(self.console, "Enter start date")
        if since is None:
            return
        self.console.print(self.services.analytics.analytics_summary(symbol, since))

    def cleanup(self) -> None:
        before = _ask_date(self.console, "Delete analytics older than")
        if before is None:
            return
        if not typer.confirm(f"Delete all analytics before {before.isoformat()}?", default=False):
            self.console.print("Cleanup cancelled.")
            return
        deleted = self.services.analytics.cleanup_before(before)
        if deleted:
            self.console.print(f"Successfully deleted {deleted} old analytics records.")
        else:
            self.console.print("No records were deleted.")


class MainMenu(_Menu):
    title = f"{APP_NAME.upper()} MAIN MENU"
    options = (
        ("1", "Stock Management"),
        ("2", "Analytics Dashboard"),
        ("3", "System Information"),
        ("0", "Exit Application"),
    )

    def handlers(self) -> dict[int, Callable[[], None]]:
        return {
            1: StockMenu(self.services, self.console, self.settings).loop,
            2: AnalyticsMenu(self.services, self.console, self.settings).loop,
            3: self.system_information,
        }

    def loop(self) -> None:
        self.console.print(Rule(f"WELCOME TO {APP_NAME.upper()} - Stock Analytics Platform"))
        super().loop()
        self.console.print(Rule(f"Thank you for using {APP_NAME}!"))
        logger.info("%s terminated", APP_NAME)

    def system_information(self) -> None:
        self.console.print(f"Application: {APP_NAME}")
        self.console.print(f"Version: {APP_VERSION}")
        self.console.print(f"Python Version: {platform.python_version()}")
        self.console.print(f"OS: {platform.system()} {platform.release()}")
        self.console.print(f"Available Processors: {os.cpu_count()}")
        self.console.print(f"Database URL: {self.settings.database_url}")
        self.console.print(f"Data directory: {self.settings.data_dir}")
