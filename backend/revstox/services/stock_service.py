from __future__ import annotations

import datetime as dt
import logging
import re
from decimal import Decimal
from typing import Optional

from revstox.domain.price_record import PriceRecord
from revstox.domain.stock import Stock
from revstox.repositories.price_repository import PriceRepository
from revstox.repositories.stock_repository import StockRepository

logger = logging.getLogger(__name__)

_SYMBOL_RE = re.compile(r"^[A-Z0-9.\-]+$")
MAX_SYMBOL_LENGTH = 50


def is_valid_symbol(symbol: Optional[str]) -> bool:
    if symbol is None or not symbol.strip():
        return False
    return bool(_SYMBOL_RE.match(symbol)) and len(symbol) <= MAX_SYMBOL_LENGTH


class StockService:
    def __init__(self, *, stock_repo: StockRepository, price_repo: PriceRepository) -> None:
        self._stocks = stock_repo
        self._prices = price_repo

    # -------- registry --------

    def add_or_update_stock(
        self,
        symbol: str,
        company_name: Optional[str],
        sector: Optional[str],
        market_cap: Optional[Decimal],
    ) -> Stock:
        stock = Stock(symbol=symbol.strip(), company_name=company_name, sector=sector, market_cap=market_cap)
        self._stocks.upsert(stock)
        logger.info("Added/updated stock: %s", stock.symbol)
        return stock

    def get_stock(self, symbol: str) -> Optional[Stock]:
        stock = self._stocks.find(symbol)
        if stock is None:
            logger.warning("Stock not found: %s", symbol)
        return stock

    def list_stocks(self) -> list[Stock]:
        stocks = self._stocks.list()
        logger.info("Retrieved %d stocks", len(stocks))
        return stocks

    def update_stock_info(
        self,
        symbol: str,
        company_name: Optional[str],
        sector: Optional[str],
        market_cap: Optional[Decimal],
    ) -> Optional[Stock]:
        try:
            stock = self._stocks.update(
                symbol=symbol, company_name=company_name, sector=sector, market_cap=market_cap
            )
        except KeyError:
            logger.warning("Cannot update - stock not found: %s", symbol)
            return None
        logger.info("Updated stock: %s", symbol)
        return stock

    def delete_stock(self, symbol: str) -> bool:
        deleted = self._stocks.delete(symbol=symbol)
        if deleted:
            logger.info("Deleted stock: %s", symbol)
        else:
            logger.warning("Stock not found, nothing deleted: %s", symbol)
        return deleted

    def stock_exists(self, symbol: str) -> bool:
        return self._stocks.exists(symbol)

    # -------- prices --------

    def available_symbols(self) -> list[str]:
        return self._prices.symbols()

    def latest_price(self, symbol: str) -> Optional[PriceRecord]:
        latest = self._prices.latest(symbol=symbol)
        if latest is None:
            logger.warning("No price data found for: %s", symbol)
        return latest

    def price_history(self, symbol: str) -> list[PriceRecord]:
        """Most recent first."""
        history = list(reversed(self._prices.list(symbol=symbol)))
        logger.info("Retrieved %d price records for: %s", len(history), symbol)
        return history

    def price_history_between(self, symbol: str, date_from: dt.date, date_to: dt.date) -> list[PriceRecord]:
        return list(reversed(self._prices.list_between(symbol=symbol, date_from=date_from, date_to=date_to)))

    def data_date_range(self, symbol: str) -> Optional[tuple[dt.date, dt.date]]:
        return self._prices.date_range(symbol=symbol)

    def record_counts(self) -> dict[str, int]:
        return self._prices.count_by_symbol()

    def stock_summary(self, symbol: str) -> str:
        stock = self.get_stock(symbol)
        if stock is None:
            return f"Stock not found: {symbol}"

        lines = [
            "=== STOCK SUMMARY ===",
            f"Symbol: {stock.symbol}",
            f"Company: {stock.company_name}",
            f"Sector: {stock.sector}",
            f"Market Cap: {stock.market_cap}",
        ]

        latest = self._prices.latest(symbol=symbol)
        if latest is not None:
            lines += [
                f"Latest Price: {latest.close}",
                f"Latest Date: {latest.trade_date.isoformat()}",
                f"Volume: {latest.volume}",
            ]

        date_range = self._prices.date_range(symbol=symbol)
        if date_range is not None:
            lines.append(f"Data Range: {date_range[0].isoformat()} to {date_range[1].isoformat()}")

        return "\n".join(lines) + "\n"
