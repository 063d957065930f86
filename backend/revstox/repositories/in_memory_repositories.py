from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, replace
from decimal import Decimal

from revstox.domain.price_record import PriceRecord
from revstox.domain.stock import Stock
from revstox.repositories.price_repository import PriceRepository
from revstox.repositories.stock_repository import StockRepository


@dataclass
class InMemoryStockRepository(StockRepository):
    """
    Registre en mémoire.
    - Déterministe
    - Facile à tester
    - placeholders_created : nombre d'entrées créées par create_placeholder
    """
    _items: dict[str, Stock] = field(default_factory=dict)
    placeholders_created: int = 0

    def list(self) -> list[Stock]:
        return [self._items[k] for k in sorted(self._items)]

    def find(self, symbol: str) -> Stock | None:
        return self._items.get(symbol.strip())

    def exists(self, symbol: str) -> bool:
        return symbol.strip() in self._items

    def upsert(self, stock: Stock) -> None:
        self._items[stock.symbol.strip()] = stock

    def create_placeholder(self, symbol: str) -> Stock:
        sym = symbol.strip()
        if sym in self._items:
            raise ValueError(f"stock '{sym}' already exists")
        stock = Stock.placeholder(sym)
        self._items[sym] = stock
        self.placeholders_created += 1
        return stock

    def update(
        self,
        *,
        symbol: str,
        company_name: str | None,
        sector: str | None,
        market_cap: Decimal | None,
    ) -> Stock:
        sym = symbol.strip()
        existing = self._items.get(sym)
        if existing is None:
            raise KeyError(f"unknown stock symbol '{sym}'")
        updated = replace(existing, company_name=company_name, sector=sector, market_cap=market_cap)
        self._items[sym] = updated
        return updated

    def delete(self, *, symbol: str) -> bool:
        return self._items.pop(symbol.strip(), None) is not None


@dataclass
class InMemoryPriceRepository(PriceRepository):
    _items: dict[tuple[str, dt.date], PriceRecord] = field(default_factory=dict)

    def upsert(self, record: PriceRecord) -> int:
        self._items[record.identity] = record
        return 1

    def get(self, *, symbol: str, trade_date: dt.date) -> PriceRecord | None:
        return self._items.get((symbol.strip(), trade_date))

    def list(self, *, symbol: str | None = None) -> list[PriceRecord]:
        items = list(self._items.values())
        if symbol is not None:
            s = symbol.strip()
            items = [p for p in items if p.symbol == s]
        return sorted(items, key=lambda p: (p.symbol, p.trade_date))

    def list_between(self, *, symbol: str, date_from: dt.date, date_to: dt.date) -> list[PriceRecord]:
        if date_from > date_to:
            raise ValueError("date_from must be <= date_to")
        return [p for p in self.list(symbol=symbol) if date_from <= p.trade_date <= date_to]

    def list_since(self, *, date_from: dt.date) -> list[PriceRecord]:
        return [p for p in self.list() if p.trade_date >= date_from]

    def latest(self, *, symbol: str) -> PriceRecord | None:
        items = self.list(symbol=symbol)
        return items[-1] if items else None

    def symbols(self) -> list[str]:
        return sorted({sym for sym, _ in self._items})

    def date_range(self, *, symbol: str) -> tuple[dt.date, dt.date] | None:
        items = self.list(symbol=symbol)
        if not items:
            return None
        return (items[0].trade_date, items[-1].trade_date)

    def count_by_symbol(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for sym, _ in self._items:
            counts[sym] = counts.get(sym, 0) + 1
        return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))
