from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from revstox.domain.stock import Stock


class StockRepository(ABC):
    @abstractmethod
    def list(self) -> list[Stock]: ...

    @abstractmethod
    def find(self, symbol: str) -> Stock | None: ...

    @abstractmethod
    def exists(self, symbol: str) -> bool: ...

    @abstractmethod
    def upsert(self, stock: Stock) -> None: ...

    @abstractmethod
    def create_placeholder(self, symbol: str) -> Stock: ...

    @abstractmethod
    def update(
        self,
        *,
        symbol: str,
        company_name: str | None,
        sector: str | None,
        market_cap: Decimal | None,
    ) -> Stock: ...

    @abstractmethod
    def delete(self, *, symbol: str) -> bool: ...
