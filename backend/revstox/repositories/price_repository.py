from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod

from revstox.domain.price_record import PriceRecord


class PriceRepository(ABC):
    @abstractmethod
    def upsert(self, record: PriceRecord) -> int:
        """Insert or overwrite by (symbol, trade_date). Returns affected rows."""

    @abstractmethod
    def get(self, *, symbol: str, trade_date: dt.date) -> PriceRecord | None: ...

    @abstractmethod
    def list(self, *, symbol: str | None = None) -> list[PriceRecord]: ...

    @abstractmethod
    def list_between(self, *, symbol: str, date_from: dt.date, date_to: dt.date) -> list[PriceRecord]: ...

    @abstractmethod
    def list_since(self, *, date_from: dt.date) -> list[PriceRecord]: ...

    @abstractmethod
    def latest(self, *, symbol: str) -> PriceRecord | None: ...

    @abstractmethod
    def symbols(self) -> list[str]: ...

    @abstractmethod
    def date_range(self, *, symbol: str) -> tuple[dt.date, dt.date] | None: ...

    @abstractmethod
    def count_by_symbol(self) -> dict[str, int]: ...
