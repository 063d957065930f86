from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod

from revstox.domain.stock_analytics import StockAnalytics


class AnalyticsRepository(ABC):
    @abstractmethod
    def upsert(self, analytics: StockAnalytics) -> int: ...

    @abstractmethod
    def list(self, *, symbol: str) -> list[StockAnalytics]: ...

    @abstractmethod
    def list_between(self, *, symbol: str, date_from: dt.date, date_to: dt.date) -> list[StockAnalytics]: ...

    @abstractmethod
    def list_since(self, *, date_from: dt.date) -> list[StockAnalytics]: ...

    @abstractmethod
    def delete_before(self, *, day: dt.date) -> int: ...
