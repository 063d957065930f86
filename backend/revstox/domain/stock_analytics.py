from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True, slots=True)
class StockAnalytics:
    symbol: str
    analysis_date: dt.date
    daily_volatility: Optional[Decimal] = None
    daily_price_change: Optional[Decimal] = None
    price_gap: Optional[Decimal] = None
    moving_avg_7: Optional[Decimal] = None
    moving_avg_30: Optional[Decimal] = None
    moving_avg_90: Optional[Decimal] = None
    volume_trend: Optional[Decimal] = None
    turnover_ratio: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if not isinstance(self.symbol, str) or not self.symbol.strip():
            raise ValueError("stock_analytics.symbol must be non-empty")
        if not isinstance(self.analysis_date, dt.date):
            raise ValueError("stock_analytics.analysis_date must be a date")

    @property
    def volatility_category(self) -> str:
        if self.daily_volatility is None:
            return "Unknown"
        if self.daily_volatility <= Decimal("2.0"):
            return "Low"
        if self.daily_volatility <= Decimal("5.0"):
            return "Medium"
        return "High"

    @property
    def performance_category(self) -> str:
        if self.daily_price_change is None:
            return "Unknown"
        if self.daily_price_change < Decimal("-2.0"):
            return "Poor"
        if self.daily_price_change <= Decimal("2.0"):
            return "Stable"
        return "Good"
