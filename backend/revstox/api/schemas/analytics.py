from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel


class MetricOut(BaseModel):
    symbol: str
    trade_date: dt.date
    value: Optional[str]


class MovingAverageOut(BaseModel):
    symbol: str
    trade_date: dt.date
    close: str
    moving_avg_7: str
    moving_avg_30: str
    moving_avg_90: str


class StockAnalyticsOut(BaseModel):
    symbol: str
    analysis_date: dt.date
    daily_volatility: Optional[str]
    daily_price_change: Optional[str]
    price_gap: Optional[str]
    moving_avg_7: Optional[str]
    moving_avg_30: Optional[str]
    moving_avg_90: Optional[str]
    volume_trend: Optional[str]
    turnover_ratio: Optional[str]
    volatility_category: str
    performance_category: str


class PerformanceOut(BaseModel):
    symbol: str
    avg_volatility: Optional[str]
    avg_price_change: Optional[str]
    avg_volume_trend: Optional[str]


class VolumeRankOut(BaseModel):
    symbol: str
    avg_volume: Optional[str]
    max_volume: Optional[int]
