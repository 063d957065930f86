from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel


class PriceOut(BaseModel):
    symbol: str
    trade_date: dt.date
    series: Optional[str]
    open: str
    high: str
    low: str
    close: str
    prev_close: Optional[str]
    last: Optional[str]
    vwap: Optional[str]
    volume: Optional[int]
    turnover: Optional[str]
    trades: Optional[int]
    deliverable_volume: Optional[int]
    deliverable_percentage: Optional[str]
