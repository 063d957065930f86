from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel


class StockCreate(BaseModel):
    symbol: str
    company_name: Optional[str] = None
    sector: Optional[str] = None
    market_cap: Optional[str] = None


class StockOut(BaseModel):
    symbol: str
    company_name: Optional[str]
    sector: Optional[str]
    market_cap: Optional[str]
    created_at: Optional[dt.datetime]
    updated_at: Optional[dt.datetime]


class StockSummaryOut(BaseModel):
    symbol: str
    summary: str
