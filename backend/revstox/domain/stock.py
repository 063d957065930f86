from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

PLACEHOLDER_COMPANY = "Unknown Company"
PLACEHOLDER_SECTOR = "Unknown Sector"


@dataclass(frozen=True, slots=True)
class Stock:
    symbol: str
    company_name: Optional[str] = None
    sector: Optional[str] = None
    market_cap: Optional[Decimal] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    def __post_init__(self) -> None:
        if not isinstance(self.symbol, str) or not self.symbol.strip():
            raise ValueError("stock.symbol must be non-empty")
        if self.market_cap is not None and not isinstance(self.market_cap, Decimal):
            raise ValueError("stock.market_cap must be a Decimal")

    @classmethod
    def placeholder(cls, symbol: str) -> "Stock":
        """Entrée minimale créée à la volée lors d'un import."""
        return cls(
            symbol=symbol,
            company_name=PLACEHOLDER_COMPANY,
            sector=PLACEHOLDER_SECTOR,
            market_cap=Decimal("0"),
        )
