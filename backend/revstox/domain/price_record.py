from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Optional

_RATIO_QUANT = Decimal("0.0001")
_HUNDRED = Decimal("100")
# assez de chiffres pour quantize() sur des ratios extremes
DECIMAL_PRECISION = 80


def percent_of(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    numerator / denominator * 100, ratio rounded half-up to 4 places first.
    Returns 0 when the denominator is not strictly positive.
    """
    if denominator <= 0:
        return Decimal("0")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        ratio = (numerator / denominator).quantize(_RATIO_QUANT, rounding=ROUND_HALF_UP)
        return ratio * _HUNDRED


@dataclass(frozen=True, slots=True)
class PriceRecord:
    """
    Une journée de cotation (OHLCV) pour un symbole.
    Identité = (symbol, trade_date).
    """
    symbol: str
    trade_date: dt.date
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    series: Optional[str] = None
    prev_close: Optional[Decimal] = None
    last: Optional[Decimal] = None
    vwap: Optional[Decimal] = None
    volume: Optional[int] = None
    turnover: Optional[Decimal] = None
    trades: Optional[int] = None
    deliverable_volume: Optional[int] = None
    deliverable_percentage: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if not isinstance(self.symbol, str) or not self.symbol.strip():
            raise ValueError("price_record.symbol must be non-empty")
        if not isinstance(self.trade_date, dt.date):
            raise ValueError("price_record.trade_date must be a date")
        for name in ("open", "high", "low", "close"):
            if not isinstance(getattr(self, name), Decimal):
                raise ValueError(f"price_record.{name} must be a Decimal")

    @property
    def identity(self) -> tuple[str, dt.date]:
        return (self.symbol, self.trade_date)

    def daily_volatility(self) -> Decimal:
        return percent_of(self.high - self.low, self.open)

    def daily_price_change(self) -> Decimal:
        return percent_of(self.close - self.open, self.open)

    def calculated_turnover(self) -> Decimal:
        if self.volume is None:
            return Decimal("0")
        return self.close * Decimal(self.volume)
