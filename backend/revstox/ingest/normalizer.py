from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from revstox.domain.price_record import PriceRecord
from revstox.ingest.fields import parse_date, parse_decimal, parse_int

logger = logging.getLogger(__name__)

# Date,Symbol,Series,Prev Close,Open,High,Low,Last,Close,VWAP,Volume,Turnover,Trades,Deliverable Volume,%Deliverble
COLUMNS = (
    "trade_date",
    "symbol",
    "series",
    "prev_close",
    "open",
    "high",
    "low",
    "last",
    "close",
    "vwap",
    "volume",
    "turnover",
    "trades",
    "deliverable_volume",
    "deliverable_percentage",
)
MIN_FIELDS = 14


@dataclass(frozen=True, slots=True)
class NormalizeOutcome:
    record: Optional[PriceRecord] = None
    reason: Optional[str] = None
    symbol: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def _reject(reason: str, symbol: Optional[str] = None) -> NormalizeOutcome:
    return NormalizeOutcome(reason=reason, symbol=symbol or None)


def normalize_row(fields: Sequence[str]) -> NormalizeOutcome:
    if len(fields) < MIN_FIELDS:
        logger.warning("Insufficient fields (%d < %d): %s", len(fields), MIN_FIELDS, ",".join(fields))
        return _reject(f"expected at least {MIN_FIELDS} fields, got {len(fields)}")

    symbol = fields[1].strip()

    trade_date = parse_date(fields[0])
    if trade_date is None:
        logger.warning("Invalid date format: %r", fields[0])
        return _reject(f"invalid date: {fields[0].strip()!r}", symbol)

    open_ = parse_decimal(fields[4])
    high = parse_decimal(fields[5])
    low = parse_decimal(fields[6])
    close = parse_decimal(fields[8])

    missing = [
        name
        for name, value in (("symbol", symbol), ("open", open_), ("high", high), ("low", low), ("close", close))
        if value is None or value == ""
    ]
    if missing:
        logger.warning("Missing essential fields %s in line: %s", missing, ",".join(fields))
        return _reject(f"missing essential field(s): {', '.join(missing)}", symbol)

    series = fields[2].strip() or None

    record = PriceRecord(
        symbol=symbol,
        trade_date=trade_date,
        series=series,
        prev_close=parse_decimal(fields[3]),
        open=open_,
        high=high,
        low=low,
        last=parse_decimal(fields[7]),
        close=close,
        vwap=parse_decimal(fields[9]),
        volume=parse_int(fields[10]),
        turnover=parse_decimal(fields[11]),
        trades=parse_int(fields[12]),
        deliverable_volume=parse_int(fields[13]),
        deliverable_percentage=parse_decimal(fields[14]) if len(fields) > MIN_FIELDS else None,
    )
    return NormalizeOutcome(record=record, symbol=symbol)
