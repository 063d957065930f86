from __future__ import annotations

import datetime as dt
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, Optional

from revstox.domain.price_record import DECIMAL_PRECISION, PriceRecord, percent_of
from revstox.domain.stock_analytics import StockAnalytics

_QUANT = Decimal("0.0001")

MOVING_AVERAGE_WINDOWS = (7, 30, 90)
VOLUME_WINDOW = 7
VOLUME_TREND_LOOKBACK = 5


def _q(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return value.quantize(_QUANT, rounding=ROUND_HALF_UP)


def mean(values: Iterable[Optional[Decimal]]) -> Optional[Decimal]:
    """Moyenne des valeurs présentes (None ignorés, comme AVG en SQL)."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return _q(sum(present, Decimal("0")) / Decimal(len(present)))


def _by_symbol(prices: Iterable[PriceRecord]) -> dict[str, list[PriceRecord]]:
    grouped: dict[str, list[PriceRecord]] = defaultdict(list)
    for p in prices:
        grouped[p.symbol].append(p)
    for items in grouped.values():
        items.sort(key=lambda p: p.trade_date)
    return grouped


def _newest_first(points: list) -> list:
    return sorted(points, key=lambda x: (x.trade_date, x.symbol), reverse=True)


# ---------- per-day series ----------

@dataclass(frozen=True, slots=True)
class DailyMetric:
    symbol: str
    trade_date: dt.date
    value: Optional[Decimal]


@dataclass(frozen=True, slots=True)
class MovingAveragePoint:
    symbol: str
    trade_date: dt.date
    close: Decimal
    moving_avg_7: Decimal
    moving_avg_30: Decimal
    moving_avg_90: Decimal


@dataclass(frozen=True, slots=True)
class VolumePoint:
    symbol: str
    trade_date: dt.date
    volume: Optional[int]
    avg_volume_7: Optional[Decimal]
    prev_volume: Optional[int]


@dataclass(frozen=True, slots=True)
class TurnoverPoint:
    symbol: str
    trade_date: dt.date
    calculated_turnover: Decimal
    turnover: Optional[Decimal]
    liquidity_ratio: Decimal


def daily_volatility_series(prices: Iterable[PriceRecord]) -> list[DailyMetric]:
    out = [DailyMetric(p.symbol, p.trade_date, p.daily_volatility()) for p in prices]
    return _newest_first(out)


def daily_price_change_series(prices: Iterable[PriceRecord]) -> list[DailyMetric]:
    out = [DailyMetric(p.symbol, p.trade_date, p.daily_price_change()) for p in prices]
    return _newest_first(out)


def moving_average_series(prices: Iterable[PriceRecord]) -> list[MovingAveragePoint]:
    """Moyennes mobiles sur les 7/30/90 dernières lignes de cotation (ligne courante incluse)."""
    out: list[MovingAveragePoint] = []
    for symbol, items in _by_symbol(prices).items():
        closes = [p.close for p in items]
        for i, p in enumerate(items):
            avgs = [mean(closes[max(0, i - w + 1): i + 1]) for w in MOVING_AVERAGE_WINDOWS]
            out.append(MovingAveragePoint(symbol, p.trade_date, p.close, *avgs))
    return _newest_first(out)


def price_gap_series(prices: Iterable[PriceRecord]) -> list[DailyMetric]:
    """open(J) - close(J-1), J-1 = jour de cotation précédent. None pour le premier jour."""
    out: list[DailyMetric] = []
    for symbol, items in _by_symbol(prices).items():
        previous: Optional[PriceRecord] = None
        for p in items:
            gap = None if previous is None else p.open - previous.close
            out.append(DailyMetric(symbol, p.trade_date, gap))
            previous = p
    return _newest_first(out)


def volume_pattern_series(prices: Iterable[PriceRecord]) -> list[VolumePoint]:
    out: list[VolumePoint] = []
    for symbol, items in _by_symbol(prices).items():
        for i, p in enumerate(items):
            window = items[max(0, i - VOLUME_WINDOW + 1): i + 1]
            avg = mean(Decimal(w.volume) if w.volume is not None else None for w in window)
            prev_volume = items[i - 1].volume if i > 0 else None
            out.append(VolumePoint(symbol, p.trade_date, p.volume, avg, prev_volume))
    return _newest_first(out)


def turnover_series(prices: Iterable[PriceRecord]) -> list[TurnoverPoint]:
    out: list[TurnoverPoint] = []
    for p in prices:
        if p.volume and p.deliverable_volume is not None:
            liquidity = _q(Decimal(p.deliverable_volume) / Decimal(p.volume) * Decimal("100"))
        else:
            liquidity = Decimal("0")
        out.append(TurnoverPoint(p.symbol, p.trade_date, p.calculated_turnover(), p.turnover, liquidity))
    return _newest_first(out)


# ---------- analytics for one day ----------

def simple_moving_average(prices: Iterable[PriceRecord], target: dt.date, days: int) -> Decimal:
    closes = [p.close for p in sorted(prices, key=lambda p: p.trade_date, reverse=True) if p.trade_date <= target]
    window = closes[:days]
    if not window:
        return Decimal("0")
    return _q(sum(window, Decimal("0")) / Decimal(len(window)))


def volume_trend(prices: Iterable[PriceRecord], target: dt.date) -> Decimal:
    """
    Écart (%) entre le volume du jour et la moyenne des 5 volumes précédents.
    0 si l'un des deux est indisponible.
    """
    ordered = sorted(prices, key=lambda p: p.trade_date, reverse=True)
    current = next((p.volume for p in ordered if p.trade_date == target), None)
    previous = [Decimal(p.volume) for p in ordered if p.trade_date < target and p.volume is not None]
    previous = previous[:VOLUME_TREND_LOOKBACK]

    if current is None or not previous:
        return Decimal("0")

    avg = _q(sum(previous, Decimal("0")) / Decimal(len(previous)))
    return percent_of(Decimal(current) - avg, avg)


def compute_stock_analytics(prices: list[PriceRecord], day: dt.date) -> Optional[StockAnalytics]:
    current = next((p for p in prices if p.trade_date == day), None)
    if current is None:
        return None

    gap = None
    if current.prev_close is not None:
        gap = current.open - current.prev_close

    turnover_ratio = None
    if current.turnover is not None and current.volume:
        turnover_ratio = _q(current.turnover / Decimal(current.volume))

    ma = {w: simple_moving_average(prices, day, w) for w in MOVING_AVERAGE_WINDOWS}

    return StockAnalytics(
        symbol=current.symbol,
        analysis_date=day,
        daily_volatility=current.daily_volatility(),
        daily_price_change=current.daily_price_change(),
        price_gap=gap,
        moving_avg_7=ma[7],
        moving_avg_30=ma[30],
        moving_avg_90=ma[90],
        volume_trend=volume_trend(prices, day),
        turnover_ratio=turnover_ratio,
    )


# ---------- cross-symbol rankings ----------

@dataclass(frozen=True, slots=True)
class PerformanceRow:
    symbol: str
    avg_volatility: Optional[Decimal]
    avg_price_change: Optional[Decimal]
    avg_volume_trend: Optional[Decimal]


@dataclass(frozen=True, slots=True)
class VolumeRank:
    symbol: str
    avg_volume: Optional[Decimal]
    max_volume: Optional[int]


def _desc_none_last(value: Optional[Decimal]) -> tuple[int, Decimal]:
    return (0, -value) if value is not None else (1, Decimal("0"))


def compare_performance(analytics: Iterable[StockAnalytics]) -> list[PerformanceRow]:
    grouped: dict[str, list[StockAnalytics]] = defaultdict(list)
    for a in analytics:
        grouped[a.symbol].append(a)

    rows = [
        PerformanceRow(
            symbol=symbol,
            avg_volatility=mean(a.daily_volatility for a in items),
            avg_price_change=mean(a.daily_price_change for a in items),
            avg_volume_trend=mean(a.volume_trend for a in items),
        )
        for symbol, items in grouped.items()
    ]
    rows.sort(key=lambda r: (_desc_none_last(r.avg_price_change), r.symbol))
    return rows


def top_performers(analytics: Iterable[StockAnalytics], limit: int) -> list[PerformanceRow]:
    if limit < 1:
        raise ValueError("limit must be >= 1")
    return compare_performance(analytics)[:limit]


def rank_by_volatility(analytics: Iterable[StockAnalytics]) -> list[PerformanceRow]:
    rows = compare_performance(analytics)
    rows.sort(key=lambda r: (_desc_none_last(r.avg_volatility), r.symbol))
    return rows


def rank_by_volume(prices: Iterable[PriceRecord]) -> list[VolumeRank]:
    grouped: dict[str, list[Optional[int]]] = defaultdict(list)
    for p in prices:
        grouped[p.symbol].append(p.volume)

    ranks = []
    for symbol, volumes in grouped.items():
        present = [v for v in volumes if v is not None]
        ranks.append(
            VolumeRank(
                symbol=symbol,
                avg_volume=mean(Decimal(v) for v in present),
                max_volume=max(present) if present else None,
            )
        )
    ranks.sort(key=lambda r: (_desc_none_last(r.avg_volume), r.symbol))
    return ranks
