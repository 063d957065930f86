from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from revstox.domain.price_record import PriceRecord
from revstox.domain.stock_analytics import StockAnalytics
from revstox.engine.analytics import (
    compare_performance,
    compute_stock_analytics,
    daily_volatility_series,
    mean,
    moving_average_series,
    price_gap_series,
    rank_by_volatility,
    rank_by_volume,
    simple_moving_average,
    top_performers,
    volume_trend,
)


def _p(day: int, close: str, *, symbol: str = "TCS", open_: str = "100", volume: int | None = 100) -> PriceRecord:
    return PriceRecord(
        symbol=symbol,
        trade_date=dt.date(2021, 1, day),
        open=Decimal(open_),
        high=Decimal("120"),
        low=Decimal("90"),
        close=Decimal(close),
        volume=volume,
    )


def _a(symbol: str, day: int, volatility: str | None, change: str | None) -> StockAnalytics:
    return StockAnalytics(
        symbol=symbol,
        analysis_date=dt.date(2021, 1, day),
        daily_volatility=None if volatility is None else Decimal(volatility),
        daily_price_change=None if change is None else Decimal(change),
        volume_trend=Decimal("0"),
    )


def test_mean_ignores_none():
    assert mean([Decimal("1"), None, Decimal("2")]) == Decimal("1.5000")
    assert mean([None, None]) is None
    assert mean([]) is None


def test_simple_moving_average_uses_rows_on_or_before_target():
    prices = [_p(d, str(100 + d)) for d in range(1, 11)]
    # jours 8, 9, 10 exclus
    assert simple_moving_average(prices, dt.date(2021, 1, 7), 3) == Decimal("106.0000")
    assert simple_moving_average(prices, dt.date(2020, 12, 31), 3) == Decimal("0")


def test_moving_average_window_counts_trading_rows():
    prices = [_p(d, str(d)) for d in (1, 4, 5, 6, 7, 8, 11, 12)]
    points = moving_average_series(prices)

    newest = points[0]
    assert newest.trade_date == dt.date(2021, 1, 12)
    # 7 dernières lignes: 4,5,6,7,8,11,12
    assert newest.moving_avg_7 == Decimal("7.5714")
    assert newest.moving_avg_30 == Decimal("6.7500")


def test_price_gap_uses_previous_trading_row():
    prices = [_p(4, "105", open_="100"), _p(1, "98", open_="95")]
    gaps = price_gap_series(prices)
    assert [g.trade_date.day for g in gaps] == [4, 1]
    assert gaps[0].value == Decimal("2")
    assert gaps[1].value is None


def test_volume_trend_uses_five_prior_volumes():
    prices = [_p(d, "100", volume=v) for d, v in zip(range(1, 8), [1000, 100, 100, 100, 100, 100, 150])]
    # moyenne des 5 précédents (jours 2..6) = 100
    assert volume_trend(prices, dt.date(2021, 1, 7)) == Decimal("50")


def test_volume_trend_missing_current_volume():
    prices = [_p(1, "100", volume=100), _p(2, "100", volume=None)]
    assert volume_trend(prices, dt.date(2021, 1, 2)) == Decimal("0")


def test_compute_stock_analytics_turnover_ratio():
    day = PriceRecord(
        symbol="TCS",
        trade_date=dt.date(2021, 1, 4),
        open=Decimal("100"),
        high=Decimal("110"),
        low=Decimal("95"),
        close=Decimal("105"),
        prev_close=Decimal("98"),
        volume=200,
        turnover=Decimal("21000"),
    )
    a = compute_stock_analytics([day], dt.date(2021, 1, 4))

    assert a.turnover_ratio == Decimal("105.0000")
    assert a.price_gap == Decimal("2")
    assert a.daily_volatility == Decimal("15")
    assert compute_stock_analytics([day], dt.date(2021, 1, 5)) is None


def test_compare_performance_orders_by_average_change():
    rows = compare_performance(
        [
            _a("TCS", 4, "1", "1"),
            _a("TCS", 5, "3", "3"),
            _a("INFY", 4, "9", "5"),
            _a("WIPRO", 4, None, None),
        ]
    )
    assert [r.symbol for r in rows] == ["INFY", "TCS", "WIPRO"]
    assert rows[1].avg_price_change == Decimal("2.0000")
    assert rows[2].avg_price_change is None


def test_rank_by_volatility_and_top_performers():
    data = [_a("TCS", 4, "1", "4"), _a("INFY", 4, "9", "1")]
    assert [r.symbol for r in rank_by_volatility(data)] == ["INFY", "TCS"]
    assert [r.symbol for r in top_performers(data, 1)] == ["TCS"]
    with pytest.raises(ValueError):
        top_performers(data, 0)


def test_rank_by_volume():
    prices = [
        _p(4, "1", symbol="TCS", volume=100),
        _p(5, "1", symbol="TCS", volume=300),
        _p(4, "1", symbol="INFY", volume=1000),
        _p(4, "1", symbol="WIPRO", volume=None),
    ]
    ranks = rank_by_volume(prices)
    assert [r.symbol for r in ranks] == ["INFY", "TCS", "WIPRO"]
    assert ranks[1].avg_volume == Decimal("200.0000")
    assert ranks[1].max_volume == 300
    assert ranks[2].max_volume is None


def test_extreme_price_ratio_does_not_overflow_rounding():
    p = PriceRecord(
        symbol="TCS",
        trade_date=dt.date(2021, 1, 4),
        open=Decimal("0.0000000001"),
        high=Decimal("9e21"),
        low=Decimal("0.0000000001"),
        close=Decimal("1"),
        volume=1,
    )

    (metric,) = daily_volatility_series([p])
    assert metric.value == Decimal("9E+33")

    row = compute_stock_analytics([p], p.trade_date)
    assert row.daily_volatility == Decimal("9E+33")
