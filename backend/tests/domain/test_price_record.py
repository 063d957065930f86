import datetime as dt
from decimal import Decimal

import pytest

from revstox.domain.price_record import PriceRecord, percent_of


def _rec(**kw) -> PriceRecord:
    base = dict(
        symbol="RELIANCE",
        trade_date=dt.date(2021, 1, 5),
        open=Decimal("100"),
        high=Decimal("110"),
        low=Decimal("95"),
        close=Decimal("104"),
    )
    base.update(kw)
    return PriceRecord(**base)


def test_identity_is_symbol_and_date():
    r = _rec()
    assert r.identity == ("RELIANCE", dt.date(2021, 1, 5))


def test_optional_fields_default_to_none():
    r = _rec()
    assert r.series is None
    assert r.volume is None
    assert r.deliverable_percentage is None


def test_symbol_cannot_be_empty():
    with pytest.raises(ValueError):
        _rec(symbol="  ")


def test_prices_must_be_decimal():
    with pytest.raises(ValueError):
        _rec(close=104.0)


def test_trade_date_must_be_date():
    with pytest.raises(ValueError):
        _rec(trade_date="2021-01-05")


def test_daily_volatility_and_change():
    r = _rec()
    # (110 - 95) / 100 = 15 %
    assert r.daily_volatility() == Decimal("15")
    # (104 - 100) / 100 = 4 %
    assert r.daily_price_change() == Decimal("4")


def test_ratio_is_rounded_before_scaling():
    # 1 / 3 -> 0.3333 -> 33.33
    assert percent_of(Decimal("1"), Decimal("3")) == Decimal("33.33")


def test_percent_of_non_positive_denominator_is_zero():
    assert percent_of(Decimal("5"), Decimal("0")) == Decimal("0")
    assert percent_of(Decimal("5"), Decimal("-1")) == Decimal("0")


def test_calculated_turnover():
    assert _rec(volume=10).calculated_turnover() == Decimal("1040")
    assert _rec().calculated_turnover() == Decimal("0")


def test_percent_of_huge_ratio_is_kept_exact():
    # 1e21 / 1e-10 = 1e31, au-dela de la precision par defaut
    assert percent_of(Decimal("1e21"), Decimal("1e-10")) == Decimal("1e33")
