import datetime as dt
from decimal import Decimal

import pytest

from revstox.wiring import build_services


ROWS = [
    "2021-01-01,RELIANCE,EQ,1987.50,1988.00,2008.95,1980.10,1999.00,1997.05,1996.21,5873542,11724970000,125384,2307021,0.3928",
    "2021-01-04,RELIANCE,EQ,1997.05,1999.00,2004.90,1978.45,1990.10,1988.60,1990.73,8830364,17578830000,198237,3372015,0.3819",
    "2021-01-05,RELIANCE,EQ,1988.60,1975.00,1979.00,1950.00,1970.00,1970.65,1963.06,14167549,27812000000,270412,5864126,0.4139",
    "04-Jan-2021,TCS,EQ,2931.95,2946.00,3067.00,2946.00,3055.00,3054.15,3027.03,4604013,13936450000,167431,2151398,0.4673",
]

D1 = dt.date(2021, 1, 1)
D4 = dt.date(2021, 1, 4)
D5 = dt.date(2021, 1, 5)


@pytest.fixture
def services(session_factory, write_csv):
    s = build_services(session_factory)
    run = s.imports.run(write_csv(*ROWS))
    assert run.succeeded
    return s


def test_calculate_and_store(services):
    a = services.analytics.calculate_and_store("RELIANCE", D5)

    assert a.daily_volatility == Decimal("1.47")
    assert a.daily_price_change == Decimal("-0.22")
    assert a.price_gap == Decimal("-13.60")
    # (1970.65 + 1988.60 + 1997.05) / 3
    assert a.moving_avg_7 == Decimal("1985.4333")
    assert a.moving_avg_90 == a.moving_avg_7
    # 14167549 vs avg(8830364, 5873542)
    assert a.volume_trend == Decimal("92.70")

    stored = services.analytics.get_analytics("RELIANCE")
    assert len(stored) == 1
    assert stored[0].daily_volatility == Decimal("1.47")
    assert stored[0].volatility_category == "Low"
    assert stored[0].performance_category == "Stable"


def test_recalculation_replaces_existing(services):
    services.analytics.calculate_and_store("RELIANCE", D5)
    services.analytics.calculate_and_store("RELIANCE", D5)
    assert len(services.analytics.get_analytics("RELIANCE")) == 1


def test_calculate_without_price_row(services):
    assert services.analytics.calculate_and_store("RELIANCE", dt.date(2021, 1, 2)) is None
    assert services.analytics.calculate_and_store("NOPE", D5) is None
    assert services.analytics.get_analytics("RELIANCE") == []


def test_first_day_has_no_volume_trend(services):
    a = services.analytics.calculate_and_store("RELIANCE", D1)
    assert a.volume_trend == Decimal("0")


def test_series_are_newest_first(services):
    vol = services.analytics.daily_volatility("RELIANCE")
    assert [m.trade_date for m in vol] == [D5, D4, D1]

    gaps = services.analytics.price_gaps("RELIANCE")
    assert gaps[0].value == Decimal("-13.60")
    assert gaps[1].value == Decimal("1.95")
    assert gaps[2].value is None

    ma = services.analytics.moving_averages("RELIANCE")
    assert ma[0].moving_avg_7 == Decimal("1985.4333")
    assert ma[-1].moving_avg_7 == Decimal("1997.0500")

    changes = services.analytics.daily_price_changes("TCS")
    assert changes[0].value == Decimal("3.67")


def test_volume_and_turnover_series(services):
    vp = services.analytics.volume_patterns("RELIANCE")
    assert vp[0].volume == 14167549
    assert vp[0].prev_volume == 8830364
    assert vp[-1].prev_volume is None

    to = services.analytics.turnover_analysis("TCS")
    # 2151398 / 4604013
    assert to[0].liquidity_ratio.quantize(Decimal("0.01")) == Decimal("46.73")


def _calculate_all(services):
    services.analytics.calculate_and_store("RELIANCE", D4)
    services.analytics.calculate_and_store("RELIANCE", D5)
    services.analytics.calculate_and_store("TCS", D4)


def test_compare_and_rank(services):
    _calculate_all(services)

    rows = services.analytics.compare_performance(D1)
    assert [r.symbol for r in rows] == ["TCS", "RELIANCE"]
    assert rows[1].avg_price_change == Decimal("-0.3700")

    top = services.analytics.top_performers(D1, 1)
    assert [r.symbol for r in top] == ["TCS"]

    by_vol = services.analytics.rank_by_volatility(D1)
    assert [r.symbol for r in by_vol] == ["TCS", "RELIANCE"]
    assert by_vol[1].avg_volatility == Decimal("1.3950")

    with pytest.raises(ValueError):
        services.analytics.top_performers(D1, 0)


def test_rank_by_volume(services):
    ranks = services.analytics.rank_by_volume(D4)
    assert [r.symbol for r in ranks] == ["RELIANCE", "TCS"]
    assert ranks[0].avg_volume == Decimal("11498956.5000")
    assert ranks[0].max_volume == 14167549


def test_analytics_summary(services):
    _calculate_all(services)

    text = services.analytics.analytics_summary("RELIANCE", D1, today=dt.date(2021, 1, 31))
    assert text.startswith("=== ANALYTICS SUMMARY FOR RELIANCE ===")
    assert "Number of Analysis Days: 2" in text
    assert "Average Daily Volatility: 1.3950%" in text
    assert "Latest Analytics (2021-01-05):" in text
    assert "- Volatility Category: Low" in text


def test_analytics_summary_without_data(services):
    text = services.analytics.analytics_summary("RELIANCE", D1, today=dt.date(2021, 1, 31))
    assert "No analytics data available for the specified period." in text

    future = services.analytics.analytics_summary("RELIANCE", dt.date(2030, 1, 1), today=D5)
    assert "No analytics data available for the specified period." in future


def test_cleanup_before(services):
    _calculate_all(services)
    assert services.analytics.cleanup_before(D5) == 2
    assert [a.analysis_date for a in services.analytics.get_analytics("RELIANCE")] == [D5]
    assert services.analytics.get_analytics("TCS") == []
