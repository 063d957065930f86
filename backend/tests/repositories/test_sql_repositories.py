import datetime as dt
from decimal import Decimal

import pytest

from revstox.domain.price_record import PriceRecord
from revstox.domain.stock import Stock
from revstox.domain.stock_analytics import StockAnalytics
from revstox.repositories.sql_analytics_repository import SqlAnalyticsRepository
from revstox.repositories.sql_price_repository import SqlPriceRepository
from revstox.repositories.sql_stock_repository import SqlStockRepository


def _price(symbol: str, day: int, close: str = "101.5") -> PriceRecord:
    return PriceRecord(
        symbol=symbol,
        trade_date=dt.date(2021, 1, day),
        series="EQ",
        open=Decimal("100"),
        high=Decimal("105"),
        low=Decimal("99"),
        close=Decimal(close),
        volume=1234567890123,
        deliverable_percentage=Decimal("0.4139"),
    )


@pytest.fixture
def repos(session_factory):
    return (
        SqlStockRepository(session_factory),
        SqlPriceRepository(session_factory),
        SqlAnalyticsRepository(session_factory),
    )


def test_stock_placeholder_and_duplicate(repos):
    stocks, _, _ = repos
    created = stocks.create_placeholder("TCS")

    assert created.company_name == "Unknown Company"
    assert created.created_at is not None
    assert stocks.exists("TCS")

    with pytest.raises(ValueError):
        stocks.create_placeholder("TCS")


def test_stock_upsert_update_list(repos):
    stocks, _, _ = repos
    stocks.upsert(Stock(symbol="TCS", company_name="Tata", sector="IT", market_cap=Decimal("10")))
    stocks.upsert(Stock(symbol="INFY", company_name="Infosys", sector="IT"))
    stocks.upsert(Stock(symbol="TCS", company_name="Tata Consultancy", sector="IT", market_cap=Decimal("12")))

    assert [s.symbol for s in stocks.list()] == ["INFY", "TCS"]
    assert stocks.find("TCS").company_name == "Tata Consultancy"
    assert stocks.find("TCS").market_cap == Decimal("12")

    updated = stocks.update(symbol="INFY", company_name="Infosys Ltd", sector="Tech", market_cap=None)
    assert updated.sector == "Tech"

    with pytest.raises(KeyError):
        stocks.update(symbol="NOPE", company_name=None, sector=None, market_cap=None)

    assert stocks.find("NOPE") is None


def test_price_upsert_overwrites_identity(repos):
    stocks, prices, _ = repos
    stocks.create_placeholder("TCS")

    assert prices.upsert(_price("TCS", 4, "101.5")) == 1
    assert prices.upsert(_price("TCS", 4, "110.25")) == 1

    items = prices.list(symbol="TCS")
    assert len(items) == 1
    assert items[0].close == Decimal("110.25")
    assert items[0].volume == 1234567890123
    assert items[0].series == "EQ"
    assert items[0].deliverable_percentage == Decimal("0.4139")


def test_price_queries(repos):
    stocks, prices, _ = repos
    for sym in ("TCS", "INFY"):
        stocks.create_placeholder(sym)
    for day in (4, 5, 6):
        prices.upsert(_price("TCS", day))
    prices.upsert(_price("INFY", 5))

    assert prices.symbols() == ["INFY", "TCS"]
    assert prices.latest(symbol="TCS").trade_date == dt.date(2021, 1, 6)
    assert prices.latest(symbol="NOPE") is None
    assert prices.get(symbol="TCS", trade_date=dt.date(2021, 1, 5)) is not None
    assert [p.trade_date.day for p in prices.list_between(symbol="TCS", date_from=dt.date(2021, 1, 5), date_to=dt.date(2021, 1, 6))] == [5, 6]
    assert {(p.symbol, p.trade_date.day) for p in prices.list_since(date_from=dt.date(2021, 1, 6))} == {("TCS", 6)}
    assert prices.date_range(symbol="TCS") == (dt.date(2021, 1, 4), dt.date(2021, 1, 6))
    assert prices.date_range(symbol="NOPE") is None
    assert prices.count_by_symbol() == {"TCS": 3, "INFY": 1}

    with pytest.raises(ValueError):
        prices.list_between(symbol="TCS", date_from=dt.date(2021, 1, 6), date_to=dt.date(2021, 1, 5))


def test_delete_stock_removes_prices_and_analytics(repos):
    stocks, prices, analytics = repos
    stocks.create_placeholder("TCS")
    prices.upsert(_price("TCS", 4))
    analytics.upsert(StockAnalytics(symbol="TCS", analysis_date=dt.date(2021, 1, 4), daily_volatility=Decimal("6")))

    assert stocks.delete(symbol="TCS") is True
    assert prices.list(symbol="TCS") == []
    assert analytics.list(symbol="TCS") == []
    assert stocks.delete(symbol="TCS") is False


def test_analytics_upsert_list_and_cleanup(repos):
    _, _, analytics = repos
    for day in (4, 5, 6):
        analytics.upsert(
            StockAnalytics(symbol="TCS", analysis_date=dt.date(2021, 1, day), daily_volatility=Decimal(day))
        )
    analytics.upsert(StockAnalytics(symbol="TCS", analysis_date=dt.date(2021, 1, 6), daily_volatility=Decimal("1.5")))

    items = analytics.list(symbol="TCS")
    assert [a.analysis_date.day for a in items] == [6, 5, 4]
    assert items[0].daily_volatility == Decimal("1.5")
    assert items[0].price_gap is None

    between = analytics.list_between(symbol="TCS", date_from=dt.date(2021, 1, 5), date_to=dt.date(2021, 1, 6))
    assert [a.analysis_date.day for a in between] == [6, 5]

    assert analytics.delete_before(day=dt.date(2021, 1, 6)) == 2
    assert [a.analysis_date.day for a in analytics.list_since(date_from=dt.date(2021, 1, 1))] == [6]
