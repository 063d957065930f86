from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from revstox.domain.stock_analytics import StockAnalytics
from revstox.engine import analytics as engine
from revstox.repositories.analytics_repository import AnalyticsRepository
from revstox.repositories.price_repository import PriceRepository

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(self, *, price_repo: PriceRepository, analytics_repo: AnalyticsRepository) -> None:
        self._prices = price_repo
        self._analytics = analytics_repo

    # -------- stored analytics --------

    def calculate_and_store(self, symbol: str, day: dt.date) -> Optional[StockAnalytics]:
        prices = self._prices.list(symbol=symbol)
        if not prices:
            logger.warning("No price data available for analytics calculation: %s", symbol)
            return None

        analytics = engine.compute_stock_analytics(prices, day)
        if analytics is None:
            logger.warning("No price data found for %s on %s", symbol, day)
            return None

        self._analytics.upsert(analytics)
        logger.info("Calculated and stored analytics for %s on %s", symbol, day)
        return analytics

    def get_analytics(self, symbol: str) -> list[StockAnalytics]:
        return self._analytics.list(symbol=symbol)

    def get_analytics_between(self, symbol: str, date_from: dt.date, date_to: dt.date) -> list[StockAnalytics]:
        return self._analytics.list_between(symbol=symbol, date_from=date_from, date_to=date_to)

    def cleanup_before(self, day: dt.date) -> int:
        deleted = self._analytics.delete_before(day=day)
        logger.info("Cleaned up %d old analytics records before %s", deleted, day)
        return deleted

    # -------- per-symbol series (most recent first) --------

    def daily_volatility(self, symbol: str) -> list[engine.DailyMetric]:
        return engine.daily_volatility_series(self._prices.list(symbol=symbol))

    def daily_price_changes(self, symbol: str) -> list[engine.DailyMetric]:
        return engine.daily_price_change_series(self._prices.list(symbol=symbol))

    def moving_averages(self, symbol: str) -> list[engine.MovingAveragePoint]:
        return engine.moving_average_series(self._prices.list(symbol=symbol))

    def price_gaps(self, symbol: str) -> list[engine.DailyMetric]:
        return engine.price_gap_series(self._prices.list(symbol=symbol))

    def volume_patterns(self, symbol: str) -> list[engine.VolumePoint]:
        return engine.volume_pattern_series(self._prices.list(symbol=symbol))

    def turnover_analysis(self, symbol: str) -> list[engine.TurnoverPoint]:
        return engine.turnover_series(self._prices.list(symbol=symbol))

    # -------- cross-symbol --------

    def compare_performance(self, since: dt.date) -> list[engine.PerformanceRow]:
        return engine.compare_performance(self._analytics.list_since(date_from=since))

    def top_performers(self, since: dt.date, limit: int = 10) -> list[engine.PerformanceRow]:
        return engine.top_performers(self._analytics.list_since(date_from=since), limit)

    def rank_by_volatility(self, since: dt.date) -> list[engine.PerformanceRow]:
        return engine.rank_by_volatility(self._analytics.list_since(date_from=since))

    def rank_by_volume(self, since: dt.date) -> list[engine.VolumeRank]:
        return engine.rank_by_volume(self._prices.list_since(date_from=since))

    def analytics_summary(self, symbol: str, since: dt.date, *, today: Optional[dt.date] = None) -> str:
        today = today or dt.date.today()
        lines = [f"=== ANALYTICS SUMMARY FOR {symbol} ===", f"Analysis Period: From {since.isoformat()}", ""]

        if since > today:
            lines.append("No analytics data available for the specified period.")
            return "\n".join(lines) + "\n"

        items = self._analytics.list_between(symbol=symbol, date_from=since, date_to=today)
        if not items:
            lines.append("No analytics data available for the specified period.")
            return "\n".join(lines) + "\n"

        lines += [
            f"Number of Analysis Days: {len(items)}",
            f"Average Daily Volatility: {engine.mean(a.daily_volatility for a in items)}%",
            f"Average Daily Price Change: {engine.mean(a.daily_price_change for a in items)}%",
        ]

        latest = items[0]
        lines += [
            "",
            f"Latest Analytics ({latest.analysis_date.isoformat()}):",
            f"- Daily Volatility: {latest.daily_volatility}%",
            f"- Daily Price Change: {latest.daily_price_change}%",
            f"- 7-Day Moving Average: {latest.moving_avg_7}",
            f"- 30-Day Moving Average: {latest.moving_avg_30}",
            f"- Volatility Category: {latest.volatility_category}",
            f"- Performance Category: {latest.performance_category}",
        ]
        return "\n".join(lines) + "\n"
