from __future__ import annotations

from decimal import Decimal
from typing import Optional

from revstox.api.schemas.analytics import (
    MetricOut,
    MovingAverageOut,
    PerformanceOut,
    StockAnalyticsOut,
    VolumeRankOut,
)
from revstox.api.schemas.imports import ImportRunOut, RejectionOut
from revstox.api.schemas.prices import PriceOut
from revstox.api.schemas.stocks import StockOut
from revstox.domain.import_run import ImportRun
from revstox.domain.price_record import PriceRecord
from revstox.domain.stock import Stock
from revstox.domain.stock_analytics import StockAnalytics
from revstox.engine.analytics import DailyMetric, MovingAveragePoint, PerformanceRow, VolumeRank


def _s(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def stock_to_response(s: Stock) -> StockOut:
    return StockOut(
        symbol=s.symbol,
        company_name=s.company_name,
        sector=s.sector,
        market_cap=_s(s.market_cap),
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


def price_to_response(p: PriceRecord) -> PriceOut:
    return PriceOut(
        symbol=p.symbol,
        trade_date=p.trade_date,
        series=p.series,
        open=str(p.open),
        high=str(p.high),
        low=str(p.low),
        close=str(p.close),
        prev_close=_s(p.prev_close),
        last=_s(p.last),
        vwap=_s(p.vwap),
        volume=p.volume,
        turnover=_s(p.turnover),
        trades=p.trades,
        deliverable_volume=p.deliverable_volume,
        deliverable_percentage=_s(p.deliverable_percentage),
    )


def run_to_response(run: ImportRun) -> ImportRunOut:
    return ImportRunOut(
        source=run.source,
        symbol=run.symbol,
        total=run.total,
        successful=run.successful,
        failed=run.failed,
        elapsed_ms=int(run.elapsed_seconds * 1000),
        succeeded=run.succeeded,
        file_error=run.file_error,
        rejections=[RejectionOut(line_no=r.line_no, symbol=r.symbol, reason=r.reason) for r in run.rejections],
    )


def metric_to_response(m: DailyMetric) -> MetricOut:
    return MetricOut(symbol=m.symbol, trade_date=m.trade_date, value=_s(m.value))


def moving_average_to_response(m: MovingAveragePoint) -> MovingAverageOut:
    return MovingAverageOut(
        symbol=m.symbol,
        trade_date=m.trade_date,
        close=str(m.close),
        moving_avg_7=str(m.moving_avg_7),
        moving_avg_30=str(m.moving_avg_30),
        moving_avg_90=str(m.moving_avg_90),
    )


def analytics_to_response(a: StockAnalytics) -> StockAnalyticsOut:
    return StockAnalyticsOut(
        symbol=a.symbol,
        analysis_date=a.analysis_date,
        daily_volatility=_s(a.daily_volatility),
        daily_price_change=_s(a.daily_price_change),
        price_gap=_s(a.price_gap),
        moving_avg_7=_s(a.moving_avg_7),
        moving_avg_30=_s(a.moving_avg_30),
        moving_avg_90=_s(a.moving_avg_90),
        volume_trend=_s(a.volume_trend),
        turnover_ratio=_s(a.turnover_ratio),
        volatility_category=a.volatility_category,
        performance_category=a.performance_category,
    )


def performance_to_response(r: PerformanceRow) -> PerformanceOut:
    return PerformanceOut(
        symbol=r.symbol,
        avg_volatility=_s(r.avg_volatility),
        avg_price_change=_s(r.avg_price_change),
        avg_volume_trend=_s(r.avg_volume_trend),
    )


def volume_rank_to_response(r: VolumeRank) -> VolumeRankOut:
    return VolumeRankOut(symbol=r.symbol, avg_volume=_s(r.avg_volume), max_volume=r.max_volume)
