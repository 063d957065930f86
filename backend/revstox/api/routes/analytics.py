from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query

from revstox.api.deps import get_services
from revstox.api.mappers.response_mappers import (
    analytics_to_response,
    metric_to_response,
    moving_average_to_response,
    performance_to_response,
    volume_rank_to_response,
)
from revstox.api.schemas.analytics import (
    MetricOut,
    MovingAverageOut,
    PerformanceOut,
    StockAnalyticsOut,
    VolumeRankOut,
)
from revstox.wiring import Services


router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/top-performers", response_model=list[PerformanceOut])
def top_performers(
    since: dt.date = Query(...),
    limit: int = Query(default=10, ge=1),
    services: Services = Depends(get_services),
):
    return [performance_to_response(r) for r in services.analytics.top_performers(since, limit)]


@router.get("/volume-ranking", response_model=list[VolumeRankOut])
def volume_ranking(since: dt.date = Query(...), services: Services = Depends(get_services)):
    return [volume_rank_to_response(r) for r in services.analytics.rank_by_volume(since)]


@router.get("/{symbol}/volatility", response_model=list[MetricOut])
def volatility(symbol: str, services: Services = Depends(get_services)):
    return [metric_to_response(m) for m in services.analytics.daily_volatility(symbol.upper())]


@router.get("/{symbol}/price-changes", response_model=list[MetricOut])
def price_changes(symbol: str, services: Services = Depends(get_services)):
    return [metric_to_response(m) for m in services.analytics.daily_price_changes(symbol.upper())]


@router.get("/{symbol}/moving-averages", response_model=list[MovingAverageOut])
def moving_averages(symbol: str, services: Services = Depends(get_services)):
    return [moving_average_to_response(m) for m in services.analytics.moving_averages(symbol.upper())]


@router.get("/{symbol}/price-gaps", response_model=list[MetricOut])
def price_gaps(symbol: str, services: Services = Depends(get_services)):
    return [metric_to_response(m) for m in services.analytics.price_gaps(symbol.upper())]


@router.post("/{symbol}/calculate", response_model=StockAnalyticsOut)
def calculate(
    symbol: str,
    day: dt.date | None = Query(default=None, description="YYYY-MM-DD, default: today"),
    services: Services = Depends(get_services),
):
    symbol = symbol.upper()
    if not services.stocks.stock_exists(symbol):
        raise HTTPException(status_code=404, detail="stock not found")

    if day is None:
        day = dt.date.today()

    analytics = services.analytics.calculate_and_store(symbol, day)
    if analytics is None:
        raise HTTPException(status_code=404, detail=f"no price data for {symbol} on {day.isoformat()}")
    return analytics_to_response(analytics)
