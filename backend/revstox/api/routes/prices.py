from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query

from revstox.api.deps import get_services
from revstox.api.mappers.response_mappers import price_to_response
from revstox.api.schemas.prices import PriceOut
from revstox.wiring import Services


router = APIRouter(prefix="/prices", tags=["prices"])


@router.get("", response_model=list[PriceOut])
def list_prices(
    symbol: str = Query(...),
    date_from: dt.date | None = Query(default=None),
    date_to: dt.date | None = Query(default=None),
    services: Services = Depends(get_services),
):
    """Historique d'un symbole, le plus récent en premier."""
    if (date_from is None) != (date_to is None):
        raise HTTPException(status_code=422, detail="date_from and date_to must be provided together")

    symbol = symbol.upper()
    if date_from is not None and date_to is not None:
        if date_from > date_to:
            raise HTTPException(status_code=422, detail="date_from must be <= date_to")
        items = services.stocks.price_history_between(symbol, date_from, date_to)
    else:
        items = services.stocks.price_history(symbol)

    return [price_to_response(p) for p in items]


@router.get("/{symbol}/latest", response_model=PriceOut)
def latest_price(symbol: str, services: Services = Depends(get_services)):
    p = services.stocks.latest_price(symbol.upper())
    if p is None:
        raise HTTPException(status_code=404, detail="price not found")
    return price_to_response(p)
