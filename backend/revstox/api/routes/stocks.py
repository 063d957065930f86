from __future__ import annotations

from decimal import Decimal, InvalidOperation

from fastapi import APIRouter, Depends, HTTPException

from revstox.api.deps import get_services
from revstox.api.mappers.response_mappers import stock_to_response
from revstox.api.schemas.stocks import StockCreate, StockOut, StockSummaryOut
from revstox.services.stock_service import is_valid_symbol
from revstox.wiring import Services


router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("", response_model=list[StockOut])
def list_stocks(services: Services = Depends(get_services)):
    return [stock_to_response(s) for s in services.stocks.list_stocks()]


@router.post("", response_model=StockOut, status_code=201)
def create_stock(payload: StockCreate, services: Services = Depends(get_services)):
    symbol = payload.symbol.strip().upper()
    if not is_valid_symbol(symbol):
        raise HTTPException(status_code=422, detail=f"invalid symbol: {payload.symbol!r}")

    market_cap = None
    if payload.market_cap is not None and payload.market_cap.strip():
        try:
            market_cap = Decimal(payload.market_cap.strip().replace(",", ""))
        except InvalidOperation:
            raise HTTPException(status_code=422, detail="invalid market_cap")

    if services.stocks.stock_exists(symbol):
        raise HTTPException(status_code=409, detail=f"stock already exists: {symbol}")

    services.stocks.add_or_update_stock(symbol, payload.company_name, payload.sector, market_cap)
    stock = services.stocks.get_stock(symbol)
    return stock_to_response(stock)


@router.get("/{symbol}", response_model=StockOut)
def get_stock(symbol: str, services: Services = Depends(get_services)):
    stock = services.stocks.get_stock(symbol.upper())
    if stock is None:
        raise HTTPException(status_code=404, detail="stock not found")
    return stock_to_response(stock)


@router.get("/{symbol}/summary", response_model=StockSummaryOut)
def stock_summary(symbol: str, services: Services = Depends(get_services)):
    symbol = symbol.upper()
    if not services.stocks.stock_exists(symbol):
        raise HTTPException(status_code=404, detail="stock not found")
    return StockSummaryOut(symbol=symbol, summary=services.stocks.stock_summary(symbol))


@router.delete("/{symbol}", status_code=204)
def delete_stock(symbol: str, services: Services = Depends(get_services)):
    if not services.stocks.delete_stock(symbol.upper()):
        raise HTTPException(status_code=404, detail="stock not found")
