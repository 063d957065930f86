from fastapi import FastAPI

from revstox.db import get_engine

from revstox.api.routes.health import router as health_router
from revstox.api.routes.stocks import router as stocks_router
from revstox.api.routes.prices import router as prices_router
from revstox.api.routes.imports import router as imports_router
from revstox.api.routes.analytics import router as analytics_router


app = FastAPI(title="RevStox API", version="1.0.0")


@app.on_event("startup")
def _startup() -> None:
    # Fail fast if DB unreachable + ensure tables exist
    get_engine()


app.include_router(health_router)
app.include_router(stocks_router)
app.include_router(prices_router)
app.include_router(imports_router)
app.include_router(analytics_router)
