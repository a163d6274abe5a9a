import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from stockledger.api.routes import api_router
from stockledger.core.config import get_settings
from stockledger.core.exceptions import (
    DuplicateSkuError,
    InsufficientStockError,
    ProductNotFoundError,
    StockLedgerError,
)
from stockledger.core.logging_config import configure_logging
from stockledger.db.base import Base
from stockledger.db.session import SessionLocal, engine
from stockledger.services.seed import seed_initial_data

import stockledger.models  # noqa: F401  registers every table on Base.metadata


settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StockLedgerError)
def stock_ledger_error_handler(_request: Request, exc: StockLedgerError) -> JSONResponse:
    status_code = 400
    if isinstance(exc, ProductNotFoundError):
        status_code = 404
    elif isinstance(exc, DuplicateSkuError):
        status_code = 409

    body = {"detail": str(exc), "code": exc.code}
    if isinstance(exc, InsufficientStockError):
        body["available"] = exc.available
    return JSONResponse(status_code=status_code, content=body)


@app.on_event("startup")
def startup_event() -> None:
    retries = 20
    while retries > 0:
        try:
            Base.metadata.create_all(bind=engine)
            break
        except OperationalError:
            retries -= 1
            if retries == 0:
                raise
            logger.warning("Database not reachable, retrying (%s attempts left)", retries)
            time.sleep(1)

    if not settings.seed_demo_data:
        return

    db = SessionLocal()
    try:
        seed_initial_data(db)
    finally:
        db.close()


@app.get("/")
def root() -> dict:
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "docs": "/docs",
    }


app.include_router(api_router, prefix=settings.api_v1_prefix)
