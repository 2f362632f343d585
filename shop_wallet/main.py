"""
Shop Wallet — FastAPI Application.

This is the entry point for the application.
All routers are registered here.

Run with: uvicorn shop_wallet.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shop_wallet.config import get_settings
from shop_wallet.errors import WalletError
from shop_wallet.middleware import RequestLogMiddleware
from shop_wallet.api.health import router as health_router
from shop_wallet.api.ledger import router as ledger_router
from shop_wallet.api.orders import router as orders_router
from shop_wallet.api.products import router as products_router
from shop_wallet.api.reviews import router as reviews_router
from shop_wallet.api.wallet import router as wallet_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Wallet payments, orders and refunds for the shop",
)

app.add_middleware(RequestLogMiddleware)


@app.exception_handler(WalletError)
async def wallet_error_handler(request: Request, exc: WalletError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": {"code": exc.code, "message": exc.message}},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"error": {"code": 9001, "message": "Internal server error"}},
    )


# Register routers
app.include_router(health_router)
app.include_router(wallet_router)
app.include_router(orders_router)
app.include_router(ledger_router)
app.include_router(products_router)
app.include_router(reviews_router)
