# src/rubin_market/main.py
"""Main entry point for the Rubin Market application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from rubin_market.api.v1 import (
    chat_router,
    moderation_router,
    notifications_router,
    reports_router,
)
from rubin_market.core.errors import MarketError
from rubin_market.core.settings import settings
from rubin_market.services.cipher import get_cipher_service

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Rubin Market API",
    description="In-game item marketplace: negotiation chat and moderation",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(chat_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(moderation_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")


@app.exception_handler(MarketError)
async def market_error_handler(request: Request, exc: MarketError) -> JSONResponse:
    """Render domain errors as ``{"kind", "detail"}`` with their HTTP status."""
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.kind, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"kind": exc.kind, "detail": exc.message},
    )


@app.on_event("startup")
async def on_startup() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Derive the chat key now so bad secrets fail the boot, not the first request.
    get_cipher_service().warm_up()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Rubin Market API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("rubin_market.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
