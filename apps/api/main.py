"""FastAPI application main entry point."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tradepost import __version__
from tradepost.domain.exceptions import TradepostError
from tradepost.infrastructure.database import close_database, init_database
from tradepost.infrastructure.logging import configure_logging

from apps.api.v1.endpoints import checkout, orders, payments

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tradepost API",
    description="Multi-vendor checkout, settlement and fulfillment API",
    version=__version__,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers (checkout before orders: its static paths must win)
app.include_router(checkout.router, prefix="/api/v1")
app.include_router(payments.router, prefix="/api/v1")
app.include_router(orders.router, prefix="/api/v1")


@app.exception_handler(TradepostError)
async def tradepost_error_handler(request: Request, exc: TradepostError) -> JSONResponse:
    """Map domain errors to their HTTP status.

    Args:
        request: FastAPI request
        exc: Domain error

    Returns:
        JSONResponse with error details
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.error_code},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions.

    Args:
        request: FastAPI request
        exc: Exception

    Returns:
        JSONResponse with error details
    """
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error": "internal_error"},
    )


@app.on_event("startup")
async def startup_event() -> None:
    """Run on application startup."""
    logger.info("🚀 Tradepost API starting up...")
    await init_database()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Run on application shutdown."""
    await close_database()
    logger.info("👋 Tradepost API shutting down...")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
