"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stocksim import __version__
from stocksim.config.settings import get_settings
from stocksim.config.logging_config import setup_logging
from stocksim.repositories.sqlalchemy.database import init_db
from stocksim.api.routers import (
    users_router,
    trades_router,
    portfolio_router,
    quotes_router,
)
from stocksim.core.exceptions import AppError, ErrorKind

# HTTP status per error kind; anything unlisted is a 400
ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.INSUFFICIENT_FUNDS: 400,
    ErrorKind.INSUFFICIENT_SHARES: 400,
    ErrorKind.NO_SUCH_HOLDING: 400,
    ErrorKind.AUTHENTICATION_FAILED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.SYMBOL_NOT_FOUND: 404,
    ErrorKind.PERSISTENCE_FAILURE: 500,
    ErrorKind.UPSTREAM_UNAVAILABLE: 502,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    init_db()
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Simulated stock trading against live market prices",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(users_router)
app.include_router(trades_router)
app.include_router(portfolio_router)
app.include_router(quotes_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.code, 400),
        content={"error": exc.code.value, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": __version__,
        "docs": "/docs",
    }
