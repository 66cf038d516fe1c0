"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from papertrade.config.settings import get_settings
from papertrade.config.logging_config import setup_logging
from papertrade.repositories.sqlalchemy.database import init_db
from papertrade.api.deps import shutdown_quote_executor
from papertrade.api.routers import (
    accounts_router,
    trades_router,
    portfolio_router,
    quotes_router,
)
from papertrade.core.exceptions import AppError

# Status code per AppError.code; anything unlisted is a client error
_STATUS_BY_CODE = {
    "VALIDATION_ERROR": 400,
    "INSUFFICIENT_FUNDS": 400,
    "INSUFFICIENT_SHARES": 400,
    "UNAUTHORIZED": 401,
    "NOT_FOUND": 404,
    "PERSISTENCE_ERROR": 500,
    "QUOTE_UNAVAILABLE": 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    init_db()
    yield
    shutdown_quote_executor()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Paper trading with FIFO lot accounting",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(accounts_router)
app.include_router(trades_router)
app.include_router(portfolio_router)
app.include_router(quotes_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=_STATUS_BY_CODE.get(exc.code, 400),
        content={"error": exc.code, "message": exc.message},
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
        "version": settings.app_version,
        "docs": "/docs",
    }
