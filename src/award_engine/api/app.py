"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from award_engine import __version__
from award_engine.api.routes import (
    award_router,
    award_rules_router,
    bonuses_router,
    health_router,
    statutory_rates_router,
)
from award_engine.calculators.errors import (
    AmbiguousRuleConfigurationError,
    AwardEngineError,
    InvalidTransitionError,
    NotFoundError,
)
from award_engine.config import configure_logging
from award_engine.database import create_tables, dispose_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    configure_logging()
    await create_tables()
    yield
    # Shutdown
    await dispose_db()


def error_status(exc: AwardEngineError) -> int:
    """HTTP status for an engine error."""
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (AmbiguousRuleConfigurationError, InvalidTransitionError)):
        return status.HTTP_409_CONFLICT
    return status.HTTP_422_UNPROCESSABLE_ENTITY


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Award Engine API",
        description="Award interpretation, statutory rates and bonus withholding",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(AwardEngineError)
    async def engine_error_handler(request: Request, exc: AwardEngineError) -> JSONResponse:
        """Map engine errors to their HTTP status."""
        return JSONResponse(
            status_code=error_status(exc),
            content={"detail": exc.message, "code": exc.code, "context": exc.context},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(award_router, prefix="/api/payroll")
    app.include_router(award_rules_router, prefix="/api/payroll")
    app.include_router(statutory_rates_router, prefix="/api/payroll")
    app.include_router(bonuses_router, prefix="/api/payroll")

    return app


# Default app instance for uvicorn
app = create_app()
