"""
Pool API Service - Main Application
===================================

FastAPI application exposing the shielded pool.

Version: 0.1.0
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.pool_api.routes import development, operations, state
from shieldpool.bootstrap import build_development_pool
from shieldpool.config import settings
from shieldpool.core.errors import (
    AccessDenied,
    AlreadyPresent,
    AlreadyProcessed,
    CustodyError,
    InvalidFieldElement,
    NotFound,
    ShieldedPoolError,
    StructureFull,
)
from shieldpool.logging import get_logger, setup_logging
from shieldpool.models.common import ErrorResponse, HealthResponse


# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="pool_api",
)

logger = get_logger(__name__)

# Pool errors not listed here are client errors (400)
ERROR_STATUS: dict[type[ShieldedPoolError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    AlreadyPresent: status.HTTP_409_CONFLICT,
    AlreadyProcessed: status.HTTP_409_CONFLICT,
    InvalidFieldElement: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AccessDenied: status.HTTP_403_FORBIDDEN,
    StructureFull: status.HTTP_507_INSUFFICIENT_STORAGE,
    CustodyError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: ShieldedPoolError) -> int:
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "pool_api_starting",
        environment=settings.environment.value,
        port=settings.api_port,
    )

    # Startup
    try:
        app.state.pool = build_development_pool(settings)
        logger.info(
            "pool_ready",
            address=settings.pool.address,
            verifier_mode=settings.verifier.mode.value,
        )
    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("pool_api_shutting_down")
    app.state.pool = None


# Create FastAPI application
app = FastAPI(
    title="Shielded Pool API",
    description="Fixed-denomination shielded pool with confidential balances",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request) -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and its collaborators.
    """
    components: dict[str, dict[str, Any]] = {}

    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        components["engine"] = {"status": "unhealthy", "error": "not initialized"}
    else:
        components["engine"] = {"status": "healthy", **pool.engine.get_stats()}
        components["custody"] = pool.custody.health_check()

    return HealthResponse.from_components("pool_api", "0.1.0", components)


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Shielded Pool API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    operations.router,
    prefix="/api/v1/pool",
    tags=["Pool Operations"],
)

app.include_router(
    state.router,
    prefix="/api/v1/pool",
    tags=["Pool State"],
)

if not settings.is_production:
    app.include_router(
        development.router,
        prefix="/api/v1/dev",
        tags=["Development"],
    )


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(ShieldedPoolError)
async def pool_error_handler(request: Request, exc: ShieldedPoolError) -> JSONResponse:
    """Map pool errors onto HTTP statuses."""
    status_code = status_for(exc)
    logger.warning(
        "pool_error",
        status_code=status_code,
        error_code=exc.code,
        error=str(exc),
        path=request.url.path,
    )
    body = ErrorResponse.from_error(exc, status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "status_code": 500,
        },
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.pool_api.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
