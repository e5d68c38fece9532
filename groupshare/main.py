"""Main FastAPI application."""
import os

import psutil
from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from groupshare.api.v1.router import api_router
from groupshare.api.deps import get_db
from groupshare.core.config import settings
from groupshare.core.errors import GroupShareError, StorageError, ValidationError
from groupshare.core.rate_limit import limiter
from groupshare.core.logging_config import setup_logging, get_logger
from groupshare.middleware import LoggingMiddleware
from groupshare.schemas import ErrorDetail, ErrorResponse

# Initialize structured logging
setup_logging(level=settings.LOG_LEVEL, json_logs=settings.ENVIRONMENT == "production")
logger = get_logger(__name__)

if settings.ENVIRONMENT == "production":
    settings.validate_production_config()

logger.info(
    "application_starting",
    app_title=settings.APP_TITLE,
    app_version=settings.APP_VERSION,
    environment=settings.ENVIRONMENT,
)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def error_response(status_code: int, kind: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=kind, message=message), details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(GroupShareError)
async def domain_error_handler(request: Request, exc: GroupShareError):
    """Render domain errors as the standard error envelope."""
    if isinstance(exc, StorageError):
        logger.error("storage_error", error=exc.message, cause=repr(exc.__cause__))
    else:
        logger.info("request_rejected", kind=exc.kind, message=exc.message)
    return error_response(exc.status_code, exc.kind, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Body/path validation failures use the same envelope, status 400."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    logger.info("request_rejected", kind=ValidationError.kind, errors=len(details))
    return error_response(400, ValidationError.kind, "Validation failed", details)


# Must be added before other middleware for proper request tracking
app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,  # Devices are anonymous; no cookies
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-API-Version"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
        - status: "healthy" or "unhealthy"
        - database: connection status and pool metrics
        - memory: process memory usage
        - environment: Current environment setting

    Returns 503 if database is unreachable.
    """
    from groupshare.db.session import engine

    pool = engine.pool
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "database": {
            "status": "connected",
            "pool": {
                "status": pool.status(),
            },
        },
    }

    try:
        process = psutil.Process(os.getpid())
        memory_info = process.memory_info()
        health_status["memory"] = {
            "rss_mb": round(memory_info.rss / 1024 / 1024, 2),
            "vms_mb": round(memory_info.vms / 1024 / 1024, 2),
            "percent": round(process.memory_percent(), 2),
        }
    except psutil.Error as e:
        logger.warning("health_check_memory_error", error=str(e))
        health_status["memory"] = {"error": "unable to read"}

    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        health_status["status"] = "unhealthy"
        health_status["database"]["status"] = f"error: {str(e)}"
        logger.error("health_check_failed", error=str(e))
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
