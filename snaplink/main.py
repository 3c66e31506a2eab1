"""Main application module.

This module initializes the FastAPI application, includes routes,
and configures middleware, exception handlers and the store lifecycle.
"""

import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from snaplink.api import api_router
from snaplink.core.config import settings
from snaplink.core.logging import setup_logging
from snaplink.core.telemetry import instrument_engine, setup_telemetry
from snaplink.middleware.logging import add_logging_middleware
from snaplink.middleware.security import SecurityHeadersMiddleware, build_security_headers
from snaplink.middleware.tracing import TracingMiddleware
from snaplink.repositories import create_url_repository

# Setup logging
logger = setup_logging()

# Setup OpenTelemetry before any instruments are used
setup_telemetry()

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# Middleware added last runs first; security headers wrap everything else
if settings.OTEL_ENABLED:
    app.add_middleware(TracingMiddleware)

if settings.REQUEST_LOGGING_ENABLED:
    add_logging_middleware(app)

app.add_middleware(SecurityHeadersMiddleware)

# Include API router
app.include_router(api_router)

app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")


# Add exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or mistyped request bodies are a client error."""
    logger.info(f"Request validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": "invalid request body"}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to catch and log all unhandled exceptions."""
    error_id = f"error-{time.time()}"
    error_location = f"{request.method} {request.url.path}"

    logger.opt(exception=exc).error(
        "Unhandled exception in {location} ({error_id}) from {client_host}",
        location=error_location,
        error_id=error_id,
        client_host=request.client.host if request.client else None,
    )

    # Never leak internals to the client. This handler runs outside the user
    # middleware stack, so the security headers are added here.
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
        },
        headers=build_security_headers(),
    )


# Add startup and shutdown event handlers
@app.on_event("startup")
async def startup_event():
    """Open the URL store before serving requests."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    repository = getattr(app.state, "url_repository", None)
    if repository is None:
        # Raises StoreConfigurationError when no store is configured
        repository = create_url_repository(settings)

    await repository.connect()
    instrument_engine(getattr(repository, "engine", None))

    app.state.url_repository = repository
    logger.info(f"URL store ready (backend: {repository.backend_name})")


@app.on_event("shutdown")
async def shutdown_event():
    """Release the URL store."""
    logger.info(f"Shutting down {settings.APP_NAME}")

    repository = getattr(app.state, "url_repository", None)
    if repository is not None:
        await repository.close()
        app.state.url_repository = None
        logger.info("URL store closed")
