"""
MDF Powder Coating Configurator - Main Application

FastAPI application serving the configurator pipeline:
- Powder coating price calculation
- Quote preview and submission to Business Central
- Ardis XML export for manufacturing
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mdf_cpq.config.settings import settings
from mdf_cpq.schemas import ErrorResponse
from mdf_cpq.services.business_central import (
    ApiError,
    ApiErrorKind,
    ClientConfigurationError,
    create_client_from_settings,
)
from mdf_cpq.services.quote import QuoteAlreadySubmittedError, QuoteError
from mdf_cpq.utils.logging import get_logger, request_logger, setup_logging

# Import routers
from mdf_cpq.api.routes import catalog, pricing, quotes

logger = get_logger(__name__)

API_ERROR_STATUS = {
    ApiErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ApiErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info("Starting MDF Powder Coating Configurator", version=settings.app_version)

    try:
        app.state.business_central = create_client_from_settings()
        logger.info("Business Central client initialized")
    except ClientConfigurationError as e:
        app.state.business_central = None
        logger.warning("Business Central client not configured", reason=str(e))

    yield

    # Shutdown
    logger.info("Shutting down MDF Powder Coating Configurator")
    if app.state.business_central is not None:
        await app.state.business_central.aclose()


app = FastAPI(
    title=settings.app_name,
    description="""
## MDF Powder Coating Configurator API

Configure MDF boards, price the powder coating and turn the result into a quote.

### Endpoints

- **Catalog**: Business Central items
- **Pricing**: engine price per configuration, Business Central price lookup
- **Quotes**: preview, submission as a Business Central sales quote, Ardis XML export
    """,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing and a request id."""
    started = time.perf_counter()
    request_id = request_logger.start(
        request.method,
        request.url.path,
        request_id=request.headers.get("X-Request-ID"),
    )

    response = await call_next(request)

    request_logger.finish(request.method, request.url.path, response.status_code, started)
    response.headers["X-Request-ID"] = request_id
    return response


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed messages."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "errors": jsonable_errors(exc),
        },
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Translate Business Central failures into gateway responses."""
    status_code = API_ERROR_STATUS.get(exc.kind, status.HTTP_502_BAD_GATEWAY)

    logger.warning(
        "Business Central request failed",
        code=exc.kind.value,
        upstream_status=exc.status_code,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            detail=exc.message,
            code=exc.kind.value,
            status_code=exc.status_code,
        ).model_dump(exclude_none=True),
    )


@app.exception_handler(QuoteError)
async def quote_error_handler(request: Request, exc: QuoteError):
    """Handle quote assembly and export failures."""
    if isinstance(exc, QuoteAlreadySubmittedError):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), code=type(exc).__name__).model_dump(exclude_none=True),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(
        "Unhandled exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "An unexpected error occurred",
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # Validator errors carry the raised exception in ``ctx``
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


# Include routers
app.include_router(catalog.router, prefix=f"{settings.api_prefix}/catalog", tags=["Catalog"])
app.include_router(pricing.router, prefix=f"{settings.api_prefix}/pricing", tags=["Pricing"])
app.include_router(quotes.router, prefix=f"{settings.api_prefix}/quotes", tags=["Quotes"])


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    """System health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "business_central": getattr(app.state, "business_central", None) is not None,
    }


@app.get("/", tags=["System"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/api/docs" if settings.debug else "Disabled in production",
    }


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "mdf_cpq.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.workers if not settings.debug else 1,
    )


if __name__ == "__main__":
    run()
