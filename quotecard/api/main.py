"""
FastAPI Application
==================

Main FastAPI application serving the quote card endpoints.
"""

from contextlib import asynccontextmanager
import uuid
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from quotecard.config.settings import get_settings
from quotecard.config.logging import get_logger
from quotecard.api.routes.generate import router as generate_router
from quotecard.api.routes.health import router as health_router
from quotecard.core.rendering.png_generator import RenderError
from quotecard.core.rendering.sanitizer import InvalidImageReferenceError, QuoteValidationError
from quotecard.core.service import MissingFieldsError
from quotecard.models.schemas import (
    InvalidFieldResponse,
    MissingFieldsResponse,
    NotFoundResponse,
    RenderFailureResponse,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    base_url = f"http://localhost:{settings.port}"
    logger.info(
        "API running",
        url=base_url,
        health_check=f"{base_url}/",
        generate_endpoint=f"{base_url}/api/generate-tweet",
    )
    try:
        yield
    finally:
        logger.info("Shutting down FastAPI application")


# Create FastAPI app
settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    description="Render social-media quote cards to PNG images",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_hosts,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(generate_router)


# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):  # type: ignore
    """Add request ID to all requests."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown paths and unsupported methods both answer 404."""
    if exc.status_code in (404, 405):
        payload = NotFoundResponse(path=request.url.path, method=request.method)
        return JSONResponse(status_code=404, content=payload.model_dump())

    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(QuoteValidationError)
async def validation_exception_handler(
    request: Request, exc: QuoteValidationError
) -> JSONResponse:
    """Reject invalid quote requests before any rendering work."""
    if isinstance(exc, InvalidImageReferenceError):
        content = InvalidFieldResponse(error="Invalid image reference", field=exc.field)
    elif isinstance(exc, MissingFieldsError):
        content = MissingFieldsResponse(required=exc.required)
    else:
        content = MissingFieldsResponse()

    logger.info(
        "Rejected quote request",
        reason=str(exc),
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=400, content=content.model_dump())


@app.exception_handler(RenderError)
async def render_exception_handler(request: Request, exc: RenderError) -> JSONResponse:
    """Map any render failure to a uniform 500 response."""
    logger.error(
        "Render error",
        phase=exc.phase.value,
        error=str(exc),
        request_id=getattr(request.state, "request_id", None),
    )
    payload = RenderFailureResponse(error="Failed to generate quote image", message=str(exc))
    return JSONResponse(status_code=500, content=payload.model_dump())


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """General exception handler for unexpected errors."""
    logger.error(
        "Unhandled exception",
        exception=str(exc),
        request_id=getattr(request.state, "request_id", None),
        exc_info=True,
    )
    payload = RenderFailureResponse(
        error="Internal server error",
        message=str(exc) if settings.debug else "An unexpected error occurred",
    )
    return JSONResponse(status_code=500, content=payload.model_dump())


# Development server runner
def run_development_server() -> None:
    """Run the API server."""
    uvicorn.run(
        "quotecard.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


def create_app() -> FastAPI:
    """
    Application factory function for creating FastAPI app instance.

    Returns:
        FastAPI application instance
    """
    return app


if __name__ == "__main__":
    run_development_server()
