"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.config import settings
from app.core.exceptions import ClubError, Conflict, InvalidState, NotAvailable, ValidationError
from app.core.logging import setup_logging
from app.api.v1.router import api_router

# Most specific first; anything else is a 400.
_STATUS_BY_ERROR = [
    (NotAvailable, status.HTTP_404_NOT_FOUND),
    (InvalidState, status.HTTP_409_CONFLICT),
    (Conflict, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def status_for(exc: ClubError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


async def club_error_handler(request: Request, exc: ClubError) -> JSONResponse:
    code = status_for(exc)
    if isinstance(exc, NotAvailable):
        # Denied and missing look the same from outside.
        body = {"detail": exc.default_message, "code": NotAvailable.code}
    else:
        body = {"detail": exc.message, "code": exc.code}
    logger.info("{} {} -> {} {}", request.method, request.url.path, code, exc.code)
    return JSONResponse(status_code=code, content=body)


def create_app() -> FastAPI:
    setup_logging()
    application = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Membership lifecycle and attendance reconciliation for sports clubs.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json")

    application.add_exception_handler(ClubError, club_error_handler)

    # Include API router
    application.include_router(api_router, prefix="/api/v1")

    @application.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "service": "clubhub-api",
            "version": settings.VERSION
        }

    @application.get("/info")
    async def info():
        return {
            "project name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "authors": settings.AUTHORS,
            "project url": settings.PROJECT_URL
        }

    return application


app = create_app()
