"""FastAPI application for choropleth data binding."""

import logging
from typing import List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from choropleth import __version__
from choropleth.config import get_config
from choropleth.exceptions import (
    BindingError,
    FileTooLargeError,
    UnknownSchemeError,
    WrongFileTypeError,
)
from choropleth_api.exceptions import (
    BindingNotReadyError,
    InvalidSessionIdError,
    SessionNotFoundError,
)
from choropleth_api.routers import schemes, sessions

config = get_config()

# Configure logging
logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Choropleth Binding API",
    description="Binds tabular region data to map geometry: region matching, value classification and color scales",
    version=__version__,
)

# CORS origins can be set via CORS_ORIGINS env var as comma-separated list
cors_origins: List[str] = [origin.strip() for origin in config.cors_origins.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if cors_origins else ["*"],  # Default to * for development
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Content-Disposition"],
)


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


# Exception handlers
@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
    """Handle session not found errors."""
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(InvalidSessionIdError)
async def invalid_session_id_handler(request: Request, exc: InvalidSessionIdError):
    """Handle invalid session ID errors."""
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


@app.exception_handler(BindingNotReadyError)
async def binding_not_ready_handler(request: Request, exc: BindingNotReadyError):
    """Handle binding requests on incomplete sessions."""
    return _error_response(status.HTTP_409_CONFLICT, exc)


@app.exception_handler(UnknownSchemeError)
async def unknown_scheme_handler(request: Request, exc: UnknownSchemeError):
    """Handle unknown color scheme errors."""
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(FileTooLargeError)
async def file_too_large_handler(request: Request, exc: FileTooLargeError):
    """Handle oversized uploads."""
    logger.warning(f"Rejected upload: {exc}")
    return _error_response(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, exc)


@app.exception_handler(WrongFileTypeError)
async def wrong_file_type_handler(request: Request, exc: WrongFileTypeError):
    """Handle uploads with an unsupported file type."""
    logger.warning(f"Rejected upload: {exc}")
    return _error_response(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, exc)


@app.exception_handler(BindingError)
async def binding_error_handler(request: Request, exc: BindingError):
    """Handle invalid binding inputs."""
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    # ctx holds the raised ValueError; its message is already in msg
    errors = jsonable_encoder([{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()])
    logger.warning(f"Invalid request to {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors, "error_type": "ValidationError"},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)


# Include routers
app.include_router(sessions.router)
app.include_router(schemes.router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Choropleth Binding API",
        "version": __version__,
        "docs": "/docs",
    }


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}
