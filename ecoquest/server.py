"""FastAPI server for the EcoQuest marker API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ecoquest.api import AVAILABLE_ROUTES, get_marker_repo, router as api_router
from ecoquest.config import API_VERSION, get_settings
from ecoquest.errors import MarkerServiceError
from ecoquest.models.dto import ErrorResponse
from ecoquest.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _error_body(**fields) -> dict:
    return ErrorResponse(**fields).model_dump(exclude_none=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for app startup/shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    repo = get_marker_repo()
    repo.ensure_initialized()
    logger.info(
        "EcoQuest API %s serving markers from %s", settings.version, repo.data_file.resolve()
    )

    yield

    logger.info("EcoQuest API shutting down")


app = FastAPI(
    title="EcoQuest Marker API",
    description="Log environmental actions (tree planting, cleanups, school outreach) "
                "as geo-tagged markers and browse aggregate statistics.",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(MarkerServiceError)
async def marker_error_handler(request: Request, exc: MarkerServiceError):
    """Translate validation, not-found and storage failures."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies and query parameters like field violations."""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        details.append(f"{location}: {message}" if location else message)
    return JSONResponse(
        status_code=400,
        content=_error_body(error="Validation failed", details=details),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Unmatched routes list what is available; other HTTP errors keep their status."""
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content=_error_body(error="Route not found", availableRoutes=AVAILABLE_ROUTES),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(error=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Last-resort 500; detail is only exposed in development."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().is_development else "Something went wrong"
    return JSONResponse(
        status_code=500,
        content=_error_body(error="Internal server error", message=message),
    )


app.include_router(api_router)
