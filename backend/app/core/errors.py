"""Global exception handlers.

Every failure path ends in a short ``{"detail": ...}`` body and a log line;
stack traces stay in the logs.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ReferenceNotFoundError(ValueError):
    """A foreign key in a request body points at a row that does not exist."""


class TransitionConflictError(ValueError):
    """A lifecycle transition is not allowed from the license's current state."""


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # Drop the "body"/"path"/"query" prefix from the location
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    field = ".".join(location) or "request"
    if first.get("type") == "missing":
        return f"Missing required field: {field}"
    return f"Invalid value for {field}: {first.get('msg', 'invalid')}"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed ids, missing required fields and bad types are all 400s."""
    detail = _describe_validation_error(exc)
    logger.warning("Bad request: %s %s - %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Log and render HTTP exceptions raised by routers."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("HTTP %d: %s %s - %s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def reference_exception_handler(request: Request, exc: ReferenceNotFoundError) -> JSONResponse:
    """A dangling reference makes the request itself malformed."""
    logger.warning("Bad reference: %s %s - %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def transition_exception_handler(request: Request, exc: TransitionConflictError) -> JSONResponse:
    """Lifecycle state conflicts."""
    logger.warning("Transition refused: %s %s - %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Constraint violations that were not pre-checked become conflicts."""
    logger.warning(
        "Integrity violation: %s %s - %s", request.method, request.url.path, exc.orig
    )
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "Request conflicts with existing data"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else is an internal error; details go to the log only."""
    logger.exception("Unhandled error: %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers on the application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(ReferenceNotFoundError, reference_exception_handler)
    app.add_exception_handler(TransitionConflictError, transition_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
