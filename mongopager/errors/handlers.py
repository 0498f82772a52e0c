"""Exception handlers for the mongopager API."""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .problem_details import ProblemDetailException, create_problem_response

logger = logging.getLogger(__name__)


STATUS_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def _request_context(request: Request, **fields: Any) -> Dict[str, Any]:
    return {"path": str(request.url.path), "method": request.method, **fields}


async def problem_detail_exception_handler(request: Request, exc: ProblemDetailException) -> JSONResponse:
    """Render pagination and service errors; 5xx are logged as errors."""
    log = logger.error if exc.status >= 500 else logger.info
    log(
        f"Problem detail exception: {exc.status} - {exc.title}",
        extra=_request_context(request, status_code=exc.status, detail=exc.detail)
    )
    return exc.to_response(request)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle routing errors such as unknown paths and methods."""
    logger.info(
        f"HTTP exception: {exc.status_code} - {exc.detail}",
        extra=_request_context(request, status_code=exc.status_code)
    )
    response = create_problem_response(
        status=exc.status_code,
        title=STATUS_TITLES.get(exc.status_code, "HTTP Error"),
        detail=str(exc.detail) if exc.detail else None,
        request=request
    )
    for key, value in (getattr(exc, "headers", None) or {}).items():
        response.headers[key] = value
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle query parameter validation errors (limit, skip, direction)."""
    errors = exc.errors()
    logger.info(f"Validation error: {len(errors)} errors", extra=_request_context(request))

    messages = [
        f"{' -> '.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in errors
    ]
    return create_problem_response(
        status=422,
        title="Validation Error",
        detail="Validation failed: " + "; ".join(messages),
        request=request
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions, including pagination contract violations."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__} - {exc}",
        extra=_request_context(request, exception_type=type(exc).__name__),
        exc_info=exc
    )
    # Internal details stay in the log
    return create_problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred",
        request=request
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(ProblemDetailException, problem_detail_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
