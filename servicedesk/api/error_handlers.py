"""
Error Handlers
==============

Turns every failure into the JSON error envelope:

    {"success": false, "error": {"code", "message", "details"?},
     "correlation_id": ..., "timestamp": ...}
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from servicedesk.core.errors import AppError, InternalError, RateLimitError, ValidationError
from servicedesk.core.logging_config import get_correlation_id
from servicedesk.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_ERROR",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMIT_EXCEEDED",
}


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or get_correlation_id()


def error_response(
    request: Request,
    status_code: int,
    error: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    correlation_id = _correlation_id(request)
    response_headers = {"x-correlation-id": correlation_id, **(headers or {})}
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({
            "success": False,
            "error": error,
            "correlation_id": correlation_id,
            "timestamp": utc_now(),
        }),
        headers=response_headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(request, exc.status_code, exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details: List[Dict[str, Any]] = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type"),
        }
        for err in exc.errors()
    ]
    error = ValidationError("Request validation failed", errors=details)
    return error_response(request, status.HTTP_400_BAD_REQUEST, error.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error = {
        "code": _HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
        "message": exc.detail if isinstance(exc.detail, str) else "Request failed",
    }
    return error_response(request, exc.status_code, error, headers=getattr(exc, "headers", None))


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded for %s: %s", request.client.host if request.client else "unknown", exc.detail)
    return error_response(
        request,
        status.HTTP_429_TOO_MANY_REQUESTS,
        RateLimitError().to_dict(),
        headers={"Retry-After": "60"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError().to_dict())


def register_error_handlers(application: FastAPI) -> None:
    """Handlers resolve along the exception MRO, so registration order is irrelevant."""
    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)
