"""
HTTP Middleware
===============

Correlation ids for every request and the double-submit CSRF check for
mutating requests.
"""
import logging
import uuid
from typing import Callable, Iterable, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servicedesk.api.error_handlers import error_response
from servicedesk.core.config import get_settings
from servicedesk.core.errors import AuthorizationError
from servicedesk.core.logging_config import correlation_id_var
from servicedesk.core.security import csrf_tokens_match

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "x-correlation-id"

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})

# Requests to these paths never carry a CSRF cookie yet
CSRF_EXEMPT_PATHS: Tuple[str, ...] = (
    "/api/v1/auth/login",
    "/api/v1/auth/register",
    "/api/v1/auth/refresh",
    "/api/v1/auth/csrf-token",
)
CSRF_EXEMPT_PREFIXES: Tuple[str, ...] = ("/health",)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Tags the request with a correlation id.

    The incoming `x-correlation-id` header is reused when present, else a
    UUID4 is generated. The id is stored on `request.state`, in the logging
    context variable, and echoed on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class CSRFMiddleware(BaseHTTPMiddleware):
    """
    Double-submit cookie check.

    For POST/PUT/PATCH/DELETE the CSRF header must equal the CSRF cookie.
    Requests authenticated with a bearer token are exempt: a browser never
    attaches one on its own.
    """

    def __init__(
        self,
        app: ASGIApp,
        exempt_paths: Iterable[str] = CSRF_EXEMPT_PATHS,
        exempt_prefixes: Iterable[str] = CSRF_EXEMPT_PREFIXES,
    ) -> None:
        super().__init__(app)
        settings = get_settings()
        self.cookie_name = settings.csrf_cookie_name
        self.header_name = settings.csrf_header_name
        self.exempt_paths = frozenset(exempt_paths)
        self.exempt_prefixes = tuple(exempt_prefixes)

    def _is_exempt(self, request: Request) -> bool:
        if request.method in SAFE_METHODS:
            return True
        path = request.url.path.rstrip("/") or "/"
        if path in self.exempt_paths or path.startswith(self.exempt_prefixes):
            return True
        authorization = request.headers.get("authorization", "")
        return authorization.lower().startswith("bearer ")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self._is_exempt(request):
            return await call_next(request)

        cookie_token = request.cookies.get(self.cookie_name)
        header_token = request.headers.get(self.header_name)
        if not csrf_tokens_match(cookie_token, header_token):
            logger.warning("CSRF validation failed for %s %s", request.method, request.url.path)
            error = AuthorizationError("CSRF token missing or invalid", code="CSRF_TOKEN_INVALID")
            return error_response(request, error.status_code, error.to_dict())
        return await call_next(request)
