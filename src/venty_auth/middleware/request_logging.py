"""Request logging middleware for the auth service."""

import logging
import secrets
import time
from urllib.parse import parse_qsl, urlencode

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"

# Query parameters that carry credentials or OAuth codes
REDACTED_PARAMS = frozenset({"code", "id_token", "access_token", "state"})


def redacted_query(query: str) -> str:
    """Return ``query`` with credential-bearing values replaced by ``***``."""
    if not query:
        return ""
    pairs = [
        (key, "***" if key in REDACTED_PARAMS else value)
        for key, value in parse_qsl(query, keep_blank_values=True)
    ]
    return "?" + urlencode(pairs, safe="*")


def status_symbol(status_code: int) -> str:
    if status_code < 300:
        return "✓"
    if status_code < 400:
        return "→"
    if status_code < 500:
        return "⚠"
    return "✗"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each sign-in request with its outcome and timing.

    Enabled when DEBUG_REQUESTS=true. Every request gets a correlation id
    (the inbound ``X-Request-ID`` or a generated one), echoed back on the
    response. Bodies and cookies are never logged.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(8)
        target = f"{request.method} {request.url.path}{redacted_query(request.url.query)}"
        started = time.perf_counter()

        logger.info(f"[{request_id}] → {target}")

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"[{request_id}] ✗ {target} - ERROR ({elapsed_ms:.2f}ms)", exc_info=e)
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"[{request_id}] {status_symbol(response.status_code)} {target} - "
            f"{response.status_code} ({elapsed_ms:.2f}ms)"
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
