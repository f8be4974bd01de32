"""
Hardening for the game API: response headers, request ids, session code
validation, sanitized 500s and the admin key check.
"""

import logging
import re
import secrets
import uuid

from fastapi import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from commons import SESSION_CODE_ALPHABET, SESSION_CODE_LENGTH
from configs.config import get_config

logger = logging.getLogger(__name__)

cfg = get_config()

SESSION_ID_PATTERN = re.compile(
    rf"^[{SESSION_CODE_ALPHABET}]{{{SESSION_CODE_LENGTH}}}$"
)

# Role cards travel in these responses, so nothing may be cached or framed.
RESPONSE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Cache-Control": "no-store",
}


# --------------- Middlewares ---------------


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add RESPONSE_HEADERS (and HSTS over https) to every response."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers.update(RESPONSE_HEADERS)
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = (
                "max-age=63072000; includeSubDomains"
            )
        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Echo the caller's X-Request-ID, or mint one."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


# --------------- Validators ---------------


def validate_session_id(session_id: str) -> str:
    """
    Normalize a session code typed on the shared device (trimmed,
    upper-cased) and return it, or raise 400.
    """
    code = (session_id or "").strip().upper()
    if not SESSION_ID_PATTERN.match(code):
        logger.warning("Rejected invalid session code: %r", session_id)
        raise HTTPException(status_code=400, detail="Invalid session ID format")
    return code


# --------------- Error Helpers ---------------


def safe_error_response(
    exc: Exception, context: str = "operation", status_code: int = 500
):
    """
    Log the exception with its traceback and raise an HTTPException whose
    detail only exposes the error outside production-like environments.
    """
    logger.error("Unhandled error in %s: %s", context, exc, exc_info=True)
    if cfg.ENVIRONMENT == "development":
        detail = f"[DEV] {context}: {exc}"
    else:
        detail = f"Something went wrong during {context}. Please try again."
    raise HTTPException(status_code=status_code, detail=detail)


# --------------- Admin Auth ---------------


def require_admin_key(request: Request):
    """Route dependency: 403 unless X-Admin-Key matches ADMIN_API_KEY."""
    provided = request.headers.get("X-Admin-Key", "")
    if provided and secrets.compare_digest(
        provided.encode(), cfg.ADMIN_API_KEY.encode()
    ):
        return
    logger.warning(
        "Rejected admin request from %s",
        request.client.host if request.client else "unknown",
    )
    raise HTTPException(status_code=403, detail="Forbidden: invalid admin key")
