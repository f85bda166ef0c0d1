"""ASGI middleware for pre-shared API key authentication."""

from __future__ import annotations

import hmac
import logging

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from src.models import ApiResponse

logger = logging.getLogger(__name__)

# Paths that bypass authentication (exact match)
PUBLIC_PATHS = {"/"}

API_KEY_HEADER = "x-api-key"


class AuthRejected(Exception):
    """Raised when a request does not present the configured key."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class AuthMiddleware:
    """Rejects requests whose key differs from the configured secret.

    The key is read from ``Authorization: Bearer <key>`` or ``X-API-Key``
    and compared in constant time.
    """

    def __init__(self, app: ASGIApp, api_key: str) -> None:
        self.app = app
        self._api_key = api_key.encode()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        if request.url.path in PUBLIC_PATHS:
            await self.app(scope, receive, send)
            return

        try:
            self._check(request)
        except AuthRejected as exc:
            logger.warning(
                "Rejected %s %s from %s: %s",
                request.method,
                request.url.path,
                request.client.host if request.client else "unknown",
                exc.reason,
            )
            body = ApiResponse.failure("unauthorized", exc.reason).to_json()
            await JSONResponse(body, status_code=401)(scope, receive, send)
            return

        await self.app(scope, receive, send)

    def _check(self, request: Request) -> None:
        provided = _presented_key(request)
        if not provided:
            raise AuthRejected("missing api key")
        if not hmac.compare_digest(provided.encode(), self._api_key):
            raise AuthRejected("invalid api key")


def _presented_key(request: Request) -> str:
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:]
    return request.headers.get(API_KEY_HEADER, "")
