"""Forwarding of captured webhooks to the configured origin."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from src.webhook.errors import ForwardError, RequestBuildError, describe
from src.webhook.models import ForwardRequest, InboundWebhook

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class Forwarder(Protocol):
    async def send(self, request: ForwardRequest) -> httpx.Response: ...


def build_forward_request(origin: str, webhook: InboundWebhook) -> ForwardRequest:
    """Target ``{origin}/webhooks/{slug}`` with the inbound headers and body untouched."""
    if not origin:
        raise RequestBuildError("forwarding origin is not configured")
    try:
        parsed = httpx.URL(origin)
    except httpx.InvalidURL as exc:
        raise RequestBuildError(describe(exc)) from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise RequestBuildError(f"invalid forwarding origin: {origin!r}")

    return ForwardRequest(
        url=f"{origin.rstrip('/')}/webhooks/{webhook.slug}",
        headers=list(webhook.headers),
        body=webhook.body,
    )


class HttpxForwarder:
    """Sends forward requests with httpx under a bounded timeout."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def send(self, request: ForwardRequest) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport,
            ) as client:
                resp = await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    content=request.body,
                )
        except httpx.HTTPError as exc:
            raise ForwardError(describe(exc)) from exc

        logger.info("Forwarded to %s, origin answered %d", request.url, resp.status_code)
        return resp
