"""Webhook relay handler.

Each inbound request goes through four sequential stages:

1. Body capture (read once, reused verbatim)
2. Slack notification (best effort, failures are logged only)
3. Forward request construction
4. Forward to the configured origin

The first fatal failure is turned into a JSON ``ApiResponse`` with status
500; reaching the end yields a 200 success envelope.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect

from src.models import ApiResponse
from src.webhook.errors import BodyReadError, RelayError, describe
from src.webhook.forwarder import build_forward_request
from src.webhook.models import InboundWebhook
from src.webhook.notifier import MissingCredentialError, NotifyError, format_notification

if TYPE_CHECKING:
    from src.config import RelayConfig
    from src.webhook.forwarder import Forwarder
    from src.webhook.notifier import Notifier

logger = logging.getLogger(__name__)


class WebhookRelayHandler:
    """Notifies the side-channel about a webhook and forwards it to the origin."""

    def __init__(
        self,
        config: RelayConfig,
        notifier: Notifier,
        forwarder: Forwarder,
    ) -> None:
        self._config = config
        self._notifier = notifier
        self._forwarder = forwarder

    async def handle(self, request: Request, slug: str) -> JSONResponse:
        logger.info("Processing webhook for slug %s", slug)
        try:
            webhook = await self.capture(request, slug)
            result = await self.relay(webhook)
        except RelayError as exc:
            logger.error("%s (slug=%s): %s", exc.message, slug, exc.error)
            result = ApiResponse.failure(exc.message, exc.error)
            return JSONResponse(result.to_json(), status_code=exc.status_code)
        return JSONResponse(result.to_json(), status_code=200)

    async def capture(self, request: Request, slug: str) -> InboundWebhook:
        """Read the whole body and snapshot the request headers."""
        try:
            body = await request.body()
        except (ClientDisconnect, OSError) as exc:
            raise BodyReadError(describe(exc)) from exc

        headers = [
            (name.decode("latin-1"), value.decode("latin-1"))
            for name, value in request.headers.raw
        ]
        return InboundWebhook(
            method=request.method,
            path=request.url.path,
            slug=slug,
            headers=headers,
            body=body,
        )

    async def relay(self, webhook: InboundWebhook) -> ApiResponse:
        await self._notify(webhook)

        forward = build_forward_request(self._config.origin_url, webhook)
        logger.debug("Forwarding %d bytes to %s", len(forward.body), forward.url)
        # The origin's status code does not decide relay success
        await self._forwarder.send(forward)

        logger.info("Webhook for slug %s processed successfully", webhook.slug)
        return ApiResponse.ok()

    async def _notify(self, webhook: InboundWebhook) -> None:
        message = format_notification(webhook, self._config.notify_channel)
        try:
            await self._notifier.notify(message)
        except MissingCredentialError:
            logger.warning("Slack token not configured, skipping notification")
        except NotifyError as exc:
            logger.warning("Notification for slug %s failed: %s", webhook.slug, exc)
