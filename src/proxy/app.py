"""FastAPI webhook relay application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from src.config import RelayConfig
from src.proxy.auth_middleware import AuthMiddleware
from src.webhook.forwarder import Forwarder, HttpxForwarder
from src.webhook.notifier import Notifier, SlackNotifier
from src.webhook.relay import WebhookRelayHandler

logger = logging.getLogger(__name__)


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    return create_app(RelayConfig.from_env())


def create_app(
    config: RelayConfig,
    notifier: Notifier | None = None,
    forwarder: Forwarder | None = None,
) -> FastAPI:
    """Create the relay FastAPI app, with key auth when an API key is configured."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    if notifier is None:
        notifier = SlackNotifier(config.slack_token, timeout=config.notify_timeout)
    if forwarder is None:
        forwarder = HttpxForwarder(timeout=config.forward_timeout)
    handler = WebhookRelayHandler(config, notifier, forwarder)

    if not config.origin_url:
        logger.warning("NGROK_DOMAIN is not set; webhooks cannot be forwarded")
    if not config.slack_token:
        logger.warning("SLACK_TOKEN is not set; notifications are disabled")

    @app.get("/")
    async def hello() -> PlainTextResponse:
        logger.debug("Received request to /")
        return PlainTextResponse("Hello, World!")

    @app.post("/webhooks/{slug}")
    async def process_webhook(request: Request, slug: str) -> JSONResponse:
        return await handler.handle(request, slug)

    if config.auth_enabled:
        app.add_middleware(AuthMiddleware, api_key=config.api_key)

    return app
