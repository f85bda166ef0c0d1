"""Slack side-channel notifications for received webhooks."""

from __future__ import annotations

import json
import logging
import math
from typing import Protocol

import aiohttp
from slack_sdk.errors import SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from src.config import DEFAULT_CHANNEL
from src.webhook.errors import describe
from src.webhook.models import InboundWebhook, NotificationMessage

logger = logging.getLogger(__name__)

_TEMPLATE = (
    "New webhook received:\n"
    " `{method} {path}`\n"
    "Headers:\n"
    "```{headers}```\n"
    "Body:\n"
    "```{body}```"
)


class NotifyError(Exception):
    """Raised when a notification could not be delivered."""


class MissingCredentialError(NotifyError):
    def __init__(self) -> None:
        super().__init__("slack token not found")


class DispatchError(NotifyError):
    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"failed to send slack message: {describe(cause)}")


class Notifier(Protocol):
    async def notify(self, message: NotificationMessage) -> None: ...


def format_notification(
    webhook: InboundWebhook, channel: str = DEFAULT_CHANNEL,
) -> NotificationMessage:
    """Render the human-readable summary of an inbound webhook."""
    text = _TEMPLATE.format(
        method=webhook.method,
        path=webhook.path,
        headers=json.dumps(
            webhook.header_map(canonical_header_name), indent=2, sort_keys=True,
        ),
        body=webhook.body_text(),
    )
    return NotificationMessage(text=text, channel=channel)


def canonical_header_name(name: str) -> str:
    """``x-github-event`` -> ``X-Github-Event``."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


class SlackNotifier:
    """Posts notification text to a Slack channel. One attempt per call."""

    def __init__(self, token: str, timeout: float = 10.0) -> None:
        self._token = token
        self._timeout = timeout

    async def notify(self, message: NotificationMessage) -> None:
        if not self._token:
            raise MissingCredentialError()

        logger.debug("Sending slack message to channel %s", message.channel)
        client = AsyncWebClient(token=self._token, timeout=math.ceil(self._timeout))
        try:
            await client.chat_postMessage(channel=message.channel, text=message.text)
        except (SlackClientError, aiohttp.ClientError, TimeoutError) as exc:
            raise DispatchError(exc) from exc
        logger.debug("Slack message sent to channel %s", message.channel)
