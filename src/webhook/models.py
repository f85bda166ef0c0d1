"""Data models for the webhook relay path."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class InboundWebhook:
    """A captured inbound webhook. The body is read once and reused verbatim."""

    method: str
    path: str
    slug: str
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    def header_map(
        self, normalize: Callable[[str], str] | None = None,
    ) -> dict[str, list[str]]:
        """Group header values by name, keeping arrival order.

        ``normalize`` rewrites names for display only; ``headers`` is untouched.
        """
        grouped: dict[str, list[str]] = {}
        for name, value in self.headers:
            key = normalize(name) if normalize else name
            grouped.setdefault(key, []).append(value)
        return grouped

    def body_text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class NotificationMessage:
    text: str
    channel: str


@dataclass(frozen=True)
class ForwardRequest:
    """Request sent on to the configured origin."""

    url: str
    headers: list[tuple[str, str]]
    body: bytes
    method: str = "POST"
