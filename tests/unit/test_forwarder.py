"""Tests for forward request construction and the httpx forwarder."""

from __future__ import annotations

import httpx
import pytest

from src.webhook.errors import ForwardError, RequestBuildError
from src.webhook.forwarder import HttpxForwarder, build_forward_request
from src.webhook.models import ForwardRequest
from tests.conftest import make_webhook


class TestBuildForwardRequest:
    def test_target_url_uses_slug(self) -> None:
        req = build_forward_request("https://relay.ngrok.app", make_webhook(slug="abc123"))
        assert req.url == "https://relay.ngrok.app/webhooks/abc123"
        assert req.method == "POST"

    def test_trailing_slash_on_origin(self) -> None:
        req = build_forward_request("https://relay.ngrok.app/", make_webhook(slug="s"))
        assert req.url == "https://relay.ngrok.app/webhooks/s"

    def test_headers_and_body_copied_verbatim(self) -> None:
        headers = [
            ("host", "inbound.example"),
            ("content-length", "9"),
            ("x-dup", "a"),
            ("x-dup", "b"),
        ]
        webhook = make_webhook(headers=headers, body=b'{"k":"v"}')
        req = build_forward_request("http://origin", webhook)
        assert req.headers == headers
        assert req.body == b'{"k":"v"}'

    @pytest.mark.parametrize("origin", ["", "not a url", "ftp://files.example", "http://"])
    def test_invalid_origin_rejected(self, origin: str) -> None:
        with pytest.raises(RequestBuildError):
            build_forward_request(origin, make_webhook())

    def test_missing_origin_message(self) -> None:
        with pytest.raises(RequestBuildError) as exc_info:
            build_forward_request("", make_webhook())
        assert exc_info.value.message == "failed to create forward request"
        assert exc_info.value.error


class TestHttpxForwarder:
    @pytest.mark.asyncio
    async def test_sends_post_with_headers_and_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        forwarder = HttpxForwarder(transport=httpx.MockTransport(handler))
        await forwarder.send(ForwardRequest(
            url="http://origin.test/webhooks/abc123",
            headers=[("x-test", "1"), ("x-dup", "a"), ("x-dup", "b")],
            body=b'{"k":"v"}',
        ))

        assert len(seen) == 1
        req = seen[0]
        assert req.method == "POST"
        assert str(req.url) == "http://origin.test/webhooks/abc123"
        assert req.headers["x-test"] == "1"
        assert req.headers.get_list("x-dup") == ["a", "b"]
        assert req.content == b'{"k":"v"}'

    @pytest.mark.asyncio
    async def test_downstream_error_status_is_not_a_failure(self) -> None:
        forwarder = HttpxForwarder(
            transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        )
        resp = await forwarder.send(ForwardRequest(
            url="http://origin.test/webhooks/x", headers=[], body=b"",
        ))
        assert resp.status_code == 503

    @pytest.mark.asyncio
    async def test_connect_error_raises_forward_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        forwarder = HttpxForwarder(transport=httpx.MockTransport(handler))
        with pytest.raises(ForwardError) as exc_info:
            await forwarder.send(ForwardRequest(
                url="http://origin.test/webhooks/x", headers=[], body=b"",
            ))
        assert "connection refused" in exc_info.value.error

    @pytest.mark.asyncio
    async def test_timeout_raises_forward_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        forwarder = HttpxForwarder(timeout=0.1, transport=httpx.MockTransport(handler))
        with pytest.raises(ForwardError):
            await forwarder.send(ForwardRequest(
                url="http://origin.test/webhooks/x", headers=[], body=b"",
            ))
