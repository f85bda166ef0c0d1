"""Errors that end a relay request with a failure envelope."""

from __future__ import annotations


class RelayError(Exception):
    """Base for request-fatal relay failures.

    ``message`` is the human summary placed in the response envelope and
    ``error`` carries the wrapped cause text.
    """

    message = "failed to process webhook"
    status_code = 500

    def __init__(self, error: str) -> None:
        self.error = error
        super().__init__(f"{self.message}: {error}")


class BodyReadError(RelayError):
    message = "failed to read request body"


class RequestBuildError(RelayError):
    message = "failed to create forward request"


class ForwardError(RelayError):
    message = "failed to forward request"


def describe(exc: BaseException) -> str:
    """Exception text for the envelope, falling back to the class name."""
    return str(exc) or type(exc).__name__
