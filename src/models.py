"""Shared Pydantic data models for the webhook relay."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

SUCCESS_MESSAGE = "Webhook processed successfully"


class ApiResponse(BaseModel):
    """JSON envelope returned to the original caller."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, message: str = SUCCESS_MESSAGE) -> ApiResponse:
        return cls(success=True, message=message)

    @classmethod
    def failure(cls, message: str, error: str | None = None) -> ApiResponse:
        return cls(success=False, message=message, error=error)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
