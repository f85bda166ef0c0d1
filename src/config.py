"""Process-wide relay configuration, read once at startup."""

from __future__ import annotations

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CHANNEL = "telemetry"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RelayConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin_url: str = ""  # downstream base URL, e.g. an ngrok domain
    slack_token: str = ""
    api_key: str | None = None
    port: int | None = Field(default=None, ge=0, le=65535)
    host: str = "0.0.0.0"
    notify_channel: str = DEFAULT_CHANNEL
    forward_timeout: float = Field(default=15.0, gt=0)
    notify_timeout: float = Field(default=10.0, gt=0)
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @property
    def auth_enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, env_file: str | None = None) -> RelayConfig:
        """Build the config from environment variables.

        A ``.env`` file is loaded first; variables already present in the
        environment take precedence over it.
        """
        load_dotenv(env_file)
        values: dict[str, object] = {
            "origin_url": os.environ.get("NGROK_DOMAIN", ""),
            "slack_token": os.environ.get("SLACK_TOKEN", ""),
            "api_key": os.environ.get("API_KEY") or None,
            "host": os.environ.get("HOST", "0.0.0.0"),
            "notify_channel": os.environ.get("SLACK_CHANNEL", DEFAULT_CHANNEL),
            "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        }
        # Only pass numeric settings through when set so defaults apply
        for env_name, field_name in (
            ("PORT", "port"),
            ("FORWARD_TIMEOUT", "forward_timeout"),
            ("NOTIFY_TIMEOUT", "notify_timeout"),
        ):
            raw = os.environ.get(env_name)
            if raw:
                values[field_name] = raw
        return cls.model_validate(values)
