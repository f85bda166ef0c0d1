"""Click entry point that serves the webhook relay with uvicorn."""

from __future__ import annotations

import logging

import click
import uvicorn
from pydantic import ValidationError

from src.config import RelayConfig
from src.proxy.app import create_app

logger = logging.getLogger(__name__)


@click.command()
@click.option("--env-file", default=None, help="Path to a .env file to load.")
@click.option("--host", default=None, help="Interface to bind (default: HOST or 0.0.0.0).")
@click.option("--port", type=int, default=None, help="Port to bind (default: PORT).")
@click.option("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO).")
def cli(
    env_file: str | None, host: str | None, port: int | None, log_level: str | None,
) -> None:
    """Relay inbound webhooks to the configured origin."""
    overrides: dict[str, object] = {}
    if host:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if log_level:
        overrides["log_level"] = log_level

    try:
        config = RelayConfig.from_env(env_file)
        if overrides:
            config = RelayConfig.model_validate({**config.model_dump(), **overrides})
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc

    if config.port is None:
        raise click.UsageError("A port is required: pass --port or set PORT.")

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting server on %s:%d", config.host, config.port)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    cli()
