from __future__ import annotations

import os

from dotenv import load_dotenv

from .core.backend import SaaSBackend
from .core.logging import setup_logging
from .core.models import CloudConfig


def _env(name: str) -> str | None:
    val = os.getenv(name, "").strip()
    return val or None


def load_env_config(*, use_dotenv: bool = True) -> CloudConfig:
    """Load the connector config bundle from environment (optional .env).

    The API endpoint is fixed at build time and has no variable here.
    """
    if use_dotenv:
        load_dotenv()
    return CloudConfig(
        api_key=_env("SQLEW_API_KEY") or "",
        project_name=_env("SQLEW_PROJECT_NAME"),
        project_id=_env("SQLEW_PROJECT_ID"),
    )


def create_backend_from_env(log_level: str | None = None, **kwargs) -> SaaSBackend:
    """Create a SaaSBackend from environment variables.

    With a log level (argument or SQLEW_LOG_LEVEL) the connector's own
    loggers get logfmt output; otherwise logging is left to the host.
    """
    config = load_env_config()
    if not config.api_key:
        raise ValueError("Missing SQLEW_API_KEY in environment.")

    level = log_level or _env("SQLEW_LOG_LEVEL")
    if level:
        setup_logging(level)
    return SaaSBackend(config, **kwargs)


__all__ = ["load_env_config", "create_backend_from_env"]
