"""sqlew SaaS connector plugin.

The host loader calls :func:`create_backend` and :func:`resolve_project`;
everything else is reached through the returned backend.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

from .core import (
    ApiError,
    CloudConfig,
    ConnectionIdentity,
    ErrorCode,
    HealthCheckResult,
    HttpClient,
    RetryConfig,
    SaaSBackend,
    ToolBackend,
)
from .core import resolve_project as _resolve_project

version = "1.0.0"
# minimum compatible mcp-sqlew host version
min_version = "4.4.0"


def create_backend(config: Union[CloudConfig, Mapping[str, Any]]) -> SaaSBackend:
    """Create a SaaS backend from the host's configuration bundle."""
    if not isinstance(config, CloudConfig):
        config = CloudConfig.model_validate(config)
    return SaaSBackend(config)


async def resolve_project(api_key: str, project_name: str) -> str:
    """Exchange a project name for its stable project id."""
    return await _resolve_project(api_key, project_name)


__all__ = [
    "create_backend",
    "resolve_project",
    "version",
    "min_version",
    "ApiError",
    "ErrorCode",
    "CloudConfig",
    "ConnectionIdentity",
    "HealthCheckResult",
    "HttpClient",
    "RetryConfig",
    "SaaSBackend",
    "ToolBackend",
]
