"""Fixed connector settings.

The API endpoint is chosen from the build stamp in ``_build_env`` and is
never read from the environment, so a deployment cannot point the connector
at another server.
"""

from __future__ import annotations

from typing import FrozenSet, Tuple

from ._build_env import BUILD_ENV

API_ENDPOINTS = {
    "development": "http://localhost:8080",
    "production": "https://api.sqlew.io",
}

API_ENDPOINT = API_ENDPOINTS.get(BUILD_ENV, API_ENDPOINTS["production"])

# Retry configuration
MAX_RETRIES = 3
INITIAL_RETRY_DELAY_SECONDS = 1.0
MAX_RETRY_DELAY_SECONDS = 30.0
REQUEST_TIMEOUT_SECONDS = 30.0

HEALTH_PATH = "/health"
PROJECT_RESOLVE_PATH = "/api/v1/project/resolve"
DISPLAY_NAME_HEADER = "X-Sqlew-Display-Name"

# help, example and use_case are served from local TOML files (no DB access)
SUPPORTED_TOOLS: Tuple[str, ...] = (
    "decision",
    "constraint",
    "suggest",
)

# "tool.action" pairs the host must handle itself
LOCAL_ONLY_ACTIONS: FrozenSet[str] = frozenset(
    {
        "decision.help",
        "decision.example",
        "decision.use_case",
        "constraint.suggest_pending",
        "constraint.help",
        "constraint.example",
        "constraint.use_case",
        "suggest.help",
    }
)


def is_local_only_action(tool: str, action: str) -> bool:
    return f"{tool}.{action}" in LOCAL_ONLY_ACTIONS


def is_supported_tool(tool: str) -> bool:
    return tool in SUPPORTED_TOOLS


__all__ = [
    "API_ENDPOINTS",
    "API_ENDPOINT",
    "BUILD_ENV",
    "MAX_RETRIES",
    "INITIAL_RETRY_DELAY_SECONDS",
    "MAX_RETRY_DELAY_SECONDS",
    "REQUEST_TIMEOUT_SECONDS",
    "HEALTH_PATH",
    "PROJECT_RESOLVE_PATH",
    "DISPLAY_NAME_HEADER",
    "SUPPORTED_TOOLS",
    "LOCAL_ONLY_ACTIONS",
    "is_local_only_action",
    "is_supported_tool",
]
