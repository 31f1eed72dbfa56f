from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple

from .auth import Credential
from .client import HttpClient
from .constants import (
    HEALTH_PATH,
    SUPPORTED_TOOLS,
    is_local_only_action,
    is_supported_tool,
)
from .context import ConnectionContext
from .errors import ApiError, ErrorCode
from .models import CloudConfig, HealthCheckResult

log = logging.getLogger("sqlew_connector.backend")

# (tool, action) -> {old_field: new_field} renames applied before the call
PARAM_REMAPS: Dict[Tuple[str, str], Dict[str, str]] = {
    ("constraint", "activate"): {"constraint_id": "id"},
    ("constraint", "deactivate"): {"constraint_id": "id"},
}


def normalize_params(
    tool: str, action: str, params: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    """Return a copy of params with SaaS field names; explicit fields are kept."""
    normalized = dict(params or {})
    for old, new in PARAM_REMAPS.get((tool, action), {}).items():
        if old in normalized and new not in normalized:
            normalized[new] = normalized.pop(old)
    return normalized


class ToolBackend(ABC):
    """Capability set shared by every backend the host can load."""

    backend_type: str
    plugin_name: Optional[str] = None

    @abstractmethod
    async def execute(self, tool: str, action: str, params: Dict[str, Any]) -> Any:
        ...

    @abstractmethod
    async def health_check(self) -> HealthCheckResult:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...


class SaaSBackend(ToolBackend):
    backend_type = "plugin"
    plugin_name = "saas-connector"

    def __init__(
        self, config: CloudConfig, *, http_client: Optional[HttpClient] = None
    ):
        self.http_client = http_client or HttpClient(
            Credential(config.api_key), ConnectionContext.from_config(config)
        )

    @property
    def display_name(self) -> Optional[str]:
        return self.http_client.display_name

    def set_display_name(self, name: Optional[str]) -> None:
        """Attribution label sent with subsequent requests."""
        self.http_client.display_name = (name or "").strip() or None

    async def execute(self, tool: str, action: str, params: Dict[str, Any]) -> Any:
        if is_local_only_action(tool, action):
            raise ApiError(
                ErrorCode.LOCAL_ONLY_ACTION,
                f"Action '{tool}.{action}' should be handled locally "
                "(no DB access required)",
                200,
            )

        if not is_supported_tool(tool):
            raise ApiError(
                ErrorCode.UNSUPPORTED_TOOL,
                f"Tool '{tool}' is not supported in SaaS mode. "
                f"Supported tools: {', '.join(SUPPORTED_TOOLS)}",
                400,
            )

        body = normalize_params(tool, action, params)
        log.debug("dispatch", extra={"tool": tool, "action": action})
        return await self.http_client.post(f"/api/v1/{tool}/{action}", body)

    async def health_check(self) -> HealthCheckResult:
        start = time.perf_counter()
        try:
            await self.http_client.get(HEALTH_PATH)
        except Exception as exc:  # reported, never raised
            latency = int((time.perf_counter() - start) * 1000)
            log.warning(
                "health_check failed",
                extra={"code": getattr(exc, "code", type(exc).__name__)},
            )
            return HealthCheckResult(
                ok=False, latency=latency, message=str(exc) or type(exc).__name__
            )
        return HealthCheckResult(
            ok=True, latency=int((time.perf_counter() - start) * 1000)
        )

    async def disconnect(self) -> None:
        # Stateless HTTP: only the local connection pool is released.
        await self.http_client.aclose()


__all__ = ["ToolBackend", "SaaSBackend", "normalize_params", "PARAM_REMAPS"]
