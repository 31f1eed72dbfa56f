"""Connection context merged into every outbound request body."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .models import CloudConfig, ConnectionIdentity


@dataclass(frozen=True)
class ConnectionContext:
    project_name: Optional[str] = None
    project_id: Optional[str] = None
    identity: Optional[ConnectionIdentity] = None

    @classmethod
    def from_config(cls, config: CloudConfig) -> "ConnectionContext":
        return cls(
            project_name=config.project_name,
            project_id=config.project_id,
            identity=config.connection_identity,
        )

    def to_body(self) -> Dict[str, Any]:
        """Ambient request fields; unset values are omitted, not sent as null."""
        body: Dict[str, Any] = {}
        if self.project_id:
            body["project_id"] = self.project_id
        if self.project_name:
            body["project_name"] = self.project_name
        if self.identity is not None:
            body["connection_hash"] = self.identity.connection_hash
            body["connection_display"] = {
                "environment": self.identity.environment,
                "path_suffix": self.identity.path_suffix,
            }
        return body

    def merge(self, body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Context first, then caller fields; the caller wins on collisions."""
        return {**self.to_body(), **(body or {})}


__all__ = ["ConnectionContext"]
