from __future__ import annotations

from typing import Any, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

Environment = Literal["windows", "macos", "linux", "wsl", "docker", "unknown"]
ENVIRONMENTS = frozenset(get_args(Environment))


def _as_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


class ApiErrorBody(BaseModel):
    code: Optional[str] = None
    message: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("code", "message", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        # servers send numeric codes now and then
        return _as_text(value)


class ApiEnvelope(BaseModel):
    """Uniform wrapper returned by every SaaS endpoint.

    Read leniently: any JSON object is an envelope. A bare string error is
    taken as the message, and an error of any other shape is dropped.
    """

    success: bool = False
    data: Any = None
    error: Optional[ApiErrorBody] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("success", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("error", mode="before")
    @classmethod
    def _coerce_error(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"message": value}
        if isinstance(value, dict):
            return value
        return None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error else None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None


class ConnectionIdentity(BaseModel):
    """
    Identifies one client installation for seat-based billing.
    The host sends camelCase keys; snake_case is accepted as well.
    full_path stays local and is never put on the wire.
    """

    connection_hash: str = Field(alias="connectionHash")
    environment: Environment = "unknown"
    path_suffix: str = Field(default="", alias="pathSuffix")
    full_path: Optional[str] = Field(default=None, alias="fullPath")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("environment", mode="before")
    @classmethod
    def _known_environment(cls, value: Any) -> str:
        # newer hosts may detect environments this connector does not know
        if isinstance(value, str) and value in ENVIRONMENTS:
            return value
        return "unknown"


class CloudConfig(BaseModel):
    """Configuration bundle handed over by the host when creating a backend."""

    api_key: str = Field(alias="apiKey")
    # [project].name from .sqlew/config.toml
    project_name: Optional[str] = Field(default=None, alias="projectName")
    # resolved project UUID, cached by the host
    project_id: Optional[str] = Field(default=None, alias="projectId")
    connection_identity: Optional[ConnectionIdentity] = Field(
        default=None, alias="connectionIdentity"
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class ProjectResolveResponse(BaseModel):
    project_id: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class HealthCheckResult(BaseModel):
    ok: bool
    latency: int  # milliseconds
    message: Optional[str] = None


__all__ = [
    "Environment",
    "ENVIRONMENTS",
    "ApiErrorBody",
    "ApiEnvelope",
    "ConnectionIdentity",
    "CloudConfig",
    "ProjectResolveResponse",
    "HealthCheckResult",
]
