"""Core connector surface (no runtime configuration is read in here)."""

from .auth import Credential
from .backend import PARAM_REMAPS, SaaSBackend, ToolBackend, normalize_params
from .client import HttpClient, RetryConfig, compute_retry_delay
from .constants import (
    API_ENDPOINT,
    LOCAL_ONLY_ACTIONS,
    SUPPORTED_TOOLS,
    is_local_only_action,
    is_supported_tool,
)
from .context import ConnectionContext
from .errors import ApiError, ErrorCode
from .logging import LogfmtFormatter, setup_logging
from .models import (
    ApiEnvelope,
    ApiErrorBody,
    CloudConfig,
    ConnectionIdentity,
    HealthCheckResult,
    ProjectResolveResponse,
)
from .observability import log_event
from .resolver import resolve_project

__all__ = [
    # Auth / context
    "Credential",
    "ConnectionContext",
    # Client
    "HttpClient",
    "RetryConfig",
    "compute_retry_delay",
    # Backend
    "ToolBackend",
    "SaaSBackend",
    "normalize_params",
    "PARAM_REMAPS",
    "resolve_project",
    # Errors
    "ApiError",
    "ErrorCode",
    # Models
    "ApiEnvelope",
    "ApiErrorBody",
    "CloudConfig",
    "ConnectionIdentity",
    "HealthCheckResult",
    "ProjectResolveResponse",
    # Constants
    "API_ENDPOINT",
    "SUPPORTED_TOOLS",
    "LOCAL_ONLY_ACTIONS",
    "is_local_only_action",
    "is_supported_tool",
    # Logging
    "LogfmtFormatter",
    "setup_logging",
    "log_event",
]
