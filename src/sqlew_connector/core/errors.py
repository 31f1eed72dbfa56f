from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class ErrorCode:
    """Machine-readable codes carried by :class:`ApiError`."""

    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    API_ERROR = "API_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    LOCAL_ONLY_ACTION = "LOCAL_ONLY_ACTION"
    UNSUPPORTED_TOOL = "UNSUPPORTED_TOOL"
    PROJECT_RESOLVE_FAILED = "PROJECT_RESOLVE_FAILED"


RATE_LIMITED_STATUS = 429


class ApiError(Exception):
    """
    Single failure type surfaced by the connector.
    - code: machine-readable, never empty
    - status_code: HTTP status, or 0 when no response was received
    - details: optional extras (e.g. retry_after from a 429)
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        details: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code or ErrorCode.UNKNOWN_ERROR
        self.message = message
        self.status_code = status_code
        self.details: Optional[Mapping[str, Any]] = (
            MappingProxyType(dict(details)) if details else None
        )

    def __repr__(self) -> str:
        return (
            f"ApiError(code={self.code!r}, message={self.message!r}, "
            f"status_code={self.status_code})"
        )

    @property
    def retry_after(self) -> Optional[str]:
        if not self.details:
            return None
        value = self.details.get("retry_after")
        return None if value is None else str(value)

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == RATE_LIMITED_STATUS

    @property
    def is_local_only(self) -> bool:
        """True when the host should fall back to local handling."""
        return self.code == ErrorCode.LOCAL_ONLY_ACTION

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
        }
        if self.details:
            payload["details"] = dict(self.details)
        return payload


__all__ = ["ApiError", "ErrorCode", "RATE_LIMITED_STATUS"]
