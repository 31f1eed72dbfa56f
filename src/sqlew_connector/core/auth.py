from __future__ import annotations

from dataclasses import dataclass, field

from .errors import ApiError, ErrorCode


@dataclass(frozen=True)
class Credential:
    """API key holder; validates once and renders the Authorization header."""

    api_key: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ApiError(ErrorCode.INVALID_CREDENTIAL, "API key is required", 0)

    def authorization_header(self) -> str:
        return f"Bearer {self.api_key}"


__all__ = ["Credential"]
