import asyncio
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import anyio
import httpx

from .auth import Credential
from .constants import (
    API_ENDPOINT,
    DISPLAY_NAME_HEADER,
    INITIAL_RETRY_DELAY_SECONDS,
    MAX_RETRIES,
    MAX_RETRY_DELAY_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
)
from .context import ConnectionContext
from .errors import RATE_LIMITED_STATUS, ApiError, ErrorCode
from .models import ApiEnvelope
from .observability import log_event

Sleep = Callable[[float], Awaitable[None]]

_LEADING_INT = re.compile(r"\s*(-?\d+)")


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = MAX_RETRIES  # total extra attempts
    initial_delay_seconds: float = INITIAL_RETRY_DELAY_SECONDS  # 1, 2, 4...
    max_delay_seconds: float = MAX_RETRY_DELAY_SECONDS
    retry_statuses: frozenset[int] = frozenset({RATE_LIMITED_STATUS})


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Leading integer of the header, so "3.5" reads as 3 seconds."""
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    # HTTP-date form is not honoured; fall back to exponential backoff
    return int(match.group(1)) if match else None


def parse_envelope(resp: httpx.Response) -> Optional[ApiEnvelope]:
    """Envelope of a response, or None when the body is not a JSON object."""
    try:
        payload = resp.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    return ApiEnvelope.model_validate(payload)


def compute_retry_delay(
    attempt: int,
    retry_after: Optional[str] = None,
    retry: Optional[RetryConfig] = None,
) -> float:
    """
    Seconds to wait before retry number ``attempt + 1``.
    A positive Retry-After wins; otherwise initial * 2**attempt. Both capped.
    """
    retry = retry or RetryConfig()
    seconds = _parse_retry_after(retry_after)
    if seconds is not None and seconds > 0:
        return min(float(seconds), retry.max_delay_seconds)
    return min(retry.initial_delay_seconds * (2**attempt), retry.max_delay_seconds)


class HttpClient:
    """
    HTTP client for the sqlew SaaS API.
    - Bearer auth, fixed endpoint, per-attempt wall-clock timeout
    - Parses the {success, data, error} envelope and returns `data`
    - Retries only rate-limited (429) calls; everything else raises ApiError
    """

    def __init__(
        self,
        credential: Credential,
        context: Optional[ConnectionContext] = None,
        *,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
        retry: Optional[RetryConfig] = None,
        http: Optional[httpx.AsyncClient] = None,
        sleep: Sleep = asyncio.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        self.credential = credential
        self.context = context or ConnectionContext()
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.display_name: Optional[str] = None
        self.log = logger or logging.getLogger("sqlew_connector.client")
        self._sleep = sleep

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=timeout_seconds)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, json=self.context.merge(body))

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Run one logical call, retrying rate-limited attempts.
        - Each attempt gets a fresh timeout
        - Timeouts and network failures are never retried
        - The last ApiError propagates unchanged once retries run out
        """
        method = method.upper()
        attempt = 0

        while True:
            try:
                return await self._send(method, path, json=json, attempt=attempt)
            except ApiError as exc:
                if (
                    exc.status_code not in self.retry.retry_statuses
                    or attempt >= self.retry.max_retries
                ):
                    raise

                delay = compute_retry_delay(attempt, exc.retry_after, self.retry)
                self.log.warning(
                    "sqlew.retry",
                    extra={
                        "method": method,
                        "path": path,
                        "status": exc.status_code,
                        "attempt": attempt,
                        "delay_ms": int(delay * 1000),
                        "retry_after": exc.retry_after,
                    },
                )
                await self._sleep(delay)
                attempt += 1

    def _headers(self, method: str) -> Dict[str, str]:
        headers = {"Authorization": self.credential.authorization_header()}
        if method == "POST":
            headers["Content-Type"] = "application/json"
        if self.display_name:
            headers[DISPLAY_NAME_HEADER] = self.display_name
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]],
        attempt: int,
    ) -> Any:
        if self._owns_http and self.http.is_closed:
            # reopened after aclose(); the client itself holds no session
            self.http = httpx.AsyncClient(timeout=self.timeout_seconds)

        url = f"{API_ENDPOINT}{path}"
        start = time.perf_counter()

        try:
            with anyio.fail_after(self.timeout_seconds):
                resp = await self.http.request(
                    method, url, json=json, headers=self._headers(method)
                )
        except (TimeoutError, httpx.TimeoutException) as exc:
            raise ApiError(ErrorCode.TIMEOUT, "Request timed out", 408) from exc
        except httpx.HTTPError as exc:
            raise ApiError(
                ErrorCode.NETWORK_ERROR, f"Network error: {exc}", 0
            ) from exc

        log_event(
            "sqlew.request",
            method=method,
            path=path,
            status=resp.status_code,
            duration_ms=int((time.perf_counter() - start) * 1000),
            attempt=attempt,
        )
        return self._handle_response(resp)

    @staticmethod
    def _handle_response(resp: httpx.Response) -> Any:
        envelope = parse_envelope(resp)
        retry_after = resp.headers.get("Retry-After")
        details = {"retry_after": retry_after} if retry_after else None

        if envelope is None:
            if not resp.is_success:
                raise ApiError(
                    ErrorCode.INTERNAL_ERROR,
                    f"HTTP {resp.status_code}: {resp.reason_phrase}",
                    resp.status_code,
                    details,
                )
            raise ApiError(
                ErrorCode.INVALID_RESPONSE, "Invalid JSON response from server", 500
            )

        if not resp.is_success:
            raise ApiError(
                envelope.error_code or ErrorCode.UNKNOWN_ERROR,
                envelope.error_message or f"HTTP {resp.status_code}",
                resp.status_code,
                details,
            )

        if not envelope.success:
            raise ApiError(
                envelope.error_code or ErrorCode.API_ERROR,
                envelope.error_message or "Unknown API error",
                500,
            )

        return envelope.data


__all__ = ["HttpClient", "RetryConfig", "compute_retry_delay", "parse_envelope"]
