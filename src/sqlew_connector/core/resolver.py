"""Project name -> project id bootstrap call.

Runs before any :class:`HttpClient` exists, because the resolved id is one of
its constructor inputs. One attempt, no retry; safe to repeat on cache miss.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import anyio
import httpx
from pydantic import ValidationError

from .auth import Credential
from .client import parse_envelope
from .constants import API_ENDPOINT, PROJECT_RESOLVE_PATH, REQUEST_TIMEOUT_SECONDS
from .errors import ApiError, ErrorCode
from .models import ProjectResolveResponse
from .observability import log_event

log = logging.getLogger("sqlew_connector.resolver")


def _failed(message: str, status_code: int) -> ApiError:
    return ApiError(ErrorCode.PROJECT_RESOLVE_FAILED, message, status_code)


async def resolve_project(
    api_key: str,
    project_name: str,
    *,
    timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    http: Optional[httpx.AsyncClient] = None,
) -> str:
    credential = Credential(api_key)
    if not project_name or not project_name.strip():
        raise _failed("Project name is required", 400)

    owns_http = http is None
    client = http or httpx.AsyncClient(timeout=timeout_seconds)
    start = time.perf_counter()
    try:
        with anyio.fail_after(timeout_seconds):
            resp = await client.post(
                f"{API_ENDPOINT}{PROJECT_RESOLVE_PATH}",
                json={"project_name": project_name},
                headers={
                    "Authorization": credential.authorization_header(),
                    "Content-Type": "application/json",
                },
            )
    except (TimeoutError, httpx.TimeoutException) as exc:
        raise ApiError(ErrorCode.TIMEOUT, "Project resolve timed out", 408) from exc
    except Exception as exc:
        # httpx transport errors and whatever a custom transport raises
        raise ApiError(ErrorCode.NETWORK_ERROR, f"Network error: {exc}", 0) from exc
    finally:
        if owns_http:
            await client.aclose()

    log_event(
        "sqlew.project_resolve",
        method="POST",
        path=PROJECT_RESOLVE_PATH,
        status=resp.status_code,
        duration_ms=int((time.perf_counter() - start) * 1000),
    )

    envelope = parse_envelope(resp)
    status = resp.status_code if not resp.is_success else 500
    if envelope is None:
        raise _failed(f"Failed to resolve project: HTTP {resp.status_code}", status)

    if not resp.is_success or not envelope.success:
        message = envelope.error_message or f"HTTP {resp.status_code}"
        raise _failed(f"Failed to resolve project: {message}", status)

    try:
        data = ProjectResolveResponse.model_validate(envelope.data or {})
    except ValidationError:
        data = ProjectResolveResponse()
    if not data.project_id:
        raise _failed("Failed to resolve project: response missing project_id", 500)

    log.info("Resolved project %s -> %s", project_name, data.project_id)
    return data.project_id


__all__ = ["resolve_project"]
