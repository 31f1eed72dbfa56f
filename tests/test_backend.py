import json

import httpx
import pytest
import respx
from httpx import Response
from sqlew_connector.core.auth import Credential
from sqlew_connector.core.backend import SaaSBackend, ToolBackend, normalize_params
from sqlew_connector.core.client import HttpClient
from sqlew_connector.core.constants import (
    API_ENDPOINT,
    DISPLAY_NAME_HEADER,
    LOCAL_ONLY_ACTIONS,
    SUPPORTED_TOOLS,
)
from sqlew_connector.core.errors import ApiError, ErrorCode
from sqlew_connector.core.models import CloudConfig, HealthCheckResult

HEALTH_URL = f"{API_ENDPOINT}/health"


async def _no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def backend():
    client = HttpClient(Credential("test-key"), sleep=_no_sleep)
    return SaaSBackend(CloudConfig(api_key="test-key"), http_client=client)


def test_backend_is_a_plugin_tool_backend(backend):
    assert isinstance(backend, ToolBackend)
    assert backend.backend_type == "plugin"
    assert backend.plugin_name == "saas-connector"


def test_blank_api_key_rejected_on_construction():
    with pytest.raises(ApiError) as exc:
        SaaSBackend(CloudConfig(api_key="   "))
    assert exc.value.code == ErrorCode.INVALID_CREDENTIAL


@pytest.mark.asyncio
@pytest.mark.parametrize("pair", sorted(LOCAL_ONLY_ACTIONS))
async def test_local_only_actions_never_reach_network(backend, pair):
    tool, action = pair.split(".")
    async with respx.mock(assert_all_called=False) as mock:
        route = mock.post(url__startswith=API_ENDPOINT)

        with pytest.raises(ApiError) as exc:
            await backend.execute(tool, action, {})

    assert exc.value.code == ErrorCode.LOCAL_ONLY_ACTION
    assert exc.value.status_code == 200
    assert exc.value.is_local_only
    assert pair in exc.value.message
    assert not route.called


@pytest.mark.asyncio
@pytest.mark.parametrize("tool", ["help", "example", "file", "Decision", ""])
async def test_unsupported_tools_never_reach_network(backend, tool):
    async with respx.mock(assert_all_called=False) as mock:
        route = mock.post(url__startswith=API_ENDPOINT)

        with pytest.raises(ApiError) as exc:
            await backend.execute(tool, "list", {})

    assert exc.value.code == ErrorCode.UNSUPPORTED_TOOL
    assert exc.value.status_code == 400
    for supported in SUPPORTED_TOOLS:
        assert supported in exc.value.message
    assert not route.called


@pytest.mark.asyncio
async def test_local_only_check_runs_before_support_check(backend):
    # suggest.help is local-only even though "suggest" is supported
    with pytest.raises(ApiError) as exc:
        await backend.execute("suggest", "help", {})
    assert exc.value.code == ErrorCode.LOCAL_ONLY_ACTION


@pytest.mark.asyncio
async def test_execute_posts_to_tool_action_route(backend):
    async with respx.mock:
        route = respx.post(f"{API_ENDPOINT}/api/v1/decision/set").mock(
            return_value=Response(200, json={"success": True, "data": {"id": 7}})
        )

        result = await backend.execute("decision", "set", {"key": "db", "value": "pg"})
        await backend.disconnect()

    assert result == {"id": 7}
    assert json.loads(route.calls[0].request.content) == {"key": "db", "value": "pg"}


@pytest.mark.asyncio
async def test_execute_normalizes_constraint_id(backend):
    async with respx.mock:
        route = respx.post(f"{API_ENDPOINT}/api/v1/constraint/deactivate").mock(
            return_value=Response(200, json={"success": True, "data": None})
        )

        params = {"constraint_id": "c1"}
        await backend.execute("constraint", "deactivate", params)
        await backend.disconnect()

    assert json.loads(route.calls[0].request.content) == {"id": "c1"}
    # caller's dict is left alone
    assert params == {"constraint_id": "c1"}


@pytest.mark.asyncio
async def test_execute_propagates_api_error_unchanged(backend):
    async with respx.mock:
        respx.post(f"{API_ENDPOINT}/api/v1/suggest/by_key").mock(
            return_value=Response(
                422,
                json={
                    "success": False,
                    "error": {"code": "VALIDATION", "message": "key required"},
                },
            )
        )

        with pytest.raises(ApiError) as exc:
            await backend.execute("suggest", "by_key", {})
        await backend.disconnect()

    assert exc.value.code == "VALIDATION"
    assert exc.value.status_code == 422


def test_normalize_params_renames_constraint_id():
    assert normalize_params("constraint", "deactivate", {"constraint_id": "c1"}) == {
        "id": "c1"
    }
    assert normalize_params("constraint", "activate", {"constraint_id": "c9"}) == {
        "id": "c9"
    }


def test_normalize_params_keeps_explicit_id():
    params = {"constraint_id": "c1", "id": "c2"}
    assert normalize_params("constraint", "deactivate", params) == {
        "constraint_id": "c1",
        "id": "c2",
    }


def test_normalize_params_leaves_other_actions_alone():
    params = {"constraint_id": "c1"}
    assert normalize_params("constraint", "get", params) == params
    assert normalize_params("decision", "deactivate", params) == params
    assert normalize_params("decision", "list", None) == {}


@pytest.mark.asyncio
async def test_health_check_success(backend):
    async with respx.mock:
        respx.get(HEALTH_URL).mock(
            return_value=Response(200, json={"success": True, "data": {"status": "ok"}})
        )

        result = await backend.health_check()
        await backend.disconnect()

    assert isinstance(result, HealthCheckResult)
    assert result.ok is True
    assert result.latency >= 0
    assert result.message is None


@pytest.mark.asyncio
async def test_health_check_absorbs_network_failure(backend):
    async with respx.mock:
        respx.get(HEALTH_URL).mock(side_effect=httpx.ConnectError("dns failure"))

        result = await backend.health_check()
        await backend.disconnect()

    assert result.ok is False
    assert result.latency >= 0
    assert result.message
    assert "dns failure" in result.message


@pytest.mark.asyncio
async def test_health_check_absorbs_exhausted_rate_limit(backend):
    async with respx.mock:
        route = respx.get(HEALTH_URL).mock(
            return_value=Response(
                429,
                json={
                    "success": False,
                    "error": {"code": "RATE_LIMITED", "message": "Too many requests"},
                },
            )
        )

        result = await backend.health_check()
        await backend.disconnect()

    assert route.call_count == 4
    assert result.ok is False
    assert result.message == "Too many requests"


@pytest.mark.asyncio
async def test_set_display_name_is_sent_on_later_requests(backend):
    backend.set_display_name("  ci-runner ")
    assert backend.display_name == "ci-runner"

    async with respx.mock:
        route = respx.post(f"{API_ENDPOINT}/api/v1/decision/list").mock(
            return_value=Response(200, json={"success": True, "data": []})
        )

        await backend.execute("decision", "list", {})
        await backend.disconnect()

    assert route.calls[0].request.headers[DISPLAY_NAME_HEADER] == "ci-runner"

    backend.set_display_name("")
    assert backend.display_name is None


@pytest.mark.asyncio
async def test_disconnect_is_repeatable(backend):
    await backend.disconnect()
    await backend.disconnect()
