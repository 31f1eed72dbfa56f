import pytest
import respx
from httpx import Response
import sqlew_connector
from sqlew_connector import CloudConfig, SaaSBackend, create_backend
from sqlew_connector.core.constants import API_ENDPOINT, PROJECT_RESOLVE_PATH


def test_plugin_metadata():
    assert sqlew_connector.version == "1.0.0"
    assert sqlew_connector.min_version == "4.4.0"


def test_create_backend_from_host_mapping():
    backend = create_backend(
        {
            "apiKey": "k",
            "projectName": "demo",
            "connectionIdentity": {
                "connectionHash": "abc",
                "environment": "macos",
                "pathSuffix": "dev/demo",
            },
        }
    )

    assert isinstance(backend, SaaSBackend)
    ctx = backend.http_client.context
    assert ctx.project_name == "demo"
    assert ctx.identity.connection_hash == "abc"


def test_create_backend_from_model():
    backend = create_backend(CloudConfig(api_key="k", project_id="p-1"))
    assert backend.http_client.context.project_id == "p-1"


@pytest.mark.asyncio
async def test_resolve_project_entry_point():
    async with respx.mock:
        respx.post(f"{API_ENDPOINT}{PROJECT_RESOLVE_PATH}").mock(
            return_value=Response(
                200, json={"success": True, "data": {"project_id": "uuid-9"}}
            )
        )

        assert await sqlew_connector.resolve_project("k", "demo") == "uuid-9"
