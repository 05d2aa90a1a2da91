"""Integration tests for the inventory and health endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from vmchat_server import create_app


@pytest.mark.asyncio
async def test_list_vms(async_client: AsyncClient):
    response = await async_client.get("/vms")

    assert response.status_code == 200
    data = response.json()
    assert [vm["id"] for vm in data] == [101, 102]

    dev = data[0]
    assert dev["name"] == "DEV-W11-01"
    assert dev["power_state"] == "running"
    assert dev["ip_address"] == "10.10.1.21"
    assert dev["tags"] == ["windows", "w11", "frontend"]
    assert dev["last_boot_utc"] is not None

    qa = data[1]
    assert qa["power_state"] == "stopped"
    assert qa["ip_address"] is None


@pytest.mark.asyncio
async def test_vms_are_not_shared_between_apps(test_settings):
    """Every app instance starts from its own seeded inventory."""
    first = create_app(settings=test_settings)
    second = create_app(settings=test_settings)

    async with first.router.lifespan_context(first):
        await first.state.inventory.set_power_state(102, "running")

        async with second.router.lifespan_context(second):
            transport = ASGITransport(app=second)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                vms = (await client.get("/vms")).json()

    assert vms[1]["power_state"] == "stopped"


@pytest.mark.asyncio
async def test_health_with_mocked_ollama(async_client: AsyncClient):
    response = await async_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["ollama_connected"] is True
    assert data["ollama_host"] == "http://localhost:11434"
    assert data["model"] == "llama3.2:latest"
