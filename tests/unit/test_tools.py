"""Unit tests for the tool registry and the VM tools."""

import json

import pytest

from vmchat_server.inventory import PLACEHOLDER_IP_ADDRESS, VmInventory, seed_vms
from vmchat_server.tools import (
    ToolDescriptor,
    ToolInvocationRequest,
    ToolInvocationResult,
    ToolParameter,
    ToolRegistry,
    build_vm_tool_registry,
)

ECHO = ToolDescriptor(
    name="echo",
    description="Echo the arguments back.",
    parameters=(
        ToolParameter(name="count", type="integer"),
        ToolParameter(name="label", required=False),
    ),
)


async def echo(count: int, label: str = "none") -> dict:
    return {"count": count, "label": label}


async def broken() -> None:
    raise RuntimeError("disk on fire")


@pytest.fixture
def registry():
    registry = ToolRegistry()
    registry.register(ECHO, echo)
    registry.register(ToolDescriptor(name="broken", description="Always fails."), broken)
    return registry.freeze()


@pytest.fixture
def vm_registry():
    return build_vm_tool_registry(VmInventory(seed_vms()))


def test_descriptor_to_ollama_schema():
    """Test the function schema advertised to the model."""
    schema = ECHO.to_ollama_schema()

    assert schema == {
        "type": "function",
        "function": {
            "name": "echo",
            "description": "Echo the arguments back.",
            "parameters": {
                "type": "object",
                "properties": {
                    "count": {"type": "integer", "description": ""},
                    "label": {"type": "string", "description": ""},
                },
                "required": ["count"],
            },
        },
    }


def test_register_after_freeze_fails(registry):
    with pytest.raises(RuntimeError, match="frozen"):
        registry.register(ToolDescriptor(name="late", description=""), echo)


def test_register_duplicate_name_fails():
    registry = ToolRegistry()
    registry.register(ECHO, echo)
    with pytest.raises(ValueError, match="already registered"):
        registry.register(ECHO, echo)


def test_resolve(registry):
    assert registry.resolve("echo") is echo
    assert registry.resolve("missing") is None


def test_describe_all_keeps_registration_order(vm_registry):
    names = [d.name for d in vm_registry.describe_all()]
    assert names == ["get_vms", "get_vm", "change_power_state"]
    assert [t["function"]["name"] for t in vm_registry.to_ollama_tools()] == names


@pytest.mark.asyncio
async def test_execute_success(registry):
    result = await registry.execute(
        ToolInvocationRequest(name="echo", arguments={"count": 2, "label": "x"})
    )

    assert result.ok
    assert result.value == {"count": 2, "label": "x"}
    assert json.loads(result.to_content()) == {"count": 2, "label": "x"}


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["7", " 7 ", 7.0, 7])
async def test_execute_coerces_integer_arguments(registry, raw):
    """Test that integral strings and floats are accepted for integers."""
    result = await registry.execute(
        ToolInvocationRequest(name="echo", arguments={"count": raw})
    )

    assert result.value == {"count": 7, "label": "none"}


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["seven", 7.5, True])
async def test_execute_rejects_non_integer_arguments(registry, raw):
    result = await registry.execute(
        ToolInvocationRequest(name="echo", arguments={"count": raw})
    )

    assert not result.ok
    assert "must be an integer" in result.error


@pytest.mark.asyncio
async def test_execute_missing_required_argument(registry):
    result = await registry.execute(ToolInvocationRequest(name="echo", arguments={}))

    assert result.error == "Tool 'echo' failed: missing required argument 'count'"
    assert json.loads(result.to_content()) == {"error": result.error}


@pytest.mark.asyncio
async def test_execute_ignores_undeclared_arguments(registry):
    result = await registry.execute(
        ToolInvocationRequest(name="echo", arguments={"count": 1, "extra": True})
    )

    assert result.value == {"count": 1, "label": "none"}


@pytest.mark.asyncio
async def test_execute_unknown_tool(registry):
    result = await registry.execute(ToolInvocationRequest(name="format_disk"))

    assert result.error == "Tool not found: format_disk"


@pytest.mark.asyncio
async def test_execute_tool_exception_becomes_error_result(registry):
    result = await registry.execute(ToolInvocationRequest(name="broken"))

    assert result.error == "Tool 'broken' failed: disk on fire"


def test_result_content_for_none_value():
    assert ToolInvocationResult(name="get_vm").to_content() == "null"


@pytest.mark.asyncio
async def test_get_vms_tool(vm_registry):
    result = await vm_registry.execute(ToolInvocationRequest(name="get_vms"))

    assert [vm["name"] for vm in result.value] == ["DEV-W11-01", "QA-W11-EDGE"]
    # Serializable as a tool message
    assert json.loads(result.to_content())[0]["ip_address"] == "10.10.1.21"


@pytest.mark.asyncio
async def test_get_vm_tool(vm_registry):
    result = await vm_registry.execute(
        ToolInvocationRequest(name="get_vm", arguments={"id": "102"})
    )

    assert result.value["name"] == "QA-W11-EDGE"


@pytest.mark.asyncio
async def test_get_vm_tool_not_found(vm_registry):
    result = await vm_registry.execute(
        ToolInvocationRequest(name="get_vm", arguments={"id": 5})
    )

    assert result.ok
    assert result.value is None


@pytest.mark.asyncio
async def test_change_power_state_tool(vm_registry):
    """Test starting then stopping an address-less VM through the tool."""
    started = await vm_registry.execute(
        ToolInvocationRequest(
            name="change_power_state", arguments={"id": 102, "power_state": "Running"}
        )
    )
    assert started.value["power_state"] == "running"
    assert started.value["ip_address"] == PLACEHOLDER_IP_ADDRESS

    stopped = await vm_registry.execute(
        ToolInvocationRequest(
            name="change_power_state", arguments={"id": 102, "power_state": "stopped"}
        )
    )
    assert stopped.value["power_state"] == "stopped"
    assert stopped.value["ip_address"] is None


@pytest.mark.asyncio
async def test_change_power_state_tool_invalid_state(vm_registry):
    result = await vm_registry.execute(
        ToolInvocationRequest(
            name="change_power_state", arguments={"id": 101, "power_state": "paused"}
        )
    )

    assert result.ok
    assert result.value["power_state"] == "running"
    assert result.value["ip_address"] == "10.10.1.21"
