"""VM inventory tools exposed to the model."""

from vmchat_server.inventory import VmInventory
from vmchat_server.models.vms import VmRecord
from vmchat_server.tools.registry import ToolDescriptor, ToolParameter, ToolRegistry

GET_VMS = ToolDescriptor(
    name="get_vms",
    description=(
        "Gets a list of virtual machines and their current power state, OS, "
        "and key details."
    ),
)

GET_VM = ToolDescriptor(
    name="get_vm",
    description="Gets details for a single virtual machine by id.",
    parameters=(
        ToolParameter(name="id", type="integer", description="The VM id"),
    ),
)

CHANGE_POWER_STATE = ToolDescriptor(
    name="change_power_state",
    description="Changes the VM power state. Valid values: running, stopped, suspended.",
    parameters=(
        ToolParameter(name="id", type="integer", description="The VM id"),
        ToolParameter(
            name="power_state",
            type="string",
            description="Target state: running, stopped or suspended",
        ),
    ),
)


def build_vm_tool_registry(inventory: VmInventory) -> ToolRegistry:
    """Create the frozen registry of VM tools bound to an inventory.

    Args:
        inventory: The inventory the tools read and mutate

    Returns:
        ToolRegistry: get_vms, get_vm and change_power_state, in that order
    """

    async def get_vms() -> list[VmRecord]:
        return await inventory.list_all()

    async def get_vm(id: int) -> VmRecord | None:
        return await inventory.get(id)

    async def change_power_state(id: int, power_state: str) -> VmRecord | None:
        return await inventory.set_power_state(id, power_state)

    registry = ToolRegistry()
    registry.register(GET_VMS, get_vms)
    registry.register(GET_VM, get_vm)
    registry.register(CHANGE_POWER_STATE, change_power_state)
    return registry.freeze()
