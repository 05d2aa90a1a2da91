"""Inventory endpoint router."""

from fastapi import APIRouter, Depends

from vmchat_server.dependencies import get_inventory
from vmchat_server.inventory import VmInventory
from vmchat_server.models.vms import VmRecord

router = APIRouter(tags=["vms"])


@router.get("/vms", response_model=list[VmRecord])
async def list_vms(inventory: VmInventory = Depends(get_inventory)) -> list[VmRecord]:
    """Return every VM record in the inventory."""
    return await inventory.list_all()
