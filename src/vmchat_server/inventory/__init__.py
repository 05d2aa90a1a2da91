"""In-memory virtual machine inventory.

This package owns the fixed set of VM records the chat tools operate on and
exposes them through a single async capability with serialized mutation.
"""

from vmchat_server.inventory.seed import seed_vms
from vmchat_server.inventory.store import PLACEHOLDER_IP_ADDRESS, VmInventory

__all__ = ["PLACEHOLDER_IP_ADDRESS", "VmInventory", "seed_vms"]
