"""Async in-memory store for VM records.

The inventory is shared by every concurrent chat request, so all mutation goes
through set_power_state() under one lock. Callers always receive copies and
can never change a stored record directly.
"""

import asyncio
import logging
from typing import Iterable

from vmchat_server.models.vms import POWER_STATES, VmRecord

logger = logging.getLogger(__name__)

# Address handed to a VM that is started without one
PLACEHOLDER_IP_ADDRESS = "10.10.99.99"


class VmInventory:
    """Fixed collection of VMs with serialized power-state changes.

    Records are neither created nor removed after construction.

    Attributes:
        _records: Stored records keyed by id, in seed order
        _lock: Serializes writers so power_state and ip_address change together
    """

    def __init__(self, records: Iterable[VmRecord]) -> None:
        """Initialize the inventory.

        Args:
            records: Seed records. They are copied; ids must be unique.

        Raises:
            ValueError: If two records share an id
        """
        self._records: dict[int, VmRecord] = {}
        for record in records:
            if record.id in self._records:
                raise ValueError(f"Duplicate VM id: {record.id}")
            self._records[record.id] = record.model_copy(deep=True)
        self._lock = asyncio.Lock()
        logger.info(f"VmInventory initialized with {len(self._records)} records")

    async def list_all(self) -> list[VmRecord]:
        """Return every VM, in seed order."""
        return [record.model_copy(deep=True) for record in self._records.values()]

    async def get(self, vm_id: int) -> VmRecord | None:
        """Return one VM, or None if the id is unknown."""
        record = self._records.get(vm_id)
        return record.model_copy(deep=True) if record is not None else None

    async def set_power_state(self, vm_id: int, power_state: str) -> VmRecord | None:
        """Change a VM's power state and keep its IP address consistent.

        The requested state is trimmed and lower-cased. Anything other than
        running, stopped or suspended leaves the record untouched and returns
        it as-is. Starting a VM keeps its address or assigns the placeholder;
        any other state clears it.

        Args:
            vm_id: The VM to change
            power_state: Requested state

        Returns:
            VmRecord | None: The record after the change, or None if the id is unknown
        """
        normalized = (power_state or "").strip().lower()

        async with self._lock:
            record = self._records.get(vm_id)
            if record is None:
                logger.debug(f"Power state change for unknown VM {vm_id}")
                return None

            if normalized not in POWER_STATES:
                logger.info(
                    f"Ignoring invalid power state {power_state!r} for VM {vm_id}"
                )
                return record.model_copy(deep=True)

            previous = record.power_state
            record.power_state = normalized  # type: ignore[assignment]
            if normalized == "running":
                record.ip_address = record.ip_address or PLACEHOLDER_IP_ADDRESS
            else:
                record.ip_address = None

            logger.info(
                f"VM {vm_id} ({record.name}) power state {previous} -> {normalized}"
            )
            return record.model_copy(deep=True)
