"""Pydantic models for the virtual machine inventory."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PowerState = Literal["running", "stopped", "suspended"]

POWER_STATES: tuple[str, ...] = ("running", "stopped", "suspended")


class VmRecord(BaseModel):
    """A single virtual machine in the inventory.

    The ``ip_address`` is only ever set while ``power_state`` is ``running``.
    """

    id: int = Field(description="Unique VM identifier")
    name: str = Field(description="VM host name")
    os: str = Field(description="Operating system")
    os_version: str = Field(description="Operating system version/build")
    power_state: PowerState = Field(default="stopped", description="Power state")
    cpu_cores: int = Field(description="Number of virtual CPU cores")
    memory_gb: int = Field(description="Memory in GB")
    disk_gb: int = Field(description="Disk size in GB")
    ip_address: str | None = Field(
        default=None, description="IP address (only while running)"
    )
    owner: str = Field(default="", description="Owning team")
    environment: str = Field(default="", description="Deployment environment")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    last_boot_utc: datetime | None = Field(
        default=None, description="Last boot time in UTC"
    )
    notes: str | None = Field(default=None, description="Operator notes")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 101,
                "name": "DEV-W11-01",
                "os": "Windows 11 Enterprise",
                "os_version": "23H2",
                "power_state": "running",
                "cpu_cores": 4,
                "memory_gb": 16,
                "disk_gb": 256,
                "ip_address": "10.10.1.21",
                "owner": "dev-team",
                "environment": "dev",
                "tags": ["windows", "w11", "frontend"],
                "last_boot_utc": "2026-02-26T04:06:02Z",
                "notes": "Primary Windows 11 dev box.",
            }
        }
    )

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))
