"""Seed records for the VM inventory."""

from datetime import datetime, timedelta, timezone

from vmchat_server.models.vms import VmRecord


def seed_vms(now: datetime | None = None) -> list[VmRecord]:
    """Build the fixed set of VMs the server starts with.

    Args:
        now: Reference time for the relative boot timestamps. Defaults to
             the current UTC time.

    Returns:
        list[VmRecord]: Fresh records, in id order.
    """
    now = now or datetime.now(timezone.utc)
    return [
        VmRecord(
            id=101,
            name="DEV-W11-01",
            os="Windows 11 Enterprise",
            os_version="23H2",
            power_state="running",
            cpu_cores=4,
            memory_gb=16,
            disk_gb=256,
            ip_address="10.10.1.21",
            owner="dev-team",
            environment="dev",
            tags=["windows", "w11", "frontend"],
            last_boot_utc=now - timedelta(hours=6),
            notes="Primary Windows 11 dev box.",
        ),
        VmRecord(
            id=102,
            name="QA-W11-EDGE",
            os="Windows 11 Pro",
            os_version="22H2",
            power_state="stopped",
            cpu_cores=2,
            memory_gb=8,
            disk_gb=128,
            ip_address=None,
            owner="qa-team",
            environment="qa",
            tags=["windows", "w11", "edge"],
            last_boot_utc=now - timedelta(days=2),
            notes="Used for Edge regression.",
        ),
    ]
