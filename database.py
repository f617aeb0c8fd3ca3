# ─────────────────────────────────────────────────────────────────
# database.py - In-Memory Device Store
#
# This file owns all device storage for the application.
# Routes and the liveness monitor only talk to DeviceStore; if the
# records move to PostgreSQL, only THIS file changes.
#
# The store is shared by the HTTP handlers and the monitor. Every
# method mutates the dictionary without awaiting in between, so on
# the single event loop each call behaves like one atomic row update.
# ─────────────────────────────────────────────────────────────────

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from models import Device, DeviceCreate, DeviceStatus, DeviceUpdate

logger = logging.getLogger("database")


class DeviceStore:
    """
    Device records keyed by id.

    Methods return copies, so callers can never change a stored
    record except through the store's own operations.
    """

    def __init__(self):
        self._devices: Dict[str, Device] = {}

    async def list_devices(self) -> List[Device]:
        return [device.model_copy() for device in self._devices.values()]

    async def get_device(self, device_id: str) -> Optional[Device]:
        device = self._devices.get(device_id)
        return device.model_copy() if device else None

    async def create_device(self, data: DeviceCreate) -> Device:
        # New devices always start as "unknown" until first probed
        device = Device(id=str(uuid.uuid4()), **data.model_dump())
        self._devices[device.id] = device
        logger.info(f"Device created: '{device.id}' ({device.name} @ {device.ip_address})")
        return device.model_copy()

    async def update_device(self, device_id: str, data: DeviceUpdate) -> Optional[Device]:
        """Partial edit of user-owned fields. Status and timestamps are untouched."""
        device = self._devices.get(device_id)
        if device is None:
            return None

        updates = data.model_dump(exclude_unset=True)
        updated = device.model_copy(update=updates)
        self._devices[device_id] = updated
        return updated.model_copy()

    async def update_device_status(
        self,
        device_id: str,
        status: DeviceStatus,
        last_seen_at: Optional[datetime] = None,
    ) -> Optional[Device]:
        """
        Records a probe outcome.

        last_checked_at is always set to now. last_seen_at is only
        written when supplied, so an unreachable device keeps the time
        it was last seen. Returns None if the device no longer exists.
        """
        device = self._devices.get(device_id)
        if device is None:
            return None

        updates = {
            "status": status,
            "last_checked_at": datetime.now(timezone.utc),
        }
        if last_seen_at is not None:
            updates["last_seen_at"] = last_seen_at

        updated = device.model_copy(update=updates)
        self._devices[device_id] = updated
        return updated.model_copy()

    async def delete_device(self, device_id: str) -> bool:
        removed = self._devices.pop(device_id, None)
        if removed is not None:
            logger.info(f"Device deleted: '{device_id}'")
        return removed is not None

    def clear(self):
        self._devices.clear()


# The single store instance shared by the routes and the monitor.
devices_db = DeviceStore()
