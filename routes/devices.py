# ─────────────────────────────────────────────────────────────────
# routes/devices.py - Device Management Endpoints
#
# This file owns HTTP request/response logic for devices.
# It does NOT know how probing works (that's monitor.py / prober.py)
# It does NOT know where data is stored (that's database.py)
#
# Users manage name, address and description here. status,
# last_seen_at and last_checked_at are read-only through the API:
# only the liveness monitor writes them.
# ─────────────────────────────────────────────────────────────────

import logging

from fastapi import APIRouter, HTTPException

from database import devices_db
from models import DeviceCreate, DeviceUpdate

logger = logging.getLogger("routes")

router = APIRouter(
    prefix="/api/devices",
    tags=["Devices"]
)


def _not_found(device_id: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail=f"Device '{device_id}' not found"
    )


# ─────────────────────────────────────────────────────────────────
# GET /api/devices - List every device with its latest status
# ─────────────────────────────────────────────────────────────────

@router.get("")
async def list_devices():
    devices = await devices_db.list_devices()
    return {
        "devices": devices,
        "total": len(devices)
    }


# ─────────────────────────────────────────────────────────────────
# GET /api/devices/{device_id} - One device
# ─────────────────────────────────────────────────────────────────

@router.get("/{device_id}")
async def get_device(device_id: str):
    device = await devices_db.get_device(device_id)
    if device is None:
        raise _not_found(device_id)
    return device


# ─────────────────────────────────────────────────────────────────
# POST /api/devices - Register a device
# ─────────────────────────────────────────────────────────────────

@router.post("", status_code=201)
async def create_device(data: DeviceCreate):
    """
    Adds a device to the store with status "unknown".

    The monitor picks it up on its next pass; until then it has no
    last_seen_at / last_checked_at.
    """
    device = await devices_db.create_device(data)

    logger.info(f"✅ Device registered: '{device.id}' | {device.name} | {device.ip_address}")

    return {
        "message": f"Device '{device.name}' created",
        "device": device
    }


# ─────────────────────────────────────────────────────────────────
# PATCH /api/devices/{device_id} - Edit a device
# ─────────────────────────────────────────────────────────────────

@router.patch("/{device_id}")
async def update_device(device_id: str, data: DeviceUpdate):
    device = await devices_db.update_device(device_id, data)
    if device is None:
        raise _not_found(device_id)

    logger.info(f"✏️  Device updated: '{device_id}'")

    return {
        "message": f"Device '{device_id}' updated",
        "device": device
    }


# ─────────────────────────────────────────────────────────────────
# DELETE /api/devices/{device_id} - Remove a device for good
# ─────────────────────────────────────────────────────────────────

@router.delete("/{device_id}")
async def delete_device(device_id: str):
    # A pass already probing this device will find it gone at
    # write-back and drop its result.
    if not await devices_db.delete_device(device_id):
        raise _not_found(device_id)

    logger.info(f"🗑️  Device removed: '{device_id}'")

    return {
        "message": f"Device '{device_id}' deleted",
        "device_id": device_id
    }
