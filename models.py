# ─────────────────────────────────────────────────────────────────
# models.py - Data Models (Pydantic Schemas)
#
# Every data shape in the service lives here: the stored device
# record, the request bodies the API accepts, and the summaries the
# liveness monitor reports about itself.
#
# Pydantic validates incoming JSON before it reaches the store, so
# a malformed IP or MAC address is rejected at the door.
# ─────────────────────────────────────────────────────────────────

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


IPV4_PATTERN = r"^(\d{1,3}\.){3}\d{1,3}$"
MAC_PATTERN = r"^(([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2})?$"


class DeviceStatus(str, Enum):
    """Liveness of a device as last observed by a probe."""

    ONLINE = "online"
    OFFLINE = "offline"
    UNKNOWN = "unknown"  # never probed yet


class Device(BaseModel):
    """
    A device record as held by the store.

    status, last_seen_at and last_checked_at belong to the liveness
    monitor. Nothing the user submits ever sets them.
    """

    id: str
    name: str
    ip_address: str
    mac_address: Optional[str] = None
    device_type: str = "other"
    os: Optional[str] = None
    description: Optional[str] = None
    status: DeviceStatus = DeviceStatus.UNKNOWN
    last_seen_at: Optional[datetime] = None     # last successful probe
    last_checked_at: Optional[datetime] = None  # last probe attempt


class DeviceCreate(BaseModel):
    """
    Request body for POST /api/devices

    {
        "name": "nas",
        "ip_address": "192.168.1.10",
        "mac_address": "aa:bb:cc:dd:ee:ff",
        "device_type": "server"
    }

    Unknown keys (a client sending "status", say) are ignored.
    """

    name: str = Field(min_length=1)
    ip_address: str = Field(pattern=IPV4_PATTERN)
    mac_address: Optional[str] = Field(default=None, pattern=MAC_PATTERN)
    device_type: str = "other"
    os: Optional[str] = None
    description: Optional[str] = None


class DeviceUpdate(BaseModel):
    """Request body for PATCH /api/devices/{id}. Every field is optional."""

    name: Optional[str] = Field(default=None, min_length=1)
    ip_address: Optional[str] = Field(default=None, pattern=IPV4_PATTERN)
    mac_address: Optional[str] = Field(default=None, pattern=MAC_PATTERN)
    device_type: Optional[str] = None
    os: Optional[str] = None
    description: Optional[str] = None


class PassSummary(BaseModel):
    """Outcome of one monitor pass over the device list."""

    started_at: datetime
    finished_at: Optional[datetime] = None
    checked: int = 0   # devices written back (misses excluded)
    online: int = 0
    offline: int = 0
    failed: int = 0    # probe or write raised
    missed: int = 0    # deleted between list and write-back
    store_error: bool = False


class MonitorState(BaseModel):
    running: bool
    interval_seconds: float
    passes_completed: int
    last_pass: Optional[PassSummary] = None
