# ─────────────────────────────────────────────────────────────────
# config.py - Pulse Home Settings
#
# Every setting can be overridden from the environment or from a
# .env file in the working directory. Values are grouped by the
# part of the service that reads them.
# ─────────────────────────────────────────────────────────────────

import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ── DEVICE MONITOR ───────────────────────────────────────────────
# DeviceMonitor rejects an interval <= 0 or a concurrency < 1.
MONITOR = {
    # Turn the background polling off entirely (e.g. on a dev laptop)
    "enabled": _flag("MONITOR_ENABLED", True),

    # Seconds between two passes over the device list
    "interval_seconds": float(os.environ.get("MONITOR_INTERVAL", 60)),

    # ping -W value and the hard limit for one probe (never above 5s)
    "ping_wait_seconds": int(os.environ.get("PING_WAIT", 2)),
    "probe_timeout_seconds": min(float(os.environ.get("PROBE_TIMEOUT", 5)), 5.0),

    # Probes allowed in flight at once during a pass
    "max_concurrent_probes": int(os.environ.get("MONITOR_CONCURRENCY", 8)),

    # How long shutdown waits for a running pass before cancelling it
    "shutdown_grace_seconds": float(os.environ.get("MONITOR_SHUTDOWN_GRACE", 6)),
}

# ── LOGGING ──────────────────────────────────────────────────────
LOGGING = {
    "level": os.environ.get("LOG_LEVEL", "INFO").upper(),
    "format": "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
}
