# ─────────────────────────────────────────────────────────────────
# main.py - Application Entry Point
#
# Builds the FastAPI app, wires in the routers, and owns the single
# DeviceMonitor for the process:
#
#   startup  → monitor.start()  (immediate pass, then every interval)
#   shutdown → monitor.stop()   (no new passes)
#              monitor.drain()  (a running pass gets a short grace period)
#
# Run with:  uvicorn main:app
# ─────────────────────────────────────────────────────────────────

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from config import MONITOR
from database import devices_db
from logging_config import configure_logging
from monitor import DeviceMonitor
from prober import PingProber
from routes import devices, monitor as monitor_routes

configure_logging()
logger = logging.getLogger("main")


def build_monitor() -> DeviceMonitor:
    prober = PingProber(
        wait_seconds=MONITOR["ping_wait_seconds"],
        timeout=MONITOR["probe_timeout_seconds"],
    )
    return DeviceMonitor(
        devices_db,
        prober,
        interval_seconds=MONITOR["interval_seconds"],
        max_concurrent_probes=MONITOR["max_concurrent_probes"],
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not MONITOR["enabled"]:
        logger.info("Device monitor disabled (MONITOR_ENABLED=false)")
        yield
        return

    device_monitor = build_monitor()
    app.state.monitor = device_monitor
    device_monitor.start()
    try:
        yield
    finally:
        device_monitor.stop()
        await device_monitor.drain(MONITOR["shutdown_grace_seconds"])


app = FastAPI(
    title="Pulse Home",
    description="Home-lab dashboard backend with device liveness monitoring",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(devices.router)
app.include_router(monitor_routes.router)


@app.get("/")
def root():
    return {
        "message": "Pulse Home is running",
        "version": "1.0.0",
        "docs": "/docs"
    }
