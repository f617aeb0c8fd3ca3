# ─────────────────────────────────────────────────────────────────
# monitor.py - Device Liveness Monitor
#
# All polling logic lives here. This file answers the question:
# "Which devices are reachable right now?"
#
# A DeviceMonitor owns one background asyncio task (the loop) that
# fires a tick every `interval_seconds`. Each tick starts a PASS:
#
#   read all devices -> probe each one -> write each result back
#
# Passes never overlap. If a tick fires while the previous pass is
# still running, that tick is skipped (not queued) and logged.
#
# Nothing that goes wrong inside a pass reaches the loop or the
# server: failures stay with the device they belong to and only
# show up in the logs and in stale last_checked_at timestamps.
# ─────────────────────────────────────────────────────────────────

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from database import DeviceStore
from models import Device, DeviceStatus, MonitorState, PassSummary
from prober import Prober

logger = logging.getLogger("monitor")

DEFAULT_INTERVAL_SECONDS = 60
DEFAULT_MAX_CONCURRENT_PROBES = 8

# Per-device outcomes of a pass besides "online" / "offline"
MISSED = "missed"
FAILED = "failed"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeviceMonitor:
    """
    Keeps every device's status in line with what its probe reports.

    LIFECYCLE:
        Stopped --start()--> Running   immediate pass, then one per interval
        Running --stop()---> Stopped   future ticks cancelled, in-flight pass finishes
        start() while Running and stop() while Stopped do nothing.

    A pass still in flight makes the next tick skip. The one exception is
    start() after stop() while the old pass is running: the immediate
    pass is queued and runs the moment the old one finishes.
    """

    def __init__(
        self,
        store: DeviceStore,
        prober: Prober,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        max_concurrent_probes: int = DEFAULT_MAX_CONCURRENT_PROBES,
    ):
        # A zero interval spins the loop; a zero-sized semaphore never
        # lets a probe through and the first pass hangs forever.
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        if max_concurrent_probes < 1:
            raise ValueError(f"max_concurrent_probes must be at least 1, got {max_concurrent_probes}")

        self.store = store
        self.prober = prober
        self.interval_seconds = interval_seconds
        self.max_concurrent_probes = max_concurrent_probes

        self.passes_completed = 0
        self.last_summary: Optional[PassSummary] = None

        self._loop_task: Optional[asyncio.Task] = None
        self._pass_task: Optional[asyncio.Task] = None
        self._pass_queued = False

    # ── lifecycle ────────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def current_pass(self) -> Optional[asyncio.Task]:
        """The in-flight pass, or the most recent one once it has finished."""
        return self._pass_task

    def start(self):
        """Must be called from inside a running event loop."""
        if self.is_running:
            return

        logger.info(f"🛰️  Starting device monitor (checking every {self.interval_seconds}s)")
        self._loop_task = asyncio.create_task(self._run_forever())

        if self._pass_task is not None and not self._pass_task.done():
            # A pass from before the last stop() is still going: queue
            # exactly one pass to run as soon as it finishes.
            if not self._pass_queued:
                self._pass_queued = True
                self._pass_task.add_done_callback(self._run_queued_pass)
            return

        self._tick()

    def stop(self):
        if not self.is_running:
            return

        # Only the schedule is cancelled; a running pass keeps going
        self._loop_task.cancel()
        self._loop_task = None
        logger.info("🛑 Device monitor stopped")

    async def drain(self, timeout: float) -> bool:
        """
        Waits up to `timeout` seconds for the in-flight pass.

        Past the deadline the pass is cancelled (its probes kill their
        ping processes) and False is returned.
        """
        task = self._pass_task
        if task is None or task.done():
            return True

        try:
            await asyncio.wait_for(task, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Pass still running after {timeout}s, cancelling it")
            return False
        return True

    def _run_queued_pass(self, _finished: asyncio.Task):
        self._pass_queued = False
        if self.is_running:
            self._tick()

    async def _run_forever(self):
        while True:
            await asyncio.sleep(self.interval_seconds)
            self._tick()

    def _tick(self) -> bool:
        if self._pass_task is not None and not self._pass_task.done():
            logger.warning("⏭️  Previous pass still running, skipping this tick")
            return False

        self._pass_task = asyncio.create_task(self.run_pass())
        return True

    def state(self) -> MonitorState:
        return MonitorState(
            running=self.is_running,
            interval_seconds=self.interval_seconds,
            passes_completed=self.passes_completed,
            last_pass=self.last_summary,
        )

    # ── one pass ─────────────────────────────────────────────────

    async def run_pass(self) -> PassSummary:
        """
        Probes every device once and writes each outcome back.

        HOW IT WORKS:
        1. Read a fresh device list. If the store fails, log it and give
           up on this pass; the next tick tries again.
        2. Start one task per device. At most `max_concurrent_probes`
           probes are outstanding at any moment.
        3. Wait for every device task before the pass counts as done.

        Never raises.
        """
        summary = PassSummary(started_at=utcnow())

        try:
            devices = await self.store.list_devices()
        except Exception:
            logger.exception("❌ Could not read the device list, skipping this pass")
            summary.store_error = True
            return self._finish(summary)

        semaphore = asyncio.Semaphore(self.max_concurrent_probes)
        outcomes = await asyncio.gather(
            *(self._check_device(device, semaphore) for device in devices)
        )

        for outcome in outcomes:
            if outcome == DeviceStatus.ONLINE.value:
                summary.online += 1
            elif outcome == DeviceStatus.OFFLINE.value:
                summary.offline += 1
            elif outcome == MISSED:
                summary.missed += 1
            else:
                summary.failed += 1
        summary.checked = summary.online + summary.offline

        return self._finish(summary)

    async def _check_device(self, device: Device, semaphore: asyncio.Semaphore) -> str:
        # A probe that blows up is just an unreachable device
        try:
            async with semaphore:
                reachable = await self.prober.probe(device.ip_address)
        except Exception as err:
            logger.warning(f"Probe error for '{device.id}' ({device.ip_address}): {err}")
            reachable = False

        status = DeviceStatus.ONLINE if reachable else DeviceStatus.OFFLINE
        last_seen_at = utcnow() if reachable else None

        try:
            updated = await self.store.update_device_status(device.id, status, last_seen_at)
        except Exception as err:
            logger.warning(f"Could not save status for '{device.id}': {err}")
            return FAILED

        if updated is None:
            # Deleted while this pass was running
            logger.debug(f"Device '{device.id}' is gone, dropping its result")
            return MISSED

        return status.value

    def _finish(self, summary: PassSummary) -> PassSummary:
        summary.finished_at = utcnow()
        self.passes_completed += 1
        self.last_summary = summary

        logger.info(
            f"✅ Pass done: {summary.online} online, {summary.offline} offline, "
            f"{summary.failed} failed, {summary.missed} gone"
        )
        return summary
