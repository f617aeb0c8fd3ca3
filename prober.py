# ─────────────────────────────────────────────────────────────────
# prober.py - Reachability Probes
#
# A prober answers one question: "is this address reachable right
# now?" The monitor only depends on the probe() coroutine, so tests
# swap in a fake prober and never touch the network.
#
# PingProber sends a single ICMP echo through the system `ping`
# binary. It runs as an asyncio subprocess, so a slow host only
# suspends its own probe while the API keeps serving requests.
# ─────────────────────────────────────────────────────────────────

import asyncio
import ipaddress
import logging
from typing import Protocol

logger = logging.getLogger("prober")

# Upper bound for a single probe, whatever the configuration says
MAX_PROBE_TIMEOUT = 5.0


class Prober(Protocol):
    async def probe(self, address: str) -> bool:
        ...


class PingProber:
    """
    Probes an address with `ping -c 1 -W <wait_seconds>`.

    HOW IT WORKS:
    1. The address is parsed as an IP first. Anything else (a hostname,
       "192.168.1.300", a string starting with "-") is unreachable
       without spawning a process.
    2. ping runs with an argument vector, never through a shell.
    3. The whole probe is bounded by `timeout`. If ping is still alive
       after that, it is killed and the device counts as unreachable.
    4. Exit code 0 means reachable. Any other exit code, a missing
       ping binary or an OS error means unreachable.

    probe() never raises for a probing failure.
    """

    def __init__(self, wait_seconds: int = 2, timeout: float = MAX_PROBE_TIMEOUT):
        self.wait_seconds = wait_seconds
        self.timeout = min(timeout, MAX_PROBE_TIMEOUT)

    def command(self, address: str) -> list:
        return ["ping", "-c", "1", "-W", str(self.wait_seconds), address]

    async def probe(self, address: str) -> bool:
        try:
            ipaddress.ip_address(address)
        except ValueError:
            logger.debug(f"Not an IP address, treating as unreachable: {address!r}")
            return False

        try:
            process = await asyncio.create_subprocess_exec(
                *self.command(address),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as err:
            # ping missing or not executable
            logger.debug(f"Could not run ping for {address}: {err}")
            return False

        try:
            returncode = await asyncio.wait_for(process.wait(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.debug(f"Ping to {address} timed out after {self.timeout}s")
            await self._kill(process)
            return False
        except asyncio.CancelledError:
            # Shutdown or a cancelled pass; the ping must not outlive us
            self._send_kill(process)
            raise

        return returncode == 0

    @staticmethod
    def _send_kill(process) -> bool:
        try:
            process.kill()
        except ProcessLookupError:
            return False
        return True

    async def _kill(self, process):
        if self._send_kill(process):
            await process.wait()
