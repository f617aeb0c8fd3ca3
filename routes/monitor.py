# ─────────────────────────────────────────────────────────────────
# routes/monitor.py - Liveness Monitor Status
#
# Read-only view of the background monitor owned by the app.
# ─────────────────────────────────────────────────────────────────

from fastapi import APIRouter, Request

from models import MonitorState

router = APIRouter(
    prefix="/api/monitor",
    tags=["Monitor"]
)


@router.get("", response_model=MonitorState)
async def monitor_status(request: Request):
    """
    Whether polling is running and how the last pass went.

    Apps started with the monitor disabled report running=false.
    """
    monitor = getattr(request.app.state, "monitor", None)
    if monitor is None:
        return MonitorState(running=False, interval_seconds=0, passes_completed=0)
    return monitor.state()
