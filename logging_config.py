# ─────────────────────────────────────────────────────────────────
# logging_config.py - Logging Setup
#
# basicConfig sets the global format for ALL log messages:
#   %(asctime)s    → timestamp e.g. "2026-03-01 10:34:22"
#   %(levelname)s  → severity e.g. "INFO", "WARNING"
#   %(name)s       → which logger sent this e.g. "monitor"
#   %(message)s    → the actual message
#
# Every module creates its own named logger ("monitor", "prober",
# "routes", "database") so each line shows where it came from.
# ─────────────────────────────────────────────────────────────────

import logging

from config import LOGGING


def configure_logging(level: str = None):
    logging.basicConfig(
        level=level or LOGGING["level"],
        format=LOGGING["format"],
    )
