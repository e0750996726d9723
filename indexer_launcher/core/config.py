# indexer_launcher/core/config.py
"""
Indexer Launcher – central configuration helper
===============================================

All modules import *only* from this file when they need:
• application constants (name, current launcher version)
• the executables we spawn (service binary, port lookup tool)
• the shared service defaults table (ports, rate limits, page sizes…)

The defaults mirror the ones the indexer service applies itself, so a
flag vector built from an untouched StartOptions starts the service
exactly as `fuel-indexer run` without arguments would.

This file does *not* perform any I/O.  Environment overrides are read
once, at import time.
"""

from __future__ import annotations

import math
import os
import sys
from typing import Any, Dict, Optional

# ──────────────────────────────────────────────
# 1. Application constants
# ──────────────────────────────────────────────
APP_NAME: str = "Indexer Launcher"
APP_ID: str = "indexer-launcher"
LAUNCHER_VERSION: str = "0.1.0"


# ──────────────────────────────────────────────
# 2. Executables
# ──────────────────────────────────────────────
SERVICE_BINARY: str = os.getenv("INDEXER_LAUNCHER_SERVICE_BIN", "fuel-indexer")
SERVICE_SUBCOMMAND: str = "run"

# Lists the PIDs holding a TCP port (`lsof -ti:<port>`)
PORT_LOOKUP_BINARY: str = os.getenv("INDEXER_LAUNCHER_LSOF_BIN", "lsof")

# Seconds to give an embedded database before we look for it.
# Heuristic only – a slow machine may need more.
DEFAULT_DB_STARTUP_DELAY: float = 1.0


def _startup_delay(raw: Optional[str]) -> float:
    """Parse INDEXER_LAUNCHER_DB_DELAY; unusable values fall back to the default."""
    if raw is None:
        return DEFAULT_DB_STARTUP_DELAY
    try:
        value = float(raw)
    except ValueError:
        value = -1.0
    if not math.isfinite(value) or value < 0:
        sys.stderr.write(
            f"[config] ignoring INDEXER_LAUNCHER_DB_DELAY={raw!r}, "
            f"using {DEFAULT_DB_STARTUP_DELAY}s\n"
        )
        return DEFAULT_DB_STARTUP_DELAY
    return value


EMBEDDED_DB_STARTUP_DELAY: float = _startup_delay(os.getenv("INDEXER_LAUNCHER_DB_DELAY"))


# ──────────────────────────────────────────────
# 3. Service defaults
# ──────────────────────────────────────────────
FUEL_NODE_HOST: str = "localhost"
FUEL_NODE_PORT: str = "4000"
WEB_API_HOST: str = "localhost"
WEB_API_PORT: str = "29987"
LOG_LEVEL: str = "info"

DATABASE: str = "postgres"
POSTGRES_PORT: str = "5432"

MAX_BODY_SIZE: int = 5242880                 # 5 MiB
RATE_LIMIT_REQUEST_COUNT: int = 10
RATE_LIMIT_WINDOW_SIZE: int = 5              # seconds
METERING_POINTS: int = 30_000_000_000
NODE_BLOCK_PAGE_SIZE: int = 10


def service_defaults() -> Dict[str, Any]:
    """Return the defaults table keyed by StartOptions field name."""
    return {
        "fuel_node_host": FUEL_NODE_HOST,
        "fuel_node_port": FUEL_NODE_PORT,
        "web_api_host": WEB_API_HOST,
        "web_api_port": WEB_API_PORT,
        "log_level": LOG_LEVEL,
        "database": DATABASE,
        "postgres_port": POSTGRES_PORT,
        "max_body_size": MAX_BODY_SIZE,
        "rate_limit_request_count": RATE_LIMIT_REQUEST_COUNT,
        "rate_limit_window_size": RATE_LIMIT_WINDOW_SIZE,
        "metering_points": METERING_POINTS,
        "block_page_size": NODE_BLOCK_PAGE_SIZE,
    }
