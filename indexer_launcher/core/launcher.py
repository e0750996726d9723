# indexer_launcher/core/launcher.py
"""
Indexer Launcher – service process bootstrapper
===============================================

This module is *purely* responsible for translating StartOptions into the
command-line flags of `fuel-indexer run` and spawning that process.  When an
embedded database was requested it also runs one delayed port lookup to
confirm the database came up.

Public helpers
--------------
• build_flags(options)                   -> List[str]
• build_service_cmd(options)             -> List[str]
• build_port_lookup_cmd(port)            -> List[str]
• confirm_embedded_database(port)        -> str
• start_service(options)                 -> subprocess.Popen

The CLI calls **start_service** – it doesn't need to know any flag names.
The spawned service is not supervised: we log its PID and move on.
"""

from __future__ import annotations

import math
import shlex
import subprocess
import sys
import time
from typing import List, Optional, Sequence, Tuple

from indexer_launcher.core import config
from indexer_launcher.core.models import DatabaseBackend, StartOptions


class LaunchError(RuntimeError):
    """A child process could not be spawned."""

    def __init__(self, cmd: Sequence[str], exc: OSError):
        self.cmd = list(cmd)
        self.exc = exc
        super().__init__(f"Failed to spawn {self.cmd[0]} child process: {exc!r}")


class UnsupportedDatabaseError(AssertionError):
    """A database backend we have no translation for reached the launcher."""


# ──────────────────────────────────────────────
# 1. Flag tables
# ──────────────────────────────────────────────
# (flag, StartOptions field); order is the order on the command line
_BOOL_FLAGS: Tuple[Tuple[str, str], ...] = (
    ("--embedded-database", "embedded_database"),
    ("--rate-limit", "rate_limit"),
    ("--indexer-net-config", "indexer_net_config"),
    ("--stop-idle-indexers", "stop_idle_indexers"),
    ("--replace-indexer", "replace_indexer"),
    ("--remove-data", "remove_data"),
    ("--accept-sql-queries", "accept_sql_queries"),
    ("--run-migrations", "run_migrations"),
    ("--metrics", "metrics"),
    ("--auth-enabled", "auth_enabled"),
    ("--verbose", "verbose"),
    ("--local-fuel-node", "local_fuel_node"),
    ("--allow-non-sequential-blocks", "allow_non_sequential_blocks"),
    ("--disable-toolchain-version-check", "disable_toolchain_version_check"),
)

_OPTIONAL_FLAGS: Tuple[Tuple[str, str], ...] = (
    ("--auth-strategy", "auth_strategy"),
    ("--jwt-secret", "jwt_secret"),
    ("--jwt-issuer", "jwt_issuer"),
    ("--jwt-expiry", "jwt_expiry"),
    ("--client-request-delay", "client_request_delay"),
    ("--network", "network"),
)

_POSTGRES_FLAGS: Tuple[Tuple[str, str], ...] = (
    ("--postgres-user", "postgres_user"),
    ("--postgres-password", "postgres_password"),
    ("--postgres-host", "postgres_host"),
    ("--postgres-port", "postgres_port"),
    ("--postgres-database", "postgres_database"),
)


def _optional_pairs(options: StartOptions, table: Sequence[Tuple[str, str]]) -> List[str]:
    args: List[str] = []
    for flag, field in table:
        value = getattr(options, field)
        if value is not None:
            args += [flag, str(value)]
    return args


def _database_flags(options: StartOptions) -> List[str]:
    backend = options.database
    if backend == DatabaseBackend.postgres:
        return _optional_pairs(options, _POSTGRES_FLAGS)

    # StartOptions validation makes this unreachable for well-formed input
    raise UnsupportedDatabaseError(
        f"'postgres' is currently the only supported database option, got {backend!r}"
    )


# ──────────────────────────────────────────────
# 2. Build launch arguments
# ──────────────────────────────────────────────
def build_flags(options: StartOptions) -> List[str]:
    """
    Translate StartOptions into the `fuel-indexer run` flag vector.

    With a config file only `--manifest` and `--config` are passed; the
    service reads everything else from the file.
    """
    args: List[str] = []

    if options.manifest is not None:
        args += ["--manifest", options.manifest]

    if options.config is not None:
        args += ["--config", options.config]
        return args

    request_count = options.rate_limit_request_count
    if request_count is None:
        request_count = config.RATE_LIMIT_REQUEST_COUNT
    window_size = options.rate_limit_window_size
    if window_size is None:
        window_size = config.RATE_LIMIT_WINDOW_SIZE

    # Options with default values
    args += [
        "--fuel-node-host", options.fuel_node_host,
        "--fuel-node-port", options.fuel_node_port,
        "--web-api-host", options.web_api_host,
        "--web-api-port", options.web_api_port,
        "--log-level", options.log_level,
        "--max-body-size", str(options.max_body_size),
        "--rate-limit-request-count", str(request_count),
        "--rate-limit-window-size", str(window_size),
        "--metering-points", str(options.metering_points),
        "--block-page-size", str(options.block_page_size),
    ]

    args += [flag for flag, field in _BOOL_FLAGS if getattr(options, field)]
    args += _optional_pairs(options, _OPTIONAL_FLAGS)
    args += _database_flags(options)

    return args


def build_service_cmd(options: StartOptions) -> List[str]:
    """Compose the full argument vector for subprocess.Popen()."""
    return [config.SERVICE_BINARY, config.SERVICE_SUBCOMMAND, *build_flags(options)]


def build_port_lookup_cmd(port: str) -> List[str]:
    return [config.PORT_LOOKUP_BINARY, f"-ti:{port}"]


# ──────────────────────────────────────────────
# 3. Spawning
# ──────────────────────────────────────────────
def _spawn(cmd: List[str], **kwargs) -> subprocess.Popen:
    try:
        return subprocess.Popen(cmd, **kwargs)
    except OSError as exc:
        err = LaunchError(cmd, exc)
        sys.stderr.write(f"[launcher] {err}\n")
        raise err from exc


def confirm_embedded_database(port: str, verbose: bool = False) -> str:
    """
    List the PIDs bound to the database port and log them.

    The output is informational: an empty list is not treated as failure.
    Only failing to spawn the lookup tool raises (LaunchError).
    """
    cmd = build_port_lookup_cmd(port)
    if verbose:
        sys.stdout.write(f"[launcher] Checking embedded database port: {shlex.join(cmd)}\n")

    proc = _spawn(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    stdout, _ = proc.communicate()
    pids = stdout.decode(errors="replace")
    sys.stdout.write(
        f"[launcher] Successfully confirmed the embedded database process at PID(s) {pids}\n"
    )
    return pids


# ──────────────────────────────────────────────
# 4. Public entry – start the service
# ──────────────────────────────────────────────
def start_service(options: StartOptions, delay: Optional[float] = None) -> subprocess.Popen:
    """
    Spawn the indexer service **non-blocking** and return the Popen handle.

    The flag vector is built (and validated) before anything is spawned.
    With ``embedded_database`` set we sleep ``delay`` seconds (default
    EMBEDDED_DB_STARTUP_DELAY) and then confirm the database port.  The
    port lookup runs even with a config file, where the service reads its
    database settings from that file.
    """
    if delay is None:
        delay = config.EMBEDDED_DB_STARTUP_DELAY
    if not math.isfinite(delay) or delay < 0:
        raise ValueError(f"embedded database delay must be a non-negative number, got {delay!r}")

    cmd = build_service_cmd(options)

    if options.verbose:
        sys.stdout.write(f"[launcher] Starting indexer service: {shlex.join(cmd)}\n")

    proc = _spawn(cmd)
    sys.stdout.write(f"[launcher] Successfully started the indexer service at PID {proc.pid}\n")

    if options.embedded_database:
        time.sleep(delay)
        confirm_embedded_database(options.db_port, verbose=options.verbose)

    return proc
