# indexer_launcher/cli.py
"""
Indexer Launcher – command line entry point
===========================================

Run options
-----------
• Installed:   indexer-launcher start --manifest my_indexer.manifest.yaml
• From source: python -m indexer_launcher.cli start --embedded-database
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from indexer_launcher.core import config
from indexer_launcher.core.launcher import LaunchError, start_service
from indexer_launcher.core.models import DatabaseBackend, StartOptions

# dest names of the store_true flags; each maps 1:1 onto a StartOptions field
_TOGGLES = (
    ("embedded_database", "Automatically create and start database using provided options or defaults."),
    ("rate_limit", "Enable rate limiting."),
    ("indexer_net_config", "Allow network configuration via indexer manifests."),
    ("stop_idle_indexers", "Stop indexers that have no more blocks to process."),
    ("replace_indexer", "Replace an existing indexer with the same UID."),
    ("remove_data", "Remove all indexed data when replacing an existing indexer."),
    ("accept_sql_queries", "Allow the web server to accept raw SQL queries."),
    ("run_migrations", "Run database migrations before starting service."),
    ("metrics", "Use Prometheus metrics reporting."),
    ("auth_enabled", "Require users to authenticate for some operations."),
    ("verbose", "Enable verbose logging."),
    ("local_fuel_node", "Start a local Fuel node."),
    ("allow_non_sequential_blocks", "Allow missing blocks or non-sequential block processing."),
    ("disable_toolchain_version_check", "Disable the toolchain version check."),
)


def _flag(dest: str) -> str:
    return "--" + dest.replace("_", "-")


def build_parser() -> argparse.ArgumentParser:
    defaults = config.service_defaults()

    p = argparse.ArgumentParser(
        prog=config.APP_ID,
        description=f"{config.APP_NAME} {config.LAUNCHER_VERSION}",
    )
    sub = p.add_subparsers(dest="command", required=True)

    start = sub.add_parser("start", help="Start a local indexer service")
    start.add_argument("--manifest", help="Indexer manifest file to load at startup")
    start.add_argument("--config", help="Service config file; all other tuning options are ignored")

    start.add_argument("--fuel-node-host", default=defaults["fuel_node_host"])
    start.add_argument("--fuel-node-port", default=defaults["fuel_node_port"])
    start.add_argument("--web-api-host", default=defaults["web_api_host"])
    start.add_argument("--web-api-port", default=defaults["web_api_port"])
    start.add_argument("--log-level", default=defaults["log_level"])
    start.add_argument("--max-body-size", type=int, default=defaults["max_body_size"])
    start.add_argument(
        "--rate-limit-request-count", type=int,
        help=f"Requests per window (default: {defaults['rate_limit_request_count']})",
    )
    start.add_argument(
        "--rate-limit-window-size", type=int,
        help=f"Window size in seconds (default: {defaults['rate_limit_window_size']})",
    )
    start.add_argument("--metering-points", type=int, default=defaults["metering_points"])
    start.add_argument("--block-page-size", type=int, default=defaults["block_page_size"])

    for dest, help_text in _TOGGLES:
        start.add_argument(_flag(dest), dest=dest, action="store_true", help=help_text)

    start.add_argument("--auth-strategy", help="Authentication scheme used (e.g. jwt)")
    start.add_argument("--jwt-secret")
    start.add_argument("--jwt-issuer")
    start.add_argument("--jwt-expiry", type=int, help="Token lifetime in seconds")
    start.add_argument("--client-request-delay", type=int, help="Milliseconds between node requests")
    start.add_argument("--network", help="Network preset to connect to")

    start.add_argument(
        "--database",
        default=defaults["database"],
        choices=[b.value for b in DatabaseBackend],
    )
    start.add_argument("--postgres-user")
    start.add_argument("--postgres-password")
    start.add_argument("--postgres-host")
    start.add_argument("--postgres-port")
    start.add_argument("--postgres-database")

    return p


def options_from_args(args: argparse.Namespace) -> StartOptions:
    fields = {k: v for k, v in vars(args).items() if k != "command"}
    return StartOptions(**fields)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "start":
        try:
            start_service(options_from_args(args))
        except LaunchError:
            # already reported by the launcher
            return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
