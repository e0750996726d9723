# indexer_launcher/core/models.py
"""
Indexer Launcher – shared data models
=====================================

The CLI front end and the launcher communicate through the **typed**,
immutable value objects defined here.  Pydantic gives us validation and
defaults for free; the launcher itself never has to re-check a field.

Avoid adding business logic – flag translation belongs in
`core.launcher`.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from indexer_launcher.core import config as defaults


# ──────────────────────────────────────────────
# 1. Database backends
# ──────────────────────────────────────────────
class DatabaseBackend(str, enum.Enum):
    """Storage backends the indexer service can run against."""
    postgres = "postgres"


# ──────────────────────────────────────────────
# 2. Start command options
# ──────────────────────────────────────────────
class StartOptions(BaseModel):
    """
    Everything `indexer-launcher start` accepts.

    When ``config`` is set the service reads its tuning from that file and
    every field below ``manifest``/``config`` is ignored.
    """
    model_config = ConfigDict(frozen=True)

    manifest: Optional[str] = None
    config: Optional[str] = None

    # Options that always reach the service
    fuel_node_host: str = defaults.FUEL_NODE_HOST
    fuel_node_port: str = defaults.FUEL_NODE_PORT
    web_api_host: str = defaults.WEB_API_HOST
    web_api_port: str = defaults.WEB_API_PORT
    log_level: str = defaults.LOG_LEVEL
    max_body_size: int = Field(default=defaults.MAX_BODY_SIZE, ge=0)
    rate_limit_request_count: Optional[int] = Field(default=None, ge=0)
    rate_limit_window_size: Optional[int] = Field(default=None, ge=0)
    metering_points: int = Field(default=defaults.METERING_POINTS, ge=0)
    block_page_size: int = Field(default=defaults.NODE_BLOCK_PAGE_SIZE, ge=0)

    # Toggles
    embedded_database: bool = False
    rate_limit: bool = False
    indexer_net_config: bool = False
    stop_idle_indexers: bool = False
    replace_indexer: bool = False
    remove_data: bool = False
    accept_sql_queries: bool = False
    run_migrations: bool = False
    metrics: bool = False
    auth_enabled: bool = False
    verbose: bool = False
    local_fuel_node: bool = False
    allow_non_sequential_blocks: bool = False
    disable_toolchain_version_check: bool = False

    # Auth & client
    auth_strategy: Optional[str] = None
    jwt_secret: Optional[str] = None
    jwt_issuer: Optional[str] = None
    jwt_expiry: Optional[int] = Field(default=None, ge=0)
    client_request_delay: Optional[int] = Field(default=None, ge=0)
    network: Optional[str] = None

    # Database
    database: DatabaseBackend = DatabaseBackend(defaults.DATABASE)
    postgres_user: Optional[str] = None
    postgres_password: Optional[str] = None
    postgres_host: Optional[str] = None
    postgres_port: Optional[str] = None
    postgres_database: Optional[str] = None

    @property
    def db_port(self) -> str:
        """Port the (embedded) database is expected to listen on."""
        if self.postgres_port is None:
            return defaults.POSTGRES_PORT
        return self.postgres_port
