"""
Unit tests for StartOptions -> service flag translation.
"""
import pytest

from indexer_launcher.core import config
from indexer_launcher.core.launcher import (
    UnsupportedDatabaseError,
    build_flags,
    build_port_lookup_cmd,
    build_service_cmd,
)
from indexer_launcher.core.models import StartOptions


BOOL_FIELDS = {
    "embedded_database": "--embedded-database",
    "rate_limit": "--rate-limit",
    "indexer_net_config": "--indexer-net-config",
    "stop_idle_indexers": "--stop-idle-indexers",
    "replace_indexer": "--replace-indexer",
    "remove_data": "--remove-data",
    "accept_sql_queries": "--accept-sql-queries",
    "run_migrations": "--run-migrations",
    "metrics": "--metrics",
    "auth_enabled": "--auth-enabled",
    "verbose": "--verbose",
    "local_fuel_node": "--local-fuel-node",
    "allow_non_sequential_blocks": "--allow-non-sequential-blocks",
    "disable_toolchain_version_check": "--disable-toolchain-version-check",
}

DEFAULT_FLAGS = [
    "--fuel-node-host", "localhost",
    "--fuel-node-port", "4000",
    "--web-api-host", "localhost",
    "--web-api-port", "29987",
    "--log-level", "info",
    "--max-body-size", "5242880",
    "--rate-limit-request-count", "10",
    "--rate-limit-window-size", "5",
    "--metering-points", "30000000000",
    "--block-page-size", "10",
]


def _value_after(args, flag):
    return args[args.index(flag) + 1]


class TestConfigFile:
    """A config file short-circuits every tuning flag."""

    def test_config_only(self):
        opts = StartOptions(config="indexer.yaml", embedded_database=True, metrics=True,
                            jwt_secret="s3cret", postgres_host="db")
        assert build_flags(opts) == ["--config", "indexer.yaml"]

    def test_config_with_manifest(self):
        opts = StartOptions(manifest="a.yaml", config="indexer.yaml", verbose=True)
        assert build_flags(opts) == ["--manifest", "a.yaml", "--config", "indexer.yaml"]


class TestDefaults:
    """Always-present flags and their default substitution."""

    def test_default_options(self, default_options):
        assert build_flags(default_options) == DEFAULT_FLAGS

    def test_manifest_comes_first(self):
        args = build_flags(StartOptions(manifest="a.yaml"))
        assert args[:2] == ["--manifest", "a.yaml"]
        assert args[2:] == DEFAULT_FLAGS

    def test_rate_limit_defaults_when_unset(self, default_options):
        args = build_flags(default_options)
        assert _value_after(args, "--rate-limit-request-count") == str(config.RATE_LIMIT_REQUEST_COUNT)
        assert _value_after(args, "--rate-limit-window-size") == str(config.RATE_LIMIT_WINDOW_SIZE)

    def test_rate_limit_literal_values(self):
        args = build_flags(StartOptions(rate_limit_request_count=0, rate_limit_window_size=60))
        assert _value_after(args, "--rate-limit-request-count") == "0"
        assert _value_after(args, "--rate-limit-window-size") == "60"

    def test_custom_hosts_and_ports_pass_through(self):
        opts = StartOptions(fuel_node_host="beta-4.fuel.network", fuel_node_port="80",
                            web_api_host="0.0.0.0", web_api_port="8080", log_level="debug")
        args = build_flags(opts)
        assert _value_after(args, "--fuel-node-host") == "beta-4.fuel.network"
        assert _value_after(args, "--fuel-node-port") == "80"
        assert _value_after(args, "--web-api-host") == "0.0.0.0"
        assert _value_after(args, "--web-api-port") == "8080"
        assert _value_after(args, "--log-level") == "debug"


class TestBooleanFlags:
    """Each true toggle yields exactly one valueless flag."""

    @pytest.mark.parametrize("field,flag", sorted(BOOL_FIELDS.items()))
    def test_single_toggle(self, field, flag):
        args = build_flags(StartOptions(**{field: True}))
        assert args.count(flag) == 1
        assert args[:len(DEFAULT_FLAGS)] == DEFAULT_FLAGS
        assert args[len(DEFAULT_FLAGS):] == [flag]

    def test_false_toggles_emit_nothing(self, default_options):
        args = build_flags(default_options)
        for flag in BOOL_FIELDS.values():
            assert flag not in args

    def test_toggle_order_is_fixed(self):
        opts = StartOptions(**{field: True for field in BOOL_FIELDS})
        args = build_flags(opts)
        assert args[len(DEFAULT_FLAGS):] == list(BOOL_FIELDS.values())


class TestOptionalFlags:
    """Optional values appear only when present."""

    def test_unset_optionals_absent(self, default_options):
        args = build_flags(default_options)
        for flag in ("--auth-strategy", "--jwt-secret", "--jwt-issuer", "--jwt-expiry",
                     "--client-request-delay", "--network"):
            assert flag not in args

    def test_numeric_optionals_stringified(self):
        args = build_flags(StartOptions(jwt_expiry=3600, client_request_delay=250))
        assert _value_after(args, "--jwt-expiry") == "3600"
        assert _value_after(args, "--client-request-delay") == "250"

    def test_auth_block(self):
        opts = StartOptions(auth_enabled=True, auth_strategy="jwt", jwt_secret="abc",
                            jwt_issuer="fuel", network="beta-4")
        args = build_flags(opts)
        assert args[len(DEFAULT_FLAGS):] == [
            "--auth-enabled",
            "--auth-strategy", "jwt",
            "--jwt-secret", "abc",
            "--jwt-issuer", "fuel",
            "--network", "beta-4",
        ]


class TestDatabaseDispatch:
    """Postgres connection flags and the unsupported-backend guard."""

    def test_partial_postgres_fields(self):
        opts = StartOptions(postgres_user="indexer", postgres_host="localhost")
        args = build_flags(opts)
        assert args[len(DEFAULT_FLAGS):] == [
            "--postgres-user", "indexer",
            "--postgres-host", "localhost",
        ]

    def test_all_postgres_fields_in_declared_order(self):
        opts = StartOptions(postgres_database="idx", postgres_port="6543",
                            postgres_host="db", postgres_password="pw", postgres_user="u")
        args = build_flags(opts)
        assert args[len(DEFAULT_FLAGS):] == [
            "--postgres-user", "u",
            "--postgres-password", "pw",
            "--postgres-host", "db",
            "--postgres-port", "6543",
            "--postgres-database", "idx",
        ]

    def test_unsupported_backend_is_contract_violation(self):
        opts = StartOptions.model_construct(**{**StartOptions().model_dump(), "database": "sqlite"})
        with pytest.raises(UnsupportedDatabaseError):
            build_flags(opts)

    def test_unsupported_backend_ignored_with_config_file(self):
        opts = StartOptions.model_construct(**{**StartOptions().model_dump(),
                                               "config": "c.yaml", "database": "sqlite"})
        assert build_flags(opts) == ["--config", "c.yaml"]


class TestCommands:
    """Full argument vectors."""

    def test_service_cmd_prefix(self, default_options):
        cmd = build_service_cmd(default_options)
        assert cmd[:2] == [config.SERVICE_BINARY, "run"]
        assert cmd[2:] == DEFAULT_FLAGS

    def test_port_lookup_cmd(self):
        assert build_port_lookup_cmd("5432") == [config.PORT_LOOKUP_BINARY, "-ti:5432"]
