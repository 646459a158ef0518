# ============================================================================
# CONFIGURATION AND LOGGING TESTS
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Tests - Environment overrides and log context
# PURPOSE: Verify get_defaults() env handling and log_context nesting
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration and Logging Tests

Run with:
    pytest tests/test_config_logging.py -v
"""

import json
import logging

import pytest
from psycopg.rows import dict_row

from core.config.defaults import DatabaseDefaults, SqlTypePolicy, get_defaults, reset_defaults
from core.logging import StructuredFormatter, get_current_context, log_context
from repositories.database import build_pool, get_connection_string, mask_conninfo


@pytest.fixture(autouse=True)
def fresh_defaults():
    reset_defaults()
    yield
    reset_defaults()


class TestDefaults:

    def test_builtin_values(self, monkeypatch):
        for var in ("CATALOG_SCHEMA", "DATA_SCHEMA", "SQL_TYPE_POLICY", "DB_POOL_TIMEOUT_SECONDS"):
            monkeypatch.delenv(var, raising=False)

        defaults = get_defaults()

        assert defaults.database.catalog_schema == "schemareg"
        assert defaults.database.data_schema == "schemareg_data"
        assert defaults.database.pool_timeout_seconds == 10.0
        assert defaults.schema.sql_type_policy == SqlTypePolicy.PASSTHROUGH
        assert defaults.schema.max_fields == 1598

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("DATA_SCHEMA", "tenant_data")
        monkeypatch.setenv("SQL_TYPE_POLICY", "STRICT")
        monkeypatch.setenv("DB_STATEMENT_TIMEOUT_MS", "5000")
        monkeypatch.setenv("AUTO_BOOTSTRAP_SCHEMA", "false")

        defaults = get_defaults()

        assert defaults.database.data_schema == "tenant_data"
        assert defaults.database.statement_timeout_ms == 5000
        assert defaults.database.auto_bootstrap is False
        assert defaults.schema.sql_type_policy == SqlTypePolicy.STRICT

    def test_cached_until_reset(self, monkeypatch):
        first = get_defaults()
        monkeypatch.setenv("DATA_SCHEMA", "changed")
        assert get_defaults() is first
        reset_defaults()
        assert get_defaults().database.data_schema == "changed"


class TestConnectionString:

    def test_database_url_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/app")
        assert get_connection_string() == "postgresql://u:p@db:5432/app"

    def test_components(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("POSTGRES_HOST", "db")
        monkeypatch.setenv("POSTGRES_USER", "reg")
        monkeypatch.setenv("POSTGRES_PASSWORD", "secret")
        monkeypatch.setenv("POSTGRES_DB", "registry")
        monkeypatch.delenv("POSTGRES_PORT", raising=False)
        monkeypatch.delenv("POSTGRES_SSLMODE", raising=False)

        assert get_connection_string() == (
            "postgresql://reg:secret@db:5432/registry?sslmode=prefer"
        )

    def test_mask_hides_credentials(self):
        assert "secret" not in mask_conninfo("postgresql://reg:secret@db:5432/registry")
        assert mask_conninfo("host=db password=secret user=reg") == "host=db password=*** user=reg"

    def test_pool_connections_return_dict_rows(self):
        settings = DatabaseDefaults(pool_min_size=1, pool_max_size=1, statement_timeout_ms=5000)

        pool = build_pool("postgresql://reg@db/registry", settings)

        assert pool.kwargs["row_factory"] is dict_row
        assert pool.kwargs["options"] == "-c statement_timeout=5000"
        assert pool.max_size == 1


class TestLogContext:

    def test_nesting_and_reset(self):
        with log_context(schema_name="Invoice", operation="create_schema"):
            with log_context(owner="user-1", request="abc"):
                ctx = get_current_context()
                assert ctx.schema_name == "Invoice"
                assert ctx.owner == "user-1"
                assert ctx.extra == {"request": "abc"}
            assert get_current_context().owner is None
        assert get_current_context().schema_name is None

    def test_structured_formatter_includes_context(self):
        record = logging.LogRecord("svc", logging.INFO, __file__, 1, "created", None, None)

        with log_context(schema_name="Invoice"):
            payload = json.loads(StructuredFormatter(include_source=False).format(record))

        assert payload["message"] == "created"
        assert payload["context"]["schema_name"] == "Invoice"
        assert "source" not in payload
