# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for database access and schema validation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the schema registry.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SqlTypePolicy(str, Enum):
    """How caller-supplied field types are checked before reaching DDL."""
    PASSTHROUGH = "passthrough"
    STRICT = "strict"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class DatabaseDefaults:
    """
    Defaults for database layout and connection handling.

    Catalog and data tables live in separate PostgreSQL schemas so a
    caller-declared schema can never shadow the catalog table.
    """
    # Layout
    catalog_schema: str = "schemareg"
    data_schema: str = "schemareg_data"
    catalog_table: str = "schema_catalog"

    # Pool sizing
    pool_min_size: int = 2
    pool_max_size: int = 10

    # Timeouts
    pool_timeout_seconds: float = 10.0  # wait for a free connection
    statement_timeout_ms: int = 30000  # per statement, server side

    # Create catalog schema/table at startup
    auto_bootstrap: bool = True

    @classmethod
    def from_env(cls) -> "DatabaseDefaults":
        """Create from environment variables."""
        return cls(
            catalog_schema=os.getenv("CATALOG_SCHEMA", "schemareg"),
            data_schema=os.getenv("DATA_SCHEMA", "schemareg_data"),
            pool_min_size=int(os.getenv("DB_POOL_MIN_SIZE", 2)),
            pool_max_size=int(os.getenv("DB_POOL_MAX_SIZE", 10)),
            pool_timeout_seconds=float(os.getenv("DB_POOL_TIMEOUT_SECONDS", 10.0)),
            statement_timeout_ms=int(os.getenv("DB_STATEMENT_TIMEOUT_MS", 30000)),
            auto_bootstrap=_env_bool("AUTO_BOOTSTRAP_SCHEMA", True),
        )


@dataclass(frozen=True)
class SchemaDefaults:
    """
    Defaults for schema declaration and row ingestion.
    """
    # Row owner column width
    owner_max_length: int = 255

    # PostgreSQL allows 1600 columns; id and owner are always present
    max_fields: int = 1598

    # Field type checking
    sql_type_policy: SqlTypePolicy = SqlTypePolicy.PASSTHROUGH
    allowed_sql_types: frozenset = field(default_factory=lambda: frozenset({
        "smallint", "integer", "int", "bigint",
        "numeric", "decimal", "real", "double precision",
        "boolean", "bool",
        "text", "varchar", "character varying", "char", "character",
        "date", "time", "timestamp", "timestamptz",
        "timestamp with time zone", "timestamp without time zone",
        "interval", "uuid", "json", "jsonb", "bytea",
    }))

    @classmethod
    def from_env(cls) -> "SchemaDefaults":
        """Create from environment variables."""
        return cls(
            owner_max_length=int(os.getenv("OWNER_MAX_LENGTH", 255)),
            sql_type_policy=SqlTypePolicy(os.getenv("SQL_TYPE_POLICY", "passthrough").lower()),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    database: DatabaseDefaults = field(default_factory=DatabaseDefaults)
    schema: SchemaDefaults = field(default_factory=SchemaDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            database=DatabaseDefaults.from_env(),
            schema=SchemaDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SqlTypePolicy",
    "DatabaseDefaults",
    "SchemaDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
