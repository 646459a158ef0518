# ============================================================================
# DDL UTILITIES
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - DRY utilities for SQL DDL generation
# PURPOSE: Index and schema builders using psycopg.sql
# CREATED: 19 OCT 2026
# EXPORTS: clip_identifier, IndexBuilder, SchemaUtils
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Utilities - Shared SQL Generation Patterns.

All methods return psycopg.sql.Composed objects for safe execution.
No string concatenation - full SQL composition for injection safety.

Usage:
    from core.schema.ddl_utils import IndexBuilder

    idx = IndexBuilder.btree('schemareg_data', 'invoices', ['owner'])
    await conn.execute(idx)
"""

import hashlib
from typing import List, Optional, Sequence, Union

from psycopg import sql

from core.schema.identifiers import MAX_IDENTIFIER_LENGTH


def clip_identifier(name: str) -> str:
    """
    Fit a generated object name into PostgreSQL's 63-byte limit.

    Over-long names keep their first 54 characters plus "$" and 8 hex
    digits of the full name's SHA-1, so names sharing a long prefix stay
    distinct.
    """
    if len(name) <= MAX_IDENTIFIER_LENGTH:
        return name
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
    return f"{name[:MAX_IDENTIFIER_LENGTH - len(digest) - 1]}${digest}"


# ============================================================================
# INDEX BUILDER
# ============================================================================

class IndexBuilder:
    """
    Builder for PostgreSQL index DDL statements.

    All methods are static and return sql.Composed objects.
    """

    @staticmethod
    def _normalize_columns(columns: Union[str, Sequence[str]]) -> List[str]:
        """Convert single column or sequence to list."""
        if isinstance(columns, str):
            return [columns]
        return list(columns)

    @staticmethod
    def _generate_index_name(
        table: str,
        columns: List[str],
        prefix: str = 'idx',
    ) -> str:
        """
        Generate conventional index name, clipped with clip_identifier().
        """
        return clip_identifier(f"{prefix}_{table}_{'_'.join(columns)}")

    @staticmethod
    def _build(
        unique: bool,
        schema: str,
        table: str,
        columns: Union[str, Sequence[str]],
        name: Optional[str],
    ) -> sql.Composed:
        cols = IndexBuilder._normalize_columns(columns)
        idx_name = name or IndexBuilder._generate_index_name(
            table, cols, prefix='idx_unique' if unique else 'idx'
        )

        return sql.SQL("CREATE {unique}INDEX IF NOT EXISTS {name} ON {schema}.{table} ({columns})").format(
            unique=sql.SQL("UNIQUE " if unique else ""),
            name=sql.Identifier(idx_name),
            schema=sql.Identifier(schema),
            table=sql.Identifier(table),
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in cols),
        )

    @staticmethod
    def btree(
        schema: str,
        table: str,
        columns: Union[str, Sequence[str]],
        name: Optional[str] = None,
    ) -> sql.Composed:
        """
        Create B-tree index.

        Args:
            schema: Schema name
            table: Table name
            columns: Column name(s) to index
            name: Optional custom index name
        """
        return IndexBuilder._build(False, schema, table, columns, name)

    @staticmethod
    def unique(
        schema: str,
        table: str,
        columns: Union[str, Sequence[str]],
        name: Optional[str] = None,
    ) -> sql.Composed:
        """Create unique index."""
        return IndexBuilder._build(True, schema, table, columns, name)


# ============================================================================
# SCHEMA UTILITIES
# ============================================================================

class SchemaUtils:
    """
    Utility methods for schema-level DDL operations.
    """

    @staticmethod
    def create_schema(schema: str) -> sql.Composed:
        return sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(schema))

    @staticmethod
    def drop_schema(schema: str) -> sql.Composed:
        """
        DROP SCHEMA CASCADE.

        WARNING: destroys every table in the schema. Test teardown only.
        """
        return sql.SQL("DROP SCHEMA IF EXISTS {} CASCADE").format(sql.Identifier(schema))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'clip_identifier',
    'IndexBuilder',
    'SchemaUtils',
]
