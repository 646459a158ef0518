# ============================================================================
# DYNAMIC TABLE MANAGER
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - DDL execution for caller-declared tables
# PURPOSE: Create, drop and introspect physical tables in the data schema
# CREATED: 19 OCT 2026
# ============================================================================
"""
DynamicTable Manager

Issues DDL for the per-schema data tables. Both create and drop are
idempotent: catalog writes and DDL are separate, non-transactional
steps, and re-running DDL is how a partially failed create or delete
is recovered.

Introspection (list_tables, list_columns) serves the catalog auditor.
"""

from typing import Dict, List, Optional, Sequence

from psycopg_pool import AsyncConnectionPool

from core.config.defaults import get_defaults
from core.models.schema_definition import FieldDefinition
from core.schema.dynamic_ddl import DynamicTableDDL
from infrastructure.base_repository import BaseRepository


class DynamicTableManager(BaseRepository):
    """DDL executor for tables in the data schema."""

    def __init__(
        self,
        pool: AsyncConnectionPool,
        data_schema: Optional[str] = None,
        owner_max_length: Optional[int] = None,
    ):
        super().__init__(pool)
        defaults = get_defaults()
        self.data_schema = data_schema or defaults.database.data_schema
        self.ddl = DynamicTableDDL(
            self.data_schema,
            owner_max_length=owner_max_length or defaults.schema.owner_max_length,
        )

    async def create_table(self, table_name: str, fields: Sequence[FieldDefinition]) -> None:
        """
        CREATE TABLE IF NOT EXISTS with id, owner and one column per field.

        A no-op when the table already exists, whatever its columns.

        Raises:
            StorageFailureError: the database rejected the DDL (e.g. bad type token)
        """
        statements = self.ddl.create_table(table_name, fields)
        with self._error_context("create table", table_name):
            async with self.pool.connection() as conn:
                for stmt in statements:
                    await conn.execute(stmt)
        self.logger.info(
            f"Ensured table {self.data_schema}.{table_name} ({len(fields)} fields)"
        )

    async def drop_table(self, table_name: str) -> None:
        """DROP TABLE IF EXISTS. Idempotent."""
        with self._error_context("drop table", table_name):
            async with self.pool.connection() as conn:
                await conn.execute(self.ddl.drop_table(table_name))
        self.logger.info(f"Dropped table {self.data_schema}.{table_name}")

    async def list_tables(self) -> List[str]:
        """Names of all base tables currently in the data schema."""
        with self._error_context("list tables", self.data_schema):
            async with self.pool.connection() as conn:
                result = await conn.execute(
                    """
                    SELECT table_name FROM information_schema.tables
                    WHERE table_schema = %s AND table_type = 'BASE TABLE'
                    ORDER BY table_name
                    """,
                    (self.data_schema,),
                )
                rows = await result.fetchall()
                return [row["table_name"] for row in rows]

    async def list_columns(self) -> Dict[str, List[str]]:
        """Column names per table in the data schema, in ordinal order."""
        with self._error_context("list columns", self.data_schema):
            async with self.pool.connection() as conn:
                result = await conn.execute(
                    """
                    SELECT table_name, column_name FROM information_schema.columns
                    WHERE table_schema = %s
                    ORDER BY table_name, ordinal_position
                    """,
                    (self.data_schema,),
                )
                rows = await result.fetchall()

        columns: Dict[str, List[str]] = {}
        for row in rows:
            columns.setdefault(row["table_name"], []).append(row["column_name"])
        return columns


__all__ = ["DynamicTableManager"]
