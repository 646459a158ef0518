# ============================================================================
# SCHEMA CATALOG REPOSITORY
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - SchemaDefinition CRUD operations
# PURPOSE: Database access for the schema_catalog table
# CREATED: 19 OCT 2026
# ============================================================================
"""
SchemaCatalog Repository

Persistent store of declared schemas, keyed by the caller's name.
Authoritative for which schemas the system believes exist.

UNIQUE(name) and UNIQUE(table_name) back the existence checks, so two
concurrent creates of the same name end with one ConflictError instead
of two catalog rows.
"""

from typing import Any, Dict, List, Optional

from psycopg import sql
from psycopg.types.json import Json
from psycopg_pool import AsyncConnectionPool

from core.config.defaults import get_defaults
from core.errors import NotFoundError
from core.models.schema_definition import FieldDefinition, SchemaDefinition
from infrastructure.base_repository import BaseRepository


class SchemaCatalogRepository(BaseRepository):
    """Repository for SchemaDefinition entities."""

    def __init__(
        self,
        pool: AsyncConnectionPool,
        catalog_schema: Optional[str] = None,
        catalog_table: Optional[str] = None,
    ):
        super().__init__(pool)
        settings = get_defaults().database
        self.table = sql.Identifier(
            catalog_schema or settings.catalog_schema,
            catalog_table or settings.catalog_table,
        )

    async def exists(self, name: str) -> bool:
        """True if a schema with this caller name is in the catalog."""
        with self._error_context("catalog lookup", name):
            async with self.pool.connection() as conn:
                result = await conn.execute(
                    sql.SQL("SELECT 1 FROM {} WHERE name = %s").format(self.table),
                    (name,),
                )
                return await result.fetchone() is not None

    async def exists_table(self, table_name: str) -> bool:
        """True if any catalog entry already owns this physical table name."""
        with self._error_context("catalog lookup", table_name):
            async with self.pool.connection() as conn:
                result = await conn.execute(
                    sql.SQL("SELECT 1 FROM {} WHERE table_name = %s").format(self.table),
                    (table_name,),
                )
                return await result.fetchone() is not None

    async def insert(self, definition: SchemaDefinition) -> SchemaDefinition:
        """
        Persist a new catalog entry.

        Raises:
            ConflictError: name or table_name already present.
        """
        with self._error_context(
            "catalog insert",
            definition.name,
            conflict_message=f"Schema with name '{definition.name}' already exists.",
        ):
            async with self.pool.connection() as conn:
                await conn.execute(
                    sql.SQL("""
                        INSERT INTO {} (
                            id, name, table_name, fields, created_at, updated_at
                        ) VALUES (
                            %(id)s, %(name)s, %(table_name)s, %(fields)s,
                            %(created_at)s, %(updated_at)s
                        )
                    """).format(self.table),
                    {
                        "id": definition.id,
                        "name": definition.name,
                        "table_name": definition.table_name,
                        "fields": Json([f.model_dump(by_alias=True) for f in definition.fields]),
                        "created_at": definition.created_at,
                        "updated_at": definition.updated_at,
                    },
                )
        self.logger.info(f"Catalogued schema {definition.name} -> {definition.table_name}")
        return definition

    async def get(self, name: str) -> Optional[SchemaDefinition]:
        """Get a catalog entry by caller name, or None."""
        with self._error_context("catalog lookup", name):
            async with self.pool.connection() as conn:
                result = await conn.execute(
                    sql.SQL("SELECT * FROM {} WHERE name = %s").format(self.table),
                    (name,),
                )
                row = await result.fetchone()
                return self._row_to_model(row) if row else None

    async def find_by_name(self, name: str) -> SchemaDefinition:
        """
        Get a catalog entry by caller name.

        Raises:
            NotFoundError: name not in catalog.
        """
        definition = await self.get(name)
        if definition is None:
            raise NotFoundError(f"Schema with name '{name}' not found.")
        return definition

    async def list_all(self) -> List[SchemaDefinition]:
        """List all catalog entries, oldest first."""
        with self._error_context("catalog list"):
            async with self.pool.connection() as conn:
                result = await conn.execute(
                    sql.SQL("SELECT * FROM {} ORDER BY created_at, name").format(self.table)
                )
                rows = await result.fetchall()
                return [self._row_to_model(row) for row in rows]

    async def remove(self, name: str) -> None:
        """
        Delete a catalog entry. Not idempotent.

        Raises:
            NotFoundError: name not in catalog.
        """
        with self._error_context("catalog delete", name):
            async with self.pool.connection() as conn:
                result = await conn.execute(
                    sql.SQL("DELETE FROM {} WHERE name = %s").format(self.table),
                    (name,),
                )
                deleted = result.rowcount
        if deleted == 0:
            raise NotFoundError(f"Schema with name '{name}' not found.")
        self.logger.info(f"Removed schema {name} from catalog")

    def _row_to_model(self, row: Dict[str, Any]) -> SchemaDefinition:
        """Convert a database row to a SchemaDefinition instance."""
        return SchemaDefinition(
            id=str(row["id"]),
            name=row["name"],
            table_name=row["table_name"],
            fields=[FieldDefinition(**f) for f in row.get("fields") or []],
            created_at=row["created_at"],
            updated_at=row.get("updated_at") or row["created_at"],
        )


__all__ = ["SchemaCatalogRepository"]
