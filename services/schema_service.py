# ============================================================================
# SCHEMA SERVICE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Schema lifecycle management
# PURPOSE: Create, inspect and delete schemas; insert and query their rows
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Service

Single entry point for callers. Coordinates the catalog, the dynamic
table manager and the row gateway.

Lifecycle per schema name:
    ABSENT --create--> ACTIVE --delete--> ABSENT
    create on ACTIVE      -> ConflictError
    delete on ABSENT      -> NotFoundError
    insert/query on ABSENT -> NotFoundError

Catalog writes and DDL are separate steps with no shared transaction.
A failure between them leaves an orphaned table, which is logged here
and reported by ReconciliationService.audit().

No schema state is cached in process; every call re-reads the catalog.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from psycopg_pool import AsyncConnectionPool

from core.config.defaults import get_defaults
from core.errors import ConflictError, InvalidRequestError, SchemaRegistryError
from core.logging import ComponentType, get_logger, log_context
from core.models import FieldDefinition, SchemaDefinition
from repositories import DynamicTableManager, RowGateway, SchemaCatalogRepository

logger = get_logger(__name__, ComponentType.SERVICE)


class SchemaService:
    """Service for dynamic schema lifecycle and data access."""

    def __init__(self, pool: AsyncConnectionPool):
        """
        Initialize schema service.

        Args:
            pool: Database connection pool shared by all repositories
        """
        self.pool = pool
        self.catalog_repo = SchemaCatalogRepository(pool)
        self.table_manager = DynamicTableManager(pool)
        self.row_gateway = RowGateway(pool)

    # ----------------------------------------------------------------
    # Schema lifecycle
    # ----------------------------------------------------------------

    async def create_schema(
        self,
        name: str,
        fields: Iterable[Union[FieldDefinition, Mapping[str, Any]]],
    ) -> SchemaDefinition:
        """
        Declare a new schema and create its physical table.

        Args:
            name: Caller-facing schema name
            fields: Ordered field declarations ({"name", "type"} or FieldDefinition)

        Returns:
            The persisted SchemaDefinition

        Raises:
            InvalidIdentifierError: bad name, bad field name, collision
            InvalidRequestError: empty or oversized field list
            ConflictError: name or its physical table name already taken
            StorageFailureError: DDL or catalog write failed
        """
        with log_context(schema_name=name, operation="create_schema"):
            definition = SchemaDefinition.declare(name, fields)

            if await self.catalog_repo.exists(definition.name):
                raise ConflictError(f"Schema with name '{name}' already exists.")
            if await self.catalog_repo.exists_table(definition.table_name):
                raise ConflictError(
                    f"Schema name '{name}' maps to table '{definition.table_name}', "
                    f"which another schema already uses."
                )

            await self.table_manager.create_table(definition.table_name, definition.fields)

            try:
                await self.catalog_repo.insert(definition)
            except ConflictError:
                # Lost a create race; the table belongs to the winner
                logger.warning(f"Concurrent create of schema {name}, keeping existing entry")
                raise
            except SchemaRegistryError:
                logger.error(
                    f"Orphaned table {definition.table_name}: created but catalog "
                    f"write for schema {name} failed"
                )
                raise

            logger.info(
                f"Created schema {name} -> {definition.table_name} "
                f"({len(definition.fields)} fields)"
            )
            return definition

    async def list_schemas(self) -> List[SchemaDefinition]:
        """All declared schemas, oldest first."""
        return await self.catalog_repo.list_all()

    async def get_schema(self, name: str) -> SchemaDefinition:
        """Get a schema by caller name. Raises NotFoundError."""
        return await self.catalog_repo.find_by_name(name)

    async def get_fields(self, name: str) -> List[str]:
        """Declared field names, in order. Raises NotFoundError."""
        definition = await self.catalog_repo.find_by_name(name)
        return definition.field_names

    async def delete_schema(self, name: str) -> Dict[str, str]:
        """
        Remove a schema from the catalog and drop its table.

        Raises:
            NotFoundError: name not in catalog
            StorageFailureError: catalog delete or DROP TABLE failed
        """
        with log_context(schema_name=name, operation="delete_schema"):
            definition = await self.catalog_repo.find_by_name(name)
            await self.catalog_repo.remove(name)

            try:
                await self.table_manager.drop_table(definition.table_name)
            except SchemaRegistryError:
                logger.error(
                    f"Orphaned table {definition.table_name}: schema {name} removed "
                    f"from catalog but drop failed"
                )
                raise

            logger.info(f"Deleted schema {name}")
            return {"message": "Schema removed successfully"}

    # ----------------------------------------------------------------
    # Data
    # ----------------------------------------------------------------

    async def insert_data(
        self,
        name: str,
        owner: str,
        values: Mapping[str, Any],
    ) -> Dict[str, str]:
        """
        Insert one row into a schema's table.

        Declared fields missing from values are stored as NULL; keys that
        are not declared fields are ignored.

        Raises:
            InvalidRequestError: empty/oversized owner, values not a mapping
            NotFoundError: schema not in catalog
            StorageFailureError: database rejected the row
        """
        self._check_owner(owner)
        if not isinstance(values, Mapping):
            raise InvalidRequestError("Values must be an object keyed by field name")

        with log_context(schema_name=name, owner=owner, operation="insert_data"):
            definition = await self.catalog_repo.find_by_name(name)
            await self.row_gateway.insert_row(definition, owner, values)
            logger.debug(f"Inserted row into {definition.table_name}")
            return {"message": "Data inserted successfully"}

    async def query_data(self, name: str, owner: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Rows of a schema, optionally filtered by owner.

        An owner with no rows yields an empty list.

        Raises:
            InvalidRequestError: owner given but empty or oversized
            NotFoundError: schema not in catalog
        """
        if owner is not None:
            self._check_owner(owner)

        with log_context(schema_name=name, owner=owner, operation="query_data"):
            definition = await self.catalog_repo.find_by_name(name)
            return await self.row_gateway.query_rows(definition, owner)

    @staticmethod
    def _check_owner(owner: Any) -> None:
        max_length = get_defaults().schema.owner_max_length
        if not isinstance(owner, str) or not owner:
            raise InvalidRequestError("Owner must be a non-empty string")
        if len(owner) > max_length:
            raise InvalidRequestError(f"Owner exceeds {max_length} characters")


__all__ = ["SchemaService"]
