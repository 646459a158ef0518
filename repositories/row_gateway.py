# ============================================================================
# ROW GATEWAY
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Generic DML against caller-declared tables
# PURPOSE: Parameterized insert and owner-filtered select for any schema
# CREATED: 19 OCT 2026
# ============================================================================
"""
Row Gateway

Reads and writes rows of a dynamic table given its SchemaDefinition.

Only sanitized identifiers are composed into statements (sql.Identifier);
every value, including the owner filter, is a bound parameter.

Insert semantics:
    - one value per declared field, in declared order
    - a declared field missing from values is stored as NULL
    - keys that are not declared fields are ignored

Query results are keyed by the caller's field names plus id and owner.
Stored values come back as the driver decodes them (e.g. numeric ->
Decimal); nothing is coerced to the declared types.
"""

from typing import Any, Dict, List, Mapping, Optional

from psycopg import sql
from psycopg.types.json import Json
from psycopg_pool import AsyncConnectionPool

from core.config.defaults import get_defaults
from core.models.schema_definition import FieldDefinition, SchemaDefinition
from core.schema.identifiers import ID_COLUMN, OWNER_COLUMN
from infrastructure.base_repository import BaseRepository

_JSON_TYPES = ("json", "jsonb")


class RowGateway(BaseRepository):
    """Generic insert/select for tables in the data schema."""

    def __init__(self, pool: AsyncConnectionPool, data_schema: Optional[str] = None):
        super().__init__(pool)
        self.data_schema = data_schema or get_defaults().database.data_schema

    def _table(self, definition: SchemaDefinition) -> sql.Identifier:
        return sql.Identifier(self.data_schema, definition.table_name)

    @staticmethod
    def _adapt_value(field: FieldDefinition, value: Any) -> Any:
        """Wrap values psycopg can not adapt on its own."""
        if value is None:
            return None
        if field.sql_type.strip().lower() in _JSON_TYPES or isinstance(value, dict):
            return Json(value)
        return value

    def build_insert(
        self,
        definition: SchemaDefinition,
        owner: str,
        values: Mapping[str, Any],
    ) -> tuple:
        """
        Compose the INSERT statement and its parameters.

        Returns:
            (sql.Composed, list of parameters)
        """
        columns = [sql.Identifier(OWNER_COLUMN)]
        columns.extend(sql.Identifier(f.column_name) for f in definition.fields)

        params: List[Any] = [owner]
        params.extend(self._adapt_value(f, values.get(f.name)) for f in definition.fields)

        stmt = sql.SQL("INSERT INTO {} ({}) VALUES ({})").format(
            self._table(definition),
            sql.SQL(", ").join(columns),
            sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )
        return stmt, params

    def build_select(self, definition: SchemaDefinition, owner: Optional[str] = None) -> tuple:
        """
        Compose the SELECT statement and its parameters.

        Full scan when owner is None, equality filter on owner otherwise.
        """
        columns = [sql.Identifier(ID_COLUMN), sql.Identifier(OWNER_COLUMN)]
        columns.extend(sql.Identifier(c) for c in definition.column_names)

        stmt = sql.SQL("SELECT {} FROM {}").format(
            sql.SQL(", ").join(columns),
            self._table(definition),
        )
        params: List[Any] = []
        if owner is not None:
            stmt = sql.SQL("{} WHERE {} = %s").format(stmt, sql.Identifier(OWNER_COLUMN))
            params.append(owner)
        return stmt, params

    async def insert_row(
        self,
        definition: SchemaDefinition,
        owner: str,
        values: Mapping[str, Any],
    ) -> None:
        """
        Insert one row owned by owner.

        Raises:
            StorageFailureError: the database rejected the row (type mismatch,
                missing table, constraint)
        """
        ignored = sorted(set(values) - set(definition.field_names))
        if ignored:
            self.logger.debug(f"Ignoring undeclared keys for {definition.name}: {ignored}")

        stmt, params = self.build_insert(definition, owner, values)
        with self._error_context("insert row", definition.name):
            async with self.pool.connection() as conn:
                await conn.execute(stmt, params)

    async def query_rows(
        self,
        definition: SchemaDefinition,
        owner: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Select rows, optionally only those of one owner."""
        stmt, params = self.build_select(definition, owner)
        with self._error_context("query rows", definition.name):
            async with self.pool.connection() as conn:
                result = await conn.execute(stmt, params)
                rows = await result.fetchall()

        return [self._row_to_record(definition, row) for row in rows]

    def _row_to_record(self, definition: SchemaDefinition, row: Dict[str, Any]) -> Dict[str, Any]:
        """Re-key a physical row by caller field names."""
        record = {
            ID_COLUMN: str(row[ID_COLUMN]) if row.get(ID_COLUMN) is not None else None,
            OWNER_COLUMN: row[OWNER_COLUMN],
        }
        for f in definition.fields:
            record[f.name] = row.get(f.column_name)
        return record


__all__ = ["RowGateway"]
