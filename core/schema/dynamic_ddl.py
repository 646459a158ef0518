# ============================================================================
# DYNAMIC TABLE DDL
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - DDL for caller-declared tables
# PURPOSE: Build CREATE/DROP statements for per-schema data tables
# CREATED: 19 OCT 2026
# EXPORTS: DynamicTableDDL
# DEPENDENCIES: psycopg
# ============================================================================
"""
Dynamic Table DDL.

Every data table has the same fixed prefix followed by one column per
declared field, in declared order:

    id    UUID PRIMARY KEY DEFAULT gen_random_uuid()
    owner VARCHAR(255) NOT NULL
    <column_1> <type_1>
    ...

Table and column names are composed with sql.Identifier. Field types are
composed with sql.SQL verbatim and must pass is_valid_sql_type().

Indexes share the relation namespace with tables. The owner index is named
"<table>$owner"; "$" never occurs in a sanitized table name.
"""

from typing import TYPE_CHECKING, List, Sequence

from psycopg import sql

from core.errors import InvalidFieldTypeError
from core.schema.ddl_utils import IndexBuilder, clip_identifier
from core.schema.identifiers import ID_COLUMN, OWNER_COLUMN, is_valid_sql_type

if TYPE_CHECKING:
    from core.models.schema_definition import FieldDefinition


class DynamicTableDDL:
    """
    Statement builder for tables in the data schema.

    Usage:
        ddl = DynamicTableDDL("schemareg_data")
        for stmt in ddl.create_table("invoices", definition.fields):
            await conn.execute(stmt)
    """

    def __init__(self, data_schema: str, owner_max_length: int = 255):
        self.data_schema = data_schema
        self.owner_max_length = owner_max_length

    def table_identifier(self, table_name: str) -> sql.Identifier:
        return sql.Identifier(self.data_schema, table_name)

    @staticmethod
    def owner_index_name(table_name: str) -> str:
        return clip_identifier(f"{table_name}${OWNER_COLUMN}")

    def create_table(self, table_name: str, fields: Sequence["FieldDefinition"]) -> List[sql.Composed]:
        """
        CREATE TABLE IF NOT EXISTS plus the owner index.

        Returns:
            Statements to run in order, all idempotent.
        """
        for f in fields:
            if not is_valid_sql_type(f.sql_type):
                raise InvalidFieldTypeError(
                    f"Field type {f.sql_type!r} is not a PostgreSQL type name",
                    sql_type=f.sql_type,
                )

        columns = [
            sql.SQL("{} UUID PRIMARY KEY DEFAULT gen_random_uuid()").format(
                sql.Identifier(ID_COLUMN)
            ),
            sql.SQL("{} VARCHAR({}) NOT NULL").format(
                sql.Identifier(OWNER_COLUMN),
                sql.Literal(self.owner_max_length),
            ),
        ]
        columns.extend(
            sql.SQL("{} {}").format(sql.Identifier(f.column_name), sql.SQL(f.sql_type))
            for f in fields
        )

        create = sql.SQL("CREATE TABLE IF NOT EXISTS {} ({})").format(
            self.table_identifier(table_name),
            sql.SQL(", ").join(columns),
        )
        owner_index = IndexBuilder.btree(
            self.data_schema, table_name, [OWNER_COLUMN],
            name=self.owner_index_name(table_name),
        )

        return [create, owner_index]

    def drop_table(self, table_name: str) -> sql.Composed:
        return sql.SQL("DROP TABLE IF EXISTS {}").format(self.table_identifier(table_name))


__all__ = ["DynamicTableDDL"]
