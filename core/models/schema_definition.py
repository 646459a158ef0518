# ============================================================================
# SCHEMA DEFINITION MODEL
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Domain model - Caller-declared record type
# PURPOSE: Catalog entry mapping a schema name to its ordered field list
# CREATED: 19 OCT 2026
# ============================================================================
"""
SchemaDefinition Model

One declared dynamic schema. Stored in the catalog table; its fields
drive the DDL of a physical table in the data schema.

Lifecycle:
    1. SchemaDefinition.declare() validates names and types
    2. Physical table created, then the definition is persisted
    3. Never updated in place (no alter path)
    4. Deleted together with its physical table
"""

import uuid
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from core.config.defaults import SchemaDefaults, get_defaults
from core.errors import InvalidRequestError
from core.schema.identifiers import (
    physical_name,
    sanitize,
    validate_field_names,
    validate_sql_type,
)


class FieldDefinition(BaseModel):
    """A single (name, SQL type) pair. Serialized as {"name", "type"}."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., description="Caller field name")
    sql_type: str = Field(..., alias="type", description="PostgreSQL type token")

    @property
    def column_name(self) -> str:
        """Physical column name."""
        return sanitize(self.name)


class SchemaDefinition(BaseModel):
    """
    Declared dynamic schema.
    Maps to: <catalog_schema>.schema_catalog
    """

    # SQL DDL METADATA
    __sql_table__: ClassVar[str] = "schema_catalog"
    __sql_schema__: ClassVar[str] = "schemareg"
    __sql_primary_key__: ClassVar[List[str]] = ["id"]
    __sql_indexes__: ClassVar[List] = [
        {"name": "idx_unique_schema_catalog_name", "columns": ["name"], "unique": True},
        {"name": "idx_unique_schema_catalog_table_name", "columns": ["table_name"], "unique": True},
    ]

    # Identity
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), max_length=36)
    name: str = Field(..., max_length=63, description="Caller schema name")
    table_name: str = Field(..., max_length=63, description="Physical table name")

    # Ordered field list (JSONB)
    fields: List[FieldDefinition] = Field(default_factory=list)

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(populate_by_name=True)

    # ----------------------------------------------------------------
    # Construction
    # ----------------------------------------------------------------

    @classmethod
    def declare(
        cls,
        name: str,
        fields: Iterable[Union[FieldDefinition, Mapping[str, Any]]],
        defaults: SchemaDefaults = None,
    ) -> "SchemaDefinition":
        """
        Validate a caller declaration and build a new definition.

        Raises:
            InvalidIdentifierError: bad schema/field name, collision, reserved column
            InvalidFieldTypeError: missing or disallowed field type
            InvalidRequestError: empty or oversized field list
        """
        defaults = defaults or get_defaults().schema
        table_name = physical_name(name, kind="schema")

        pairs = [cls._unpack_field(f) for f in fields]
        if not pairs:
            raise InvalidRequestError(f"Schema {name!r} must declare at least one field")
        if len(pairs) > defaults.max_fields:
            raise InvalidRequestError(
                f"Schema {name!r} declares {len(pairs)} fields, limit is {defaults.max_fields}"
            )

        validate_field_names([field_name for field_name, _ in pairs])
        checked = [
            FieldDefinition(name=field_name, sql_type=validate_sql_type(sql_type, defaults))
            for field_name, sql_type in pairs
        ]

        return cls(name=name, table_name=table_name, fields=checked)

    @staticmethod
    def _unpack_field(raw: Union[FieldDefinition, Mapping[str, Any]]) -> Tuple[Any, Any]:
        if isinstance(raw, FieldDefinition):
            return raw.name, raw.sql_type
        if not isinstance(raw, Mapping):
            raise InvalidRequestError(f"Field entry {raw!r} must have 'name' and 'type'")
        return raw.get("name"), raw.get("type", raw.get("sql_type"))

    # ----------------------------------------------------------------
    # Accessors
    # ----------------------------------------------------------------

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def column_names(self) -> List[str]:
        return [f.column_name for f in self.fields]

    def column_map(self) -> Dict[str, str]:
        """Physical column name -> caller field name."""
        return {f.column_name: f.name for f in self.fields}


__all__ = ["FieldDefinition", "SchemaDefinition"]
