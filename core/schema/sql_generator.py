# ============================================================================
# PYDANTIC TO SQL GENERATOR
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - DDL generation from Pydantic models
# PURPOSE: Generate the catalog's PostgreSQL CREATE statements from its model
# CREATED: 19 OCT 2026
# EXPORTS: PydanticToSQL
# DEPENDENCIES: pydantic, psycopg
# ============================================================================
"""
Pydantic to PostgreSQL Schema Generator.

Generates PostgreSQL DDL statements for fixed tables from Pydantic models.
The catalog model is the single source of truth for the catalog table;
caller-declared tables are built separately by core.schema.dynamic_ddl.

Model Metadata Convention:
    Models define SQL metadata via ClassVar attributes:
    - __sql_table__: Table name
    - __sql_schema__: Schema name (overridable per generator)
    - __sql_primary_key__: Primary key column(s) - string or list
    - __sql_indexes__: List of index definitions (tuple or dict)

Usage:
    generator = PydanticToSQL(catalog_schema="schemareg", data_schema="schemareg_data")
    for stmt in generator.generate_all():
        await conn.execute(stmt)
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, Union, get_args, get_origin

from annotated_types import MaxLen
from pydantic import BaseModel
from pydantic.fields import FieldInfo
from psycopg import sql

from core.schema.ddl_utils import IndexBuilder, SchemaUtils

logger = logging.getLogger(__name__)


class PydanticToSQL:
    """
    Convert Pydantic models to PostgreSQL DDL statements.

    Analyzes Pydantic models with __sql_* metadata and generates
    corresponding PostgreSQL CREATE TABLE statements.
    """

    TYPE_MAP = {
        str: "VARCHAR",
        int: "INTEGER",
        float: "DOUBLE PRECISION",
        bool: "BOOLEAN",
        datetime: "TIMESTAMPTZ",
        dict: "JSONB",
        Dict: "JSONB",
        list: "JSONB",
        List: "JSONB",
    }

    def __init__(self, catalog_schema: str = "schemareg", data_schema: str = "schemareg_data"):
        """
        Initialize the generator.

        Args:
            catalog_schema: PostgreSQL schema holding the catalog table
            data_schema: PostgreSQL schema holding caller-declared tables
        """
        self.catalog_schema = catalog_schema
        self.data_schema = data_schema

    # =========================================================================
    # METADATA EXTRACTION
    # =========================================================================

    def get_model_metadata(self, model: Type[BaseModel]) -> Dict[str, Any]:
        """
        Extract SQL DDL metadata from a Pydantic model.

        The generator's catalog_schema wins over the model's __sql_schema__
        so deployments can relocate the catalog.
        """
        primary_key = getattr(model, "__sql_primary_key__", [])
        if isinstance(primary_key, str):
            primary_key = [primary_key]

        return {
            "table": getattr(model, "__sql_table__", None),
            "schema": self.catalog_schema or getattr(model, "__sql_schema__", "public"),
            "primary_key": list(primary_key),
            "indexes": getattr(model, "__sql_indexes__", []),
        }

    # =========================================================================
    # TYPE CONVERSION
    # =========================================================================

    def python_type_to_sql(self, field_type: Type, field_info: FieldInfo) -> str:
        """
        Convert Python type to PostgreSQL type.

        Lists and dicts (including lists of models) become JSONB.
        """
        actual_type = field_type
        origin = get_origin(field_type)

        # Unwrap Optional/Union
        if origin is Union:
            args = [a for a in get_args(field_type) if a is not type(None)]
            actual_type = args[0] if args else str
            origin = get_origin(actual_type)

        if origin in (dict, Dict, list, List):
            return "JSONB"

        # Handle string with max_length
        if actual_type == str:
            for constraint in getattr(field_info, "metadata", None) or []:
                if isinstance(constraint, MaxLen):
                    return f"VARCHAR({constraint.max_length})"
            return "VARCHAR"

        return self.TYPE_MAP.get(actual_type, "JSONB")

    @staticmethod
    def _is_optional(field_type: Type) -> bool:
        return get_origin(field_type) is Union and type(None) in get_args(field_type)

    # =========================================================================
    # TABLE GENERATION
    # =========================================================================

    def generate_table(self, model: Type[BaseModel]) -> sql.Composed:
        """
        Generate CREATE TABLE DDL from a Pydantic model.

        Args:
            model: Pydantic model with __sql_* metadata

        Returns:
            sql.Composed CREATE TABLE statement
        """
        meta = self.get_model_metadata(model)
        table_name = meta["table"]
        schema_name = meta["schema"]
        primary_key = meta["primary_key"]

        if not table_name:
            raise ValueError(f"Model {model.__name__} missing __sql_table__ attribute")

        logger.debug(f"Generating table {schema_name}.{table_name} from {model.__name__}")

        columns = []
        for field_name, field_info in model.model_fields.items():
            sql_type_str = self.python_type_to_sql(field_info.annotation, field_info)

            column_parts = [sql.Identifier(field_name), sql.SQL(" "), sql.SQL(sql_type_str)]

            if not self._is_optional(field_info.annotation) and field_name not in primary_key:
                column_parts.append(sql.SQL(" NOT NULL"))

            if field_name in ("created_at", "updated_at"):
                column_parts.append(sql.SQL(" DEFAULT NOW()"))

            columns.append(sql.SQL("").join(column_parts))

        constraints = []
        if primary_key:
            constraints.append(
                sql.SQL("PRIMARY KEY ({})").format(
                    sql.SQL(", ").join(sql.Identifier(col) for col in primary_key)
                )
            )

        return sql.SQL("CREATE TABLE IF NOT EXISTS {}.{} ({})").format(
            sql.Identifier(schema_name),
            sql.Identifier(table_name),
            sql.SQL(", ").join(columns + constraints),
        )

    # =========================================================================
    # INDEX GENERATION
    # =========================================================================

    def generate_indexes(self, model: Type[BaseModel]) -> List[sql.Composed]:
        """
        Generate CREATE INDEX statements from a model's __sql_indexes__.

        Supports tuple format (name, columns) and dict format with name,
        columns, unique.
        """
        meta = self.get_model_metadata(model)
        result = []

        for idx_def in meta["indexes"]:
            if isinstance(idx_def, tuple):
                name = idx_def[0]
                columns = idx_def[1] if len(idx_def) > 1 else []
                unique = False
            elif isinstance(idx_def, dict):
                name = idx_def.get("name")
                columns = idx_def.get("columns", [])
                unique = idx_def.get("unique", False)
            else:
                continue

            if not columns or not name:
                continue

            builder = IndexBuilder.unique if unique else IndexBuilder.btree
            result.append(builder(meta["schema"], meta["table"], columns, name=name))

        return result

    # =========================================================================
    # COMPLETE SCHEMA GENERATION
    # =========================================================================

    def generate_all(self, models: Optional[List[Type[BaseModel]]] = None) -> List[sql.Composed]:
        """
        Generate complete catalog DDL.

        Creates both PostgreSQL schemas, then each model's table and indexes.
        Every statement is idempotent.
        """
        if models is None:
            from core.models.schema_definition import SchemaDefinition
            models = [SchemaDefinition]

        statements = [
            SchemaUtils.create_schema(self.catalog_schema),
            SchemaUtils.create_schema(self.data_schema),
        ]

        for model in models:
            statements.append(self.generate_table(model))
            statements.extend(self.generate_indexes(model))

        logger.info(
            f"Generated {len(statements)} DDL statements for schemas "
            f"{self.catalog_schema}, {self.data_schema}"
        )
        return statements


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["PydanticToSQL"]
