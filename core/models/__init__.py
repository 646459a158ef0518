# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Model exports
# PURPOSE: Central export point for Pydantic models
# CREATED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Models define SQL metadata via __sql_* ClassVar attributes for DDL generation.

Single Source of Truth Pattern:
    - Pydantic models define structure
    - PydanticToSQL reads __sql_* metadata
    - Catalog table generated from models
"""

from core.models.schema_definition import FieldDefinition, SchemaDefinition

__all__ = [
    "FieldDefinition",
    "SchemaDefinition",
]
