# ============================================================================
# SCHEMA MODULE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Identifier handling and DDL generation
# PURPOSE: Safe identifiers and PostgreSQL DDL for catalog and data tables
# CREATED: 19 OCT 2026
# ============================================================================

from core.schema.identifiers import (
    IDENTIFIER_PATTERN,
    is_valid_identifier,
    is_valid_sql_type,
    sanitize,
    validate_identifier,
    physical_name,
)
from core.schema.ddl_utils import IndexBuilder, SchemaUtils, clip_identifier
from core.schema.sql_generator import PydanticToSQL

__all__ = [
    # Identifiers
    "IDENTIFIER_PATTERN",
    "is_valid_identifier",
    "is_valid_sql_type",
    "sanitize",
    "validate_identifier",
    "physical_name",
    # Generator
    "PydanticToSQL",
    # Utilities
    "IndexBuilder",
    "clip_identifier",
    "SchemaUtils",
]
