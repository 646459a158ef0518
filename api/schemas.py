# ============================================================================
# API SCHEMAS
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Request/Response schemas
# PURPOSE: Pydantic models for API validation
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Schemas

Request and response models for the API.

Identifier and type rules are enforced by the domain layer, not here,
so a bad name surfaces as invalid_identifier rather than a generic
422 validation error.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from core.models import SchemaDefinition


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class FieldSpec(BaseModel):
    """One declared field."""
    name: Any = None
    type: Any = None


class SchemaCreate(BaseModel):
    """Request to declare a new schema."""
    name: Any = Field(..., description="Caller-facing schema name")
    fields: List[FieldSpec] = Field(..., description="Ordered field declarations")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Invoice",
                    "fields": [
                        {"name": "invoiceDate", "type": "DATE"},
                        {"name": "total", "type": "NUMERIC(10,2)"},
                    ],
                }
            ]
        }
    }


class DataInsert(BaseModel):
    """Request to insert one row."""
    owner: Any = Field(
        ...,
        validation_alias=AliasChoices("owner", "userId"),
        description="Owner tag for the row",
    )
    values: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("values", "analysisResult"),
        description="Field name -> value",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "owner": "user-42",
                    "values": {"invoiceDate": "2026-10-01", "total": 99.5},
                }
            ]
        }
    )


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class FieldResponse(BaseModel):
    name: str
    type: str


class SchemaResponse(BaseModel):
    """Schema definition response."""
    id: str
    name: str
    table_name: str
    fields: List[FieldResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_definition(cls, definition: SchemaDefinition) -> "SchemaResponse":
        return cls(
            id=definition.id,
            name=definition.name,
            table_name=definition.table_name,
            fields=[FieldResponse(name=f.name, type=f.sql_type) for f in definition.fields],
            created_at=definition.created_at,
            updated_at=definition.updated_at,
        )


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error response body (under 'detail')."""
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None


__all__ = [
    "FieldSpec",
    "SchemaCreate",
    "DataInsert",
    "FieldResponse",
    "SchemaResponse",
    "MessageResponse",
    "ErrorResponse",
]
