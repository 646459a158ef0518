# ============================================================================
# SCHEMA REGISTRY ERRORS
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Error taxonomy
# PURPOSE: Typed errors shared by repositories, services and the HTTP layer
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Registry Errors

Every failure the core reports is one of these. Each carries a stable
``code`` the HTTP layer maps to a status, and a caller-safe ``message``.

Storage failures never carry the raw driver text in ``message``; the
driver error is logged where it happens and chained via ``__cause__``.
"""

from typing import Any, Dict, Optional


class SchemaRegistryError(Exception):
    """Base exception for schema registry operations."""

    code = "schema_registry_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for API error responses."""
        result = {"error": self.code, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result


class InvalidIdentifierError(SchemaRegistryError):
    """Schema or field name fails the safe-identifier rules."""

    code = "invalid_identifier"

    def __init__(self, message: str, identifier: Optional[str] = None, kind: str = "identifier"):
        self.identifier = identifier
        self.kind = kind
        super().__init__(message, {"kind": kind, "identifier": identifier})


class InvalidFieldTypeError(InvalidIdentifierError):
    """Field SQL type rejected by the strict type policy."""

    code = "invalid_field_type"

    def __init__(self, message: str, sql_type: Optional[str] = None):
        super().__init__(message, identifier=sql_type, kind="sql_type")


class InvalidRequestError(SchemaRegistryError):
    """Request is malformed in a way not tied to an identifier."""

    code = "invalid_request"


class ConflictError(SchemaRegistryError):
    """Schema name (or its physical table name) already exists."""

    code = "conflict"


class NotFoundError(SchemaRegistryError):
    """Schema name is not in the catalog."""

    code = "not_found"


class StorageFailureError(SchemaRegistryError):
    """The database rejected a DDL or DML statement."""

    code = "storage_failure"

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message, {"operation": operation} if operation else None)


class UpstreamFailureError(SchemaRegistryError):
    """An external collaborator (image fetch, OCR, LLM) failed."""

    code = "upstream_failure"


__all__ = [
    "SchemaRegistryError",
    "InvalidIdentifierError",
    "InvalidFieldTypeError",
    "InvalidRequestError",
    "ConflictError",
    "NotFoundError",
    "StorageFailureError",
    "UpstreamFailureError",
]
