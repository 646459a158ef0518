# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Business logic layer
# PURPOSE: Schema lifecycle and catalog audit services
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

Business logic for the schema registry.
Services coordinate between the catalog, DDL and row repositories.

Usage:
    from services import SchemaService

    schema_service = SchemaService(pool)
    definition = await schema_service.create_schema("Invoice", fields)
"""

from .schema_service import SchemaService
from .reconciliation_service import AuditReport, ColumnMismatch, ReconciliationService

__all__ = [
    "SchemaService",
    "ReconciliationService",
    "AuditReport",
    "ColumnMismatch",
]
