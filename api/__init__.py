# ============================================================================
# API MODULE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for schema lifecycle, data access and administration
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Module

FastAPI routers for the schema registry. Mounted under /api/v1 by main.py.
"""

from .schema_routes import router as schema_router, set_schema_service
from .admin_routes import router as admin_router, set_admin_services
from .schemas import (
    SchemaCreate,
    DataInsert,
    SchemaResponse,
    MessageResponse,
)

__all__ = [
    "schema_router",
    "admin_router",
    "set_schema_service",
    "set_admin_services",
    "SchemaCreate",
    "DataInsert",
    "SchemaResponse",
    "MessageResponse",
]
