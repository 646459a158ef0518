# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Database access layer
# PURPOSE: Catalog CRUD, dynamic DDL and generic row access
# CREATED: 19 OCT 2026
# ============================================================================
"""
Repositories Module

Provides database access for the schema registry.
Uses psycopg3 async with connection pooling.

Usage:
    from repositories import SchemaCatalogRepository, get_pool

    pool = await get_pool()
    catalog = SchemaCatalogRepository(pool)
    definition = await catalog.find_by_name("Invoice")
"""

from .database import get_pool, init_pool, close_pool, DatabasePool
from .catalog_repo import SchemaCatalogRepository
from .table_manager import DynamicTableManager
from .row_gateway import RowGateway

__all__ = [
    "get_pool",
    "init_pool",
    "close_pool",
    "DatabasePool",
    "SchemaCatalogRepository",
    "DynamicTableManager",
    "RowGateway",
]
