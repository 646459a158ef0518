# ============================================================================
# ADMIN API ROUTES
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Infrastructure - Bootstrap and audit endpoints
# PURPOSE: HTTP endpoints for catalog deployment and consistency checks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Admin API Routes

ENDPOINT SUMMARY:
-----------------
| Endpoint         | Behavior                              | Destructive? |
|------------------|---------------------------------------|--------------|
| GET  /ddl        | Preview catalog DDL                   | No           |
| POST /bootstrap  | Create schemas + catalog (idempotent) | No (safe)    |
| GET  /audit      | Catalog vs data schema report         | No           |

These endpoints are intended for operational use, not regular API consumers.
"""

import logging

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from core.errors import SchemaRegistryError
from infrastructure import DatabaseInitializer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_pool = None
_reconciliation_service = None


def set_admin_services(pool, reconciliation_service) -> None:
    """Set pool and audit service for dependency injection."""
    global _pool, _reconciliation_service
    _pool = pool
    _reconciliation_service = reconciliation_service


def _get_pool():
    if _pool is None:
        raise HTTPException(503, "Database pool not initialized")
    return _pool


def _get_reconciliation_service():
    if _reconciliation_service is None:
        raise HTTPException(503, "Reconciliation service not initialized")
    return _reconciliation_service


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/ddl")
async def get_ddl_preview():
    """Catalog DDL generated from the Pydantic models, without executing."""
    statements = DatabaseInitializer().render_ddl()
    return {"statements_count": len(statements), "statements": statements}


@router.post("/bootstrap")
async def bootstrap(
    confirm: str = Query(None, description="Must be 'yes' to execute"),
    dry_run: bool = Query(False, description="Preview SQL without executing"),
):
    """
    Deploy the catalog and data schemas.

    Operations are idempotent (safe to run multiple times).
    """
    if not dry_run and confirm != "yes":
        return JSONResponse(
            status_code=400,
            content={
                "error": "Confirmation required",
                "message": "Add ?confirm=yes to execute, or ?dry_run=true to preview",
                "example": "POST /api/v1/admin/bootstrap?confirm=yes"
            }
        )

    pool = _get_pool()
    result = await DatabaseInitializer().initialize_async(pool, dry_run=dry_run)

    return JSONResponse(
        status_code=200 if result.success else 500,
        content=result.to_dict()
    )


@router.get("/audit")
async def audit():
    """
    Compare the catalog with the tables in the data schema.

    Reports orphaned tables, catalog entries whose table is missing,
    and tables whose columns differ from the declaration.
    """
    service = _get_reconciliation_service()
    try:
        report = await service.audit()
    except SchemaRegistryError as e:
        logger.error(f"Audit failed: {e.message}")
        raise HTTPException(status_code=500, detail=e.to_dict())
    return report.to_dict()


__all__ = ["router", "set_admin_services"]
