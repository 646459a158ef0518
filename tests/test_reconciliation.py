# ============================================================================
# RECONCILIATION + ADMIN TESTS
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Tests - Catalog audit, bootstrap and admin endpoints
# PURPOSE: Verify ReconciliationService, DatabaseInitializer and admin routes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Reconciliation and Admin Tests

Run with:
    pytest tests/test_reconciliation.py -v
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import psycopg
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.models import SchemaDefinition
from infrastructure import DatabaseInitializer
from services.reconciliation_service import AuditReport, ReconciliationService
from api.admin_routes import router, set_admin_services


# ============================================================================
# HELPERS
# ============================================================================

def _definition(name, *fields):
    return SchemaDefinition.declare(name, [{"name": f, "type": "TEXT"} for f in fields])


def _build_service(definitions, tables, columns):
    svc = ReconciliationService(MagicMock())
    svc.catalog_repo = AsyncMock()
    svc.table_manager = AsyncMock()
    svc.catalog_repo.list_all = AsyncMock(return_value=definitions)
    svc.table_manager.list_tables = AsyncMock(return_value=tables)
    svc.table_manager.list_columns = AsyncMock(return_value=columns)
    return svc


def _make_pool(execute_side_effect=None, fetchone=None):
    pool = MagicMock()
    conn_mock = AsyncMock()
    result = MagicMock()
    result.fetchone = AsyncMock(return_value=fetchone)
    conn_mock.execute = AsyncMock(return_value=result, side_effect=execute_side_effect)
    conn_mock.transaction = MagicMock()
    conn_mock.transaction.return_value.__aenter__ = AsyncMock(return_value=None)
    conn_mock.transaction.return_value.__aexit__ = AsyncMock(return_value=False)
    pool.connection.return_value.__aenter__ = AsyncMock(return_value=conn_mock)
    pool.connection.return_value.__aexit__ = AsyncMock(return_value=False)
    return pool, conn_mock


# ============================================================================
# AUDIT
# ============================================================================

class TestAudit:

    def test_consistent(self):
        svc = _build_service(
            [_definition("Receipt", "storeName")],
            ["receipt"],
            {"receipt": ["id", "owner", "store_name"]},
        )

        report = asyncio.run(svc.audit())

        assert report.consistent
        assert report.catalog_count == 1
        assert report.to_dict()["orphaned_tables"] == []

    def test_orphaned_and_missing(self):
        svc = _build_service(
            [_definition("Receipt", "storeName"), _definition("Invoice", "total")],
            ["receipt", "leftover"],
            {"receipt": ["id", "owner", "store_name"], "leftover": ["id", "owner"]},
        )

        report = asyncio.run(svc.audit())

        assert not report.consistent
        assert report.orphaned_tables == ["leftover"]
        assert report.missing_tables == ["Invoice"]
        assert report.column_mismatches == []

    def test_column_mismatch(self):
        svc = _build_service(
            [_definition("Receipt", "storeName", "amount")],
            ["receipt"],
            {"receipt": ["id", "owner", "store_name"]},
        )

        report = asyncio.run(svc.audit())

        assert len(report.column_mismatches) == 1
        mismatch = report.column_mismatches[0]
        assert mismatch.expected == ["id", "owner", "store_name", "amount"]
        assert mismatch.actual == ["id", "owner", "store_name"]
        assert report.to_dict()["column_mismatches"][0]["schema_name"] == "Receipt"


# ============================================================================
# BOOTSTRAP
# ============================================================================

class TestDatabaseInitializer:

    def test_dry_run_executes_nothing_but_connection_test(self):
        pool, conn = _make_pool(fetchone={"version": "PostgreSQL 16.2 on x86_64", "database_name": "app"})

        result = asyncio.run(DatabaseInitializer().initialize_async(pool, dry_run=True))

        assert result.success
        assert [s.name for s in result.steps] == ["test_connection", "deploy_schema"]
        assert conn.execute.await_count == 1
        assert result.steps[1].details["statements_count"] == 5

    def test_execute_runs_all_statements(self):
        pool, conn = _make_pool()
        conn.execute.return_value.fetchone = AsyncMock(
            side_effect=[
                {"version": "PostgreSQL 16.2", "database_name": "app"},
                {"catalog_exists": True, "data_schema_exists": True},
            ]
        )

        result = asyncio.run(DatabaseInitializer().initialize_async(pool))

        assert result.success
        assert [s.status for s in result.steps] == ["success", "success", "success"]
        # connection test + 5 DDL + verification
        assert conn.execute.await_count == 7

    def test_connection_failure_stops_early(self):
        pool, _ = _make_pool(execute_side_effect=psycopg.OperationalError("no route to host"))

        result = asyncio.run(DatabaseInitializer().initialize_async(pool))

        assert not result.success
        assert len(result.steps) == 1
        assert result.to_dict()["summary"]["failed"] == 1


# ============================================================================
# ADMIN ROUTES
# ============================================================================

def _make_test_app(pool, reconciliation_service):
    app = FastAPI()
    app.include_router(router, prefix="/api/v1")
    set_admin_services(pool=pool, reconciliation_service=reconciliation_service)
    return app


class TestAdminRoutes:

    def test_audit(self):
        svc = AsyncMock()
        svc.audit = AsyncMock(return_value=AuditReport(catalog_count=2, table_count=3, orphaned_tables=["x"]))

        resp = TestClient(_make_test_app(MagicMock(), svc)).get("/api/v1/admin/audit")

        assert resp.status_code == 200
        data = resp.json()
        assert data["consistent"] is False
        assert data["orphaned_tables"] == ["x"]

    def test_bootstrap_requires_confirmation(self):
        resp = TestClient(_make_test_app(MagicMock(), AsyncMock())).post("/api/v1/admin/bootstrap")

        assert resp.status_code == 400

    def test_bootstrap_dry_run(self):
        pool, _ = _make_pool(fetchone={"version": "PostgreSQL 16.2", "database_name": "app"})

        resp = TestClient(_make_test_app(pool, AsyncMock())).post(
            "/api/v1/admin/bootstrap", params={"dry_run": "true"}
        )

        assert resp.status_code == 200
        assert resp.json()["dry_run"] is True

    def test_ddl_preview(self):
        resp = TestClient(_make_test_app(MagicMock(), AsyncMock())).get("/api/v1/admin/ddl")

        assert resp.status_code == 200
        assert resp.json()["statements_count"] == 5
