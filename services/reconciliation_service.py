# ============================================================================
# RECONCILIATION SERVICE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Admin - Catalog vs data schema audit
# PURPOSE: Detect orphaned tables, missing tables and column drift
# CREATED: 19 OCT 2026
# ============================================================================
"""
Reconciliation Service

Read-only comparison of the catalog with the tables that actually exist
in the data schema. Nothing is repaired; the report is for operators.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from psycopg_pool import AsyncConnectionPool

from core.logging import ComponentType, get_logger
from core.schema.identifiers import ID_COLUMN, OWNER_COLUMN
from repositories import DynamicTableManager, SchemaCatalogRepository

logger = get_logger(__name__, ComponentType.SERVICE)


@dataclass
class ColumnMismatch:
    """Declared vs live columns of one schema's table."""

    schema_name: str
    table_name: str
    expected: List[str]
    actual: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_name": self.schema_name,
            "table_name": self.table_name,
            "expected": self.expected,
            "actual": self.actual,
        }


@dataclass
class AuditReport:
    """Result of one catalog/table audit."""

    catalog_count: int = 0
    table_count: int = 0
    orphaned_tables: List[str] = field(default_factory=list)
    missing_tables: List[str] = field(default_factory=list)
    column_mismatches: List[ColumnMismatch] = field(default_factory=list)
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def consistent(self) -> bool:
        return not (self.orphaned_tables or self.missing_tables or self.column_mismatches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "consistent": self.consistent,
            "catalog_count": self.catalog_count,
            "table_count": self.table_count,
            "orphaned_tables": self.orphaned_tables,
            "missing_tables": self.missing_tables,
            "column_mismatches": [m.to_dict() for m in self.column_mismatches],
            "checked_at": self.checked_at.isoformat(),
        }


class ReconciliationService:
    """Audits the catalog against the data schema."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool
        self.catalog_repo = SchemaCatalogRepository(pool)
        self.table_manager = DynamicTableManager(pool)

    async def audit(self) -> AuditReport:
        """
        Compare catalog entries with live tables.

        Returns:
            AuditReport with orphaned tables (no catalog entry), missing
            tables (catalog entry without table) and column mismatches.
        """
        definitions = await self.catalog_repo.list_all()
        tables = set(await self.table_manager.list_tables())
        columns = await self.table_manager.list_columns()

        report = AuditReport(catalog_count=len(definitions), table_count=len(tables))
        catalogued = set()

        for definition in definitions:
            catalogued.add(definition.table_name)
            if definition.table_name not in tables:
                report.missing_tables.append(definition.name)
                continue

            expected = [ID_COLUMN, OWNER_COLUMN] + definition.column_names
            actual = columns.get(definition.table_name, [])
            if expected != actual:
                report.column_mismatches.append(
                    ColumnMismatch(
                        schema_name=definition.name,
                        table_name=definition.table_name,
                        expected=expected,
                        actual=actual,
                    )
                )

        report.orphaned_tables = sorted(tables - catalogued)

        if report.consistent:
            logger.info(f"Audit clean: {report.catalog_count} schemas")
        else:
            logger.warning(
                f"Audit found {len(report.orphaned_tables)} orphaned, "
                f"{len(report.missing_tables)} missing, "
                f"{len(report.column_mismatches)} mismatched"
            )
        return report


__all__ = ["AuditReport", "ColumnMismatch", "ReconciliationService"]
