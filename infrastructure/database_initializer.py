# ============================================================================
# DATABASE INITIALIZER - INFRASTRUCTURE AS CODE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Infrastructure - Database initialization orchestrator
# PURPOSE: Bootstrap catalog and data schemas from Pydantic models
# CREATED: 19 OCT 2026
# ============================================================================
"""
DatabaseInitializer - Infrastructure as Code for the schema registry.

Provides a standardized workflow for initializing the database:
1. Connection test
2. Schema creation (catalog schema and data schema)
3. Catalog table creation from SchemaDefinition
4. Unique index creation (name, table_name)
5. Verification

Pydantic models are the SINGLE SOURCE OF TRUTH for the catalog layout.
DDL is generated via PydanticToSQL.generate_all(). Per-schema data
tables are not created here; SchemaService creates them on demand.

Usage:
    from infrastructure import DatabaseInitializer

    initializer = DatabaseInitializer()
    result = await initializer.initialize_async(pool)

    # Dry run (show SQL without executing)
    result = await initializer.initialize_async(pool, dry_run=True)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import psycopg
from psycopg_pool import AsyncConnectionPool

from core.config.defaults import DatabaseDefaults, get_defaults
from core.schema.sql_generator import PydanticToSQL

logger = logging.getLogger(__name__)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class StepResult:
    """Result of a single initialization step."""
    name: str
    status: str  # 'success', 'failed', 'skipped'
    message: str = ""
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class InitializationResult:
    """Complete result of database initialization."""
    catalog_schema: str
    data_schema: str
    timestamp: str
    success: bool
    dry_run: bool = False
    steps: List[StepResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "catalog_schema": self.catalog_schema,
            "data_schema": self.data_schema,
            "timestamp": self.timestamp,
            "success": self.success,
            "dry_run": self.dry_run,
            "steps": [
                {
                    "name": s.name,
                    "status": s.status,
                    "message": s.message,
                    "error": s.error,
                    "details": s.details
                }
                for s in self.steps
            ],
            "errors": self.errors,
            "warnings": self.warnings,
            "summary": {
                "total_steps": len(self.steps),
                "successful": len([s for s in self.steps if s.status == "success"]),
                "failed": len([s for s in self.steps if s.status == "failed"]),
                "skipped": len([s for s in self.steps if s.status == "skipped"])
            }
        }


# ============================================================================
# DATABASE INITIALIZER
# ============================================================================

class DatabaseInitializer:
    """
    Database initialization orchestrator.

    All operations are idempotent (safe to run multiple times).
    Database errors are recorded per step, never raised.
    """

    def __init__(self, settings: Optional[DatabaseDefaults] = None):
        self.settings = settings or get_defaults().database
        self.generator = PydanticToSQL(
            catalog_schema=self.settings.catalog_schema,
            data_schema=self.settings.data_schema,
        )

    # ========================================================================
    # DDL GENERATION (Pydantic is the source of truth)
    # ========================================================================

    def generate_ddl(self) -> List:
        """
        Generate DDL statements from Pydantic models.

        Returns:
            List of sql.Composed DDL statements
        """
        return self.generator.generate_all()

    def render_ddl(self) -> List[str]:
        """DDL statements as SQL text, for previews."""
        return [stmt.as_string(None) for stmt in self.generate_ddl()]

    # ========================================================================
    # ASYNC OPERATIONS
    # ========================================================================

    async def initialize_async(
        self,
        pool: AsyncConnectionPool,
        dry_run: bool = False,
    ) -> InitializationResult:
        """
        Initialize catalog and data schemas.

        Args:
            pool: Open connection pool
            dry_run: If True, return DDL preview without executing

        Returns:
            InitializationResult with detailed step results
        """
        result = InitializationResult(
            catalog_schema=self.settings.catalog_schema,
            data_schema=self.settings.data_schema,
            timestamp=datetime.now(timezone.utc).isoformat(),
            success=False,
            dry_run=dry_run,
        )

        logger.info("=" * 70)
        logger.info("SCHEMA REGISTRY - DATABASE INITIALIZATION")
        logger.info(f"   Schemas: {self.settings.catalog_schema}, {self.settings.data_schema}")
        logger.info(f"   Mode: {'DRY RUN' if dry_run else 'EXECUTE'}")
        logger.info("=" * 70)

        # Step 1: Test connection
        step_result = await self._test_connection(pool)
        result.steps.append(step_result)
        if step_result.status == "failed":
            result.errors.append(f"Connection failed: {step_result.error}")
            return result

        # Step 2: Deploy catalog
        step_result = await self._deploy_schema(pool, dry_run=dry_run)
        result.steps.append(step_result)
        if step_result.status == "failed":
            result.errors.append(f"Schema deployment failed: {step_result.error}")

        # Step 3: Verify installation
        if not dry_run:
            step_result = await self._verify_tables(pool)
            result.steps.append(step_result)
            if step_result.status == "failed":
                result.warnings.append(f"Verification issue: {step_result.error}")

        critical_failures = [
            s for s in result.steps
            if s.status == "failed" and s.name != "verify_tables"
        ]
        result.success = len(critical_failures) == 0

        summary = result.to_dict()["summary"]
        logger.info("=" * 70)
        logger.info(f"INITIALIZATION {'COMPLETE' if result.success else 'FAILED'}")
        logger.info(f"   Steps: {summary['successful']} succeeded, {summary['failed']} failed")
        if result.errors:
            logger.warning(f"   Errors: {result.errors}")
        logger.info("=" * 70)

        return result

    async def _test_connection(self, pool: AsyncConnectionPool) -> StepResult:
        """Test database connection."""
        step = StepResult(name="test_connection", status="pending")
        logger.info("Step: Testing database connection...")

        try:
            async with pool.connection() as conn:
                cursor = await conn.execute(
                    "SELECT version() AS version, current_database() AS database_name"
                )
                row = await cursor.fetchone()
                version, database = row["version"], row["database_name"]
                step.status = "success"
                step.message = f"Connected to {database}"
                step.details = {
                    "version": version[:50] + "...",
                    "database": database,
                }
        except psycopg.Error as e:
            step.status = "failed"
            step.error = str(e)
            step.message = "Connection failed"
            logger.error(f"Connection test failed: {e}")

        logger.info(f"   Result: {step.status} - {step.message}")
        return step

    async def _deploy_schema(self, pool: AsyncConnectionPool, dry_run: bool = False) -> StepResult:
        """Deploy catalog DDL in one transaction."""
        step = StepResult(name="deploy_schema", status="pending")
        logger.info("Step: Deploying catalog schema...")

        statements = self.generate_ddl()
        logger.info(f"   Generated {len(statements)} DDL statements from Pydantic models")

        if dry_run:
            step.status = "success"
            step.message = f"[DRY RUN] Would execute {len(statements)} statements"
            step.details = {
                "statements_count": len(statements),
                "statements": self.render_ddl(),
            }
            return step

        try:
            async with pool.connection() as conn:
                async with conn.transaction():
                    for stmt in statements:
                        await conn.execute(stmt)
            step.status = "success"
            step.message = f"Deployed {len(statements)} statements"
            step.details = {
                "statements_executed": len(statements),
                "catalog_schema": self.settings.catalog_schema,
                "data_schema": self.settings.data_schema,
            }
        except psycopg.Error as e:
            step.status = "failed"
            step.error = str(e)
            step.message = "Schema deployment failed"
            logger.error(f"Schema deployment failed: {e}", exc_info=True)

        logger.info(f"   Result: {step.status} - {step.message}")
        return step

    async def _verify_tables(self, pool: AsyncConnectionPool) -> StepResult:
        """Verify the catalog table and data schema exist."""
        step = StepResult(name="verify_tables", status="pending")
        logger.info("Step: Verifying tables...")

        try:
            async with pool.connection() as conn:
                cursor = await conn.execute(
                    """
                    SELECT
                        EXISTS (
                            SELECT 1 FROM information_schema.tables
                            WHERE table_schema = %s AND table_name = %s
                        ) AS catalog_exists,
                        EXISTS (
                            SELECT 1 FROM information_schema.schemata
                            WHERE schema_name = %s
                        ) AS data_schema_exists
                    """,
                    (
                        self.settings.catalog_schema,
                        self.settings.catalog_table,
                        self.settings.data_schema,
                    ),
                )
                row = await cursor.fetchone()
            catalog_exists, data_schema_exists = row["catalog_exists"], row["data_schema_exists"]

            missing = []
            if not catalog_exists:
                missing.append(f"{self.settings.catalog_schema}.{self.settings.catalog_table}")
            if not data_schema_exists:
                missing.append(self.settings.data_schema)

            if missing:
                step.status = "failed"
                step.error = f"Missing: {missing}"
                step.message = f"Verification failed: {len(missing)} objects missing"
            else:
                step.status = "success"
                step.message = "Catalog table and data schema exist"
            step.details = {"missing": missing}
        except psycopg.Error as e:
            step.status = "failed"
            step.error = str(e)
            step.message = "Verification failed"

        logger.info(f"   Result: {step.status} - {step.message}")
        return step


__all__ = ["DatabaseInitializer", "InitializationResult", "StepResult"]
