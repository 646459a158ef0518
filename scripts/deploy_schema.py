#!/usr/bin/env python
# ============================================================================
# SCHEMA DEPLOYMENT SCRIPT
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# PURPOSE: Deploy catalog and data schemas to PostgreSQL using PydanticToSQL
# USAGE:
#   python scripts/deploy_schema.py --dry-run    # Preview SQL
#   python scripts/deploy_schema.py              # Execute deployment
#   python scripts/deploy_schema.py --audit      # Catalog vs tables report
# ============================================================================

import argparse
import asyncio
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from infrastructure import DatabaseInitializer
from repositories.database import DatabasePool
from services import ReconciliationService


async def _deploy(connection: str, verbose: bool) -> bool:
    initializer = DatabaseInitializer()

    async with DatabasePool(connection) as pool:
        result = await initializer.initialize_async(pool)

    print("\n[RESULTS]\n")
    for step in result.steps:
        status_mark = {
            "success": "[OK]",
            "failed": "[FAIL]",
            "skipped": "[SKIP]"
        }.get(step.status, "[?]")

        print(f"{status_mark} {step.name}: {step.message}")
        if step.error:
            print(f"   Error: {step.error}")
        if step.details and verbose:
            for key, value in step.details.items():
                print(f"   {key}: {value}")

    if result.errors:
        for error in result.errors:
            print(f"   - {error}")
    return result.success


async def _audit(connection: str) -> bool:
    async with DatabasePool(connection) as pool:
        report = await ReconciliationService(pool).audit()

    print("\n[AUDIT]\n")
    print(f"Catalog entries: {report.catalog_count}")
    print(f"Tables: {report.table_count}")
    for table in report.orphaned_tables:
        print(f"  orphaned table: {table}")
    for name in report.missing_tables:
        print(f"  missing table for schema: {name}")
    for mismatch in report.column_mismatches:
        print(f"  column mismatch in {mismatch.table_name}: "
              f"expected {mismatch.expected}, found {mismatch.actual}")
    return report.consistent


def main():
    parser = argparse.ArgumentParser(
        description="Deploy schema registry catalog to PostgreSQL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/deploy_schema.py --dry-run     # Preview DDL without executing
  python scripts/deploy_schema.py               # Deploy catalog
  python scripts/deploy_schema.py --audit       # Compare catalog with tables

Environment Variables:
  DATABASE_URL          Full PostgreSQL connection string
  POSTGRES_HOST         Database host (default: localhost)
  POSTGRES_DB           Database name (default: postgres)
  POSTGRES_USER         Database user (default: postgres)
  POSTGRES_PASSWORD     Database password
  POSTGRES_PORT         Database port (default: 5432)
  POSTGRES_SSLMODE      SSL mode (default: prefer)
  CATALOG_SCHEMA        Catalog schema (default: schemareg)
  DATA_SCHEMA           Data schema (default: schemareg_data)
        """
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print DDL without executing"
    )
    parser.add_argument(
        "--audit",
        action="store_true",
        help="Report orphaned tables, missing tables and column drift"
    )
    parser.add_argument(
        "--connection",
        type=str,
        help="PostgreSQL connection string (overrides environment)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    print("=" * 70)
    print("SCHEMA REGISTRY - Schema Deployment")
    print("=" * 70)

    if args.dry_run:
        for i, statement in enumerate(DatabaseInitializer().render_ddl(), 1):
            print(f"[{i}] {statement};")
        print("=" * 70)
        return

    if args.audit:
        ok = asyncio.run(_audit(args.connection))
    else:
        print("\nMode: EXECUTE\n")
        ok = asyncio.run(_deploy(args.connection, verbose=args.verbose))

    print("\n" + "=" * 70)
    if not ok:
        print("Completed with problems")
        sys.exit(1)
    print("Completed successfully")
    print("=" * 70)


if __name__ == "__main__":
    main()
