# ============================================================================
# SCHEMA REGISTRY - MAIN APPLICATION
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - FastAPI application entry point
# PURPOSE: Main application wiring pool, bootstrap, services and routers
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Registry Main Application

FastAPI application that:
1. Provides HTTP API for declaring schemas and reading/writing their rows
2. Bootstraps the catalog on startup (AUTO_BOOTSTRAP_SCHEMA)
3. Manages the shared database connection pool

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

import psycopg
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from __version__ import __version__, BUILD_DATE, EPOCH
from api.schema_routes import router as schema_router, set_schema_service
from api.admin_routes import router as admin_router, set_admin_services
from core.config.defaults import get_defaults
from infrastructure import DatabaseInitializer
from repositories.database import init_pool, close_pool, get_pool
from services import SchemaService, ReconciliationService

# Configure logging using our structured logging system
from core.logging import configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Initializes services on startup, cleans up on shutdown.
    """
    logger.info(f"Starting Schema Registry v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")

    # Initialize database pool
    pool = await init_pool()
    logger.info("Database pool initialized")

    if get_defaults().database.auto_bootstrap:
        logger.info("Auto-bootstrap enabled, deploying catalog schema...")
        result = await DatabaseInitializer().initialize_async(pool)
        if result.success:
            logger.info("Schema bootstrap completed successfully")
        else:
            logger.warning(f"Schema bootstrap had issues: {result.errors}")

    schema_service = SchemaService(pool)
    reconciliation_service = ReconciliationService(pool)

    # Set services for API routes
    set_schema_service(schema_service)
    set_admin_services(pool=pool, reconciliation_service=reconciliation_service)

    yield

    # Shutdown
    logger.info("Shutting down Schema Registry...")
    await close_pool()
    logger.info("Schema Registry stopped")


# Create FastAPI app
app = FastAPI(
    title="Schema Registry",
    description=f"Epoch {EPOCH} dynamic schema registry",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(schema_router, prefix="/api/v1")

# Include admin routes (bootstrap, audit)
app.include_router(admin_router, prefix="/api/v1")


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Schema Registry",
        "version": __version__,
        "epoch": EPOCH,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Database round trip through the shared pool."""
    try:
        pool = await get_pool()
        async with pool.connection() as conn:
            await conn.execute("SELECT 1")
    except psycopg.Error as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "unreachable"})
    return {"status": "healthy", "database": "ok"}


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
