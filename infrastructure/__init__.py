# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Infrastructure - Database bootstrap and repository base
# PURPOSE: Catalog schema deployment and shared repository patterns
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for the schema registry.

Provides:
- DatabaseInitializer: Bootstrap catalog and data schemas from Pydantic models
- BaseRepository: Error translation shared by all repositories

Usage:
    from infrastructure import DatabaseInitializer

    initializer = DatabaseInitializer()
    result = await initializer.initialize_async(pool)
"""

from infrastructure.base_repository import BaseRepository
from infrastructure.database_initializer import (
    DatabaseInitializer,
    InitializationResult,
    StepResult,
)

__all__ = [
    # Repository base
    'BaseRepository',
    # Database Initialization
    'DatabaseInitializer',
    'InitializationResult',
    'StepResult',
]
