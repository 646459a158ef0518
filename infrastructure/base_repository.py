# ============================================================================
# BASE REPOSITORY - ERROR HANDLING PATTERNS
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Infrastructure - Base repository patterns
# PURPOSE: Common error translation and logging for all repositories
# CREATED: 19 OCT 2026
# ============================================================================
"""
Base Repository Patterns

Abstract base class that provides common infrastructure for the
PostgreSQL repositories:
- Consistent error handling with a context manager
- Driver errors translated into the registry error taxonomy
- Standardized logging

Driver error text is logged here, in full, and never copied into the
raised error's message.
"""

import logging
from abc import ABC
from contextlib import contextmanager
from typing import Optional

import psycopg
from psycopg_pool import AsyncConnectionPool

from core.errors import ConflictError, SchemaRegistryError, StorageFailureError


class BaseRepository(ABC):
    """
    Abstract base repository with common patterns.

    Provides:
    - Error context manager for consistent error handling
    - Standardized logging

    Subclasses implement storage-specific operations against self.pool.
    """

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def _error_context(
        self,
        operation: str,
        entity_id: Optional[str] = None,
        conflict_message: Optional[str] = None,
    ):
        """
        Context manager for consistent error handling.

        Registry errors pass through untouched. A unique violation becomes
        ConflictError when conflict_message is given. Every other driver
        error is logged and re-raised as StorageFailureError.

        Args:
            operation: Human-readable description of the operation
            entity_id: Optional entity (schema name) for context
            conflict_message: Caller-facing message for unique violations

        Example:
            with self._error_context("catalog insert", name, conflict_message=msg):
                await conn.execute(...)
        """
        target = f" for {entity_id}" if entity_id else ""
        try:
            yield
        except SchemaRegistryError:
            raise
        except psycopg.errors.UniqueViolation as e:
            if conflict_message is None:
                self.logger.error(f"{operation} failed{target}: {e}")
                raise StorageFailureError(f"{operation} failed{target}", operation=operation) from e
            self.logger.warning(f"{operation} hit unique constraint{target}: {e}")
            raise ConflictError(conflict_message) from e
        except psycopg.Error as e:
            self.logger.error(
                f"{operation} failed{target}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            raise StorageFailureError(f"{operation} failed{target}", operation=operation) from e


__all__ = ["BaseRepository"]
