# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the schema registry.
"""

from core.config.defaults import (
    SqlTypePolicy,
    DatabaseDefaults,
    SchemaDefaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "SqlTypePolicy",
    "DatabaseDefaults",
    "SchemaDefaults",
    "get_defaults",
    "reset_defaults",
]
