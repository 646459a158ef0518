# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core module initialization
# PURPOSE: Models, errors, configuration and schema utilities
# CREATED: 19 OCT 2026
# ============================================================================
