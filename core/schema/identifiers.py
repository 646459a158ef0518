# ============================================================================
# IDENTIFIER SANITIZER
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Caller name to SQL identifier mapping
# PURPOSE: Validate caller-supplied names and derive physical identifiers
# CREATED: 19 OCT 2026
# EXPORTS: IDENTIFIER_PATTERN, is_valid_identifier, validate_identifier,
#          sanitize, physical_name, validate_field_names, validate_sql_type
# ============================================================================
"""
Identifier Sanitizer.

Two namespaces:
    - Logical: the caller's name, stored in and looked up from the catalog.
    - Physical: sanitize(name), used for table and column identifiers.

Identifiers can not be bound as statement parameters, so the pattern check
here runs before any SQL is composed. Physical identifiers are then always
quoted via psycopg.sql.Identifier.

Usage:
    from core.schema.identifiers import physical_name

    table = physical_name("InvoiceLines", kind="schema")   # "invoice_lines"
"""

import re
from typing import Iterable, List

from core.config.defaults import SchemaDefaults, SqlTypePolicy, get_defaults
from core.errors import InvalidFieldTypeError, InvalidIdentifierError

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# PostgreSQL truncates identifiers beyond NAMEDATALEN - 1 bytes
MAX_IDENTIFIER_LENGTH = 63

# Columns every physical table carries
ID_COLUMN = "id"
OWNER_COLUMN = "owner"
RESERVED_COLUMNS = frozenset({ID_COLUMN, OWNER_COLUMN})

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SQL_TYPE_SHAPE = re.compile(
    r"^(?P<base>[a-z][a-z ]*?)\s*"
    r"(?:\(\s*\d+\s*(?:,\s*\d+\s*)?\))?"
    r"(?:\s*\[\])?$"
)
# Words, one optional modifier list of words or numbers, array suffixes.
_SQL_TYPE_TOKEN = re.compile(
    r"^[a-z_][a-z0-9_]*(?:\s+[a-z_][a-z0-9_]*)*"
    r"(?:\s*\(\s*[a-z0-9_]+\s*(?:,\s*[a-z0-9_]+\s*)*\))?"
    r"(?:\s+[a-z_][a-z0-9_]*)*"
    r"(?:\s*\[\s*\d*\s*\])*$",
    re.IGNORECASE,
)


def is_valid_identifier(raw: object) -> bool:
    """True if raw is a string matching IDENTIFIER_PATTERN."""
    return isinstance(raw, str) and IDENTIFIER_PATTERN.match(raw) is not None


def is_valid_sql_type(raw: object) -> bool:
    """True if raw is shaped like a PostgreSQL type name (see validate_sql_type)."""
    return isinstance(raw, str) and _SQL_TYPE_TOKEN.match(raw.strip()) is not None


def sanitize(raw: str) -> str:
    """
    Convert a caller name to its physical snake_case form.

    Deterministic and total. Callers must run validate_identifier first;
    sanitize itself never rejects.

        invoiceDate  -> invoice_date
        HTTPStatus   -> http_status
        line2Total   -> line2_total
        already_ok   -> already_ok
    """
    result = _ACRONYM_BOUNDARY.sub(r"\1_\2", raw)
    result = _WORD_BOUNDARY.sub(r"\1_\2", result)
    return result.lower()


def validate_identifier(raw: object, kind: str = "identifier") -> str:
    """
    Check a caller name and return it unchanged.

    Raises:
        InvalidIdentifierError: pattern mismatch or physical form too long.
    """
    if not is_valid_identifier(raw):
        raise InvalidIdentifierError(
            f"{kind} name {raw!r} must match {IDENTIFIER_PATTERN.pattern}",
            identifier=raw if isinstance(raw, str) else repr(raw),
            kind=kind,
        )
    physical = sanitize(raw)
    if len(physical) > MAX_IDENTIFIER_LENGTH:
        raise InvalidIdentifierError(
            f"{kind} name {raw!r} exceeds {MAX_IDENTIFIER_LENGTH} characters "
            f"once converted to {physical!r}",
            identifier=raw,
            kind=kind,
        )
    return raw


def physical_name(raw: object, kind: str = "identifier") -> str:
    """Validate then sanitize."""
    return sanitize(validate_identifier(raw, kind))


def validate_field_names(names: Iterable[str]) -> List[str]:
    """
    Validate an ordered field name list and return the physical column names.

    Rejects duplicates in either namespace and names that map onto the
    reserved id/owner columns.

    Raises:
        InvalidIdentifierError
    """
    columns: List[str] = []
    seen_names = set()
    seen_columns = {}

    for name in names:
        column = physical_name(name, kind="field")

        if name in seen_names:
            raise InvalidIdentifierError(
                f"Duplicate field name {name!r}", identifier=name, kind="field"
            )
        if column in RESERVED_COLUMNS:
            raise InvalidIdentifierError(
                f"Field name {name!r} maps to reserved column {column!r}",
                identifier=name,
                kind="field",
            )
        if column in seen_columns:
            raise InvalidIdentifierError(
                f"Field names {seen_columns[column]!r} and {name!r} both map to "
                f"column {column!r}",
                identifier=name,
                kind="field",
            )

        seen_names.add(name)
        seen_columns[column] = name
        columns.append(column)

    return columns


def validate_sql_type(sql_type: object, defaults: SchemaDefaults = None) -> str:
    """
    Check a field type token.

    The token is spliced into DDL, so under every policy it must be shaped
    like a type name: words, at most one parenthesised modifier list of
    words or numbers, and optional [] suffixes. Under the passthrough policy
    the stripped token is then returned as is. Under the strict policy the
    base type must also be in SchemaDefaults.allowed_sql_types, with
    optional (n) / (p,s) and [].

    Raises:
        InvalidFieldTypeError
    """
    defaults = defaults or get_defaults().schema

    if not isinstance(sql_type, str) or not sql_type.strip():
        raise InvalidFieldTypeError("Field type must be a non-empty string", sql_type=sql_type)

    token = sql_type.strip()
    if not is_valid_sql_type(token):
        raise InvalidFieldTypeError(
            f"Field type {token!r} is not a PostgreSQL type name",
            sql_type=token,
        )

    if defaults.sql_type_policy == SqlTypePolicy.PASSTHROUGH:
        return token

    match = _SQL_TYPE_SHAPE.match(token.lower())
    base = " ".join(match.group("base").split()) if match else None
    if base not in defaults.allowed_sql_types:
        raise InvalidFieldTypeError(
            f"Field type {token!r} is not an allowed PostgreSQL type",
            sql_type=token,
        )
    return token


__all__ = [
    "IDENTIFIER_PATTERN",
    "MAX_IDENTIFIER_LENGTH",
    "ID_COLUMN",
    "OWNER_COLUMN",
    "RESERVED_COLUMNS",
    "is_valid_identifier",
    "is_valid_sql_type",
    "sanitize",
    "validate_identifier",
    "physical_name",
    "validate_field_names",
    "validate_sql_type",
]
