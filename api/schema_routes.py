# ============================================================================
# SCHEMA API ROUTES
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - FastAPI route definitions
# PURPOSE: HTTP endpoints for schema lifecycle and data access
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema API Routes

ENDPOINT SUMMARY:
-----------------
| Endpoint                          | Behavior                     |
|-----------------------------------|------------------------------|
| POST   /schema                    | Declare schema, create table |
| GET    /schema                    | List schemas                 |
| GET    /schema/{name}             | Get one schema               |
| GET    /schema/{name}/fields      | Declared field names         |
| DELETE /schema/{name}             | Remove schema, drop table    |
| POST   /schema/{name}/data        | Insert one row               |
| GET    /schema/{name}/data        | Query rows (?owner=)         |
| GET    /schema/{name}/data/{owner}| Query rows of one owner      |

Registry errors map to HTTP status by their code; the body is under
'detail' as {"error", "message", "details"}.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query

from core.errors import SchemaRegistryError
from .schemas import (
    DataInsert,
    ErrorResponse,
    MessageResponse,
    SchemaCreate,
    SchemaResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schema", tags=["Schemas"])

ERROR_STATUS = {
    "invalid_identifier": 400,
    "invalid_field_type": 400,
    "invalid_request": 400,
    "conflict": 409,
    "not_found": 404,
    "storage_failure": 500,
    "upstream_failure": 502,
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid identifier or request"},
    404: {"model": ErrorResponse, "description": "Schema not found"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# Set by the main app at startup

_schema_service = None


def set_schema_service(schema_service) -> None:
    """Set service instance for dependency injection."""
    global _schema_service
    _schema_service = schema_service


def _get_schema_service():
    if _schema_service is None:
        raise HTTPException(503, "Schema service not initialized")
    return _schema_service


def _to_http(e: SchemaRegistryError) -> HTTPException:
    status = ERROR_STATUS.get(e.code, 500)
    if status >= 500:
        logger.error(f"{e.code}: {e.message}")
    return HTTPException(status_code=status, detail=e.to_dict())


# ============================================================================
# SCHEMAS
# ============================================================================

@router.post(
    "",
    response_model=SchemaResponse,
    status_code=201,
    responses={**ERROR_RESPONSES, 409: {"model": ErrorResponse, "description": "Name taken"}},
)
async def create_schema(request: SchemaCreate):
    """
    Declare a schema and create its table.

    Field names are sanitized to snake_case column names; the caller
    keeps using the declared names everywhere else.
    """
    service = _get_schema_service()
    try:
        definition = await service.create_schema(
            request.name,
            [f.model_dump() for f in request.fields],
        )
    except SchemaRegistryError as e:
        raise _to_http(e)
    return SchemaResponse.from_definition(definition)


@router.get("", response_model=List[SchemaResponse])
async def list_schemas():
    """List declared schemas, oldest first."""
    service = _get_schema_service()
    try:
        definitions = await service.list_schemas()
    except SchemaRegistryError as e:
        raise _to_http(e)
    return [SchemaResponse.from_definition(d) for d in definitions]


@router.get("/{name}", response_model=SchemaResponse, responses=ERROR_RESPONSES)
async def get_schema(name: str):
    service = _get_schema_service()
    try:
        definition = await service.get_schema(name)
    except SchemaRegistryError as e:
        raise _to_http(e)
    return SchemaResponse.from_definition(definition)


@router.get("/{name}/fields", response_model=List[str], responses=ERROR_RESPONSES)
async def get_fields(name: str):
    """Declared field names, in order."""
    service = _get_schema_service()
    try:
        return await service.get_fields(name)
    except SchemaRegistryError as e:
        raise _to_http(e)


@router.delete("/{name}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_schema(name: str):
    """Remove a schema and drop its table. Not idempotent."""
    service = _get_schema_service()
    try:
        return await service.delete_schema(name)
    except SchemaRegistryError as e:
        raise _to_http(e)


# ============================================================================
# DATA
# ============================================================================

@router.post(
    "/{name}/data",
    response_model=MessageResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
async def insert_data(name: str, request: DataInsert):
    """
    Insert one row.

    Accepts {owner, values} or {userId, analysisResult}. Declared fields
    missing from values are stored as NULL; undeclared keys are ignored.
    """
    service = _get_schema_service()
    try:
        return await service.insert_data(name, request.owner, request.values)
    except SchemaRegistryError as e:
        raise _to_http(e)


@router.get("/{name}/data", response_model=List[Dict[str, Any]], responses=ERROR_RESPONSES)
async def query_data(
    name: str,
    owner: Optional[str] = Query(None, description="Only rows of this owner"),
):
    service = _get_schema_service()
    try:
        return await service.query_data(name, owner)
    except SchemaRegistryError as e:
        raise _to_http(e)


@router.get("/{name}/data/{owner}", response_model=List[Dict[str, Any]], responses=ERROR_RESPONSES)
async def query_data_by_owner(name: str, owner: str):
    service = _get_schema_service()
    try:
        return await service.query_data(name, owner)
    except SchemaRegistryError as e:
        raise _to_http(e)


__all__ = ["router", "set_schema_service", "ERROR_STATUS"]
