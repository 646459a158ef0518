# ============================================================================
# ROW GATEWAY TESTS
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Tests - Generic DML with mocked pool
# PURPOSE: Verify parameterized insert/select and result re-keying
# CREATED: 19 OCT 2026
# ============================================================================
"""
RowGateway Tests

Run with:
    pytest tests/test_row_gateway.py -v
"""

import asyncio
import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import psycopg
import pytest
from psycopg.types.json import Json

from core.errors import StorageFailureError
from core.models import SchemaDefinition
from repositories.row_gateway import RowGateway


def _make_pool(result=None, side_effect=None):
    pool = MagicMock()
    conn_mock = AsyncMock()
    conn_mock.execute = AsyncMock(return_value=result, side_effect=side_effect)
    pool.connection.return_value.__aenter__ = AsyncMock(return_value=conn_mock)
    pool.connection.return_value.__aexit__ = AsyncMock(return_value=False)
    return pool, conn_mock


def _definition():
    return SchemaDefinition.declare(
        "Receipt",
        [
            {"name": "storeName", "type": "TEXT"},
            {"name": "amount", "type": "NUMERIC(10,2)"},
            {"name": "lineItems", "type": "JSONB"},
        ],
    )


# ============================================================================
# INSERT
# ============================================================================

class TestInsert:

    def test_statement_and_params_in_declared_order(self):
        pool, conn = _make_pool()
        gateway = RowGateway(pool, data_schema="reg_data")

        asyncio.run(gateway.insert_row(
            _definition(),
            "user-1",
            {"amount": 12.5, "storeName": "Corner Shop", "lineItems": [{"sku": "A1"}]},
        ))

        stmt, params = conn.execute.call_args.args
        assert stmt.as_string(None) == (
            'INSERT INTO "reg_data"."receipt" ("owner", "store_name", "amount", "line_items") '
            "VALUES (%s, %s, %s, %s)"
        )
        assert params[:3] == ["user-1", "Corner Shop", 12.5]
        assert isinstance(params[3], Json)
        assert params[3].obj == [{"sku": "A1"}]

    def test_missing_keys_bind_null(self):
        gateway = RowGateway(MagicMock(), data_schema="reg_data")

        _, params = gateway.build_insert(_definition(), "user-1", {"storeName": "Shop"})

        assert params == ["user-1", "Shop", None, None]

    def test_extra_keys_ignored(self):
        gateway = RowGateway(MagicMock(), data_schema="reg_data")

        stmt, params = gateway.build_insert(
            _definition(), "user-1", {"storeName": "Shop", "unexpected": "x"}
        )

        assert "unexpected" not in stmt.as_string(None)
        assert "x" not in params

    def test_dict_value_wrapped_for_non_json_column(self):
        gateway = RowGateway(MagicMock())

        _, params = gateway.build_insert(_definition(), "u", {"storeName": {"raw": "Shop"}})

        assert isinstance(params[1], Json)

    def test_hostile_value_is_a_parameter(self):
        gateway = RowGateway(MagicMock())
        value = "'); DROP TABLE receipt; --"

        stmt, params = gateway.build_insert(_definition(), "u", {"storeName": value})

        assert value not in stmt.as_string(None)
        assert value in params

    def test_database_rejection_is_storage_failure(self):
        pool, _ = _make_pool(side_effect=psycopg.errors.InvalidTextRepresentation(
            'invalid input syntax for type numeric: "abc"'
        ))
        gateway = RowGateway(pool)

        with pytest.raises(StorageFailureError) as exc:
            asyncio.run(gateway.insert_row(_definition(), "u", {"amount": "abc"}))
        assert "numeric" not in exc.value.message


# ============================================================================
# QUERY
# ============================================================================

class TestQuery:

    def test_full_scan_has_no_filter(self):
        gateway = RowGateway(MagicMock(), data_schema="reg_data")

        stmt, params = gateway.build_select(_definition())

        assert stmt.as_string(None) == (
            'SELECT "id", "owner", "store_name", "amount", "line_items" '
            'FROM "reg_data"."receipt"'
        )
        assert params == []

    def test_owner_filter_is_bound(self):
        gateway = RowGateway(MagicMock(), data_schema="reg_data")

        stmt, params = gateway.build_select(_definition(), owner="user-1")

        assert stmt.as_string(None).endswith('WHERE "owner" = %s')
        assert params == ["user-1"]

    def test_rows_keyed_by_field_names(self):
        row_id = uuid.uuid4()
        result = MagicMock()
        result.fetchall = AsyncMock(return_value=[{
            "id": row_id,
            "owner": "user-1",
            "store_name": "Shop",
            "amount": Decimal("12.50"),
            "line_items": None,
        }])
        pool, conn = _make_pool(result)
        gateway = RowGateway(pool)

        rows = asyncio.run(gateway.query_rows(_definition(), owner="user-1"))

        assert rows == [{
            "id": str(row_id),
            "owner": "user-1",
            "storeName": "Shop",
            "amount": Decimal("12.50"),
            "lineItems": None,
        }]
        assert conn.execute.call_args.args[1] == ["user-1"]

    def test_no_rows(self):
        result = MagicMock()
        result.fetchall = AsyncMock(return_value=[])
        pool, _ = _make_pool(result)

        assert asyncio.run(RowGateway(pool).query_rows(_definition(), owner="nobody")) == []
