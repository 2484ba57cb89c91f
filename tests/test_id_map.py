"""Tests del IdMap (traducción ID origen → ID destino)."""

import pytest

from errors import MissingDependencyError
from id_map import IdMap


def test_put_and_get():
    id_map = IdMap()
    id_map.put("brands", "brand-1", "t-1")

    assert id_map.get("brands", "brand-1") == "t-1"
    assert id_map.count("brands") == 1
    assert "brands" in id_map
    assert "users" not in id_map


def test_source_ids_are_compared_as_strings():
    """UUIDs de psycopg2 y strings del mismo ID resuelven igual."""
    from uuid import UUID

    source_id = UUID("8f14e45f-ceea-467a-9af0-2e0bd2c4b6a1")
    id_map = IdMap()
    id_map.put("users", source_id, "t-9")

    assert id_map.get("users", str(source_id)) == "t-9"


def test_get_missing_returns_none():
    id_map = IdMap()
    assert id_map.get("coupons", "coupon-1") is None
    assert id_map.get("coupons", None) is None


def test_require_missing_raises_with_context():
    id_map = IdMap()

    with pytest.raises(MissingDependencyError) as excinfo:
        id_map.require(
            "users", "user-404", referenced_by="orders", row_id="order-1", field="user_id"
        )

    error = excinfo.value
    assert error.referenced_type == "users"
    assert error.referenced_id == "user-404"
    assert error.entity_type == "orders"
    assert error.source_id == "order-1"
    assert error.field == "user_id"
    assert "users[user-404]" in str(error)
    assert "orders[order-1].user_id" in str(error)


def test_require_with_null_reference_raises():
    with pytest.raises(MissingDependencyError):
        IdMap().require("brands", None)


def test_put_same_pair_twice_is_noop():
    id_map = IdMap()
    id_map.put("brands", "brand-1", "t-1")
    id_map.put("brands", "brand-1", "t-1")

    assert id_map.count("brands") == 1


def test_remapping_to_other_target_is_rejected():
    id_map = IdMap()
    id_map.put("brands", "brand-1", "t-1")

    with pytest.raises(ValueError):
        id_map.put("brands", "brand-1", "t-2")
    assert id_map.get("brands", "brand-1") == "t-1"


def test_entries_returns_copy():
    id_map = IdMap()
    id_map.put("brands", "brand-1", "t-1")

    entries = id_map.entries("brands")
    entries["brand-2"] = "t-2"

    assert id_map.count("brands") == 1
    assert id_map.entity_types() == ["brands"]
