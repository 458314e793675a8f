"""
Shared test fixtures for erdplace tests.

Provides reusable schema, settings and layout-state fixtures for the
component and end-to-end tests.
"""

import pytest
from typing import Dict, List

from erdplace.schema.abstraction import Bounds, Schema
from erdplace.settings import LayoutSettings, get_default_settings
from erdplace.placement.state import LayoutState


def _table(name: str, column_count: int = 1) -> Dict:
    """A table record with ``column_count`` simple columns."""
    return {
        "name": name,
        "columns": [{"name": f"col_{i}", "type": "int"} for i in range(column_count)],
    }


def _relationship(source: str, target: str,
                  source_column: str = "id", target_column: str = "id") -> Dict:
    return {
        "from": {"table": source, "column": source_column},
        "to": {"table": target, "column": target_column},
    }


def _state(boxes: List[tuple]) -> LayoutState:
    """Layout state from ``(name, x, y, width, height)`` tuples."""
    return LayoutState(
        names=[b[0] for b in boxes],
        widths=[float(b[3]) for b in boxes],
        heights=[float(b[4]) for b in boxes],
        xs=[float(b[1]) for b in boxes],
        ys=[float(b[2]) for b in boxes],
    )


@pytest.fixture
def make_table():
    """Factory for table records: make_table(name, column_count=1)."""
    return _table


@pytest.fixture
def make_relationship():
    """Factory for nested from/to relationship records."""
    return _relationship


@pytest.fixture
def make_state():
    """Factory for layout states from (name, x, y, width, height) tuples."""
    return _state


@pytest.fixture
def default_settings() -> LayoutSettings:
    """Packaged default settings."""
    return get_default_settings()


@pytest.fixture
def default_bounds() -> Bounds:
    return Bounds(width=1200.0, height=800.0)


@pytest.fixture
def two_table_schema() -> Dict:
    """Table A (3 columns) joined to table B (1 column)."""
    return {
        "tables": [_table("A", 3), _table("B", 1)],
        "relationships": [_relationship("A", "B")],
    }


@pytest.fixture
def unrelated_schema() -> Dict:
    """Five single-column tables with no relationships."""
    return {
        "tables": [_table(f"T{i}", 1) for i in range(5)],
        "relationships": [],
    }


@pytest.fixture
def dangling_schema() -> Dict:
    """Two tables whose only relationships point at a missing table."""
    return {
        "tables": [_table("orders", 2), _table("customers", 2)],
        "relationships": [
            _relationship("orders", "ghost"),
            _relationship("ghost", "customers"),
        ],
    }


@pytest.fixture
def shop_schema() -> Dict:
    """Small webshop: two connected groups, a self-referencing table and two orphans."""
    return {
        "tables": [
            {"name": "customers", "columns": [
                {"name": "id", "type": "int"},
                {"name": "email", "type": "varchar(255)"},
                {"name": "created_at", "type": "timestamp"},
            ]},
            {"name": "orders", "columns": [
                {"name": "id", "type": "int"},
                {"name": "customer_id", "type": "int"},
                {"name": "total", "type": "decimal(10,2)"},
            ]},
            {"name": "order_items", "columns": [
                {"name": "id", "type": "int"},
                {"name": "order_id", "type": "int"},
                {"name": "product_id", "type": "int"},
                {"name": "quantity", "type": "int"},
            ]},
            {"name": "products", "columns": [
                {"name": "id", "type": "int"},
                {"name": "name", "type": "varchar(120)"},
            ]},
            {"name": "warehouses", "columns": [{"name": "id", "type": "int"}]},
            {"name": "stock", "columns": [
                {"name": "warehouse_id", "type": "int"},
                {"name": "sku", "type": "varchar(40)"},
            ]},
            {"name": "categories", "columns": [
                {"name": "id", "type": "int"},
                {"name": "parent_id", "type": "int"},
            ]},
            {"name": "audit_log", "columns": [{"name": "message", "type": "text"}]},
            {"name": "settings", "columns": []},
        ],
        "relationships": [
            _relationship("orders", "customers", "customer_id", "id"),
            _relationship("order_items", "orders", "order_id", "id"),
            _relationship("order_items", "products", "product_id", "id"),
            _relationship("stock", "warehouses", "warehouse_id", "id"),
            _relationship("categories", "categories", "parent_id", "id"),
        ],
    }


@pytest.fixture
def shop(shop_schema) -> Schema:
    return Schema.from_dict(shop_schema)
