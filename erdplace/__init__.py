"""
erdplace - Automatic Layout for ER Diagrams

Computes non-overlapping, readable positions for the tables of a database
schema: related tables are pulled together by a force simulation, clusters
are packed into columns and unrelated tables are parked in a grid below.
"""

__version__ = "0.1.0"

from .engine import LayoutDiagnostics, LayoutEngine, LayoutResult, calculate_layout
from .schema.abstraction import Bounds, Relationship, Schema, Table
from .settings import LayoutSettings, load_settings
from .validation.statistics import LayoutStatistics

__all__ = [
    "LayoutEngine",
    "LayoutResult",
    "LayoutDiagnostics",
    "LayoutStatistics",
    "LayoutSettings",
    "calculate_layout",
    "load_settings",
    "Bounds",
    "Relationship",
    "Schema",
    "Table",
]
