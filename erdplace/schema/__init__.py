"""Schema graph records consumed by the layout engine."""

from .abstraction import Bounds, Column, Dimension, Relationship, Schema, Table

__all__ = [
    "Bounds",
    "Column",
    "Dimension",
    "Relationship",
    "Schema",
    "Table",
]
