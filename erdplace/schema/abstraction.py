"""
Schema Abstraction Layer

Provides the read-only graph of tables and relationships that the layout
engine consumes. Schema loading, validation and relationship auto-detection
live outside this package; this module only normalizes the dictionary form
handed over by those collaborators into typed records.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set


@dataclass
class Column:
    """A table column. Only used to size the table's rectangle."""
    name: str
    type: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Column':
        return cls(
            name=str(data.get("name") or ""),
            type=str(data.get("type") or ""),
        )


@dataclass
class Dimension:
    """Rectangle size of a table, fixed for the duration of one layout call."""
    width: float
    height: float
    area: float = field(init=False)

    def __post_init__(self):
        self.area = self.width * self.height

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height, "area": self.area}


@dataclass
class Table:
    """Represents a database table (a node of the diagram)."""
    name: str
    columns: List[Column] = field(default_factory=list)

    # Original input record, echoed back into the layout result
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Table':
        """Build a table from its dictionary form.

        Raises:
            ValueError: If the record has no usable name
        """
        if not isinstance(data, dict):
            raise ValueError(f"Table entry must be a mapping, got {type(data).__name__}")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"Table entry has no name: {data!r}")

        columns = [Column.from_dict(c) for c in data.get("columns") or []
                   if isinstance(c, dict)]
        return cls(name=name, columns=columns, fields=dict(data))

    def to_dict(self) -> Dict[str, Any]:
        """Original fields, or a minimal record for programmatically built tables."""
        if self.fields:
            return dict(self.fields)
        return {
            "name": self.name,
            "columns": [{"name": c.name, "type": c.type} for c in self.columns],
        }


@dataclass
class Relationship:
    """A foreign-key style edge between two tables.

    Only the table endpoints matter for layout; column identity is carried
    along for completeness but never used.
    """
    from_table: Optional[str]
    to_table: Optional[str]
    from_column: Optional[str] = None
    to_column: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Relationship':
        """Normalize the supported relationship shapes.

        Accepts the nested ``{"from": {"table", "column"}, "to": {...}}`` form
        as well as the flat ``fromTable``/``toTable`` and
        ``sourceTable``/``targetTable`` forms.
        """
        if not isinstance(data, dict):
            return cls(from_table=None, to_table=None)

        source = data.get("from")
        target = data.get("to")
        if isinstance(source, dict) or isinstance(target, dict):
            source = source if isinstance(source, dict) else {}
            target = target if isinstance(target, dict) else {}
            return cls(
                from_table=_name_or_none(source.get("table")),
                to_table=_name_or_none(target.get("table")),
                from_column=_name_or_none(source.get("column")),
                to_column=_name_or_none(target.get("column")),
            )

        return cls(
            from_table=_name_or_none(data.get("fromTable", data.get("sourceTable"))),
            to_table=_name_or_none(data.get("toTable", data.get("targetTable"))),
            from_column=_name_or_none(data.get("fromColumn", data.get("sourceColumn"))),
            to_column=_name_or_none(data.get("toColumn", data.get("targetColumn"))),
        )

    @property
    def is_self_loop(self) -> bool:
        return self.from_table is not None and self.from_table == self.to_table

    def connects_known(self, known: Set[str]) -> bool:
        """True when both endpoints name tables present in the schema."""
        return self.from_table in known and self.to_table in known


@dataclass
class Bounds:
    """Target canvas size. Input only; the engine never mutates it."""
    width: float = 1200.0
    height: float = 800.0

    @classmethod
    def from_value(cls, value: Any) -> 'Bounds':
        """Coerce None, a Bounds or a ``{width, height}`` mapping."""
        if value is None:
            return cls()
        if isinstance(value, Bounds):
            return cls(width=value.width, height=value.height)
        if isinstance(value, dict):
            default = cls()
            try:
                return cls(
                    width=float(value.get("width", default.width)),
                    height=float(value.get("height", default.height)),
                )
            except (TypeError, ValueError) as e:
                raise ValueError(f"Bounds width and height must be numeric: {value!r}") from e
        raise ValueError(f"Unsupported bounds value: {value!r}")

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}


@dataclass
class Schema:
    """The layout engine's only input: tables plus relationships."""
    tables: List[Table] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)

    # Relationship records as received, passed through unmodified
    raw_relationships: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Schema':
        """Build a schema from ``{"tables": [...], "relationships": [...]}``.

        Raises:
            ValueError: If tables are not a list, a table has no name, or two
                tables share a name
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Schema must be a mapping, got {type(data).__name__}")

        raw_tables = data.get("tables") or []
        raw_relationships = data.get("relationships") or []
        if not isinstance(raw_tables, list):
            raise ValueError("Schema 'tables' must be a list")
        if not isinstance(raw_relationships, list):
            raise ValueError("Schema 'relationships' must be a list")

        tables = [Table.from_dict(t) for t in raw_tables]
        schema = cls(
            tables=tables,
            relationships=[Relationship.from_dict(r) for r in raw_relationships],
            raw_relationships=list(raw_relationships),
        )
        schema._check_unique_names()
        return schema

    @classmethod
    def coerce(cls, value: Any) -> 'Schema':
        if isinstance(value, Schema):
            return value
        return cls.from_dict(value)

    def _check_unique_names(self):
        seen: Set[str] = set()
        for table in self.tables:
            if table.name in seen:
                raise ValueError(f"Duplicate table name: {table.name}")
            seen.add(table.name)

    @property
    def table_names(self) -> List[str]:
        return [t.name for t in self.tables]

    def get_table(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def relationship_records(self) -> List[Any]:
        """Relationship records for the pass-through part of a layout result."""
        if self.raw_relationships:
            return list(self.raw_relationships)
        return [_relationship_to_dict(r) for r in self.relationships]

    def valid_relationships(self) -> Iterable[Relationship]:
        """Relationships whose two endpoints are known tables."""
        known = set(self.table_names)
        return [r for r in self.relationships if r.connects_known(known)]

    def __repr__(self) -> str:
        return f"Schema(tables={len(self.tables)}, relationships={len(self.relationships)})"


def _relationship_to_dict(rel: Relationship) -> Dict[str, Any]:
    return {
        "from": {"table": rel.from_table, "column": rel.from_column},
        "to": {"table": rel.to_table, "column": rel.to_column},
    }


def _name_or_none(value: Any) -> Optional[str]:
    """Table and column references must be strings; anything else is unresolvable."""
    return value if isinstance(value, str) else None
