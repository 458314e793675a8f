"""
Cluster Detector

Partitions tables into connected components of the relationship graph.
Larger clusters come first so that later stages place the most central
parts of the diagram before the small ones.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Set

from ..schema.abstraction import Schema

logger = logging.getLogger(__name__)


@dataclass
class Cluster:
    """A connected component snapshot."""
    tables: List[str] = field(default_factory=list)

    # True when at least one relationship (self-loops included) touches a member
    has_relationships: bool = False

    @property
    def size(self) -> int:
        return len(self.tables)

    @property
    def is_orphan(self) -> bool:
        """A singleton table that no relationship touches."""
        return self.size == 1 and not self.has_relationships

    def to_dict(self) -> Dict:
        return {"tables": list(self.tables), "size": self.size}


class ClusterDetector:
    """
    Detects clusters from schema connectivity.

    Relationships referencing unknown tables are dropped; self-loops mark a
    table as related but add no edge. Traversal is depth-first from each
    unvisited table in declaration order, visiting neighbors in the order
    their relationships were declared, which makes the output deterministic.
    """

    def __init__(self, schema: Schema):
        self.schema = schema
        self.clusters: List[Cluster] = []
        self.adjacency: Dict[str, Dict[str, None]] = {}
        self.related: Set[str] = set()

    def detect(self) -> List[Cluster]:
        """
        Detect all clusters in the schema.

        Returns:
            Clusters sorted by descending size (stable for equal sizes)
        """
        self._build_adjacency()

        visited: Set[str] = set()
        clusters = []
        for name in self.schema.table_names:
            if name in visited:
                continue
            members = self._traverse(name, visited)
            clusters.append(Cluster(
                tables=members,
                has_relationships=any(m in self.related for m in members),
            ))

        clusters.sort(key=lambda c: -c.size)
        self.clusters = clusters

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Cluster detection: tables=%d clusters=%d largest=%d orphans=%d",
                len(self.schema.tables),
                len(clusters),
                clusters[0].size if clusters else 0,
                sum(1 for c in clusters if c.is_orphan),
            )
        return clusters

    def orphan_names(self) -> List[str]:
        """Tables touched by no valid relationship, in declaration order."""
        if not self.adjacency:
            self._build_adjacency()
        return [name for name in self.schema.table_names if name not in self.related]

    def _build_adjacency(self):
        """Undirected adjacency with insertion-ordered neighbor sets."""
        adjacency: Dict[str, Dict[str, None]] = {name: {} for name in self.schema.table_names}
        related: Set[str] = set()
        dropped = 0

        for rel in self.schema.relationships:
            if rel.from_table not in adjacency or rel.to_table not in adjacency:
                dropped += 1
                continue
            related.add(rel.from_table)
            related.add(rel.to_table)
            if rel.is_self_loop:
                continue
            adjacency[rel.from_table][rel.to_table] = None
            adjacency[rel.to_table][rel.from_table] = None

        if dropped and logger.isEnabledFor(logging.DEBUG):
            logger.debug("Ignoring %d relationships with unknown tables", dropped)

        self.adjacency = adjacency
        self.related = related

    def _traverse(self, start: str, visited: Set[str]) -> List[str]:
        """Depth-first preorder from ``start`` using an explicit stack."""
        visited.add(start)
        members = [start]
        stack: List[Iterator[str]] = [iter(self.adjacency[start])]

        while stack:
            for neighbor in stack[-1]:
                if neighbor not in visited:
                    visited.add(neighbor)
                    members.append(neighbor)
                    stack.append(iter(self.adjacency[neighbor]))
                    break
            else:
                stack.pop()

        return members
