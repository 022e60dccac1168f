"""Undirected adjacency with edge multiplicities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from linkchart.domain.model import freeze

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkchart.domain.model import Edge, Node


@dataclass(frozen=True, slots=True)
class Adjacency:
    """Neighbor multiplicities per node, both in insertion order.

    A self-loop records the node as its own neighbor and adds two to its degree.
    """

    neighbors: Mapping[str, Mapping[str, int]]
    degrees: Mapping[str, int]
    skipped_edges: tuple[str, ...] = ()

    @classmethod
    def from_graph(cls, nodes: Sequence[Node], edges: Sequence[Edge]) -> Adjacency:
        neighbors: dict[str, dict[str, int]] = {node.id: {} for node in nodes}
        degrees: dict[str, int] = dict.fromkeys(neighbors, 0)
        skipped: list[str] = []
        for edge in edges:
            if edge.source not in neighbors or edge.target not in neighbors:
                skipped.append(edge.id)
                continue
            source_links = neighbors[edge.source]
            source_links[edge.target] = source_links.get(edge.target, 0) + 1
            if edge.is_self_loop:
                degrees[edge.source] += 2
                continue
            target_links = neighbors[edge.target]
            target_links[edge.source] = target_links.get(edge.source, 0) + 1
            degrees[edge.source] += 1
            degrees[edge.target] += 1
        return cls(
            neighbors=freeze({node_id: freeze(links) for node_id, links in neighbors.items()}),
            degrees=freeze(degrees),
            skipped_edges=tuple(skipped),
        )

    @property
    def node_ids(self) -> tuple[str, ...]:
        return tuple(self.neighbors)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.neighbors

    def neighbors_of(self, node_id: str) -> tuple[str, ...]:
        return tuple(self.neighbors.get(node_id, {}))

    def are_adjacent(self, left: str, right: str) -> bool:
        return right in self.neighbors.get(left, {})

    def degree(self, node_id: str) -> int:
        return self.degrees.get(node_id, 0)

    def distinct_pairs(self) -> int:
        """Number of unordered adjacent node pairs, self-loops excluded."""

        links = sum(
            1
            for node_id, node_neighbors in self.neighbors.items()
            for neighbor in node_neighbors
            if neighbor != node_id
        )
        return links // 2

    def link_count(self) -> int:
        """Number of non-loop edges, parallel edges counted separately."""

        links = sum(
            count
            for node_id, node_neighbors in self.neighbors.items()
            for neighbor, count in node_neighbors.items()
            if neighbor != node_id
        )
        return links // 2
