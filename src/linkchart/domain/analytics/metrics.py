"""Basic graph metrics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from linkchart.domain.model import Edge, Node

    from .adjacency import Adjacency


@dataclass(frozen=True, slots=True, kw_only=True)
class GraphMetrics:
    entity_count: int
    edge_count: int
    entity_types: Mapping[str, int] = field(default_factory=dict[str, int])
    edge_types: Mapping[str, int] = field(default_factory=dict[str, int])
    density: float = 0.0
    average_degree: float = 0.0
    max_degree: int = 0
    max_degree_node: str | None = None


def compute_metrics(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    adjacency: Adjacency,
) -> GraphMetrics:
    """Counts, type distributions, density and degree statistics.

    Density counts distinct adjacent pairs so that parallel edges and self-loops
    cannot push it above one.
    """

    node_count = len(nodes)
    density = 0.0
    if node_count > 1:
        density = 2 * adjacency.distinct_pairs() / (node_count * (node_count - 1))

    total_degree = sum(adjacency.degrees.values())
    average_degree = total_degree / node_count if node_count else 0.0

    max_degree = 0
    max_degree_node: str | None = None
    for node_id, degree in adjacency.degrees.items():
        if (
            max_degree_node is None
            or degree > max_degree
            or (degree == max_degree and node_id < max_degree_node)
        ):
            max_degree, max_degree_node = degree, node_id

    return GraphMetrics(
        entity_count=node_count,
        edge_count=len(edges),
        entity_types=dict(Counter(node.type for node in nodes)),
        edge_types=dict(Counter(edge.type for edge in edges)),
        density=density,
        average_degree=average_degree,
        max_degree=max_degree,
        max_degree_node=max_degree_node,
    )
