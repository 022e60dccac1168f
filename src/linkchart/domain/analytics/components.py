"""Connected components and the multi-node clusters built from them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkchart.domain.model import Edge

    from .adjacency import Adjacency


@dataclass(frozen=True, slots=True)
class Cluster:
    id: str
    node_ids: tuple[str, ...]
    edge_ids: tuple[str, ...]

    @property
    def size(self) -> int:
        return len(self.node_ids)


def connected_components(adjacency: Adjacency) -> dict[str, int]:
    """Node -> component id, ids assigned sequentially in discovery order."""

    component_of: dict[str, int] = {}
    next_id = 0
    for start in adjacency.node_ids:
        if start in component_of:
            continue
        component_of[start] = next_id
        stack = [start]
        while stack:
            node_id = stack.pop()
            for neighbor in adjacency.neighbors_of(node_id):
                if neighbor not in component_of:
                    component_of[neighbor] = next_id
                    stack.append(neighbor)
        next_id += 1
    return component_of


def find_clusters(
    component_of: dict[str, int],
    edges: Sequence[Edge],
) -> tuple[Cluster, ...]:
    """Components with more than one node, largest first."""

    members: dict[int, list[str]] = {}
    for node_id, component in component_of.items():
        members.setdefault(component, []).append(node_id)
    edge_ids: dict[int, list[str]] = {}
    for edge in edges:
        component = component_of.get(edge.source)
        if component is not None and component == component_of.get(edge.target):
            edge_ids.setdefault(component, []).append(edge.id)

    multi = [component for component, nodes in members.items() if len(nodes) > 1]
    multi.sort(key=lambda component: -len(members[component]))
    return tuple(
        Cluster(
            id=f"cluster_{position}",
            node_ids=tuple(members[component]),
            edge_ids=tuple(edge_ids.get(component, ())),
        )
        for position, component in enumerate(multi)
    )
