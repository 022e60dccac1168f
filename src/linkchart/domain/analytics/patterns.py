"""Structural pattern discovery: hubs, hierarchies and cycles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from linkchart.domain.model import Edge, Node

    from .adjacency import Adjacency

HIERARCHICAL_EDGE_TYPE = "hierarchical"
DEFAULT_HUB_LIMIT = 3
DEFAULT_CYCLE_LIMIT = 3
MIN_HUB_DEGREE = 5
HUB_DEGREE_FACTOR = 1.5


@dataclass(frozen=True, slots=True)
class Hub:
    id: str
    label: str
    degree: int


@dataclass(frozen=True, slots=True, kw_only=True)
class Hierarchy:
    root: str
    label: str
    children: tuple[str, ...]
    depth: int
    descendants: int


@dataclass(frozen=True, slots=True)
class Patterns:
    hubs: tuple[Hub, ...] = field(default_factory=tuple)
    hierarchies: tuple[Hierarchy, ...] = field(default_factory=tuple)
    cycles: tuple[tuple[str, ...], ...] = field(default_factory=tuple)


def find_hubs(
    adjacency: Adjacency,
    nodes: Sequence[Node],
    *,
    limit: int = DEFAULT_HUB_LIMIT,
) -> tuple[Hub, ...]:
    """Nodes with degree at least ``max(5, 1.5 * average degree)``, busiest first."""

    if not nodes:
        return ()
    average = sum(adjacency.degrees.values()) / len(nodes)
    threshold = max(MIN_HUB_DEGREE, HUB_DEGREE_FACTOR * average)
    labels = {node.id: node.label for node in nodes}
    qualifying = [
        (node_id, degree) for node_id, degree in adjacency.degrees.items() if degree >= threshold
    ]
    qualifying.sort(key=lambda item: (-item[1], item[0]))
    return tuple(
        Hub(id=node_id, label=labels.get(node_id, node_id), degree=degree)
        for node_id, degree in qualifying[:limit]
    )


def find_hierarchies(nodes: Sequence[Node], edges: Sequence[Edge]) -> tuple[Hierarchy, ...]:
    """Trees spanned by ``hierarchical`` edges, which point from child to parent.

    A root is a parent that is never a child. Only roots with at least two
    direct children or a depth of at least two are reported.
    """

    known = {node.id: node for node in nodes}
    children_of: dict[str, list[str]] = {}
    child_ids: set[str] = set()
    for edge in edges:
        if edge.type.strip().casefold() != HIERARCHICAL_EDGE_TYPE:
            continue
        if edge.source not in known or edge.target not in known or edge.is_self_loop:
            continue
        siblings = children_of.setdefault(edge.target, [])
        if edge.source not in siblings:
            siblings.append(edge.source)
        child_ids.add(edge.source)

    hierarchies: list[Hierarchy] = []
    for root, children in children_of.items():
        if root in child_ids:
            continue
        depth, descendants = _measure_tree(root, children_of)
        if len(children) >= 2 or depth >= 2:
            hierarchies.append(
                Hierarchy(
                    root=root,
                    label=known[root].label,
                    children=tuple(children),
                    depth=depth,
                    descendants=descendants,
                )
            )
    return tuple(hierarchies)


def _measure_tree(root: str, children_of: dict[str, list[str]]) -> tuple[int, int]:
    depth = 0
    reached: set[str] = set()
    stack: list[tuple[str, int, frozenset[str]]] = [(root, 0, frozenset((root,)))]
    while stack:
        node_id, level, on_path = stack.pop()
        depth = max(depth, level)
        for child in children_of.get(node_id, ()):
            if child in on_path:
                continue
            reached.add(child)
            stack.append((child, level + 1, on_path | {child}))
    return depth, len(reached)


def find_cycles(
    adjacency: Adjacency,
    *,
    limit: int = DEFAULT_CYCLE_LIMIT,
    min_length: int = 3,
) -> tuple[tuple[str, ...], ...]:
    """First ``limit`` distinct cycles found by depth-first search, in node order.

    Whenever a neighbor is already on the current path, the path slice from that
    neighbor onwards closes a cycle.
    """

    cycles: list[tuple[str, ...]] = []
    seen: set[frozenset[str]] = set()
    visited: set[str] = set()

    for start in adjacency.node_ids:
        if start in visited:
            continue
        visited.add(start)
        path = [start]
        position = {start: 0}
        stack: list[tuple[str, str | None, Iterator[str]]] = [
            (start, None, iter(adjacency.neighbors_of(start)))
        ]
        while stack and len(cycles) < limit:
            node_id, parent, pending = stack[-1]
            descended = False
            for neighbor in pending:
                if neighbor in (node_id, parent):
                    continue
                if neighbor in position:
                    cycle = tuple(path[position[neighbor] :])
                    key = frozenset(cycle)
                    if len(cycle) >= min_length and key not in seen:
                        seen.add(key)
                        cycles.append(cycle)
                    continue
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                position[neighbor] = len(path)
                path.append(neighbor)
                stack.append((neighbor, node_id, iter(adjacency.neighbors_of(neighbor))))
                descended = True
                break
            if not descended:
                stack.pop()
                path.pop()
                del position[node_id]
        if len(cycles) >= limit:
            break
    return tuple(cycles[:limit])


def discover_patterns(
    adjacency: Adjacency,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    *,
    hub_limit: int = DEFAULT_HUB_LIMIT,
    cycle_limit: int = DEFAULT_CYCLE_LIMIT,
) -> Patterns:
    return Patterns(
        hubs=find_hubs(adjacency, nodes, limit=hub_limit),
        hierarchies=find_hierarchies(nodes, edges),
        cycles=find_cycles(adjacency, limit=cycle_limit),
    )
