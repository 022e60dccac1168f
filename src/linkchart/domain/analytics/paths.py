"""Undirected path search over the adjacency."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .adjacency import Adjacency

DEFAULT_MAX_DEPTH = 3


def find_path(
    adjacency: Adjacency,
    source: str,
    target: str,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[str, ...]:
    """Shortest node path from ``source`` to ``target`` within ``max_depth`` hops.

    Returns an empty tuple when either node is unknown or no path fits the bound.
    """

    if source not in adjacency or target not in adjacency:
        return ()
    if source == target:
        return (source,)

    parents: dict[str, str | None] = {source: None}
    queue: deque[tuple[str, int]] = deque([(source, 0)])
    while queue:
        node_id, depth = queue.popleft()
        if depth >= max_depth:
            continue
        for neighbor in adjacency.neighbors_of(node_id):
            if neighbor in parents:
                continue
            parents[neighbor] = node_id
            if neighbor == target:
                return _walk_back(parents, target)
            queue.append((neighbor, depth + 1))
    return ()


def _walk_back(parents: dict[str, str | None], target: str) -> tuple[str, ...]:
    path: list[str] = []
    current: str | None = target
    while current is not None:
        path.append(current)
        current = parents[current]
    path.reverse()
    return tuple(path)


def find_all_paths(
    adjacency: Adjacency,
    source: str,
    target: str,
    *,
    max_hops: int = DEFAULT_MAX_DEPTH,
) -> tuple[tuple[str, ...], ...]:
    """Every simple path between two nodes with at most ``max_hops`` edges."""

    if source not in adjacency or target not in adjacency:
        return ()
    if source == target:
        return ((source,),)

    paths: list[tuple[str, ...]] = []
    stack: list[tuple[str, tuple[str, ...]]] = [(source, (source,))]
    while stack:
        node_id, path = stack.pop()
        if node_id == target:
            paths.append(path)
            continue
        if len(path) - 1 >= max_hops:
            continue
        # reversed so paths come out in neighbor insertion order
        for neighbor in reversed(adjacency.neighbors_of(node_id)):
            if neighbor not in path:
                stack.append((neighbor, (*path, neighbor)))
    return tuple(paths)
