"""Greedy modularity community detection ("Louvain-lite").

Every node starts in its own community. Each sweep visits nodes in insertion
order and moves a node to the neighboring community with the largest positive
gain ``(e_new - e_old) / 2m``, where ``e_x`` counts the node's edges into
community ``x`` and ``m`` is the number of non-loop edges. The gain ignores the
degree penalty of full modularity; the final partition is still scored with the
standard modularity function.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from networkx.algorithms.community import modularity

from linkchart.domain.model import PipelineWarning, WarningKind

from .centrality import to_networkx

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from linkchart.domain.model import Node

    from .adjacency import Adjacency

log = getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 20


@dataclass(frozen=True, slots=True)
class Community:
    id: int
    node_ids: tuple[str, ...]
    types: Mapping[str, int] = field(default_factory=dict[str, int])

    @property
    def size(self) -> int:
        return len(self.node_ids)


@dataclass(frozen=True, slots=True, kw_only=True)
class CommunityResult:
    assignment: Mapping[str, int]
    communities: tuple[Community, ...]
    modularity: float
    iterations: int
    converged: bool
    warnings: tuple[PipelineWarning, ...] = ()

    @property
    def count(self) -> int:
        return len(self.communities)


def detect_communities(
    adjacency: Adjacency,
    nodes: Sequence[Node],
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> CommunityResult:
    order = adjacency.node_ids
    community_of = {node_id: position for position, node_id in enumerate(order)}
    link_count = adjacency.link_count()

    iterations = 0
    converged = link_count == 0
    while not converged and iterations < max_iterations:
        iterations += 1
        moved = False
        for node_id in order:
            target = _best_move(node_id, adjacency, community_of, link_count)
            if target is not None:
                community_of[node_id] = target
                moved = True
        converged = not moved

    warnings: list[PipelineWarning] = []
    if not converged:
        warnings.append(
            PipelineWarning(
                kind=WarningKind.BOUND_EXCEEDED,
                message=(
                    f"Community detection stopped after {max_iterations} sweeps "
                    "without converging"
                ),
            )
        )
        log.warning("Community detection hit the %d sweep cap", max_iterations)

    assignment = _renumber(order, community_of)
    communities = _summarize(assignment, nodes)
    score = _modularity(adjacency, communities, link_count)
    log.info(
        "Found %d communities in %d sweeps (modularity %.4f)",
        len(communities),
        iterations,
        score,
    )
    return CommunityResult(
        assignment=assignment,
        communities=communities,
        modularity=score,
        iterations=iterations,
        converged=converged,
        warnings=tuple(warnings),
    )


def _best_move(
    node_id: str,
    adjacency: Adjacency,
    community_of: dict[str, int],
    link_count: int,
) -> int | None:
    current = community_of[node_id]
    links_into: dict[int, int] = {}
    for neighbor, count in adjacency.neighbors[node_id].items():
        if neighbor == node_id:
            continue
        community = community_of[neighbor]
        links_into[community] = links_into.get(community, 0) + count

    stay = links_into.get(current, 0)
    best_gain = 0.0
    best: int | None = None
    for community, links in links_into.items():
        if community == current:
            continue
        gain = (links - stay) / (2 * link_count)
        if gain > best_gain:
            best_gain, best = gain, community
    return best


def _renumber(order: Sequence[str], community_of: Mapping[str, int]) -> dict[str, int]:
    renumbered: dict[int, int] = {}
    assignment: dict[str, int] = {}
    for node_id in order:
        community = community_of[node_id]
        assignment[node_id] = renumbered.setdefault(community, len(renumbered))
    return assignment


def _summarize(
    assignment: Mapping[str, int],
    nodes: Sequence[Node],
) -> tuple[Community, ...]:
    """Community records, largest first."""

    types = {node.id: node.type for node in nodes}
    members: dict[int, list[str]] = {}
    for node_id, community in assignment.items():
        members.setdefault(community, []).append(node_id)
    summary = [
        Community(
            id=community,
            node_ids=tuple(node_ids),
            types=dict(Counter(types.get(node_id, "") for node_id in node_ids)),
        )
        for community, node_ids in members.items()
    ]
    summary.sort(key=lambda community: (-community.size, community.id))
    return tuple(summary)


def _modularity(
    adjacency: Adjacency,
    communities: Sequence[Community],
    link_count: int,
) -> float:
    if link_count == 0 or not communities:
        return 0.0
    graph = to_networkx(adjacency)
    partition = [set(community.node_ids) for community in communities]
    return float(modularity(graph, partition, weight="weight"))
