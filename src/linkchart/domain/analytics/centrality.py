"""Degree ranking and networkx-backed centrality measures."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import networkx as nx

from linkchart.domain.model import CentralityMeasure, PipelineWarning, WarningKind

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from linkchart.domain.model import Node

    from .adjacency import Adjacency

log = getLogger(__name__)

DEFAULT_TOP_K = 5


@dataclass(frozen=True, slots=True)
class CentralNode:
    id: str
    label: str
    degree: int


def degree_ranking(
    adjacency: Adjacency,
    nodes: Sequence[Node],
    *,
    top_k: int = DEFAULT_TOP_K,
) -> tuple[CentralNode, ...]:
    """Top ``top_k`` nodes by degree, ties broken by id."""

    labels = {node.id: node.label for node in nodes}
    ranked = sorted(adjacency.degrees.items(), key=lambda item: (-item[1], item[0]))
    return tuple(
        CentralNode(id=node_id, label=labels.get(node_id, node_id), degree=degree)
        for node_id, degree in ranked[:top_k]
    )


def to_networkx(adjacency: Adjacency) -> nx.Graph:
    """Simple undirected graph; parallel edges become the ``weight`` attribute."""

    graph = nx.Graph()
    graph.add_nodes_from(adjacency.node_ids)
    for node_id, node_neighbors in adjacency.neighbors.items():
        for neighbor, count in node_neighbors.items():
            if not graph.has_edge(node_id, neighbor):
                graph.add_edge(node_id, neighbor, weight=count)
    return graph


_MEASURES: dict[CentralityMeasure, Callable[[nx.Graph], Mapping[str, float]]] = {
    CentralityMeasure.BETWEENNESS: lambda graph: nx.betweenness_centrality(graph, normalized=True),
    CentralityMeasure.CLOSENESS: nx.closeness_centrality,
    CentralityMeasure.PAGERANK: lambda graph: nx.pagerank(graph, alpha=0.85, weight="weight"),
    CentralityMeasure.EIGENVECTOR: lambda graph: nx.eigenvector_centrality(
        graph, max_iter=1000, weight="weight"
    ),
}


def extended_centrality(
    adjacency: Adjacency,
    measures: Sequence[CentralityMeasure | str],
) -> tuple[dict[str, dict[str, float]], list[PipelineWarning]]:
    """Scores per requested measure, rounded and keyed by node id."""

    results: dict[str, dict[str, float]] = {}
    warnings: list[PipelineWarning] = []
    if not measures or not adjacency.node_ids:
        return results, warnings

    graph = to_networkx(adjacency)
    for requested in measures:
        measure = CentralityMeasure(requested)
        try:
            scores = _MEASURES[measure](graph)
        except nx.PowerIterationFailedConvergence as exc:
            warnings.append(
                PipelineWarning(
                    kind=WarningKind.BOUND_EXCEEDED,
                    message=f"{measure} centrality did not converge: {exc}",
                )
            )
            log.warning("%s centrality did not converge", measure)
            continue
        results[measure] = {
            node_id: round(float(scores.get(node_id, 0.0)), 6) for node_id in adjacency.node_ids
        }
    return results, warnings
