"""Read-only analytics over a resolved graph."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from linkchart.domain.model import PipelineWarning

from .adjacency import Adjacency
from .centrality import DEFAULT_TOP_K, degree_ranking, extended_centrality
from .communities import DEFAULT_MAX_ITERATIONS, detect_communities
from .components import connected_components, find_clusters
from .metrics import compute_metrics
from .paths import DEFAULT_MAX_DEPTH, find_path
from .patterns import DEFAULT_CYCLE_LIMIT, DEFAULT_HUB_LIMIT, discover_patterns
from .report import AnalysisReport

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkchart.domain.model import CentralityMeasure, Edge, Node

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class AnalyzeOptions:
    top_k: int = DEFAULT_TOP_K
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    max_depth: int = DEFAULT_MAX_DEPTH
    path: tuple[str, str] | None = None
    centrality_measures: tuple[CentralityMeasure | str, ...] = ()
    hub_limit: int = DEFAULT_HUB_LIMIT
    cycle_limit: int = DEFAULT_CYCLE_LIMIT


def analyze(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: AnalyzeOptions | None = None,
) -> AnalysisReport:
    """Metrics, centrality, clusters, communities, patterns and an optional path.

    Nodes and edges are never modified. Edges that reference unknown nodes are
    left out of every computation and reported as warnings.
    """

    active = options or AnalyzeOptions()
    adjacency = Adjacency.from_graph(nodes, edges)
    warnings: list[PipelineWarning] = [
        PipelineWarning.validation(
            f"Edge {edge_id!r} references a missing node and was not analyzed",
            edge_id=edge_id,
        )
        for edge_id in adjacency.skipped_edges
    ]
    if adjacency.skipped_edges:
        log.warning("Skipped %d dangling edges during analysis", len(adjacency.skipped_edges))
    analyzed_edges = [
        edge for edge in edges if edge.source in adjacency and edge.target in adjacency
    ]

    components = connected_components(adjacency)
    communities = detect_communities(adjacency, nodes, max_iterations=active.max_iterations)
    warnings.extend(communities.warnings)
    centrality, centrality_warnings = extended_centrality(
        adjacency, active.centrality_measures
    )
    warnings.extend(centrality_warnings)

    path: tuple[str, ...] | None = None
    if active.path is not None:
        source, target = active.path
        path = find_path(adjacency, source, target, max_depth=active.max_depth)

    report = AnalysisReport(
        metrics=compute_metrics(nodes, analyzed_edges, adjacency),
        central_nodes=degree_ranking(adjacency, nodes, top_k=active.top_k),
        clusters=find_clusters(components, analyzed_edges),
        patterns=discover_patterns(
            adjacency,
            nodes,
            analyzed_edges,
            hub_limit=active.hub_limit,
            cycle_limit=active.cycle_limit,
        ),
        communities=communities,
        components=components,
        path=path,
        extended_centrality=centrality,
        warnings=tuple(warnings),
    )
    log.info(
        "Analyzed %d nodes/%d edges: %d clusters, %d communities, %d cycles",
        len(nodes),
        len(analyzed_edges),
        len(report.clusters),
        report.communities.count,
        len(report.patterns.cycles),
    )
    return report
