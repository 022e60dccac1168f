from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from linkchart.domain.analytics import AnalyzeOptions, analyze
from linkchart.domain.model import CentralityMeasure, WarningKind
from tests.helpers.graphs import make_edge, make_node

if TYPE_CHECKING:
    from linkchart.domain.model import Edge, Node


def _sample_graph() -> tuple[tuple[Node, ...], tuple[Edge, ...]]:
    nodes = (
        make_node("1", label="Alice"),
        make_node("2", label="Bob"),
        make_node("3", type_="Company", label="Acme Corp"),
    )
    edges = (make_edge("1", "2"), make_edge("2", "3", type_="works_at"))
    return nodes, edges


def test_analyze_sample_graph() -> None:
    nodes, edges = _sample_graph()

    report = analyze(nodes, edges, AnalyzeOptions(path=("1", "3")))

    assert report.metrics.density == pytest.approx(2 / 3)
    assert report.metrics.max_degree_node == "2"
    assert report.path == ("1", "2", "3")
    assert report.central_nodes[0].id == "2"
    assert report.central_nodes[0].label == "Bob"
    assert [cluster.size for cluster in report.clusters] == [3]
    assert report.communities.count >= 1
    assert report.patterns.cycles == ()
    assert report.warnings == ()


def test_analyze_does_not_modify_its_input() -> None:
    nodes, edges = _sample_graph()
    snapshot = (tuple(nodes), tuple(edges))

    analyze(nodes, edges, AnalyzeOptions(centrality_measures=(CentralityMeasure.CLOSENESS,)))

    assert (nodes, edges) == snapshot


def test_analyze_skips_dangling_edges_with_warning() -> None:
    nodes, edges = _sample_graph()
    dangling = make_edge("3", "ghost", edge_id="dangling")

    report = analyze(nodes, (*edges, dangling))

    assert report.metrics.edge_count == 2
    assert [warning.edge_id for warning in report.warnings] == ["dangling"]
    assert report.warnings[0].kind is WarningKind.VALIDATION


def test_analyze_reports_extended_centrality() -> None:
    nodes, edges = _sample_graph()

    report = analyze(
        nodes,
        edges,
        AnalyzeOptions(centrality_measures=("betweenness",), top_k=1),
    )

    assert report.extended_centrality["betweenness"]["2"] == pytest.approx(1.0)
    assert len(report.central_nodes) == 1


def test_analyze_path_outside_depth_is_empty() -> None:
    nodes = tuple(make_node(node_id) for node_id in "ABCDE")
    edges = tuple(make_edge(left, right) for left, right in zip("ABCD", "BCDE", strict=True))

    report = analyze(nodes, edges, AnalyzeOptions(path=("A", "E"), max_depth=3))

    assert report.path == ()


def test_analyze_empty_graph() -> None:
    report = analyze((), ())

    assert report.metrics.entity_count == 0
    assert report.metrics.max_degree_node is None
    assert report.central_nodes == ()
    assert report.communities.count == 0
    assert report.path is None
