from __future__ import annotations

import pytest

from linkchart.domain.analytics import Adjacency, compute_metrics
from tests.helpers.graphs import make_edge, make_graph, make_node


def test_sample_graph_metrics() -> None:
    nodes = (
        make_node("1", label="Alice"),
        make_node("2", label="Bob"),
        make_node("3", type_="Company", label="Acme Corp"),
    )
    edges = (make_edge("1", "2"), make_edge("2", "3", type_="works_at"))
    adjacency = Adjacency.from_graph(nodes, edges)

    metrics = compute_metrics(nodes, edges, adjacency)

    assert metrics.entity_count == 3
    assert metrics.edge_count == 2
    assert metrics.density == pytest.approx(2 / 3)
    assert metrics.max_degree == 2
    assert metrics.max_degree_node == "2"
    assert metrics.average_degree == pytest.approx(4 / 3)
    assert dict(metrics.entity_types) == {"Person": 2, "Company": 1}
    assert dict(metrics.edge_types) == {"knows": 1, "works_at": 1}


def test_density_stays_within_bounds_with_parallel_edges_and_loops() -> None:
    nodes, _ = make_graph("AB", ())
    edges = (
        make_edge("A", "B", edge_id="e1"),
        make_edge("B", "A", edge_id="e2"),
        make_edge("A", "A", edge_id="e3"),
    )
    adjacency = Adjacency.from_graph(nodes, edges)

    metrics = compute_metrics(nodes, edges, adjacency)

    assert 0.0 <= metrics.density <= 1.0
    assert metrics.density == 1.0
    assert adjacency.degree("A") == 4
    assert adjacency.link_count() == 2


@pytest.mark.parametrize("node_ids", ["", "A"])
def test_density_of_tiny_graphs_is_zero(node_ids: str) -> None:
    nodes, edges = make_graph(node_ids, ())
    adjacency = Adjacency.from_graph(nodes, edges)

    metrics = compute_metrics(nodes, edges, adjacency)

    assert metrics.density == 0.0
    assert metrics.average_degree == 0.0


def test_adjacency_skips_dangling_edges() -> None:
    nodes, _ = make_graph("AB", ())
    edges = (make_edge("A", "B", edge_id="ok"), make_edge("A", "Z", edge_id="dangling"))

    adjacency = Adjacency.from_graph(nodes, edges)

    assert adjacency.skipped_edges == ("dangling",)
    assert adjacency.neighbors_of("A") == ("B",)
    assert adjacency.are_adjacent("B", "A")
    assert "Z" not in adjacency
