from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from linkchart.domain.analytics import Adjacency, detect_communities
from linkchart.domain.model import WarningKind
from tests.helpers.graphs import make_graph, make_node

if TYPE_CHECKING:
    from linkchart.domain.model import Edge, Node


def test_two_triangles_form_two_communities(two_triangles: tuple[tuple[Node, ...], tuple[Edge, ...]]) -> None:
    nodes, edges = two_triangles

    result = detect_communities(Adjacency.from_graph(nodes, edges), nodes)

    assert result.count == 2
    assert [community.size for community in result.communities] == [3, 3]
    assert result.modularity > 0
    assert result.modularity == pytest.approx(0.5)
    assert result.converged
    assert result.assignment["A"] == result.assignment["B"] == result.assignment["C"]
    assert result.assignment["D"] == result.assignment["E"] == result.assignment["F"]
    assert result.assignment["A"] != result.assignment["D"]


def test_community_ids_are_contiguous_and_cover_every_node() -> None:
    nodes, edges = make_graph(
        "ABCDEFGH",
        (("A", "B"), ("B", "C"), ("C", "A"), ("C", "D"), ("D", "E"), ("E", "F"), ("F", "D")),
    )

    result = detect_communities(Adjacency.from_graph(nodes, edges), nodes)

    assert set(result.assignment) == {node.id for node in nodes}
    assert sorted({*result.assignment.values()}) == list(range(result.count))
    members = [node_id for community in result.communities for node_id in community.node_ids]
    assert sorted(members) == sorted(node.id for node in nodes)


def test_communities_are_summarized_largest_first() -> None:
    nodes = (
        make_node("solo", type_="Company"),
        *make_graph("ABC", ())[0],
    )
    _, edges = make_graph("ABC", (("A", "B"), ("B", "C"), ("C", "A")))

    result = detect_communities(Adjacency.from_graph(nodes, edges), nodes)

    assert [community.node_ids for community in result.communities] == [
        ("A", "B", "C"),
        ("solo",),
    ]
    assert dict(result.communities[0].types) == {"Person": 3}
    assert result.assignment["solo"] == 0


def test_graph_without_links_keeps_singletons() -> None:
    nodes, edges = make_graph("ABC", ())

    result = detect_communities(Adjacency.from_graph(nodes, edges), nodes)

    assert result.count == 3
    assert result.iterations == 0
    assert result.modularity == 0.0


def test_iteration_cap_warns() -> None:
    nodes, edges = make_graph("ABCD", (("A", "B"), ("B", "C"), ("C", "D")))

    result = detect_communities(Adjacency.from_graph(nodes, edges), nodes, max_iterations=1)

    assert not result.converged
    assert result.iterations == 1
    assert [warning.kind for warning in result.warnings] == [WarningKind.BOUND_EXCEEDED]
    assert sorted({*result.assignment.values()}) == list(range(result.count))
