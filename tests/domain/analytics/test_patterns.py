from __future__ import annotations

from linkchart.domain.analytics import (
    Adjacency,
    discover_patterns,
    find_cycles,
    find_hierarchies,
    find_hubs,
)
from tests.helpers.graphs import make_edge, make_graph, make_node


def test_single_triangle_cycle() -> None:
    adjacency = Adjacency.from_graph(
        *make_graph("ABCD", (("A", "B"), ("B", "C"), ("C", "A"), ("C", "D")))
    )

    cycles = find_cycles(adjacency)

    assert cycles == (("A", "B", "C"),)


def test_reported_cycles_are_closed_walks() -> None:
    adjacency = Adjacency.from_graph(
        *make_graph(
            "ABCDEF",
            (("A", "B"), ("B", "C"), ("C", "D"), ("D", "A"), ("B", "E"), ("E", "F"), ("F", "B")),
        )
    )

    cycles = find_cycles(adjacency, limit=5)

    assert len(cycles) == 2
    for cycle in cycles:
        assert len(cycle) >= 3
        closing = (*cycle, cycle[0])
        assert all(
            adjacency.are_adjacent(left, right)
            for left, right in zip(closing, closing[1:], strict=False)
        )


def test_find_cycles_honours_limit_and_ignores_parallel_edges() -> None:
    nodes, _ = make_graph("AB", ())
    parallel = (make_edge("A", "B", edge_id="e1"), make_edge("A", "B", edge_id="e2"))
    triangles = Adjacency.from_graph(
        *make_graph(
            "ABCDEFGHI",
            (
                ("A", "B"), ("B", "C"), ("C", "A"),
                ("D", "E"), ("E", "F"), ("F", "D"),
                ("G", "H"), ("H", "I"), ("I", "G"),
            ),
        )
    )

    assert find_cycles(Adjacency.from_graph(nodes, parallel)) == ()
    assert len(find_cycles(triangles, limit=2)) == 2


def test_find_hubs_threshold() -> None:
    spokes = tuple(("H", spoke) for spoke in "ABCDEF")
    nodes, edges = make_graph("HABCDEF", spokes)
    adjacency = Adjacency.from_graph(nodes, edges)

    hubs = find_hubs(adjacency, nodes)

    assert [(hub.id, hub.degree) for hub in hubs] == [("H", 6)]


def test_find_hubs_needs_at_least_five_links() -> None:
    nodes, edges = make_graph("HABC", (("H", "A"), ("H", "B"), ("H", "C")))

    assert find_hubs(Adjacency.from_graph(nodes, edges), nodes) == ()


def test_find_hierarchies_follow_child_to_parent_edges() -> None:
    nodes = tuple(make_node(node_id) for node_id in ("ceo", "cto", "cfo", "dev", "intern"))
    edges = (
        make_edge("cto", "ceo", type_="hierarchical"),
        make_edge("cfo", "ceo", type_="Hierarchical"),
        make_edge("dev", "cto", type_="hierarchical"),
        make_edge("intern", "dev", type_="knows"),
    )

    (hierarchy,) = find_hierarchies(nodes, edges)

    assert hierarchy.root == "ceo"
    assert hierarchy.children == ("cto", "cfo")
    assert hierarchy.depth == 2
    assert hierarchy.descendants == 3


def test_find_hierarchies_skips_trivial_trees() -> None:
    nodes = (make_node("boss"), make_node("worker"))
    edges = (make_edge("worker", "boss", type_="hierarchical"),)

    assert find_hierarchies(nodes, edges) == ()


def test_discover_patterns_bundles_results() -> None:
    nodes, edges = make_graph("ABCD", (("A", "B"), ("B", "C"), ("C", "A"), ("C", "D")))

    patterns = discover_patterns(Adjacency.from_graph(nodes, edges), nodes, edges)

    assert patterns.cycles == (("A", "B", "C"),)
    assert patterns.hubs == ()
    assert patterns.hierarchies == ()
