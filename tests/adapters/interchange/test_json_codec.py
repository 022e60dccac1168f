from __future__ import annotations

import json

import pytest

from linkchart.adapters.interchange import export_json, import_json
from linkchart.domain.model import Edge, Graph, Node, ParseError, TypedCell


def _graph() -> Graph:
    alice = Node(
        id="a",
        type="Person",
        label="Alice",
        properties={
            "email": TypedCell(raw_value="X@x.com", canonical_value="x@x.com", type="email"),
            "phone": TypedCell(
                raw_value="+1 (415) 555-0100",
                canonical_value="(415) 555-0100",
                type="phone",
            ),
        },
        source_row_index=0,
        aliases=({"id": "b", "label": "Bee"},),
    )
    acme = Node(
        id="c",
        type="Company",
        label="Acme Corp",
        properties={
            "phone": TypedCell(
                raw_value="4155550100", canonical_value="(415) 555-0100", type="phone"
            ),
        },
        source_row_index=2,
    )
    works_at = Edge(id="e1", source="a", target="c", type="works_at", source_row_index=3)
    shares_phone = Edge(
        id="inferred-1",
        source="a",
        target="c",
        type="shares-phone",
        properties={
            "phone": TypedCell(
                raw_value="(415) 555-0100", canonical_value="(415) 555-0100", type="phone"
            )
        },
        inferred=True,
    )
    return Graph(nodes=(alice, acme), edges=(works_at, shares_phone))


def test_export_then_import_restores_the_graph() -> None:
    graph = _graph()

    restored = import_json(export_json(graph))

    assert restored == graph
    assert restored.node("a") is not None
    assert restored.edges[1].inferred


def test_export_uses_camel_case_and_nests_aliases() -> None:
    document = json.loads(export_json(_graph()))

    alice = document["nodes"][0]
    assert alice["sourceRowIndex"] == 0
    assert alice["properties"]["email"]["canonicalValue"] == "x@x.com"
    assert alice["properties"]["aliases"] == [{"id": "b", "label": "Bee"}]
    assert "aliases" not in document["nodes"][1]["properties"]
    assert document["metadata"]["nodeCount"] == 2
    assert document["metadata"]["edgeCount"] == 2
    assert document["metadata"]["version"] == "1.0"


def test_import_wraps_bare_property_values_and_fills_defaults() -> None:
    payload = json.dumps(
        {
            "nodes": [{"id": "a", "properties": {"city": "Paris", "visits": 3}}],
            "edges": [{"id": "e1", "source": "a", "target": "a"}],
        }
    )

    graph = import_json(payload)

    (node,) = graph.nodes
    assert node.label == "a"
    assert node.type == "entity"
    assert node.properties["city"].raw_value == "Paris"
    assert node.properties["visits"].canonical_value == 3
    assert graph.edges[0].type == "associates"


def test_import_rejects_duplicate_node_ids() -> None:
    payload = json.dumps({"nodes": [{"id": "a"}, {"id": "a"}], "edges": []})

    with pytest.raises(ParseError, match="Duplicate node id"):
        import_json(payload)


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        json.dumps({"nodes": [{"type": "Person"}]}),
        json.dumps({"nodes": [], "edges": [{"id": "e1", "source": "a"}]}),
    ],
)
def test_import_rejects_invalid_documents(payload: str) -> None:
    with pytest.raises(ParseError, match="Invalid graph document"):
        import_json(payload)
