"""JSON export and import of resolved graphs."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from linkchart.domain.model import Edge, Graph, Node, ParseError, TypedCell

from .schema import CellDocument, EdgeDocument, GraphDocument, MetadataDocument, NodeDocument

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)


def cell_document(cell: TypedCell) -> CellDocument:
    return CellDocument(
        raw_value=cell.raw_value,
        canonical_value=cell.canonical_value,
        type=cell.type,
        valid=cell.valid,
    )


def node_document(node: Node) -> NodeDocument:
    return NodeDocument(
        id=node.id,
        type=node.type,
        label=node.label,
        properties={key: cell_document(cell) for key, cell in node.properties.items()},
        aliases=[dict(alias) for alias in node.aliases],
        source_row_index=node.source_row_index,
    )


def edge_document(edge: Edge) -> EdgeDocument:
    return EdgeDocument(
        id=edge.id,
        source=edge.source,
        target=edge.target,
        type=edge.type,
        properties={key: cell_document(cell) for key, cell in edge.properties.items()},
        inferred=edge.inferred,
        source_row_index=edge.source_row_index,
    )


def graph_to_document(graph: Graph) -> GraphDocument:
    return GraphDocument(
        nodes=[node_document(node) for node in graph.nodes],
        edges=[edge_document(edge) for edge in graph.edges],
        metadata=MetadataDocument(node_count=len(graph.nodes), edge_count=len(graph.edges)),
    )


def export_json(graph: Graph, *, indent: int | None = 2) -> str:
    """Serialize ``graph`` as a camelCase ``{nodes, edges, metadata}`` document."""

    document = graph_to_document(graph)
    log.debug("Exporting %d nodes and %d edges as JSON", len(graph.nodes), len(graph.edges))
    return document.model_dump_json(by_alias=True, indent=indent)


def _cells(properties: Mapping[str, CellDocument]) -> dict[str, TypedCell]:
    return {
        key: TypedCell(
            raw_value=cell.raw_value,
            canonical_value=cell.canonical_value,
            type=cell.type,
            valid=cell.valid,
        )
        for key, cell in properties.items()
    }


def document_to_graph(document: GraphDocument) -> Graph:
    nodes: list[Node] = []
    seen: set[str] = set()
    for entry in document.nodes:
        if entry.id in seen:
            raise ParseError(f"Duplicate node id {entry.id!r} in graph document")
        seen.add(entry.id)
        nodes.append(
            Node(
                id=entry.id,
                type=entry.type,
                label=entry.label if entry.label is not None else entry.id,
                properties=_cells(entry.properties),
                source_row_index=entry.source_row_index,
                aliases=tuple(entry.aliases),
            )
        )
    edges = [
        Edge(
            id=entry.id,
            source=entry.source,
            target=entry.target,
            type=entry.type,
            properties=_cells(entry.properties),
            inferred=entry.inferred,
            source_row_index=entry.source_row_index,
        )
        for entry in document.edges
    ]
    return Graph(nodes=tuple(nodes), edges=tuple(edges))


def import_json(payload: str | bytes) -> Graph:
    """Parse a graph document produced by :func:`export_json`."""

    try:
        document = GraphDocument.model_validate_json(payload)
    except ValidationError as exc:
        raise ParseError(f"Invalid graph document ({exc.error_count()} errors): {exc}") from exc
    graph = document_to_graph(document)
    log.info("Imported graph with %d nodes and %d edges", len(graph.nodes), len(graph.edges))
    return graph
