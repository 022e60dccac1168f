"""JSON-ready encoding of stage outputs.

Dataclass field names become camelCase keys; mapping keys (column names, node
ids, property names) are kept verbatim. Nodes and edges use the interchange
document layout so stage output and exported graphs look the same.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from enum import Enum
from functools import singledispatch

from pydantic.alias_generators import to_camel

from linkchart.domain.analytics import Cluster, Community
from linkchart.domain.model import Edge, Graph, Node

from .json_codec import edge_document, graph_to_document, node_document


@singledispatch
def encode(value: object) -> object:
    if is_dataclass(value) and not isinstance(value, type):
        return {
            to_camel(item.name): encode(getattr(value, item.name))
            for item in fields(value)
            if not item.name.startswith("_")
        }
    if isinstance(value, Mapping):
        return {str(key): encode(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [encode(item) for item in value]
    return value


@encode.register
def _(value: Enum) -> object:
    return value.value


@encode.register
def _(value: str) -> object:
    return str(value)


@encode.register
def _(value: Node) -> object:
    return node_document(value).model_dump(mode="json", by_alias=True)


@encode.register
def _(value: Edge) -> object:
    return edge_document(value).model_dump(mode="json", by_alias=True)


@encode.register
def _(value: Graph) -> object:
    return graph_to_document(value).model_dump(mode="json", by_alias=True)


@encode.register
def _(value: Cluster) -> object:
    return {
        "id": value.id,
        "size": value.size,
        "nodeIds": list(value.node_ids),
        "edgeIds": list(value.edge_ids),
    }


@encode.register
def _(value: Community) -> object:
    return {
        "id": value.id,
        "size": value.size,
        "nodeIds": list(value.node_ids),
        "types": dict(value.types),
    }
