"""Nodes, edges and the graph that owns them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .primitives import EdgeId, NodeId, freeze
from .rows import TypedCell

type PropertyBag = Mapping[str, TypedCell]
type AliasRecord = Mapping[str, object]


@dataclass(frozen=True, slots=True, kw_only=True)
class Node:
    id: NodeId
    type: str
    label: str
    properties: PropertyBag = field(default_factory=dict[str, TypedCell])
    source_row_index: int | None = None
    aliases: tuple[AliasRecord, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", freeze(self.properties))
        object.__setattr__(self, "aliases", tuple(freeze(alias) for alias in self.aliases))


@dataclass(frozen=True, slots=True, kw_only=True)
class Edge:
    id: EdgeId
    source: NodeId
    target: NodeId
    type: str
    properties: PropertyBag = field(default_factory=dict[str, TypedCell])
    inferred: bool = False
    source_row_index: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", freeze(self.properties))

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def other(self, node_id: NodeId) -> NodeId:
        return self.target if node_id == self.source else self.source


@dataclass(frozen=True, slots=True)
class Graph:
    """Insertion-ordered node and edge collections keyed by id."""

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    _index: Mapping[NodeId, Node] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "_index", freeze({node.id: node for node in self.nodes}))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    @property
    def node_ids(self) -> tuple[NodeId, ...]:
        return tuple(node.id for node in self.nodes)

    def node(self, node_id: NodeId) -> Node | None:
        return self._index.get(node_id)
