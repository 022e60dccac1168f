"""Implicit link inference from shared attribute values."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from linkchart.domain.model import Edge, TypedCell

from .normalize import attribute_values

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkchart.domain.ingest_pipeline.recognizers import RecognizerRegistry
    from linkchart.domain.model import Node

log = getLogger(__name__)

DEFAULT_LINKABLE_ATTRIBUTES: tuple[str, ...] = ("email", "phone", "address")


def inferred_edge_type(attribute: str) -> str:
    return f"shares-{attribute}"


def infer_links(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    *,
    attributes: Sequence[str] = DEFAULT_LINKABLE_ATTRIBUTES,
    registry: RecognizerRegistry | None = None,
) -> tuple[Edge, ...]:
    """New ``shares-<attr>`` edges between nodes with a common attribute value.

    Pairs already joined by an explicit edge, or by an inferred edge of the
    same type, are skipped, so running inference on its own output adds
    nothing.
    """

    explicit_pairs = {frozenset((edge.source, edge.target)) for edge in edges if not edge.inferred}
    typed_pairs = {(frozenset((edge.source, edge.target)), edge.type) for edge in edges}
    inferred: list[Edge] = []

    for attribute in attributes:
        edge_type = inferred_edge_type(attribute)
        holders: dict[str, list[str]] = {}
        for node in nodes:
            for value in attribute_values(node, attribute, registry=registry):
                members = holders.setdefault(value, [])
                if node.id not in members:
                    members.append(node.id)

        for value, members in holders.items():
            for offset, source in enumerate(members):
                for target in members[offset + 1 :]:
                    pair = frozenset((source, target))
                    if pair in explicit_pairs or (pair, edge_type) in typed_pairs:
                        continue
                    typed_pairs.add((pair, edge_type))
                    inferred.append(
                        Edge(
                            id=f"{edge_type}:{source}:{target}",
                            source=source,
                            target=target,
                            type=edge_type,
                            properties={
                                attribute: TypedCell(
                                    raw_value=value,
                                    canonical_value=value,
                                    type=attribute,
                                )
                            },
                            inferred=True,
                        )
                    )

    log.info("Inferred %d links from %s", len(inferred), ", ".join(attributes))
    return tuple(inferred)
