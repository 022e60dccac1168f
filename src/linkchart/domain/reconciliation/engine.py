"""Entity resolution: deduplication followed by implicit link inference."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from linkchart.domain.model import Graph, MergeReason

from .deduplicate import deduplicate_nodes, rewrite_edges
from .infer import DEFAULT_LINKABLE_ATTRIBUTES, infer_links
from .normalize import DEFAULT_FUZZY_RATIO

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkchart.domain.ingest_pipeline.recognizers import RecognizerRegistry
    from linkchart.domain.model import Edge, Node, PipelineWarning

    from .deduplicate import MergeRecord

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolveOptions:
    fuzzy_ratio: float = DEFAULT_FUZZY_RATIO
    fuzzy_labels: bool = True
    merge_attributes: tuple[str, ...] = (MergeReason.EMAIL, MergeReason.PHONE)
    # email/phone merges stay within one node type unless this is set
    merge_across_types: bool = False
    linkable_attributes: tuple[str, ...] = DEFAULT_LINKABLE_ATTRIBUTES


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]
    merge_log: tuple[MergeRecord, ...] = field(default_factory=tuple)
    warnings: tuple[PipelineWarning, ...] = field(default_factory=tuple)

    @property
    def graph(self) -> Graph:
        return Graph(nodes=self.nodes, edges=self.edges)


def resolve(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: ResolveOptions | None = None,
    *,
    registry: RecognizerRegistry | None = None,
) -> ResolutionResult:
    """Merge duplicate nodes, rewire edges and add inferred links.

    ``registry`` supplies the field-name aliases that mark merge-key columns.
    """

    active = options or ResolveOptions()
    deduplicated = deduplicate_nodes(
        nodes,
        merge_attributes=active.merge_attributes,
        merge_across_types=active.merge_across_types,
        fuzzy_labels=active.fuzzy_labels,
        fuzzy_ratio=active.fuzzy_ratio,
        registry=registry,
    )
    rewired = rewrite_edges(edges, deduplicated.representative_by_id)
    inferred = infer_links(
        deduplicated.nodes,
        rewired.edges,
        attributes=active.linkable_attributes,
        registry=registry,
    )

    result = ResolutionResult(
        nodes=deduplicated.nodes,
        edges=(*rewired.edges, *inferred),
        merge_log=deduplicated.merge_log,
        warnings=(*deduplicated.warnings, *rewired.warnings),
    )
    log.info(
        "Resolved %d nodes/%d edges into %d nodes/%d edges (%d merges, %d inferred)",
        len(nodes),
        len(edges),
        len(result.nodes),
        len(result.edges),
        len(result.merge_log),
        len(inferred),
    )
    return result
