"""Node deduplication and edge rewiring.

Responsibilities of this stage:
- collapse nodes that share an id, a merge attribute or a fuzzy label
- pick the lexicographically lowest id of each group as its representative
- union property bags and keep losing values as alias records
- rewrite edge endpoints to representatives, dropping dangling edges and
  duplicate self-loops
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from linkchart.domain.model import MergeReason, Node, PipelineWarning, WarningKind

from .normalize import DEFAULT_FUZZY_RATIO, attribute_values, labels_match, normalize_text

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from linkchart.domain.ingest_pipeline.recognizers import RecognizerRegistry
    from linkchart.domain.model import Edge, TypedCell

log = getLogger(__name__)

type _Join = Callable[[int, int, str], None]


@dataclass(frozen=True, slots=True)
class MergeRecord:
    canonical_id: str
    merged_id: str
    reason: str


@dataclass(frozen=True, slots=True)
class DeduplicationResult:
    nodes: tuple[Node, ...]
    representative_by_id: Mapping[str, str]
    merge_log: tuple[MergeRecord, ...] = field(default_factory=tuple)
    warnings: tuple[PipelineWarning, ...] = field(default_factory=tuple)

    def representative_for(self, node_id: str) -> str | None:
        return self.representative_by_id.get(node_id)


@dataclass(frozen=True, slots=True)
class RewiredEdges:
    edges: tuple[Edge, ...]
    warnings: tuple[PipelineWarning, ...] = field(default_factory=tuple)


@dataclass(slots=True)
class DisjointSet:
    """Union-find over positions with union by size and path compression."""

    _parent: list[int] = field(default_factory=list[int])
    _size: list[int] = field(default_factory=list[int])

    @classmethod
    def of_size(cls, count: int) -> DisjointSet:
        return cls(_parent=list(range(count)), _size=[1] * count)

    def find(self, item: int) -> int:
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, left: int, right: int) -> bool:
        left_root = self.find(left)
        right_root = self.find(right)
        if left_root == right_root:
            return False
        if self._size[left_root] < self._size[right_root]:
            left_root, right_root = right_root, left_root
        self._parent[right_root] = left_root
        self._size[left_root] += self._size[right_root]
        return True

    def groups(self) -> list[list[int]]:
        """Members of each set, sets and members in first-appearance order."""

        by_root: dict[int, list[int]] = {}
        for item in range(len(self._parent)):
            by_root.setdefault(self.find(item), []).append(item)
        return list(by_root.values())


def deduplicate_nodes(
    nodes: Sequence[Node],
    *,
    merge_attributes: Sequence[str] = (MergeReason.EMAIL, MergeReason.PHONE),
    merge_across_types: bool = False,
    fuzzy_labels: bool = True,
    fuzzy_ratio: float = DEFAULT_FUZZY_RATIO,
    registry: RecognizerRegistry | None = None,
) -> DeduplicationResult:
    """Collapse duplicate nodes; see the module docstring for the rules."""

    disjoint = DisjointSet.of_size(len(nodes))
    reasons: dict[int, str] = {}

    def join(left: int, right: int, reason: str) -> None:
        if disjoint.union(left, right):
            reasons.setdefault(left, reason)
            reasons.setdefault(right, reason)

    _join_same_ids(nodes, join)
    for attribute in merge_attributes:
        _join_shared_attribute(
            nodes,
            attribute,
            join,
            across_types=merge_across_types,
            registry=registry,
        )
    if fuzzy_labels:
        _join_similar_labels(nodes, join, disjoint=disjoint, ratio=fuzzy_ratio)

    groups = disjoint.groups()
    merged_nodes: list[tuple[int, Node]] = []
    representative_by_id: dict[str, str] = {}
    merge_log: list[MergeRecord] = []
    warnings: list[PipelineWarning] = []

    for group in groups:
        representative_pos = min(group, key=lambda pos: (nodes[pos].id, pos))
        representative = nodes[representative_pos]
        losers = [nodes[pos] for pos in group if pos != representative_pos]
        for pos in group:
            representative_by_id[nodes[pos].id] = representative.id
            if pos != representative_pos:
                merge_log.append(
                    MergeRecord(
                        canonical_id=representative.id,
                        merged_id=nodes[pos].id,
                        reason=reasons.get(pos, MergeReason.ID),
                    )
                )
        merged, conflict_warnings = _merge_group(representative, losers)
        warnings.extend(conflict_warnings)
        merged_nodes.append((representative_pos, merged))

    merged_nodes.sort(key=lambda item: item[0])
    if len(nodes) > 1 and len(groups) == 1:
        warnings.append(
            PipelineWarning.resolution(
                f"All {len(nodes)} nodes collapsed into {merged_nodes[0][1].id!r}",
                node_id=merged_nodes[0][1].id,
            )
        )
        log.warning("Degenerate resolution: all %d nodes merged into one", len(nodes))

    log.info("Deduplicated %d nodes into %d", len(nodes), len(merged_nodes))
    return DeduplicationResult(
        nodes=tuple(node for _, node in merged_nodes),
        representative_by_id=representative_by_id,
        merge_log=tuple(merge_log),
        warnings=tuple(warnings),
    )


def _join_same_ids(nodes: Sequence[Node], join: _Join) -> None:
    first_by_id: dict[str, int] = {}
    for pos, node in enumerate(nodes):
        first = first_by_id.setdefault(node.id, pos)
        if first != pos:
            join(first, pos, MergeReason.ID)


def _join_shared_attribute(
    nodes: Sequence[Node],
    attribute: str,
    join: _Join,
    *,
    across_types: bool,
    registry: RecognizerRegistry | None,
) -> None:
    first_by_key: dict[tuple[str | None, str], int] = {}
    for pos, node in enumerate(nodes):
        scope = None if across_types else _type_key(node)
        for value in attribute_values(node, attribute, registry=registry):
            first = first_by_key.setdefault((scope, value), pos)
            if first != pos:
                join(first, pos, attribute)


def _join_similar_labels(
    nodes: Sequence[Node],
    join: _Join,
    *,
    disjoint: DisjointSet,
    ratio: float,
) -> None:
    by_type: dict[str, list[int]] = {}
    for pos, node in enumerate(nodes):
        # a label that merely repeats the id carries no naming evidence
        if node.label == node.id or normalize_text(node.label) is None:
            continue
        by_type.setdefault(_type_key(node), []).append(pos)

    for positions in by_type.values():
        for offset, left in enumerate(positions):
            for right in positions[offset + 1 :]:
                if disjoint.find(left) == disjoint.find(right):
                    continue
                if labels_match(nodes[left].label, nodes[right].label, ratio=ratio):
                    join(left, right, MergeReason.LABEL)


def _type_key(node: Node) -> str:
    return node.type.strip().casefold()


def _merge_group(
    representative: Node,
    losers: Sequence[Node],
) -> tuple[Node, list[PipelineWarning]]:
    if not losers:
        return representative, []

    properties: dict[str, TypedCell] = dict(representative.properties)
    aliases: list[Mapping[str, object]] = list(representative.aliases)
    warnings: list[PipelineWarning] = []

    for loser in losers:
        record: dict[str, object] = {"id": loser.id}
        if loser.label not in {loser.id, representative.label}:
            record["label"] = loser.label
        if _type_key(loser) != _type_key(representative):
            record["type"] = loser.type
        for key, cell in loser.properties.items():
            current = properties.get(key)
            if current is None:
                properties[key] = cell
                continue
            if current.canonical_value == cell.canonical_value:
                continue
            record[key] = cell.canonical_value
            warnings.append(
                PipelineWarning(
                    kind=WarningKind.MERGE_CONFLICT,
                    message=(
                        f"Conflicting {key!r} while merging {loser.id!r} into "
                        f"{representative.id!r}; kept {current.canonical_value!r}"
                    ),
                    node_id=representative.id,
                    column=key,
                )
            )
        if loser.id != representative.id or len(record) > 1:
            aliases.append(record)
        aliases.extend(loser.aliases)

    return replace(representative, properties=properties, aliases=tuple(aliases)), warnings


def rewrite_edges(edges: Sequence[Edge], representative_by_id: Mapping[str, str]) -> RewiredEdges:
    """Point edges at representatives; drop dangling edges and repeated self-loops."""

    rewired: list[Edge] = []
    warnings: list[PipelineWarning] = []
    loop_types: set[tuple[str, str]] = set()

    for edge in edges:
        source = representative_by_id.get(edge.source)
        target = representative_by_id.get(edge.target)
        if source is None or target is None:
            missing = edge.source if source is None else edge.target
            warnings.append(
                PipelineWarning.validation(
                    f"Dropped dangling edge {edge.id!r}: no node {missing!r}",
                    edge_id=edge.id,
                    row_index=edge.source_row_index,
                )
            )
            continue
        if source == target:
            loop_key = (source, edge.type.strip().casefold())
            if loop_key in loop_types:
                warnings.append(
                    PipelineWarning.resolution(
                        f"Dropped self-loop {edge.id!r} on {source!r}: "
                        f"duplicate of an existing {edge.type!r} loop",
                        edge_id=edge.id,
                        node_id=source,
                        row_index=edge.source_row_index,
                    )
                )
                continue
            loop_types.add(loop_key)
        if source != edge.source or target != edge.target:
            edge = replace(edge, source=source, target=target)
        rewired.append(edge)

    if warnings:
        log.warning("Dropped %d edges while rewiring", len(warnings))
    return RewiredEdges(edges=tuple(rewired), warnings=tuple(warnings))

