"""Role assignment and projection of typed rows into nodes and edges."""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from linkchart.domain.model import (
    Edge,
    Node,
    PipelineWarning,
    Role,
    RoleAssignment,
    SemanticType,
    name_tokens,
)

from .recognizers import text_value

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkchart.domain.model import ColumnProfile, TypedCell, TypedRow

log = getLogger(__name__)

DEFAULT_NODE_TYPE = "entity"
DEFAULT_EDGE_TYPE = "associates"

_NAME_ROLES: dict[str, Role] = {
    "id": Role.ID,
    "uid": Role.ID,
    "type": Role.TYPE,
    "kind": Role.TYPE,
    "category": Role.TYPE,
    "name": Role.LABEL,
    "label": Role.LABEL,
    "title": Role.LABEL,
    "from": Role.SOURCE_ID,
    "source": Role.SOURCE_ID,
    "src": Role.SOURCE_ID,
    "to": Role.TARGET_ID,
    "target": Role.TARGET_ID,
    "dst": Role.TARGET_ID,
    "sourceid": Role.SOURCE_ID,
    "targetid": Role.TARGET_ID,
}
_DATE_NAMES = frozenset({"date", "when"})
_PROPERTY_ROLES = frozenset({Role.PROPERTY, Role.DATE})

type AssignmentInput = RoleAssignment | Mapping[str, str | Role] | None


@dataclass(frozen=True, slots=True)
class MappingResult:
    """Raw node and edge candidates, in row order, without deduplication."""

    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]
    warnings: tuple[PipelineWarning, ...] = field(default_factory=tuple)


def synthesize_id(
    row_index: int,
    type_value: str | None,
    label_value: str | None,
    *,
    prefix: str = "row",
) -> str:
    """Deterministic identifier for a row that carries no id of its own."""

    digest = hashlib.sha1(
        f"{row_index}|{type_value or ''}|{label_value or ''}".encode(),
        usedforsecurity=False,
    ).hexdigest()
    return f"{prefix}-{digest[:12]}"


def suggest_roles(profiles: Sequence[ColumnProfile]) -> RoleAssignment:
    """Guess a role for each column from its name and detected type."""

    roles: dict[str, Role] = {}
    for profile in profiles:
        tokens = name_tokens(profile.name)
        role = _NAME_ROLES.get("".join(tokens))
        is_date = profile.detected_type == SemanticType.DATE
        if role is None and is_date and _DATE_NAMES & set(tokens):
            role = Role.DATE
        roles[profile.name] = role or Role.PROPERTY
    return RoleAssignment(roles)


def coerce_assignment(
    profiles: Sequence[ColumnProfile],
    assignment: AssignmentInput = None,
) -> tuple[RoleAssignment, tuple[PipelineWarning, ...]]:
    """Overlay a user assignment on the suggested one.

    Unknown role names fall back to ``property`` with a warning, as do columns
    the assignment names but the input does not have.
    """

    suggested = suggest_roles(profiles)
    if assignment is None:
        return suggested, ()

    requested = assignment.roles if isinstance(assignment, RoleAssignment) else assignment
    known_columns = {profile.name for profile in profiles}
    roles = dict(suggested.roles)
    warnings: list[PipelineWarning] = []
    for column, value in requested.items():
        if column not in known_columns:
            warnings.append(
                PipelineWarning.validation(
                    f"Assignment names unknown column {column!r}; ignored", column=column
                )
            )
            continue
        role = _parse_role(value)
        if role is None:
            warnings.append(
                PipelineWarning.validation(
                    f"Unknown role {value!r} for column {column!r}; treated as property",
                    column=column,
                )
            )
            role = Role.PROPERTY
        roles[column] = role
    return RoleAssignment(roles), tuple(warnings)


def _parse_role(value: str | Role) -> Role | None:
    if isinstance(value, Role):
        return value
    wanted = value.strip().casefold()
    for role in Role:
        if role.value.casefold() == wanted:
            return role
    return None


def first_text(row: TypedRow, columns: Sequence[str]) -> str | None:
    """First non-empty canonical text among ``columns``."""

    for column in columns:
        cell = row.get(column)
        if cell is None:
            continue
        value = text_value(cell.canonical_value)
        if value:
            return value
    return None


def is_edge_row(row: TypedRow, assignment: RoleAssignment) -> bool:
    source = first_text(row, assignment.columns(Role.SOURCE_ID))
    target = first_text(row, assignment.columns(Role.TARGET_ID))
    return bool(source and target)


def map_roles(
    rows: Sequence[TypedRow],
    profiles: Sequence[ColumnProfile],
    assignment: AssignmentInput = None,
) -> MappingResult:
    """Turn each typed row into a node or an edge candidate."""

    resolved, assignment_warnings = coerce_assignment(profiles, assignment)
    warnings = list(assignment_warnings)
    nodes: list[Node] = []
    edges: list[Edge] = []
    edge_ids: set[str] = set()

    for row in rows:
        if is_edge_row(row, resolved):
            edge = _edge_from_row(row, resolved)
            if edge.id in edge_ids:
                unique_id = _unique_edge_id(edge.id, edge_ids)
                warnings.append(
                    PipelineWarning.validation(
                        f"Duplicate edge id {edge.id!r} renamed to {unique_id!r}",
                        row_index=row.index,
                        edge_id=unique_id,
                    )
                )
                edge = _with_edge_id(edge, unique_id)
            edge_ids.add(edge.id)
            edges.append(edge)
            continue

        if first_text(row, resolved.columns(Role.SOURCE_ID)) or first_text(
            row, resolved.columns(Role.TARGET_ID)
        ):
            warnings.append(
                PipelineWarning.validation(
                    "Row has only one edge endpoint; mapped as a node",
                    row_index=row.index,
                )
            )
        node, synthesized = _node_from_row(row, resolved)
        if synthesized:
            warnings.append(
                PipelineWarning.validation(
                    f"Row has no id; synthesized {node.id!r}",
                    row_index=row.index,
                    node_id=node.id,
                )
            )
        nodes.append(node)

    log.info("Mapped %d rows to %d nodes and %d edges", len(rows), len(nodes), len(edges))
    return MappingResult(nodes=tuple(nodes), edges=tuple(edges), warnings=tuple(warnings))


def _node_from_row(row: TypedRow, assignment: RoleAssignment) -> tuple[Node, bool]:
    type_value = first_text(row, assignment.columns(Role.TYPE))
    label_value = first_text(row, assignment.columns(Role.LABEL))
    node_id = first_text(row, assignment.columns(Role.ID))
    synthesized = node_id is None
    if node_id is None:
        node_id = synthesize_id(row.index, type_value, label_value)
    node = Node(
        id=node_id,
        type=type_value or DEFAULT_NODE_TYPE,
        label=label_value or node_id,
        properties=_properties(row, assignment),
        source_row_index=row.index,
    )
    return node, synthesized


def _edge_from_row(row: TypedRow, assignment: RoleAssignment) -> Edge:
    type_value = first_text(row, assignment.columns(Role.TYPE))
    label_columns = assignment.columns(Role.LABEL)
    label_value = first_text(row, label_columns)
    properties = _properties(row, assignment)
    if type_value is not None:
        # the label is not used as the type, keep it on the edge
        properties = {**properties, **_present_cells(row, label_columns)}
    edge_id = first_text(row, assignment.columns(Role.ID)) or synthesize_id(
        row.index, type_value, label_value, prefix="edge"
    )
    return Edge(
        id=edge_id,
        source=first_text(row, assignment.columns(Role.SOURCE_ID)) or "",
        target=first_text(row, assignment.columns(Role.TARGET_ID)) or "",
        type=type_value or label_value or DEFAULT_EDGE_TYPE,
        properties=properties,
        source_row_index=row.index,
    )


def _properties(row: TypedRow, assignment: RoleAssignment) -> dict[str, TypedCell]:
    columns = [column for column in row.cells if assignment.role_of(column) in _PROPERTY_ROLES]
    return _present_cells(row, columns)


def _present_cells(row: TypedRow, columns: Sequence[str]) -> dict[str, TypedCell]:
    cells: dict[str, TypedCell] = {}
    for column in columns:
        cell = row.get(column)
        if cell is not None and cell.canonical_value is not None:
            cells[column] = cell
    return cells


def _unique_edge_id(edge_id: str, taken: set[str]) -> str:
    suffix = 2
    while f"{edge_id}-{suffix}" in taken:
        suffix += 1
    return f"{edge_id}-{suffix}"


def _with_edge_id(edge: Edge, edge_id: str) -> Edge:
    return replace(edge, id=edge_id)
