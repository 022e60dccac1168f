"""Cell canonicalization into typed rows.

Normalization never raises for bad data: a cell that cannot be canonicalized
keeps its raw value, is marked invalid and produces a warning. Structural
columns (ids, endpoints, type and label) are canonicalized as text so that
identifiers such as ``"1"`` are not turned into numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from linkchart.domain.model import (
    PipelineWarning,
    Role,
    SemanticType,
    TypedCell,
    TypedRow,
    is_empty,
)

from .recognizers import default_registry
from .roles import coerce_assignment, first_text, is_edge_row, synthesize_id

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkchart.domain.model import CellValue, ColumnProfile, RawRow, RoleAssignment

    from .recognizers import Recognizer, RecognizerRegistry
    from .roles import AssignmentInput

log = getLogger(__name__)

_TEXT_ROLES = frozenset({Role.ID, Role.TYPE, Role.LABEL, Role.SOURCE_ID, Role.TARGET_ID})


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    rows: tuple[TypedRow, ...]
    warnings: tuple[PipelineWarning, ...] = field(default_factory=tuple)


def normalize(
    rows: Sequence[RawRow],
    profiles: Sequence[ColumnProfile],
    *,
    registry: RecognizerRegistry | None = None,
    assignment: AssignmentInput = None,
) -> NormalizationResult:
    """Canonicalize every cell of ``rows`` with the recognizer of its column."""

    active_registry = registry if registry is not None else default_registry()
    # assignment problems are reported once, by the role mapper
    resolved, _ = coerce_assignment(profiles, assignment)
    recognizers = {
        profile.name: _recognizer_for(profile, resolved, active_registry) for profile in profiles
    }

    warnings: list[PipelineWarning] = []
    typed_rows: list[TypedRow] = []
    for row in rows:
        cells = {
            column: _normalize_cell(
                row.get(column),
                column=column,
                recognizer=recognizer,
                row_index=row.index,
                warnings=warnings,
            )
            for column, recognizer in recognizers.items()
        }
        typed_row = TypedRow(index=row.index, cells=cells)
        typed_rows.append(_ensure_node_id(typed_row, resolved, warnings))

    invalid = sum(1 for row in typed_rows for cell in row.cells.values() if not cell.valid)
    log.info("Normalized %d rows (%d invalid cells)", len(typed_rows), invalid)
    return NormalizationResult(rows=tuple(typed_rows), warnings=tuple(warnings))


def _recognizer_for(
    profile: ColumnProfile,
    assignment: RoleAssignment,
    registry: RecognizerRegistry,
) -> Recognizer:
    if assignment.role_of(profile.name) in _TEXT_ROLES:
        return registry.fallback
    if profile.detected_type in registry:
        return registry.get(profile.detected_type)
    log.debug("No recognizer for %s; using %s", profile.detected_type, registry.fallback.tag)
    return registry.fallback


def _normalize_cell(
    value: CellValue,
    *,
    column: str,
    recognizer: Recognizer,
    row_index: int,
    warnings: list[PipelineWarning],
) -> TypedCell:
    if is_empty(value):
        return TypedCell(raw_value=value, canonical_value=None, type=recognizer.tag)

    try:
        canonical = recognizer.canonicalize(value, field_name=column)
        valid = recognizer.validate(canonical)
    except Exception as exc:  # noqa: BLE001
        warnings.append(
            PipelineWarning.validation(
                f"Cannot normalize {column!r} as {recognizer.tag}: {exc}",
                row_index=row_index,
                column=column,
            )
        )
        return TypedCell(raw_value=value, canonical_value=value, type=recognizer.tag, valid=False)

    if not valid:
        warnings.append(
            PipelineWarning.validation(
                f"Invalid {recognizer.tag} value in {column!r}: {value!r}",
                row_index=row_index,
                column=column,
            )
        )
    return TypedCell(raw_value=value, canonical_value=canonical, type=recognizer.tag, valid=valid)


def _ensure_node_id(
    row: TypedRow,
    assignment: RoleAssignment,
    warnings: list[PipelineWarning],
) -> TypedRow:
    id_columns = assignment.columns(Role.ID)
    if not id_columns or is_edge_row(row, assignment):
        return row
    if first_text(row, id_columns) is not None:
        return row

    column = id_columns[0]
    node_id = synthesize_id(
        row.index,
        first_text(row, assignment.columns(Role.TYPE)),
        first_text(row, assignment.columns(Role.LABEL)),
    )
    warnings.append(
        PipelineWarning.validation(
            f"Empty id synthesized as {node_id!r}",
            row_index=row.index,
            column=column,
            node_id=node_id,
        )
    )
    original = row.cells[column]
    cells = {
        **row.cells,
        column: TypedCell(
            raw_value=original.raw_value,
            canonical_value=node_id,
            type=SemanticType.STRING,
        ),
    }
    return TypedRow(index=row.index, cells=cells)
