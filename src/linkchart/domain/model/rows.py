"""Row-level records produced by ingestion, detection and normalization."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import Role
from .primitives import CellValue, ColumnName, TypeTag, freeze

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class RawRow:
    """Ordered column -> cell mapping for one input record."""

    index: int
    values: Mapping[ColumnName, CellValue]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", freeze(self.values))

    def get(self, column: ColumnName) -> CellValue:
        return self.values.get(column)


@dataclass(frozen=True, slots=True)
class TypedCell:
    raw_value: CellValue
    canonical_value: object
    type: TypeTag
    valid: bool = True


@dataclass(frozen=True, slots=True)
class TypedRow:
    index: int
    cells: Mapping[ColumnName, TypedCell]

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", freeze(self.cells))

    def get(self, column: ColumnName) -> TypedCell | None:
        return self.cells.get(column)


@dataclass(frozen=True, slots=True, kw_only=True)
class ColumnProfile:
    """Detected semantic type of a column plus the evidence behind it."""

    name: ColumnName
    detected_type: TypeTag
    confidence: float
    sample_values: tuple[CellValue, ...] = ()
    scores: Mapping[TypeTag, float] = field(default_factory=dict[str, float])
    null_count: int = 0
    unique_count: int = 0


@dataclass(frozen=True, slots=True)
class RoleAssignment:
    """Maps each column to exactly one role."""

    roles: Mapping[ColumnName, Role]

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", freeze(self.roles))

    def __iter__(self) -> Iterator[tuple[ColumnName, Role]]:
        return iter(self.roles.items())

    def role_of(self, column: ColumnName) -> Role:
        return self.roles.get(column, Role.PROPERTY)

    def columns(self, role: Role) -> tuple[ColumnName, ...]:
        return tuple(column for column, assigned in self.roles.items() if assigned is role)

    def first(self, role: Role) -> ColumnName | None:
        columns = self.columns(role)
        return columns[0] if columns else None
