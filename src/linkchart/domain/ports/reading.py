"""Ports for reading raw tabular input into rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from linkchart.domain.model import InputFormat, PipelineWarning, RawRow


@dataclass(frozen=True, slots=True)
class IngestResult:
    """Rows read from one input blob, in input order."""

    rows: tuple[RawRow, ...]
    headers: tuple[str, ...]
    warnings: tuple[PipelineWarning, ...] = field(default_factory=tuple)


@runtime_checkable
class RowReader(Protocol):
    """Callable port turning a text or byte blob into rows."""

    def __call__(
        self,
        blob: str | bytes,
        input_format: InputFormat | str | None = None,
        *,
        column_tolerance: int = 0,
    ) -> IngestResult: ...


__all__ = ["IngestResult", "RowReader"]
