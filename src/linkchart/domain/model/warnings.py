"""Recoverable pipeline conditions carried alongside stage results."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import WarningKind


@dataclass(frozen=True, slots=True, kw_only=True)
class PipelineWarning:
    kind: WarningKind
    message: str
    row_index: int | None = None
    column: str | None = None
    node_id: str | None = None
    edge_id: str | None = None

    @classmethod
    def validation(cls, message: str, **refs: str | int | None) -> PipelineWarning:
        return cls(kind=WarningKind.VALIDATION, message=message, **refs)  # type: ignore[arg-type]

    @classmethod
    def resolution(cls, message: str, **refs: str | int | None) -> PipelineWarning:
        return cls(kind=WarningKind.RESOLUTION, message=message, **refs)  # type: ignore[arg-type]
