"""Immutable snapshots passed from one pipeline phase to the next."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from linkchart.domain.analytics import AnalysisReport
    from linkchart.domain.model import ColumnProfile, InputFormat, PipelineWarning
    from linkchart.domain.ports import IngestResult
    from linkchart.domain.reconciliation import ResolutionResult

    from .normalization import NormalizationResult
    from .roles import MappingResult


@dataclass(frozen=True, slots=True, kw_only=True)
class PipelineState:
    """Everything produced so far; each phase returns a new instance.

    ``warnings`` accumulates the warnings of every completed stage in order.
    """

    blob: str | bytes
    input_format: InputFormat | str | None = None
    ingest: IngestResult | None = None
    profiles: tuple[ColumnProfile, ...] | None = None
    normalization: NormalizationResult | None = None
    mapping: MappingResult | None = None
    resolution: ResolutionResult | None = None
    report: AnalysisReport | None = None
    warnings: tuple[PipelineWarning, ...] = field(default_factory=tuple)

    def require[T](self, value: T | None, stage: str) -> T:
        if value is None:
            raise LookupError(f"Pipeline state has no {stage} output yet")
        return value


@dataclass(frozen=True, slots=True)
class PhaseOutput:
    """New state plus the stage payload and warnings published with its event."""

    state: PipelineState
    data: object
    warnings: tuple[PipelineWarning, ...] = field(default_factory=tuple)
