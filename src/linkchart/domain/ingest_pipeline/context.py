"""Shared context structures for the ingest pipeline (settings + observers)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from linkchart.domain.analytics import AnalyzeOptions
from linkchart.domain.reconciliation import ResolveOptions

from .detection import DEFAULT_MIN_CONFIDENCE, DEFAULT_SAMPLE_SIZE
from .events import EventBus
from .recognizers import default_registry

if TYPE_CHECKING:
    from .recognizers import RecognizerRegistry
    from .roles import AssignmentInput


@dataclass(slots=True)
class CancellationToken:
    """Flag checked by the pipeline at every stage boundary."""

    _cancelled: bool = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass(frozen=True, slots=True, kw_only=True)
class PipelineSettings:
    """Stage tunables; built from environment configuration by the app layer."""

    sample_size: int = DEFAULT_SAMPLE_SIZE
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    column_tolerance: int = 0
    resolve: ResolveOptions = field(default_factory=ResolveOptions)
    analyze: AnalyzeOptions = field(default_factory=AnalyzeOptions)


@dataclass(slots=True, kw_only=True)
class PipelineContext:
    """Mutable context shared across pipeline phases."""

    events: EventBus = field(default_factory=EventBus)
    settings: PipelineSettings = field(default_factory=PipelineSettings)
    registry: RecognizerRegistry = field(default_factory=default_registry)
    assignment: AssignmentInput = None
    cancellation: CancellationToken | None = None
    durations_ms: dict[str, float] = field(default_factory=dict[str, float])

    @property
    def cancelled(self) -> bool:
        return self.cancellation is not None and self.cancellation.cancelled
