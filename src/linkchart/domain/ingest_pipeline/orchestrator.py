"""Phase-based orchestrator for the linkchart ingest pipeline."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from linkchart.domain.model import PipelineCancelledError

from .context import PipelineContext
from .events import StageEvent

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .state import PhaseOutput, PipelineState

log = getLogger(__name__)


class PipelinePhase(Protocol):
    """Contract implemented by each pipeline phase."""

    name: str
    event: str

    def run(self, state: PipelineState, *, context: PipelineContext) -> PhaseOutput: ...


@dataclass(slots=True)
class IngestionPipeline:
    """Compose and execute the ordered pipeline phases.

    Before each phase the cancellation token is checked; a phase that finishes
    after cancellation has its result discarded. Every completed phase publishes
    a ``StageEvent`` whose subscribers run before the next phase starts.
    """

    phases: Sequence[PipelinePhase] = field(default_factory=tuple)

    def with_phase(self, phase: PipelinePhase) -> IngestionPipeline:
        """Return a new pipeline appending ``phase`` at the end."""

        return IngestionPipeline(phases=(*self.phases, phase))

    def extend(self, phases: Iterable[PipelinePhase]) -> IngestionPipeline:
        """Return a new pipeline with the provided ``phases`` concatenated."""

        return IngestionPipeline(phases=(*self.phases, *tuple(phases)))

    def until(self, name: str) -> IngestionPipeline:
        """Return a new pipeline ending with the phase called ``name``."""

        for position, phase in enumerate(self.phases):
            if name in (phase.name, phase.event):
                return IngestionPipeline(phases=tuple(self.phases[: position + 1]))
        raise ValueError(f"Unknown pipeline phase: {name!r}")

    def run(self, state: PipelineState, *, context: PipelineContext | None = None) -> PipelineState:
        """Execute the configured phases in-order starting from ``state``."""

        active_context = context or PipelineContext()
        for phase in self.phases:
            if active_context.cancelled:
                raise PipelineCancelledError(stage=phase.event)

            log.debug("Starting phase %s", phase.name)
            started = time.perf_counter()
            output = phase.run(state, context=active_context)
            duration_ms = (time.perf_counter() - started) * 1000

            if active_context.cancelled:
                log.info("Discarding %s output after cancellation", phase.name)
                raise PipelineCancelledError(stage=phase.event)

            state = output.state
            active_context.durations_ms[phase.event] = duration_ms
            log.info(
                "Phase %s finished in %.1f ms with %d warnings",
                phase.name,
                duration_ms,
                len(output.warnings),
            )
            active_context.events.emit(
                StageEvent(
                    stage=phase.event,
                    data=output.data,
                    warnings=output.warnings,
                    duration_ms=duration_ms,
                )
            )
        return state
