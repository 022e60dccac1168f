"""Default pipeline phases, one per stage function."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, ClassVar

from linkchart.domain.analytics import analyze
from linkchart.domain.model import StageName
from linkchart.domain.reconciliation import resolve

from .detection import detect_types
from .normalization import normalize
from .roles import map_roles
from .state import PhaseOutput

if TYPE_CHECKING:
    from linkchart.domain.ports import RowReader

    from .context import PipelineContext
    from .orchestrator import PipelinePhase
    from .state import PipelineState


@dataclass(slots=True)
class ReadPhase:
    """Parse the input blob into raw rows."""

    reader: RowReader
    name: ClassVar[str] = "read"
    event: ClassVar[StageName] = StageName.INGESTED

    def run(self, state: PipelineState, *, context: PipelineContext) -> PhaseOutput:
        result = self.reader(
            state.blob,
            state.input_format,
            column_tolerance=context.settings.column_tolerance,
        )
        return PhaseOutput(
            state=replace(state, ingest=result, warnings=(*state.warnings, *result.warnings)),
            data=result,
            warnings=result.warnings,
        )


@dataclass(slots=True)
class DetectionPhase:
    """Profile the columns of the ingested rows."""

    name: ClassVar[str] = "detect"
    event: ClassVar[StageName] = StageName.TYPED

    def run(self, state: PipelineState, *, context: PipelineContext) -> PhaseOutput:
        ingested = state.require(state.ingest, StageName.INGESTED)
        profiles = detect_types(
            ingested.rows,
            ingested.headers,
            context.registry,
            sample_size=context.settings.sample_size,
            min_confidence=context.settings.min_confidence,
        )
        return PhaseOutput(state=replace(state, profiles=profiles), data=profiles)


@dataclass(slots=True)
class NormalizationPhase:
    """Canonicalize every cell with the recognizer of its column."""

    name: ClassVar[str] = "normalize"
    event: ClassVar[StageName] = StageName.NORMALIZED

    def run(self, state: PipelineState, *, context: PipelineContext) -> PhaseOutput:
        ingested = state.require(state.ingest, StageName.INGESTED)
        profiles = state.require(state.profiles, StageName.TYPED)
        result = normalize(
            ingested.rows,
            profiles,
            registry=context.registry,
            assignment=context.assignment,
        )
        return PhaseOutput(
            state=replace(
                state,
                normalization=result,
                warnings=(*state.warnings, *result.warnings),
            ),
            data=result,
            warnings=result.warnings,
        )


@dataclass(slots=True)
class RoleMappingPhase:
    """Project typed rows onto node and edge candidates."""

    name: ClassVar[str] = "map"
    event: ClassVar[StageName] = StageName.MAPPED

    def run(self, state: PipelineState, *, context: PipelineContext) -> PhaseOutput:
        normalized = state.require(state.normalization, StageName.NORMALIZED)
        profiles = state.require(state.profiles, StageName.TYPED)
        result = map_roles(normalized.rows, profiles, context.assignment)
        return PhaseOutput(
            state=replace(state, mapping=result, warnings=(*state.warnings, *result.warnings)),
            data=result,
            warnings=result.warnings,
        )


@dataclass(slots=True)
class ResolutionPhase:
    """Deduplicate nodes and infer implicit links."""

    name: ClassVar[str] = "resolve"
    event: ClassVar[StageName] = StageName.RESOLVED

    def run(self, state: PipelineState, *, context: PipelineContext) -> PhaseOutput:
        mapped = state.require(state.mapping, StageName.MAPPED)
        result = resolve(
            mapped.nodes,
            mapped.edges,
            context.settings.resolve,
            registry=context.registry,
        )
        return PhaseOutput(
            state=replace(
                state,
                resolution=result,
                warnings=(*state.warnings, *result.warnings),
            ),
            data=result,
            warnings=result.warnings,
        )


@dataclass(slots=True)
class AnalysisPhase:
    """Run the analytics engine over the resolved graph."""

    name: ClassVar[str] = "analyze"
    event: ClassVar[StageName] = StageName.ANALYZED

    def run(self, state: PipelineState, *, context: PipelineContext) -> PhaseOutput:
        resolved = state.require(state.resolution, StageName.RESOLVED)
        report = analyze(resolved.nodes, resolved.edges, context.settings.analyze)
        return PhaseOutput(
            state=replace(state, report=report, warnings=(*state.warnings, *report.warnings)),
            data=report,
            warnings=report.warnings,
        )


def default_phases(reader: RowReader) -> tuple[PipelinePhase, ...]:
    return (
        ReadPhase(reader),
        DetectionPhase(),
        NormalizationPhase(),
        RoleMappingPhase(),
        ResolutionPhase(),
        AnalysisPhase(),
    )
