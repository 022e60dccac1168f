from __future__ import annotations

from dataclasses import dataclass, replace

import pytest

from linkchart.adapters.tabular import ingest
from linkchart.domain.ingest_pipeline import (
    CancellationToken,
    EventBus,
    IngestionPipeline,
    PhaseOutput,
    PipelineContext,
    PipelinePhase,
    PipelineState,
    StageEvent,
    default_phases,
)
from linkchart.domain.model import PipelineCancelledError, PipelineWarning, StageName


@dataclass(slots=True)
class _RecordingPhase(PipelinePhase):
    name: str
    event: str
    calls: list[str]

    def run(self, state: PipelineState, *, context: PipelineContext) -> PhaseOutput:
        _ = context
        self.calls.append(self.name)
        warning = PipelineWarning.validation(f"{self.name} ran")
        return PhaseOutput(
            state=replace(state, warnings=(*state.warnings, warning)),
            data=self.name,
            warnings=(warning,),
        )


@dataclass(slots=True)
class _CancellingPhase(PipelinePhase):
    name: str
    event: str
    token: CancellationToken

    def run(self, state: PipelineState, *, context: PipelineContext) -> PhaseOutput:
        _ = context
        self.token.cancel()
        return PhaseOutput(state=state, data=None)


def test_pipeline_runs_phases_in_order() -> None:
    calls: list[str] = []
    first = _RecordingPhase(name="first", event="one", calls=calls)
    second = _RecordingPhase(name="second", event="two", calls=calls)
    pipeline = IngestionPipeline(phases=(first, second))

    state = pipeline.run(PipelineState(blob=""), context=PipelineContext())

    assert calls == ["first", "second"]
    assert [warning.message for warning in state.warnings] == ["first ran", "second ran"]


def test_pipeline_publishes_stage_events_before_next_phase() -> None:
    calls: list[str] = []
    events = EventBus()
    received: list[StageEvent] = []

    def on_one(event: StageEvent) -> None:
        received.append(event)
        calls.append("event:one")

    events.subscribe("one", on_one)
    pipeline = IngestionPipeline(
        phases=(
            _RecordingPhase(name="first", event="one", calls=calls),
            _RecordingPhase(name="second", event="two", calls=calls),
        )
    )
    context = PipelineContext(events=events)

    pipeline.run(PipelineState(blob=""), context=context)

    assert calls == ["first", "event:one", "second"]
    (event,) = received
    assert event.data == "first"
    assert [warning.message for warning in event.warnings] == ["first ran"]
    assert event.duration_ms >= 0.0
    assert set(context.durations_ms) == {"one", "two"}


def test_pipeline_with_phase_and_extend_return_new_pipelines() -> None:
    calls: list[str] = []
    base = IngestionPipeline(phases=(_RecordingPhase(name="a", event="a", calls=calls),))

    grown = base.with_phase(_RecordingPhase(name="b", event="b", calls=calls)).extend(
        [_RecordingPhase(name="c", event="c", calls=calls)]
    )
    grown.run(PipelineState(blob=""))

    assert len(base.phases) == 1
    assert calls == ["a", "b", "c"]


def test_pipeline_until_accepts_phase_or_event_name() -> None:
    pipeline = IngestionPipeline(phases=default_phases(ingest))

    by_name = pipeline.until("normalize")
    by_event = pipeline.until(StageName.RESOLVED)

    assert [phase.name for phase in by_name.phases] == ["read", "detect", "normalize"]
    assert by_event.phases[-1].event == StageName.RESOLVED
    with pytest.raises(ValueError, match="Unknown pipeline phase"):
        pipeline.until("export")


def test_pipeline_stops_when_cancelled_before_a_phase() -> None:
    calls: list[str] = []
    token = CancellationToken()
    token.cancel()
    pipeline = IngestionPipeline(phases=(_RecordingPhase(name="a", event="one", calls=calls),))

    with pytest.raises(PipelineCancelledError) as excinfo:
        pipeline.run(PipelineState(blob=""), context=PipelineContext(cancellation=token))

    assert excinfo.value.stage == "one"
    assert calls == []


def test_pipeline_discards_output_of_phase_cancelled_midway() -> None:
    calls: list[str] = []
    token = CancellationToken()
    events = EventBus()
    published: list[str] = []
    events.subscribe("one", lambda event: published.append(event.stage))
    pipeline = IngestionPipeline(
        phases=(
            _CancellingPhase(name="cancel", event="one", token=token),
            _RecordingPhase(name="never", event="two", calls=calls),
        )
    )

    with pytest.raises(PipelineCancelledError) as excinfo:
        pipeline.run(
            PipelineState(blob=""),
            context=PipelineContext(events=events, cancellation=token),
        )

    assert excinfo.value.stage == "one"
    assert published == []
    assert calls == []


def test_default_phases_process_sample_records_end_to_end(sample_blob: str) -> None:
    events = EventBus()
    stages: list[str] = []
    for stage in StageName:
        events.subscribe(stage, lambda event: stages.append(event.stage))
    pipeline = IngestionPipeline(phases=default_phases(ingest))

    state = pipeline.run(PipelineState(blob=sample_blob), context=PipelineContext(events=events))

    assert stages == [stage.value for stage in StageName]
    assert state.resolution is not None
    assert len(state.resolution.nodes) == 3
    assert len(state.resolution.edges) == 2
    assert state.report is not None
    assert state.report.metrics.max_degree_node == "2"
