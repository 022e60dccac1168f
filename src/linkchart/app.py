"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from linkchart.adapters.tabular import ingest
from linkchart.config import get_pipeline_config
from linkchart.domain.analytics import AnalyzeOptions
from linkchart.domain.ingest_pipeline import (
    EventBus,
    IngestionPipeline,
    PipelineContext,
    PipelineSettings,
    PipelineState,
    default_phases,
    default_registry,
)
from linkchart.domain.reconciliation import ResolveOptions

if TYPE_CHECKING:
    from linkchart.config import PipelineConfig
    from linkchart.domain.ingest_pipeline import CancellationToken, RecognizerRegistry
    from linkchart.domain.ingest_pipeline.roles import AssignmentInput
    from linkchart.domain.model import CentralityMeasure, InputFormat
    from linkchart.domain.ports import RowReader

log = getLogger(__name__)


def settings_from_config(
    config: PipelineConfig,
    *,
    path: tuple[str, str] | None = None,
    centrality_measures: tuple[CentralityMeasure | str, ...] = (),
) -> PipelineSettings:
    """Translate environment-level configuration into stage settings."""

    return PipelineSettings(
        sample_size=config.sample_size,
        min_confidence=config.min_confidence,
        column_tolerance=config.column_tolerance,
        resolve=ResolveOptions(
            fuzzy_ratio=config.fuzzy_ratio,
            linkable_attributes=config.linkable_attributes,
        ),
        analyze=AnalyzeOptions(
            top_k=config.top_k,
            max_iterations=config.max_iterations,
            max_depth=config.max_depth,
            path=path,
            centrality_measures=centrality_measures,
        ),
    )


def build_pipeline(
    *,
    reader: RowReader | None = None,
    stop_after: str | None = None,
) -> IngestionPipeline:
    """Default six-phase pipeline, optionally truncated after ``stop_after``."""

    pipeline = IngestionPipeline(phases=default_phases(reader or ingest))
    if stop_after is not None:
        pipeline = pipeline.until(stop_after)
    return pipeline


def run_pipeline(
    blob: str | bytes,
    *,
    input_format: InputFormat | str | None = None,
    config: PipelineConfig | None = None,
    assignment: AssignmentInput = None,
    events: EventBus | None = None,
    cancellation: CancellationToken | None = None,
    registry: RecognizerRegistry | None = None,
    reader: RowReader | None = None,
    stop_after: str | None = None,
    path: tuple[str, str] | None = None,
    centrality_measures: tuple[CentralityMeasure | str, ...] = (),
) -> PipelineState:
    """Run ``blob`` through the pipeline and return the final state."""

    effective_config = config or get_pipeline_config()
    context = PipelineContext(
        events=events or EventBus(),
        settings=settings_from_config(
            effective_config,
            path=path,
            centrality_measures=centrality_measures,
        ),
        registry=registry if registry is not None else default_registry(),
        assignment=assignment,
        cancellation=cancellation,
    )
    pipeline = build_pipeline(reader=reader, stop_after=stop_after)
    log.info(
        "Starting pipeline: %d phases, format=%s, bytes=%d",
        len(pipeline.phases),
        input_format or "auto",
        len(blob),
    )

    state = pipeline.run(PipelineState(blob=blob, input_format=input_format), context=context)

    log.info(
        "Finished pipeline: %d warnings, durations=%s",
        len(state.warnings),
        ", ".join(f"{stage}={ms:.1f}ms" for stage, ms in context.durations_ms.items()),
    )
    return state
