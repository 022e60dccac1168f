"""Tabular ingestion pipeline for linkchart.

The pipeline is split into explicit, testable phases. Each phase turns an
immutable ``PipelineState`` into the next one and publishes a ``StageEvent``;
the phases share a ``PipelineContext`` holding settings, the recognizer
registry and the event bus so the stage functions stay adapter-free.
"""

from __future__ import annotations

from .context import CancellationToken, PipelineContext, PipelineSettings
from .detection import detect_cell_type, detect_types
from .events import EventBus, EventHandler, StageEvent
from .normalization import NormalizationResult, normalize
from .orchestrator import IngestionPipeline, PipelinePhase
from .phases import (
    AnalysisPhase,
    DetectionPhase,
    NormalizationPhase,
    ReadPhase,
    ResolutionPhase,
    RoleMappingPhase,
    default_phases,
)
from .recognizers import Recognizer, RecognizerRegistry, default_registry
from .roles import MappingResult, coerce_assignment, map_roles, suggest_roles, synthesize_id
from .state import PhaseOutput, PipelineState

__all__ = [
    "AnalysisPhase",
    "CancellationToken",
    "DetectionPhase",
    "EventBus",
    "EventHandler",
    "IngestionPipeline",
    "MappingResult",
    "NormalizationPhase",
    "NormalizationResult",
    "PhaseOutput",
    "PipelineContext",
    "PipelinePhase",
    "PipelineSettings",
    "PipelineState",
    "ReadPhase",
    "Recognizer",
    "RecognizerRegistry",
    "ResolutionPhase",
    "RoleMappingPhase",
    "StageEvent",
    "coerce_assignment",
    "default_phases",
    "default_registry",
    "detect_cell_type",
    "detect_types",
    "map_roles",
    "normalize",
    "suggest_roles",
    "synthesize_id",
]
