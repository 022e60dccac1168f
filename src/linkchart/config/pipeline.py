"""Pipeline tuning defaults and their environment overrides."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final

from .env import env_float, env_int, env_list

DEFAULT_SAMPLE_SIZE: Final[int] = 50
DEFAULT_COLUMN_TOLERANCE: Final[int] = 0
DEFAULT_MIN_CONFIDENCE: Final[float] = 0.3
DEFAULT_FUZZY_RATIO: Final[float] = 0.15
DEFAULT_LINKABLE_ATTRIBUTES: Final[tuple[str, ...]] = ("email", "phone", "address")
DEFAULT_MAX_ITERATIONS: Final[int] = 20
DEFAULT_MAX_DEPTH: Final[int] = 3
DEFAULT_TOP_K: Final[int] = 5


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    sample_size: int = DEFAULT_SAMPLE_SIZE
    column_tolerance: int = DEFAULT_COLUMN_TOLERANCE
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    fuzzy_ratio: float = DEFAULT_FUZZY_RATIO
    linkable_attributes: tuple[str, ...] = DEFAULT_LINKABLE_ATTRIBUTES
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    max_depth: int = DEFAULT_MAX_DEPTH
    top_k: int = DEFAULT_TOP_K

    def with_overrides(self, **overrides: object) -> PipelineConfig:
        """Return a copy with every non-``None`` override applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)  # type: ignore[arg-type]


def get_pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        sample_size=env_int("LINKCHART_SAMPLE_SIZE", DEFAULT_SAMPLE_SIZE, minimum=1),
        column_tolerance=env_int("LINKCHART_COLUMN_TOLERANCE", DEFAULT_COLUMN_TOLERANCE),
        min_confidence=env_float("LINKCHART_MIN_CONFIDENCE", DEFAULT_MIN_CONFIDENCE),
        fuzzy_ratio=env_float("LINKCHART_FUZZY_RATIO", DEFAULT_FUZZY_RATIO),
        linkable_attributes=env_list(
            "LINKCHART_LINKABLE_ATTRIBUTES", DEFAULT_LINKABLE_ATTRIBUTES
        ),
        max_iterations=env_int("LINKCHART_MAX_ITERATIONS", DEFAULT_MAX_ITERATIONS, minimum=1),
        max_depth=env_int("LINKCHART_MAX_DEPTH", DEFAULT_MAX_DEPTH),
        top_k=env_int("LINKCHART_TOP_K", DEFAULT_TOP_K, minimum=1),
    )
