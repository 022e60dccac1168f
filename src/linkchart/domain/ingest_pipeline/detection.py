"""Column type detection from field names and sampled values."""

from __future__ import annotations

import json
from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING

from linkchart.domain.model import ColumnProfile, SemanticType, is_empty

from .recognizers import NAME_ONLY_CONFIDENCE, default_registry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkchart.domain.model import CellValue, RawRow

    from .recognizers import RecognizerRegistry

log = getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 50
DEFAULT_MIN_CONFIDENCE = 0.3
_SAMPLE_VALUE_LIMIT = 5


def detect_types(
    rows: Sequence[RawRow],
    headers: Sequence[str],
    registry: RecognizerRegistry | None = None,
    *,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> tuple[ColumnProfile, ...]:
    """Profile every column in ``headers`` using the first ``sample_size`` rows."""

    active_registry = registry if registry is not None else default_registry()
    sample = rows[:sample_size]
    profiles = tuple(
        _profile_column(
            name,
            rows=rows,
            sample=sample,
            registry=active_registry,
            min_confidence=min_confidence,
        )
        for name in headers
    )
    log.info(
        "Detected column types: %s",
        ", ".join(f"{profile.name}={profile.detected_type}" for profile in profiles),
    )
    return profiles


def detect_cell_type(
    name: str | None,
    value: object,
    registry: RecognizerRegistry | None = None,
) -> tuple[str, float]:
    """Best ``(tag, confidence)`` for a single cell, ``string`` when nothing matches."""

    active_registry = registry if registry is not None else default_registry()
    best_tag: str = SemanticType.STRING
    best_confidence = 0.0
    for recognizer in active_registry:
        confidence = recognizer.get_confidence(name, value)
        if confidence > best_confidence:
            best_tag, best_confidence = recognizer.tag, confidence
    return best_tag, best_confidence


def _profile_column(
    name: str,
    *,
    rows: Sequence[RawRow],
    sample: Sequence[RawRow],
    registry: RecognizerRegistry,
    min_confidence: float,
) -> ColumnProfile:
    sampled = [row.get(name) for row in sample]
    present = [value for value in sampled if not is_empty(value)]

    scores: dict[str, float] = {}
    for recognizer in registry:
        if present:
            total = sum(recognizer.get_confidence(name, value) for value in present)
            scores[recognizer.tag] = total / len(present)
        else:
            scores[recognizer.tag] = (
                NAME_ONLY_CONFIDENCE if recognizer.matches_field_name(name) else 0.0
            )

    # strict comparison keeps the earlier (higher priority) tag on ties
    detected: str = SemanticType.STRING
    best = 0.0
    for tag, score in scores.items():
        if score > best:
            detected, best = tag, score

    if best < min_confidence:
        detected = SemanticType.STRING
        confidence = round(1.0 - best, 4)
    else:
        confidence = round(best, 4)
    scores[SemanticType.STRING] = round(1.0 - best, 4)

    all_values = [row.get(name) for row in rows]
    distinct = {_fingerprint(value) for value in all_values if not is_empty(value)}
    return ColumnProfile(
        name=name,
        detected_type=detected,
        confidence=confidence,
        sample_values=_sample_values(present),
        scores={tag: round(score, 4) for tag, score in scores.items()},
        null_count=sum(1 for value in all_values if is_empty(value)),
        unique_count=len(distinct),
    )


def _sample_values(values: Sequence[CellValue]) -> tuple[CellValue, ...]:
    seen: set[str] = set()
    samples: list[CellValue] = []
    for value in values:
        key = _fingerprint(value)
        if key in seen:
            continue
        seen.add(key)
        samples.append(value)
        if len(samples) == _SAMPLE_VALUE_LIMIT:
            break
    return tuple(samples)


def _fingerprint(value: CellValue) -> str:
    if isinstance(value, Mapping):
        return json.dumps(dict(value), sort_keys=True, default=str)
    return f"{type(value).__name__}:{value}"
