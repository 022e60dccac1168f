"""Comparable keys for resolution: attribute values and fuzzy labels."""

from __future__ import annotations

import math
import unicodedata
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from rapidfuzz.distance import Levenshtein

from linkchart.domain.model import SemanticType, name_tokens

if TYPE_CHECKING:
    from linkchart.domain.ingest_pipeline.recognizers import RecognizerRegistry
    from linkchart.domain.model import Node, TypedCell

DEFAULT_FUZZY_RATIO = 0.15


def normalize_text(value: str | None) -> str | None:
    """Case-folded text without punctuation and with collapsed whitespace."""

    if value is None:
        return None
    text = unicodedata.normalize("NFKC", value)
    text = text.casefold()
    text = "".join(ch for ch in text if not unicodedata.category(ch).startswith("P"))
    text = " ".join(text.split())
    return text or None


def labels_match(
    left: str | None,
    right: str | None,
    *,
    ratio: float = DEFAULT_FUZZY_RATIO,
) -> bool:
    """Equal after normalization, or within ``max(1, floor(ratio * len))`` edits.

    ``len`` is the length of the longer normalized label.
    """

    left_key = normalize_text(left)
    right_key = normalize_text(right)
    if left_key is None or right_key is None:
        return False
    if left_key == right_key:
        return True
    threshold = max(1, math.floor(ratio * max(len(left_key), len(right_key))))
    return Levenshtein.distance(left_key, right_key, score_cutoff=threshold) <= threshold


def attribute_cells(
    node: Node,
    attribute: str,
    *,
    registry: RecognizerRegistry | None = None,
) -> tuple[TypedCell, ...]:
    """Cells from the columns that hold ``attribute``.

    A column counts when its name equals ``attribute`` or matches the
    field-name aliases of the ``attribute`` recognizer in ``registry``.
    Without a registry, any name token equal to ``attribute`` counts, so
    ``work_phone`` still holds a phone. The detected cell type alone never
    makes a column a merge key.
    """

    matches = _column_matcher(attribute, registry)
    return tuple(cell for key, cell in node.properties.items() if matches(key))


def attribute_values(
    node: Node,
    attribute: str,
    *,
    registry: RecognizerRegistry | None = None,
) -> tuple[str, ...]:
    """Distinct normalized values of ``attribute`` on valid, non-empty cells."""

    values: list[str] = []
    for cell in attribute_cells(node, attribute, registry=registry):
        if not cell.valid or cell.canonical_value is None:
            continue
        value = _attribute_key(attribute, cell.canonical_value)
        if value and value not in values:
            values.append(value)
    return tuple(values)


def _column_matcher(
    attribute: str,
    registry: RecognizerRegistry | None,
) -> Callable[[str], bool]:
    wanted = attribute.casefold()
    recognizer = registry.get(wanted) if registry is not None and wanted in registry else None

    def matches(column: str) -> bool:
        if column.casefold() == wanted:
            return True
        if recognizer is not None:
            return recognizer.matches_field_name(column)
        return wanted in name_tokens(column)

    return matches


def _attribute_key(attribute: str, canonical: object) -> str | None:
    if isinstance(canonical, Mapping):
        return None
    text = str(canonical).strip()
    if attribute.casefold() == SemanticType.EMAIL:
        return text.casefold() or None
    if attribute.casefold() == SemanticType.PHONE:
        return text or None
    return normalize_text(text)
