"""Domain primitives: scalar aliases shared by rows, cells and graphs."""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

type ColumnName = str
type NodeId = str
type EdgeId = str
type TypeTag = str
type CellValue = str | int | float | bool | Mapping[str, object] | None

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def freeze[K, V](mapping: Mapping[K, V] | None = None) -> Mapping[K, V]:
    """Return a read-only snapshot of ``mapping``."""

    return MappingProxyType(dict(mapping or {}))


def is_empty(value: object) -> bool:
    """Blank strings, ``None`` and empty mappings count as empty cells."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Mapping):
        return not value
    return False


def name_tokens(name: str) -> tuple[str, ...]:
    """Split a column name on punctuation, underscores and camelCase boundaries."""

    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", name.strip())
    return tuple(token for token in _NON_ALNUM.split(spaced.casefold()) if token)
