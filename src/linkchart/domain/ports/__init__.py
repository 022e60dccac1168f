"""Domain port definitions for adapters."""

from __future__ import annotations

from .reading import IngestResult, RowReader

__all__ = ["IngestResult", "RowReader"]
