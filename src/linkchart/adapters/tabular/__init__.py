"""Public interface for the tabular input adapter."""

from __future__ import annotations

from .reader import format_from_suffix, ingest, ingest_file, sniff_format

__all__ = ["format_from_suffix", "ingest", "ingest_file", "sniff_format"]
