"""Entity resolution over mapped nodes and edges.

Flow:
1) deduplicate nodes by id, shared merge attributes and fuzzy labels
2) rewrite edge endpoints to the surviving representatives
3) infer `shares-<attr>` links between nodes with common linkable values
"""

from __future__ import annotations

from .deduplicate import (
    DeduplicationResult,
    DisjointSet,
    MergeRecord,
    deduplicate_nodes,
    rewrite_edges,
)
from .engine import ResolutionResult, ResolveOptions, resolve
from .infer import infer_links, inferred_edge_type
from .normalize import attribute_values, labels_match, normalize_text

__all__ = [
    "DeduplicationResult",
    "DisjointSet",
    "MergeRecord",
    "ResolutionResult",
    "ResolveOptions",
    "attribute_values",
    "deduplicate_nodes",
    "infer_links",
    "inferred_edge_type",
    "labels_match",
    "normalize_text",
    "resolve",
    "rewrite_edges",
]
