"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SemanticType(StrEnum):
    """Built-in cell types, listed in detection tie-break priority."""

    EMAIL = "email"
    PHONE = "phone"
    COORDINATES = "coordinates"
    ADDRESS = "address"
    DATE = "date"
    NUMBER = "number"
    STRING = "string"


class Role(StrEnum):
    ID = "id"
    TYPE = "type"
    LABEL = "label"
    SOURCE_ID = "sourceId"
    TARGET_ID = "targetId"
    DATE = "date"
    PROPERTY = "property"
    IGNORE = "ignore"


class InputFormat(StrEnum):
    CSV = "csv"
    TSV = "tsv"
    JSON = "json"


class WarningKind(StrEnum):
    VALIDATION = "validation"
    MERGE_CONFLICT = "merge_conflict"
    BOUND_EXCEEDED = "bound_exceeded"
    RESOLUTION = "resolution"


class MergeReason(StrEnum):
    """Why the resolver collapsed two nodes into one."""

    ID = "id"
    EMAIL = "email"
    PHONE = "phone"
    LABEL = "label"


class StageName(StrEnum):
    """Event names published after each pipeline stage."""

    INGESTED = "ingested"
    TYPED = "typed"
    NORMALIZED = "normalized"
    MAPPED = "mapped"
    RESOLVED = "resolved"
    ANALYZED = "analyzed"


class CentralityMeasure(StrEnum):
    BETWEENNESS = "betweenness"
    CLOSENESS = "closeness"
    PAGERANK = "pagerank"
    EIGENVECTOR = "eigenvector"
