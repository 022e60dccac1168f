"""Public domain model surface."""

from __future__ import annotations

from linkchart.domain.model.enums import (
    CentralityMeasure,
    InputFormat,
    MergeReason,
    Role,
    SemanticType,
    StageName,
    WarningKind,
)
from linkchart.domain.model.errors import (
    EmptyInputError,
    LinkChartError,
    ParseError,
    PipelineCancelledError,
    UnknownRecognizerError,
)
from linkchart.domain.model.graph import AliasRecord, Edge, Graph, Node, PropertyBag
from linkchart.domain.model.primitives import (
    CellValue,
    ColumnName,
    EdgeId,
    NodeId,
    TypeTag,
    freeze,
    is_empty,
    name_tokens,
)
from linkchart.domain.model.rows import ColumnProfile, RawRow, RoleAssignment, TypedCell, TypedRow
from linkchart.domain.model.warnings import PipelineWarning

__all__ = [  # noqa: RUF022
    # enums
    "CentralityMeasure",
    "InputFormat",
    "MergeReason",
    "Role",
    "SemanticType",
    "StageName",
    "WarningKind",
    # errors
    "LinkChartError",
    "ParseError",
    "EmptyInputError",
    "PipelineCancelledError",
    "UnknownRecognizerError",
    # primitives
    "CellValue",
    "ColumnName",
    "EdgeId",
    "NodeId",
    "TypeTag",
    "freeze",
    "is_empty",
    "name_tokens",
    # rows
    "RawRow",
    "TypedCell",
    "TypedRow",
    "ColumnProfile",
    "RoleAssignment",
    # graph
    "AliasRecord",
    "PropertyBag",
    "Node",
    "Edge",
    "Graph",
    # warnings
    "PipelineWarning",
]
