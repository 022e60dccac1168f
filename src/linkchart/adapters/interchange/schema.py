"""Pydantic models describing the graph interchange document."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, cast

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from linkchart.domain.ingest_pipeline.roles import DEFAULT_EDGE_TYPE, DEFAULT_NODE_TYPE
from linkchart.domain.model import SemanticType

FORMAT_VERSION = "1.0"
ALIASES_KEY = "aliases"
_CELL_KEYS = frozenset({"rawValue", "canonicalValue", "raw_value", "canonical_value"})


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat()


class InterchangeModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class CellDocument(InterchangeModel):
    raw_value: Any = None
    canonical_value: Any = None
    type: str = SemanticType.STRING
    valid: bool = True

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_value(cls, value: object) -> object:
        if isinstance(value, CellDocument):
            return value
        # hand-written documents may carry plain values instead of cell objects
        if isinstance(value, Mapping) and _CELL_KEYS & set(cast(Mapping[str, object], value)):
            return value
        return {"rawValue": value, "canonicalValue": value}


class NodeDocument(InterchangeModel):
    id: str
    type: str = DEFAULT_NODE_TYPE
    label: str | None = None
    properties: dict[str, CellDocument] = Field(default_factory=dict[str, CellDocument])
    aliases: list[dict[str, Any]] = Field(default_factory=list[dict[str, Any]])
    source_row_index: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_aliases(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return value
        data: dict[str, object] = dict(cast(Mapping[str, object], value))
        properties = data.get("properties")
        if isinstance(properties, Mapping):
            remaining = dict(cast(Mapping[str, object], properties))
            aliases = remaining.get(ALIASES_KEY)
            if isinstance(aliases, list):
                data[ALIASES_KEY] = remaining.pop(ALIASES_KEY)
                data["properties"] = remaining
        return data

    @model_serializer(mode="wrap")
    def _nest_aliases(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = cast(dict[str, Any], handler(self))
        aliases = data.pop(ALIASES_KEY, None)
        if aliases:
            data["properties"] = {**data.get("properties", {}), ALIASES_KEY: aliases}
        return data


class EdgeDocument(InterchangeModel):
    id: str
    source: str
    target: str
    type: str = DEFAULT_EDGE_TYPE
    properties: dict[str, CellDocument] = Field(default_factory=dict[str, CellDocument])
    inferred: bool = False
    source_row_index: int | None = None


class MetadataDocument(InterchangeModel):
    version: str = FORMAT_VERSION
    timestamp: str = Field(default_factory=_utc_timestamp)
    node_count: int | None = None
    edge_count: int | None = None


class GraphDocument(InterchangeModel):
    nodes: list[NodeDocument] = Field(default_factory=list[NodeDocument])
    edges: list[EdgeDocument] = Field(default_factory=list[EdgeDocument])
    metadata: MetadataDocument = Field(default_factory=MetadataDocument)
