"""CSV dumps of a graph: ``entities.csv`` and ``links.csv``.

The ``properties`` column holds a JSON object of canonical values. Node aliases
travel under ``aliases``; inferred links are flagged with ``"inferred": true``.
Cell types are not stored and are re-detected on import.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Mapping
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, cast

from linkchart.domain.ingest_pipeline import detect_cell_type
from linkchart.domain.model import Edge, Graph, Node, ParseError, TypedCell

from .schema import ALIASES_KEY

if TYPE_CHECKING:
    from collections.abc import Iterable

    from linkchart.domain.ingest_pipeline import RecognizerRegistry
    from linkchart.domain.model import CellValue

log = getLogger(__name__)

ENTITIES_FILE = "entities.csv"
LINKS_FILE = "links.csv"
ENTITY_HEADERS = ("id", "type", "label", "properties")
LINK_HEADERS = ("id", "source", "target", "type", "properties")
INFERRED_KEY = "inferred"


def _properties_json(properties: Mapping[str, TypedCell], key: str, extra: object) -> str:
    payload: dict[str, object] = {name: cell.canonical_value for name, cell in properties.items()}
    if extra:
        payload[key] = extra
    return json.dumps(payload, ensure_ascii=False, default=str)


def _write(headers: tuple[str, ...], rows: Iterable[tuple[object, ...]]) -> str:
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def entities_csv(graph: Graph) -> str:
    return _write(
        ENTITY_HEADERS,
        (
            (
                node.id,
                node.type,
                node.label,
                _properties_json(
                    node.properties, ALIASES_KEY, [dict(alias) for alias in node.aliases]
                ),
            )
            for node in graph.nodes
        ),
    )


def links_csv(graph: Graph) -> str:
    return _write(
        LINK_HEADERS,
        (
            (
                edge.id,
                edge.source,
                edge.target,
                edge.type,
                _properties_json(edge.properties, INFERRED_KEY, edge.inferred),
            )
            for edge in graph.edges
        ),
    )


def write_csv_dump(graph: Graph, directory: Path | str) -> tuple[Path, Path]:
    """Write both CSV files into ``directory`` (created if missing)."""

    target = Path(directory)
    target.mkdir(parents=True, exist_ok=True)
    entities_path = target / ENTITIES_FILE
    links_path = target / LINKS_FILE
    entities_path.write_text(entities_csv(graph), encoding="utf-8")
    links_path.write_text(links_csv(graph), encoding="utf-8")
    log.info("Wrote CSV dump to %s", target)
    return entities_path, links_path


def _records(text: str, headers: tuple[str, ...], name: str) -> list[dict[str, str]]:
    reader = csv.DictReader(io.StringIO(text, newline=""))
    missing = [header for header in headers if header not in (reader.fieldnames or ())]
    if missing:
        raise ParseError(f"{name} is missing columns: {', '.join(missing)}", line=1)
    return list(reader)


def _decode_properties(raw: str | None, *, line: int, name: str) -> dict[str, object]:
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ParseError(f"{name}: properties are not valid JSON ({exc.msg})", line=line) from exc
    if not isinstance(payload, dict):
        raise ParseError(f"{name}: properties must be a JSON object", line=line)
    return cast(dict[str, object], payload)


def _cells(
    properties: Mapping[str, object],
    registry: RecognizerRegistry | None,
) -> dict[str, TypedCell]:
    cells: dict[str, TypedCell] = {}
    for key, value in properties.items():
        tag, _ = detect_cell_type(key, value, registry)
        cells[key] = TypedCell(raw_value=cast("CellValue", value), canonical_value=value, type=tag)
    return cells


def read_csv_dump(
    entities_text: str,
    links_text: str,
    *,
    registry: RecognizerRegistry | None = None,
) -> Graph:
    """Rebuild a graph from the text of an entities and a links CSV file."""

    nodes: list[Node] = []
    for line, record in enumerate(_records(entities_text, ENTITY_HEADERS, ENTITIES_FILE), 2):
        properties = _decode_properties(record["properties"], line=line, name=ENTITIES_FILE)
        aliases = properties.pop(ALIASES_KEY, [])
        if not isinstance(aliases, list):
            raise ParseError(f"{ENTITIES_FILE}: aliases must be a list", line=line)
        nodes.append(
            Node(
                id=record["id"],
                type=record["type"],
                label=record["label"] or record["id"],
                properties=_cells(properties, registry),
                aliases=tuple(cast(list[Mapping[str, object]], aliases)),
            )
        )

    edges: list[Edge] = []
    for line, record in enumerate(_records(links_text, LINK_HEADERS, LINKS_FILE), 2):
        properties = _decode_properties(record["properties"], line=line, name=LINKS_FILE)
        inferred = properties.get(INFERRED_KEY) is True
        if inferred:
            del properties[INFERRED_KEY]
        edges.append(
            Edge(
                id=record["id"],
                source=record["source"],
                target=record["target"],
                type=record["type"],
                properties=_cells(properties, registry),
                inferred=inferred,
            )
        )

    log.info("Read CSV dump with %d nodes and %d links", len(nodes), len(edges))
    return Graph(nodes=tuple(nodes), edges=tuple(edges))


def import_csv_dump(
    directory: Path | str,
    *,
    registry: RecognizerRegistry | None = None,
) -> Graph:
    source = Path(directory)
    return read_csv_dump(
        (source / ENTITIES_FILE).read_text(encoding="utf-8"),
        (source / LINKS_FILE).read_text(encoding="utf-8"),
        registry=registry,
    )
