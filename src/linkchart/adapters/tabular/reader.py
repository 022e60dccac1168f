"""Read CSV, TSV and JSON blobs into ordered raw rows."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Mapping
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, cast

from linkchart.domain.model import (
    EmptyInputError,
    InputFormat,
    ParseError,
    PipelineWarning,
    RawRow,
)
from linkchart.domain.ports import IngestResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkchart.domain.model import CellValue

log = getLogger(__name__)

_DELIMITERS: dict[InputFormat, str] = {InputFormat.CSV: ",", InputFormat.TSV: "\t"}
_JSON_COLLECTION_KEYS: tuple[tuple[str, str], ...] = (("entities", "links"), ("nodes", "edges"))
_JSON_RECORD_KEYS: tuple[str, ...] = ("data", "records")


def ingest(
    blob: str | bytes,
    input_format: InputFormat | str | None = None,
    *,
    column_tolerance: int = 0,
) -> IngestResult:
    """Parse ``blob`` into rows, sniffing the format when none is declared."""

    text = _decode(blob)
    if not text.strip():
        raise EmptyInputError("Input is empty")

    resolved_format = _resolve_format(text, input_format)
    if resolved_format is InputFormat.JSON:
        result = _read_json(text)
    else:
        result = _read_delimited(
            text,
            delimiter=_DELIMITERS[resolved_format],
            column_tolerance=column_tolerance,
        )
    log.info(
        "Read %d rows, %d columns (%s, %d warnings)",
        len(result.rows),
        len(result.headers),
        resolved_format,
        len(result.warnings),
    )
    return result


def ingest_file(
    path: Path | str,
    input_format: InputFormat | str | None = None,
    *,
    column_tolerance: int = 0,
) -> IngestResult:
    """Read ``path`` and parse it; the file suffix declares the format when known."""

    file_path = Path(path)
    if input_format is None:
        input_format = format_from_suffix(file_path)
    return ingest(file_path.read_bytes(), input_format, column_tolerance=column_tolerance)


def sniff_format(text: str) -> InputFormat:
    stripped = text.lstrip()
    if stripped.startswith(("[", "{")):
        return InputFormat.JSON
    first_line = next((line for line in stripped.splitlines() if line.strip()), "")
    if first_line.count("\t") > first_line.count(","):
        return InputFormat.TSV
    return InputFormat.CSV


def _resolve_format(text: str, input_format: InputFormat | str | None) -> InputFormat:
    if input_format is None:
        return sniff_format(text)
    try:
        return InputFormat(str(input_format).lower())
    except ValueError as exc:
        raise ParseError(f"Unsupported input format: {input_format!r}") from exc


def format_from_suffix(path: Path | str) -> InputFormat | None:
    try:
        return InputFormat(Path(path).suffix.lstrip(".").lower())
    except ValueError:
        return None


def _decode(blob: str | bytes) -> str:
    if isinstance(blob, bytes):
        try:
            return blob.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Input is not valid UTF-8: {exc.reason}") from exc
    return blob.removeprefix("\ufeff")


# --- delimited ---------------------------------------------------------------


def _read_delimited(text: str, *, delimiter: str, column_tolerance: int) -> IngestResult:
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)
    headers: tuple[str, ...] | None = None
    rows: list[RawRow] = []
    warnings: list[PipelineWarning] = []

    try:
        for record in reader:
            if not any(cell.strip() for cell in record):
                warnings.append(PipelineWarning.validation(f"Skipped blank line {reader.line_num}"))
                continue
            if headers is None:
                headers = _normalize_headers(record, warnings)
                continue
            cells = _fit_to_headers(
                record,
                headers,
                line=reader.line_num,
                row_index=len(rows),
                column_tolerance=column_tolerance,
                warnings=warnings,
            )
            rows.append(RawRow(index=len(rows), values=dict(zip(headers, cells, strict=True))))
    except csv.Error as exc:
        raise ParseError(f"Malformed delimited input: {exc}", line=reader.line_num) from exc

    if headers is None:
        raise EmptyInputError("Input has no header row")
    if not rows:
        raise EmptyInputError("Input has a header but no data rows")
    return IngestResult(rows=tuple(rows), headers=headers, warnings=tuple(warnings))


def _normalize_headers(record: Sequence[str], warnings: list[PipelineWarning]) -> tuple[str, ...]:
    headers: list[str] = []
    used: set[str] = set()
    for position, cell in enumerate(record, start=1):
        name = cell.strip()
        if not name:
            name = f"column_{position}"
            warnings.append(
                PipelineWarning.validation(
                    f"Blank header at position {position} renamed to {name!r}", column=name
                )
            )
        if name in used:
            base, suffix = name, 2
            while f"{base}_{suffix}" in used:
                suffix += 1
            name = f"{base}_{suffix}"
            warnings.append(
                PipelineWarning.validation(
                    f"Duplicate header {base!r} renamed to {name!r}", column=name
                )
            )
        used.add(name)
        headers.append(name)
    return tuple(headers)


def _fit_to_headers(
    record: Sequence[str],
    headers: Sequence[str],
    *,
    line: int,
    row_index: int,
    column_tolerance: int,
    warnings: list[PipelineWarning],
) -> list[str]:
    expected = len(headers)
    found = len(record)
    if found == expected:
        return list(record)
    if abs(found - expected) > column_tolerance:
        raise ParseError(
            f"Expected {expected} columns but found {found} (tolerance {column_tolerance})",
            line=line,
        )
    if found < expected:
        warnings.append(
            PipelineWarning.validation(
                f"Row has {found} of {expected} columns; missing cells left empty",
                row_index=row_index,
            )
        )
        return [*record, *([""] * (expected - found))]
    dropped = list(record[expected:])
    warnings.append(
        PipelineWarning.validation(
            f"Row has {found} columns for {expected} headers; dropped trailing cells {dropped!r}",
            row_index=row_index,
        )
    )
    return list(record[:expected])


# --- json --------------------------------------------------------------------


def _read_json(text: str) -> IngestResult:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON: {exc.msg}", line=exc.lineno) from exc

    records = _json_records(payload)
    if not records:
        raise EmptyInputError("JSON input contains no records")

    headers: dict[str, None] = {}
    mappings: list[Mapping[str, object]] = []
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise ParseError(f"Record {position} is a {type(record).__name__}, expected an object")
        mapping = cast(Mapping[str, object], record)
        for key in mapping:
            headers.setdefault(str(key), None)
        mappings.append(mapping)

    rows = tuple(
        RawRow(
            index=position,
            values={str(key): _json_cell(mapping.get(key)) for key in headers},
        )
        for position, mapping in enumerate(mappings)
    )
    return IngestResult(rows=rows, headers=tuple(headers))


def _json_records(payload: object) -> list[object]:
    if isinstance(payload, list):
        return cast(list[object], payload)
    if not isinstance(payload, Mapping):
        raise ParseError("JSON input must be an array or an object")

    mapping = cast(Mapping[str, object], payload)
    for first, second in _JSON_COLLECTION_KEYS:
        if first in mapping or second in mapping:
            return [*_json_list(mapping, first), *_json_list(mapping, second)]
    for key in _JSON_RECORD_KEYS:
        if key in mapping:
            return _json_list(mapping, key)
    return [mapping]


def _json_list(mapping: Mapping[str, object], key: str) -> list[object]:
    value = mapping.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParseError(f"JSON field {key!r} must be an array")
    return cast(list[object], value)


def _json_cell(value: object) -> CellValue:
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if isinstance(value, Mapping):
        return cast(Mapping[str, object], value)
    return json.dumps(value)
