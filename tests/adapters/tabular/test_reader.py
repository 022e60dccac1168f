from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from linkchart.adapters.tabular import format_from_suffix, ingest, ingest_file, sniff_format
from linkchart.domain.model import EmptyInputError, InputFormat, ParseError, WarningKind

if TYPE_CHECKING:
    from pathlib import Path


def test_ingest_csv_keeps_quoted_delimiters() -> None:
    blob = 'id,name,address\n1,"Smith, Jane","12 Main St, Springfield"\n'

    result = ingest(blob, InputFormat.CSV)

    assert result.headers == ("id", "name", "address")
    assert len(result.rows) == 1
    assert result.rows[0].get("name") == "Smith, Jane"
    assert result.rows[0].get("address") == "12 Main St, Springfield"


def test_ingest_warns_about_skipped_blank_lines() -> None:
    blob = "\n\nid,name\n1,Alice\n\n2,Bob\n"

    result = ingest(blob, "csv")

    assert result.headers == ("id", "name")
    assert [row.index for row in result.rows] == [0, 1]
    assert [row.get("name") for row in result.rows] == ["Alice", "Bob"]
    assert [warning.message for warning in result.warnings] == [
        "Skipped blank line 1",
        "Skipped blank line 2",
        "Skipped blank line 5",
    ]
    assert {warning.kind for warning in result.warnings} == {WarningKind.VALIDATION}


def test_ingest_sniffs_tsv_and_json() -> None:
    assert sniff_format("id\tname\n1\tAlice\n") is InputFormat.TSV
    assert sniff_format("  [{\"id\": 1}]") is InputFormat.JSON
    assert sniff_format("id,name\n") is InputFormat.CSV

    result = ingest(b"id\tname\n1\tAlice\n")

    assert result.rows[0].get("name") == "Alice"


def test_ingest_strips_utf8_bom() -> None:
    result = ingest("\ufeffid,name\n1,Alice\n".encode())

    assert result.headers == ("id", "name")


def test_ingest_uneven_row_raises_with_line_number() -> None:
    blob = "id,name\n1,Alice\n2,Bob,extra\n"

    with pytest.raises(ParseError) as excinfo:
        ingest(blob, InputFormat.CSV)

    assert excinfo.value.line == 3


def test_ingest_uneven_row_within_tolerance_warns() -> None:
    blob = "id,name,email\n1,Alice\n2,Bob,bob@corp.io,spare\n"

    result = ingest(blob, InputFormat.CSV, column_tolerance=1)

    assert result.rows[0].get("email") == ""
    assert result.rows[1].get("email") == "bob@corp.io"
    assert [warning.row_index for warning in result.warnings] == [0, 1]


def test_ingest_malformed_quoting_raises() -> None:
    blob = 'id,name\n1,"Ali"ce\n'

    with pytest.raises(ParseError):
        ingest(blob, InputFormat.CSV)


@pytest.mark.parametrize("blob", ["", "   \n\n", "id,name\n"])
def test_ingest_empty_input(blob: str) -> None:
    with pytest.raises(EmptyInputError):
        ingest(blob, InputFormat.CSV)


def test_ingest_renames_blank_and_duplicate_headers() -> None:
    blob = "id,,name,name\n1,x,Alice,Al\n"

    result = ingest(blob, InputFormat.CSV)

    assert result.headers == ("id", "column_2", "name", "name_2")
    assert {warning.column for warning in result.warnings} == {"column_2", "name_2"}


def test_ingest_json_unions_record_keys() -> None:
    blob = json.dumps(
        [
            {"id": "1", "name": "Alice", "tags": ["a", "b"]},
            {"from": "1", "to": "2"},
        ]
    )

    result = ingest(blob)

    assert result.headers == ("id", "name", "tags", "from", "to")
    assert result.rows[0].get("tags") == '["a", "b"]'
    assert result.rows[0].get("from") is None
    assert result.rows[1].get("from") == "1"


def test_ingest_json_concatenates_entities_and_links() -> None:
    blob = json.dumps(
        {
            "entities": [{"id": "1"}, {"id": "2"}],
            "links": [{"source": "1", "target": "2"}],
        }
    )

    result = ingest(blob, InputFormat.JSON)

    assert len(result.rows) == 3
    assert result.rows[2].get("source") == "1"


def test_ingest_json_keeps_nested_objects() -> None:
    blob = json.dumps([{"id": "1", "location": {"lat": 40.1, "lng": -74.0}}])

    result = ingest(blob)

    assert result.rows[0].get("location") == {"lat": 40.1, "lng": -74.0}


def test_ingest_json_rejects_scalar_records() -> None:
    with pytest.raises(ParseError):
        ingest("[1, 2]", InputFormat.JSON)


def test_ingest_invalid_json_reports_line() -> None:
    with pytest.raises(ParseError) as excinfo:
        ingest('[\n{"id": 1},\n{oops}\n]', InputFormat.JSON)

    assert excinfo.value.line == 3


def test_ingest_unknown_format() -> None:
    with pytest.raises(ParseError):
        ingest("id\n1\n", "xlsx")


def test_ingest_file_uses_suffix(tmp_path: Path) -> None:
    path = tmp_path / "people.tsv"
    path.write_text("id\tname\n1\tSmith, Jane\n", encoding="utf-8")

    result = ingest_file(path)

    assert format_from_suffix(path) is InputFormat.TSV
    assert format_from_suffix("notes.txt") is None
    assert result.rows[0].get("name") == "Smith, Jane"
