from __future__ import annotations

from linkchart.domain.ingest_pipeline import (
    RecognizerRegistry,
    detect_types,
    normalize,
    synthesize_id,
)
from linkchart.domain.model import ColumnProfile, RawRow, SemanticType, WarningKind


def _profile(name: str, detected_type: str) -> ColumnProfile:
    return ColumnProfile(name=name, detected_type=detected_type, confidence=1.0)


def test_normalize_canonicalizes_each_cell() -> None:
    rows = (
        RawRow(
            index=0,
            values={"id": "7", "email": " Bob@Corp.io", "phone": "+1 (415) 555-0100"},
        ),
    )
    profiles = (
        _profile("id", SemanticType.NUMBER),
        _profile("email", SemanticType.EMAIL),
        _profile("phone", SemanticType.PHONE),
    )

    result = normalize(rows, profiles)

    (row,) = result.rows
    assert row.cells["email"].canonical_value == "bob@corp.io"
    assert row.cells["email"].raw_value == " Bob@Corp.io"
    assert row.cells["phone"].canonical_value == "(415) 555-0100"
    assert result.warnings == ()


def test_normalize_keeps_ids_as_text() -> None:
    rows = (RawRow(index=0, values={"id": "007"}),)

    result = normalize(rows, (_profile("id", SemanticType.NUMBER),))

    cell = result.rows[0].cells["id"]
    assert cell.canonical_value == "007"
    assert cell.type == SemanticType.STRING


def test_normalize_never_raises_on_bad_cells() -> None:
    rows = (
        RawRow(index=0, values={"email": "not-an-email", "when": "2024-02-30"}),
        RawRow(index=1, values={"email": "ok@corp.io", "when": "2024-02-01"}),
    )
    profiles = (_profile("email", SemanticType.EMAIL), _profile("when", SemanticType.DATE))

    result = normalize(rows, profiles)

    bad_email = result.rows[0].cells["email"]
    bad_date = result.rows[0].cells["when"]
    assert not bad_email.valid
    assert bad_email.canonical_value == "not-an-email"
    assert not bad_date.valid
    assert result.rows[1].cells["email"].valid
    assert result.rows[1].cells["when"].canonical_value == "2024-02-01T00:00:00+00:00"
    assert {(warning.row_index, warning.column) for warning in result.warnings} == {
        (0, "email"),
        (0, "when"),
    }
    assert all(warning.kind is WarningKind.VALIDATION for warning in result.warnings)


def test_normalize_marks_out_of_range_coordinates_invalid() -> None:
    rows = (
        RawRow(index=0, values={"location": {"lat": 40.7, "lng": -74.0}}),
        RawRow(index=1, values={"location": {"lat": 140.7, "lng": -74.0}}),
    )

    result = normalize(rows, (_profile("location", SemanticType.COORDINATES),))

    assert result.rows[0].cells["location"].canonical_value == {
        "latitude": 40.7,
        "longitude": -74.0,
    }
    assert result.rows[0].cells["location"].valid
    assert not result.rows[1].cells["location"].valid
    assert len(result.warnings) == 1


def test_normalize_placeholder_email_is_invalid() -> None:
    rows = (RawRow(index=0, values={"email": "someone@example.com"}),)

    result = normalize(rows, (_profile("email", SemanticType.EMAIL),))

    cell = result.rows[0].cells["email"]
    assert cell.canonical_value == "someone@example.com"
    assert not cell.valid


def test_normalize_synthesizes_missing_ids() -> None:
    rows = (
        RawRow(index=0, values={"id": "", "type": "Person", "name": "Alice"}),
        RawRow(index=1, values={"id": "b", "type": "Person", "name": "Bob"}),
    )
    profiles = detect_types(rows, ("id", "type", "name"))

    first = normalize(rows, profiles)
    second = normalize(rows, profiles)

    expected = synthesize_id(0, "Person", "Alice")
    assert first.rows[0].cells["id"].canonical_value == expected
    assert second.rows[0].cells["id"].canonical_value == expected
    assert first.rows[1].cells["id"].canonical_value == "b"
    assert [warning.node_id for warning in first.warnings] == [expected]


def test_normalize_empty_cells_stay_empty() -> None:
    rows = (RawRow(index=0, values={"phone": "  "}),)

    result = normalize(rows, (_profile("phone", SemanticType.PHONE),))

    cell = result.rows[0].cells["phone"]
    assert cell.canonical_value is None
    assert cell.valid
    assert result.warnings == ()


def test_normalize_is_idempotent_on_canonical_values() -> None:
    rows = (
        RawRow(
            index=0,
            values={"email": "A@B.io", "phone": "4155550100", "when": "Jan 5, 2024"},
        ),
    )
    profiles = (
        _profile("email", SemanticType.EMAIL),
        _profile("phone", SemanticType.PHONE),
        _profile("when", SemanticType.DATE),
    )
    once = normalize(rows, profiles)
    canonical_rows = (
        RawRow(
            index=0,
            values={
                column: cell.canonical_value  # type: ignore[misc]
                for column, cell in once.rows[0].cells.items()
            },
        ),
    )

    twice = normalize(canonical_rows, profiles)

    assert {column: cell.canonical_value for column, cell in twice.rows[0].cells.items()} == {
        column: cell.canonical_value for column, cell in once.rows[0].cells.items()
    }


def test_normalize_with_an_empty_registry_keeps_cells_as_text() -> None:
    rows = (RawRow(index=0, values={"email": " Bob@Corp.io"}),)
    profiles = (_profile("email", SemanticType.EMAIL),)

    result = normalize(rows, profiles, registry=RecognizerRegistry())

    cell = result.rows[0].cells["email"]
    assert cell.type == SemanticType.STRING
    assert cell.canonical_value == "Bob@Corp.io"
    assert result.warnings == ()
