from __future__ import annotations

import pytest

from linkchart.domain.ingest_pipeline import default_registry
from linkchart.domain.reconciliation import attribute_values, labels_match, normalize_text
from tests.helpers.graphs import cell, make_node


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  Acme,  Corp. ", "acme corp"),
        ("JOHN O'NEIL", "john oneil"),
        ("...", None),
        (None, None),
    ],
)
def test_normalize_text(raw: str | None, expected: str | None) -> None:
    assert normalize_text(raw) == expected


def test_labels_match_within_edit_threshold() -> None:
    assert labels_match("Jonathan Smith", "Jonathon Smith")
    assert labels_match("Acme Corp.", "ACME CORP")
    assert labels_match("Bob", "Rob")
    assert not labels_match("Bob", "Rod")
    assert not labels_match("Alice", None)


def test_labels_match_threshold_scales_with_ratio() -> None:
    assert not labels_match("International Business", "Internatinal Busines", ratio=0.05)
    assert labels_match("International Business", "Internatinal Busines", ratio=0.15)


def test_attribute_values_use_valid_canonical_cells() -> None:
    node = make_node(
        "a",
        email=cell("Alice@Corp.io", "email"),
        work_email=cell("bob@example.com", "email", valid=False),
    )

    assert attribute_values(node, "email") == ("alice@corp.io",)


def test_attribute_values_only_read_columns_named_for_the_attribute() -> None:
    node = make_node(
        "a",
        work_phone=cell("+14155550100", "phone"),
        mobile=cell("+14155550199", "phone"),
        salary=cell("+1200000", "phone"),
    )

    by_token = attribute_values(node, "phone")
    by_alias = attribute_values(node, "phone", registry=default_registry())

    assert by_token == ("+14155550100",)
    assert by_alias == ("+14155550100", "+14155550199")
