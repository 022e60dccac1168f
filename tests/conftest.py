from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from tests.helpers.graphs import make_graph

if TYPE_CHECKING:
    from linkchart.domain.model import Edge, Node

SAMPLE_RECORDS: list[dict[str, str]] = [
    {"id": "1", "name": "Alice", "type": "Person", "date": "2024-01-01"},
    {"id": "2", "name": "Bob", "type": "Person", "date": "2024-01-02"},
    {"id": "3", "name": "Acme Corp", "type": "Company", "date": "2024-01-03"},
    {"from": "1", "to": "2", "label": "knows"},
    {"from": "2", "to": "3", "label": "works_at"},
]

LINKCHART_ENV_VARS = (
    "LINKCHART_SAMPLE_SIZE",
    "LINKCHART_COLUMN_TOLERANCE",
    "LINKCHART_MIN_CONFIDENCE",
    "LINKCHART_FUZZY_RATIO",
    "LINKCHART_LINKABLE_ATTRIBUTES",
    "LINKCHART_MAX_ITERATIONS",
    "LINKCHART_MAX_DEPTH",
    "LINKCHART_TOP_K",
)


@pytest.fixture(autouse=True)
def _clear_linkchart_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in LINKCHART_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_blob() -> str:
    return json.dumps(SAMPLE_RECORDS)


@pytest.fixture
def contacts_csv() -> str:
    """Two people sharing an email and a company sharing a phone with one of them."""

    return (
        "id,name,type,email,phone\n"
        "a,Alice Smith,Person,X@x.com,+1 (415) 555-0100\n"
        "b,Bob Jones,Person,x@X.com,\n"
        "c,Acme Corp,Company,info@acme.io,4155550100\n"
    )


@pytest.fixture
def two_triangles() -> tuple[tuple[Node, ...], tuple[Edge, ...]]:
    return make_graph(
        "ABCDEF",
        (("A", "B"), ("B", "C"), ("C", "A"), ("D", "E"), ("E", "F"), ("F", "D")),
    )
