"""Public interface for graph interchange: JSON documents, CSV dumps, stage encoding."""

from __future__ import annotations

from .csv_codec import (
    entities_csv,
    import_csv_dump,
    links_csv,
    read_csv_dump,
    write_csv_dump,
)
from .encoding import encode
from .json_codec import document_to_graph, export_json, graph_to_document, import_json
from .schema import (
    CellDocument,
    EdgeDocument,
    GraphDocument,
    MetadataDocument,
    NodeDocument,
)

__all__ = [
    "CellDocument",
    "EdgeDocument",
    "GraphDocument",
    "MetadataDocument",
    "NodeDocument",
    "document_to_graph",
    "encode",
    "entities_csv",
    "export_json",
    "graph_to_document",
    "import_csv_dump",
    "import_json",
    "links_csv",
    "read_csv_dump",
    "write_csv_dump",
]
