"""Protocols for the collaborators around the search pipeline."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from lexical_search.models.document import Document, SearchResult
from lexical_search.models.span import ExportPayload


@runtime_checkable
class ExportSinkProtocol(Protocol):
    """Protocol for structured document writers fed by the export renderer."""

    def write(self, payload: ExportPayload, basename: str) -> Path | None:
        """Serialize the payload and return where it went (None if not written)."""
        ...


@runtime_checkable
class SearchObserver(Protocol):
    """Receives progress notifications while documents are searched."""

    def on_document_searched(self, document: Document, result: SearchResult | None) -> None:
        """Called after each document; result is None when nothing matched."""
        ...

    def on_document_skipped(self, document_id: str, reason: str) -> None:
        """Called when a selected document cannot be searched."""
        ...
