"""Fake collaborators for testing the search and export pipeline."""

from pathlib import Path

from lexical_search.models.document import Document, SearchResult
from lexical_search.models.span import ExportPayload


class FakeSink:
    """In-memory export sink that records every payload it receives."""

    def __init__(self, *, fail_with: Exception | None = None) -> None:
        self.writes: list[tuple[ExportPayload, str]] = []
        self._fail_with = fail_with

    def write(self, payload: ExportPayload, basename: str) -> Path | None:
        """Record the payload, or raise the configured error."""
        if self._fail_with is not None:
            raise self._fail_with
        self.writes.append((payload, basename))
        return Path(f"/fake/{basename}.docx")


class RecordingObserver:
    """Observer that records notifications in call order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, int | None]] = []

    def on_document_searched(self, document: Document, result: SearchResult | None) -> None:
        count = None if result is None else len(result.found_paragraphs)
        self.events.append(("searched", document.id, count))

    def on_document_skipped(self, document_id: str, reason: str) -> None:
        self.events.append(("skipped", document_id, None))


def make_doc(name: str, content: str) -> Document:
    """Build a Document the way the loader would."""
    return Document(
        id=f"data-{name}",
        name=name,
        content=content,
        size=len(content.encode("utf-8")),
        kind="text/markdown" if name.endswith(".md") else "text/plain",
    )
