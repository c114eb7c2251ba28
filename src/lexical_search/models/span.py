"""Styled text spans and the export structures built from them."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class StyledSpan:
    """A run of text with inline formatting flags."""

    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False
    strikethrough: bool = False


@dataclass(frozen=True)
class HighlightedSpan(StyledSpan):
    """A styled span that also knows whether it is a search-term match."""

    matched: bool = False

    @classmethod
    def from_styled(
        cls, span: StyledSpan, *, text: str | None = None, matched: bool = False
    ) -> "HighlightedSpan":
        return cls(
            text=span.text if text is None else text,
            bold=span.bold,
            italic=span.italic,
            code=span.code,
            strikethrough=span.strikethrough,
            matched=matched,
        )


@dataclass(frozen=True)
class ExportEntry:
    """One numbered paragraph destined for an exported document.

    The first span is always the bold sequence prefix.
    """

    sequence: int
    document_name: str
    spans: tuple[HighlightedSpan, ...]

    @property
    def prefix(self) -> str:
        return f"{self.sequence:02d}. "

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.spans)


@dataclass(frozen=True)
class FileSummary:
    """Per-file counts shown above the exported paragraphs."""

    file_name: str
    paragraph_count: int
    occurrence_count: int

    @property
    def line(self) -> str:
        return f"Found {self.paragraph_count} paragraphs with {self.occurrence_count} occurrences"


@dataclass(frozen=True)
class ExportSection:
    """Entries of one source file plus its summary."""

    summary: FileSummary
    entries: tuple[ExportEntry, ...]


@dataclass(frozen=True)
class ExportPayload:
    """Everything a sink needs to serialize a result set."""

    term: str
    title: str
    generated_on: date
    sections: tuple[ExportSection, ...]

    @property
    def entries(self) -> tuple[ExportEntry, ...]:
        return tuple(e for s in self.sections for e in s.entries)
