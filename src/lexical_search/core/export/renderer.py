"""Turn search results into numbered, formatted export entries."""

import re
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from loguru import logger

from lexical_search.core.format.highlight import format_paragraph
from lexical_search.models.document import SearchResult
from lexical_search.models.span import (
    ExportEntry,
    ExportPayload,
    ExportSection,
    FileSummary,
    HighlightedSpan,
)
from lexical_search.protocols import ExportSinkProtocol

_SLUG_STRIP = re.compile(r"[^A-Za-z0-9]")


def _entry(sequence: int, document_name: str, paragraph: str, term: str) -> ExportEntry:
    prefix = HighlightedSpan(text=f"{sequence:02d}. ", bold=True)
    spans = (prefix, *format_paragraph(paragraph, term))
    return ExportEntry(sequence=sequence, document_name=document_name, spans=spans)


def _sections(results: Sequence[SearchResult], term: str) -> list[ExportSection]:
    # Numbering runs across the whole result set, never per file.
    sequence = 0
    sections: list[ExportSection] = []
    for result in results:
        entries: list[ExportEntry] = []
        for paragraph in result.found_paragraphs:
            sequence += 1
            entries.append(_entry(sequence, result.file_name, paragraph, term))
        sections.append(ExportSection(summary=summarize_result(result), entries=tuple(entries)))
    return sections


def render(results: Sequence[SearchResult], term: str) -> list[ExportEntry]:
    """Number and format every found paragraph, in result then paragraph order."""
    return [entry for section in _sections(results, term) for entry in section.entries]


def summarize_result(result: SearchResult) -> FileSummary:
    return FileSummary(
        file_name=result.file_name,
        paragraph_count=len(result.found_paragraphs),
        occurrence_count=result.occurrence_count,
    )


def summarize(results: Sequence[SearchResult]) -> list[FileSummary]:
    return [summarize_result(r) for r in results]


def build_export(
    results: Sequence[SearchResult],
    term: str,
    *,
    generated_on: date | None = None,
) -> ExportPayload:
    """Assemble the full payload handed to an export sink."""
    return ExportPayload(
        term=term,
        title=f'Search Results for "{term}"',
        generated_on=generated_on or date.today(),
        sections=tuple(_sections(results, term)),
    )


def export_basename(term: str, day: date) -> str:
    """Name for an export file, e.g. ``search_results_fooBar_2024-05-01``."""
    slug = _SLUG_STRIP.sub("", term)
    return f"search_results_{slug}_{day.isoformat()}"


def export_results(
    results: Sequence[SearchResult],
    term: str,
    sink: ExportSinkProtocol,
    *,
    generated_on: date | None = None,
) -> Path | None:
    """Render results and hand them to a sink.

    Errors raised by the sink propagate to the caller.

    Returns:
        Whatever location the sink reports for the written document.
    """
    payload = build_export(results, term, generated_on=generated_on)
    basename = export_basename(term, payload.generated_on)
    logger.debug("Exporting {} entries as {}", len(payload.entries), basename)
    return sink.write(payload, basename)
