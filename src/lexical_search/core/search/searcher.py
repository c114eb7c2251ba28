"""Literal, case-insensitive paragraph search across loaded documents."""

from collections.abc import Iterable, Sequence

from loguru import logger

from lexical_search.config import SegmentationThresholds
from lexical_search.core.segment.splitter import segment
from lexical_search.models.document import (
    Document,
    MatchDebugRecord,
    RestructureTrace,
    SearchResult,
    SentenceDecision,
)
from lexical_search.protocols import SearchObserver

SENTENCE_SEPARATOR = "|"

# A paragraph is only restructured when it has a base clause plus at least two more.
_MIN_PIECES = 3


def _normalize_term(term: str) -> str:
    return term.strip().lower()


def count_occurrences(text: str, term: str) -> int:
    """Count non-overlapping, case-insensitive occurrences of term in text."""
    needle = _normalize_term(term)
    if not needle:
        return 0
    return text.lower().count(needle)


def restructure_paragraph(paragraph: str, term: str) -> tuple[str, RestructureTrace]:
    """Keep only the clauses of a pipe-delimited paragraph that mention term.

    The first clause is always kept as context. Paragraphs with fewer than
    three clauses are returned unchanged.

    Args:
        paragraph: Paragraph text as produced by the segmenter.
        term: Search term (matched case-insensitively).

    Returns:
        Tuple of (restructured text, trace of kept and dropped clauses).
    """
    needle = _normalize_term(term)
    pieces = paragraph.split(SENTENCE_SEPARATOR)
    contains_separator = SENTENCE_SEPARATOR in paragraph

    if not contains_separator or len(pieces) < _MIN_PIECES:
        return paragraph, RestructureTrace(
            contains_separator=contains_separator,
            piece_count=len(pieces),
            final_paragraph=paragraph,
        )

    sentences = [p.strip() for p in pieces]
    kept = [sentences[0]]
    decisions = [SentenceDecision(sentences[0], "base")]
    for sentence in sentences[1:]:
        if needle in sentence.lower():
            kept.append(sentence)
            decisions.append(SentenceDecision(sentence, "match"))
        else:
            decisions.append(SentenceDecision(sentence, "skip"))

    result = " ".join(kept)
    return result, RestructureTrace(
        contains_separator=True,
        piece_count=len(pieces),
        sentences=tuple(sentences),
        decisions=tuple(decisions),
        final_paragraph=result,
    )


def search_document(
    document: Document,
    term: str,
    *,
    thresholds: SegmentationThresholds | None = None,
) -> tuple[SearchResult | None, list[MatchDebugRecord]]:
    """Search a single document.

    Returns:
        Tuple of (result or None when nothing matched, debug records).
    """
    needle = _normalize_term(term)
    paragraphs, _report = segment(document.content, thresholds)

    found: list[str] = []
    records: list[MatchDebugRecord] = []
    occurrences = 0

    for paragraph in paragraphs:
        # Counted on the original text; restructuring only affects what is shown.
        count = count_occurrences(paragraph.text, term)
        if not count:
            continue
        occurrences += count

        processed, trace = restructure_paragraph(paragraph.text, term)
        found.append(processed)
        records.append(
            MatchDebugRecord(
                file_name=document.name,
                paragraph_index=paragraph.index,
                original_paragraph=paragraph.text,
                processed_paragraph=processed,
                term=needle,
                trace=trace,
            )
        )

    if not found:
        return None, []

    result = SearchResult(
        document_id=document.id,
        file_name=document.name,
        found_paragraphs=tuple(found),
        total_paragraphs=len(paragraphs),
        occurrence_count=occurrences,
    )
    return result, records


def search_documents(
    documents: Iterable[Document],
    selected_ids: Sequence[str],
    term: str,
    *,
    thresholds: SegmentationThresholds | None = None,
    observer: SearchObserver | None = None,
) -> tuple[list[SearchResult], list[MatchDebugRecord]]:
    """Search the selected documents for a literal term.

    A blank term or an empty selection is a no-op, not an error.

    Args:
        documents: All loaded documents.
        selected_ids: Ids of the documents to search, in output order.
        term: Literal search term.
        thresholds: Segmentation limits passed to the segmenter.
        observer: Optional progress listener.

    Returns:
        Tuple of (results for documents with at least one match, debug records).
    """
    if not term.strip() or not selected_ids:
        return [], []

    by_id = {doc.id: doc for doc in documents}
    results: list[SearchResult] = []
    debug_records: list[MatchDebugRecord] = []

    for document_id in selected_ids:
        document = by_id.get(document_id)
        if document is None:
            logger.debug("Skipping {}: not loaded", document_id)
            if observer is not None:
                observer.on_document_skipped(document_id, "not loaded")
            continue

        result, records = search_document(document, term, thresholds=thresholds)
        if result is not None:
            results.append(result)
            debug_records.extend(records)
            logger.debug(
                "{}: {} paragraphs, {} occurrences",
                document.name, len(result.found_paragraphs), result.occurrence_count,
            )
        if observer is not None:
            observer.on_document_searched(document, result)

    return results, debug_records
