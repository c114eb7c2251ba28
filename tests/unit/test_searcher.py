"""Tests for literal paragraph search and pipe-clause restructuring."""

from lexical_search.core.search.searcher import (
    count_occurrences,
    restructure_paragraph,
    search_document,
    search_documents,
)
from lexical_search.models.document import Document
from tests.unit.fakes import RecordingObserver, make_doc

ALL_IDS = ["data-notes.md", "data-recipes.txt", "data-other.txt"]


def test_blank_term_returns_nothing(documents: list[Document]) -> None:
    assert search_documents(documents, ALL_IDS, "   ") == ([], [])


def test_empty_selection_returns_nothing(documents: list[Document]) -> None:
    assert search_documents(documents, [], "python") == ([], [])


def test_search_finds_matching_paragraphs(documents: list[Document]) -> None:
    results, _ = search_documents(documents, ALL_IDS, "python")

    assert [r.file_name for r in results] == ["notes.md", "recipes.txt"]
    notes, recipes = results
    assert notes.found_paragraphs == (
        "Python is great for scripting",
        "Python notebooks with python kernels",
    )
    assert notes.total_paragraphs == 4
    assert notes.occurrence_count == 3
    assert recipes.found_paragraphs == ("A python cake recipe",)
    assert recipes.occurrence_count == 1


def test_results_follow_selection_order(documents: list[Document]) -> None:
    results, _ = search_documents(documents, ["data-recipes.txt", "data-notes.md"], "python")
    assert [r.file_name for r in results] == ["recipes.txt", "notes.md"]


def test_search_is_case_insensitive(documents: list[Document]) -> None:
    lower, _ = search_documents(documents, ALL_IDS, "python")
    upper, _ = search_documents(documents, ALL_IDS, "  PYTHON ")
    assert lower == upper


def test_unknown_ids_are_skipped_and_reported(documents: list[Document]) -> None:
    observer = RecordingObserver()

    results, _ = search_documents(
        documents, ["missing", "data-recipes.txt", "data-other.txt"], "python", observer=observer
    )

    assert [r.file_name for r in results] == ["recipes.txt"]
    assert observer.events == [
        ("skipped", "missing", None),
        ("searched", "data-recipes.txt", 1),
        ("searched", "data-other.txt", None),
    ]


def test_count_occurrences_is_non_overlapping() -> None:
    assert count_occurrences("abcabc", "abc") == 2
    assert count_occurrences("aaaa", "aa") == 2
    assert count_occurrences("ABC abc", "abc") == 2


def test_count_occurrences_treats_term_literally() -> None:
    assert count_occurrences("abc", "a.c") == 0
    assert count_occurrences("a.c and a.c", "a.c") == 2
    assert count_occurrences("anything", "  ") == 0


def test_restructure_keeps_base_and_matching_clauses() -> None:
    paragraph = "Intro text | mentions abc here | unrelated clause | another abc mention"

    result, trace = restructure_paragraph(paragraph, "abc")

    assert result == "Intro text mentions abc here another abc mention"
    assert trace.contains_separator is True
    assert trace.piece_count == 4
    assert [d.action for d in trace.decisions] == ["base", "match", "skip", "match"]
    assert str(trace.decisions[2]) == "[SKIP] unrelated clause"
    assert trace.final_paragraph == result


def test_restructure_leaves_two_piece_paragraphs_alone() -> None:
    result, trace = restructure_paragraph("left side | right abc", "abc")
    assert result == "left side | right abc"
    assert trace.contains_separator is True
    assert trace.piece_count == 2
    assert trace.decisions == ()


def test_restructure_without_separator_is_identity() -> None:
    result, trace = restructure_paragraph("just abc text", "ABC")
    assert result == "just abc text"
    assert trace.contains_separator is False


def test_occurrences_are_counted_before_restructuring() -> None:
    doc = make_doc("a.txt", "abc base | nothing | still nothing\nfiller line one\nfiller line two")

    result, _ = search_document(doc, "abc")

    assert result is not None
    assert result.found_paragraphs == ("abc base",)
    assert result.occurrence_count == 1

    doc = make_doc("b.txt", "Base | abc one | skip me | abc two abc")
    result, _ = search_document(doc, "abc")
    assert result is not None
    assert result.found_paragraphs == ("Base abc one abc two abc",)
    assert result.occurrence_count == 3


def test_debug_records_trace_every_match(documents: list[Document]) -> None:
    _, records = search_documents(documents, ALL_IDS, "Python")

    assert [(r.file_name, r.paragraph_index) for r in records] == [
        ("notes.md", 0),
        ("notes.md", 2),
        ("recipes.txt", 1),
    ]
    piped = records[1]
    assert piped.term == "python"
    assert piped.original_paragraph == "Python notebooks | for data | with python kernels | and plots"
    assert piped.processed_paragraph == "Python notebooks with python kernels"
    assert piped.trace.sentences == (
        "Python notebooks",
        "for data",
        "with python kernels",
        "and plots",
    )


def test_document_without_match_is_omitted(documents: list[Document]) -> None:
    results, records = search_documents(documents, ["data-other.txt"], "python")
    assert results == []
    assert records == []


def test_search_document_totals_match_count_occurrences() -> None:
    doc = make_doc("c.txt", "abc ABC abc\nno match here\nabcabc line")

    result, _ = search_document(doc, "abc")

    assert result is not None
    expected = count_occurrences("abc ABC abc", "abc") + count_occurrences("abcabc line", "abc")
    assert result.occurrence_count == expected == 5


def test_search_document_with_blank_term_finds_nothing() -> None:
    doc = make_doc("c.txt", "abc line one\nabc line two\nabc line three")
    assert search_document(doc, "   ") == (None, [])
