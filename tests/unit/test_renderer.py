"""Tests for export numbering, payload assembly and sink hand-off."""

from datetime import date

import pytest

from lexical_search.core.export.renderer import (
    build_export,
    export_basename,
    export_results,
    render,
    summarize,
)
from lexical_search.models.document import SearchResult
from tests.unit.fakes import FakeSink


def _result(name: str, paragraphs: list[str], occurrences: int) -> SearchResult:
    return SearchResult(
        document_id=f"data-{name}",
        file_name=name,
        found_paragraphs=tuple(paragraphs),
        total_paragraphs=10,
        occurrence_count=occurrences,
    )


@pytest.fixture
def results() -> list[SearchResult]:
    return [
        _result("a.md", ["first abc", "second **abc**"], 2),
        _result("b.md", ["third ABC"], 1),
    ]


def test_numbering_is_global_across_files(results: list[SearchResult]) -> None:
    entries = render(results, "abc")

    assert [e.prefix for e in entries] == ["01. ", "02. ", "03. "]
    assert [e.document_name for e in entries] == ["a.md", "a.md", "b.md"]
    assert [e.spans[0].text for e in entries] == ["01. ", "02. ", "03. "]
    assert all(e.spans[0].bold and not e.spans[0].matched for e in entries)


def test_entries_carry_highlighted_spans(results: list[SearchResult]) -> None:
    second = render(results, "abc")[1]
    assert second.text == "02. second abc"
    matched = [s for s in second.spans if s.matched]
    assert len(matched) == 1
    assert matched[0].bold is True


def test_numbers_past_99_are_not_repadded() -> None:
    many = [_result("big.md", [f"line {i} abc" for i in range(101)], 101)]
    entries = render(many, "abc")
    assert entries[8].prefix == "09. "
    assert entries[99].prefix == "100. "
    assert entries[100].prefix == "101. "


def test_empty_results_render_nothing() -> None:
    assert render([], "abc") == []


def test_build_export_groups_entries_per_file(results: list[SearchResult]) -> None:
    payload = build_export(results, "abc", generated_on=date(2024, 5, 1))

    assert payload.title == 'Search Results for "abc"'
    assert payload.generated_on == date(2024, 5, 1)
    assert [s.summary.file_name for s in payload.sections] == ["a.md", "b.md"]
    assert payload.sections[0].summary.line == "Found 2 paragraphs with 2 occurrences"
    assert [e.sequence for e in payload.entries] == [1, 2, 3]


def test_summarize_counts_paragraphs_and_occurrences(results: list[SearchResult]) -> None:
    summaries = summarize(results)
    assert [(s.paragraph_count, s.occurrence_count) for s in summaries] == [(2, 2), (1, 1)]


def test_export_basename_strips_non_alphanumerics() -> None:
    assert export_basename("foo bar!", date(2024, 5, 1)) == "search_results_foobar_2024-05-01"
    assert export_basename("Ação-42", date(2024, 5, 1)) == "search_results_Ao42_2024-05-01"


def test_export_results_hands_payload_to_sink(results: list[SearchResult]) -> None:
    sink = FakeSink()

    path = export_results(results, "a b", sink, generated_on=date(2024, 5, 1))

    assert len(sink.writes) == 1
    payload, basename = sink.writes[0]
    assert basename == "search_results_ab_2024-05-01"
    assert len(payload.entries) == 3
    assert str(path) == "/fake/search_results_ab_2024-05-01.docx"


def test_sink_failures_propagate(results: list[SearchResult]) -> None:
    sink = FakeSink(fail_with=OSError("disk full"))
    with pytest.raises(OSError, match="disk full"):
        export_results(results, "abc", sink)
