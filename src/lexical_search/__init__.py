"""Literal search, paragraph segmentation and formatted export for text files."""

from lexical_search.core.export.renderer import build_export, export_results, render
from lexical_search.core.format.highlight import format_paragraph, highlight
from lexical_search.core.format.inline import parse_formatting
from lexical_search.core.search.searcher import search_documents
from lexical_search.core.segment.splitter import segment
from lexical_search.protocols import ExportSinkProtocol, SearchObserver
from lexical_search.writer import DocxWriter

__all__ = [
    "DocxWriter",
    "ExportSinkProtocol",
    "SearchObserver",
    "build_export",
    "export_results",
    "format_paragraph",
    "highlight",
    "parse_formatting",
    "render",
    "search_documents",
    "segment",
]
