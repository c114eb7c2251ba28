"""MCP server exposing lexical search and export tools."""

import os
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from lexical_search.config import DATA_DIR_ENV, DEFAULT_EXPORT_DIR, resolve_data_directory
from lexical_search.core.display.spans import render_spans_as_markdown
from lexical_search.core.export.renderer import export_results
from lexical_search.core.format.highlight import format_paragraph
from lexical_search.core.importer.loader import load_data_dir, resolve_selection
from lexical_search.core.search.searcher import search_documents
from lexical_search.core.segment.splitter import count_paragraphs
from lexical_search.models.document import Document
from lexical_search.writer import DocxWriter


def _selection(documents: Sequence[Document], files: list[str] | None) -> list[str]:
    if files:
        return resolve_selection(documents, files)
    return [d.id for d in documents]


# --- Core functions (testable without MCP context) ---


def lexical_search(
    documents: Sequence[Document],
    *,
    term: str = "",
    files: list[str] | None = None,
    limit: int = 20,
    include_debug: bool = False,
) -> dict[str, Any]:
    """Search loaded files for a literal, case-insensitive term.

    Matched paragraphs are returned as markdown with matches wrapped in
    ``==...==``. Pipe-delimited paragraphs only keep the first clause and
    the clauses mentioning the term.

    Args:
        term: Literal search text.
        files: Restrict to these file names or ids.
        limit: Max paragraphs returned per file (1-200, default 20).
        include_debug: Include restructuring traces.
    """
    if not term.strip():
        return {"error": "No search term provided.", "results": [], "count": 0}

    limit = max(1, min(limit, 200))
    selected = _selection(documents, files)
    if files and not selected:
        return {"error": f"No known files among {files!r}.", "results": [], "count": 0}

    results, debug_records = search_documents(documents, selected, term)

    serialized = []
    for r in results:
        shown = r.found_paragraphs[:limit]
        serialized.append(
            {
                "file": r.file_name,
                "paragraphs": [render_spans_as_markdown(format_paragraph(p, term)) for p in shown],
                "paragraph_count": len(r.found_paragraphs),
                "total_paragraphs": r.total_paragraphs,
                "occurrences": r.occurrence_count,
                "has_more": len(shown) < len(r.found_paragraphs),
            }
        )

    output: dict[str, Any] = {
        "results": serialized,
        "count": len(serialized),
        "total_paragraphs": sum(len(r.found_paragraphs) for r in results),
        "total_occurrences": sum(r.occurrence_count for r in results),
    }
    if include_debug:
        output["debug"] = [
            {
                "file": d.file_name,
                "paragraph_index": d.paragraph_index,
                "original": d.original_paragraph,
                "processed": d.processed_paragraph,
                "sentences": [str(s) for s in d.trace.decisions],
            }
            for d in debug_records
        ]
    return output


def lexical_list_files(documents: Sequence[Document]) -> dict[str, Any]:
    """List loaded files with sizes and paragraph counts."""
    return {
        "files": [
            {
                "id": d.id,
                "name": d.name,
                "kind": d.kind,
                "size": d.size,
                "paragraphs": count_paragraphs(d.content),
            }
            for d in documents
        ],
        "count": len(documents),
    }


def lexical_export(
    documents: Sequence[Document],
    *,
    term: str,
    output_dir: Path,
    files: list[str] | None = None,
) -> dict[str, Any]:
    """Search and write the results to a .docx file in output_dir.

    Args:
        term: Literal search text.
        output_dir: Existing directory to write into.
        files: Restrict to these file names or ids.
    """
    if not term.strip():
        return {"error": "No search term provided."}

    results, _ = search_documents(documents, _selection(documents, files), term)
    if not results:
        return {"error": f'No results found for "{term}".'}

    try:
        writer = DocxWriter(output_dir)
        path = export_results(results, term, writer)
    except (OSError, ValueError) as e:
        logger.warning("Export failed: {}", e)
        return {"error": f"Export failed: {e}"}

    return {
        "path": str(path),
        "files": len(results),
        "paragraphs": sum(len(r.found_paragraphs) for r in results),
    }


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    documents: list[Document]
    data_dir: Path


def _resolve_data_dir() -> Path:
    data_dir_env = os.environ.get(DATA_DIR_ENV)
    return Path(data_dir_env) if data_dir_env else resolve_data_directory()


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Load all documents once on startup."""
    data_dir = _resolve_data_dir()
    try:
        documents = load_data_dir(data_dir)
    except FileNotFoundError:
        logger.warning("Data directory {} not found, serving no files", data_dir)
        documents = []
    yield ServerContext(documents=documents, data_dir=data_dir)


mcp_server = FastMCP(
    "lexical-search",
    instructions="""\
Literal (exact substring, case-insensitive) search over a collection of text
and markdown files. There is no fuzzy matching, stemming or ranking: search
for the exact word or phrase you expect to appear in the text.

1. Call lexical_list_files_tool to see which files are loaded.
2. Call lexical_search_tool with a term; restrict with `files` when useful.
3. Call lexical_export_tool to produce a .docx with numbered, highlighted results.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def lexical_search_tool(
    ctx: Context,
    term: str,
    files: list[str] | None = None,
    limit: int = 20,
    include_debug: bool = False,
) -> dict[str, Any]:
    """Search loaded files for a literal, case-insensitive term.

    Args:
        term: Literal search text.
        files: Restrict to these file names or ids.
        limit: Max paragraphs per file (1-200, default 20).
        include_debug: Include restructuring traces.
    """
    return lexical_search(
        _ctx(ctx).documents,
        term=term,
        files=files,
        limit=limit,
        include_debug=include_debug,
    )


@mcp_server.tool()
async def lexical_list_files_tool(ctx: Context) -> dict[str, Any]:
    """List loaded files with sizes and paragraph counts."""
    return lexical_list_files(_ctx(ctx).documents)


@mcp_server.tool()
async def lexical_export_tool(
    ctx: Context,
    term: str,
    output_dir: str | None = None,
    files: list[str] | None = None,
) -> dict[str, Any]:
    """Export search results for a term to a .docx file.

    Args:
        term: Literal search text.
        output_dir: Directory to write into (default: current directory).
        files: Restrict to these file names or ids.
    """
    return lexical_export(
        _ctx(ctx).documents,
        term=term,
        output_dir=Path(output_dir) if output_dir else DEFAULT_EXPORT_DIR,
        files=files,
    )


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from lexical_search.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
