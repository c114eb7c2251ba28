"""CLI for lexical search over local text collections."""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from lexical_search.config import DEFAULT_EXPORT_DIR, INDEX_FILENAME, resolve_data_directory
from lexical_search.core.display.spans import render_spans_as_markdown, render_spans_for_terminal
from lexical_search.core.export.renderer import export_results
from lexical_search.core.format.highlight import format_paragraph
from lexical_search.core.importer.loader import (
    generate_index_content,
    list_supported_files,
    load_data_dir,
    load_file,
    resolve_selection,
)
from lexical_search.core.search.searcher import search_documents
from lexical_search.core.segment.splitter import count_paragraphs, segment
from lexical_search.logging_config import configure_logging
from lexical_search.models.document import Document, MatchDebugRecord, SearchResult
from lexical_search.writer import DocxWriter

app = typer.Typer(help="Literal search over text and markdown files, with DOCX export.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Directory with .md/.txt files"),
]
FileOption = Annotated[
    list[str] | None,
    typer.Option("--file", "-f", help="Restrict to a file (name or id); repeatable"),
]


class _LoggingObserver:
    """Reports per-document progress through the logger."""

    def on_document_searched(self, document: Document, result: SearchResult | None) -> None:
        if result is None:
            logger.debug("{}: no matches", document.name)
        else:
            logger.debug("{}: {} paragraphs", document.name, len(result.found_paragraphs))

    def on_document_skipped(self, document_id: str, reason: str) -> None:
        logger.warning("Skipped {}: {}", document_id, reason)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    configure_logging(verbose=verbose, quiet=quiet)


def _load(data_dir: Path | None) -> list[Document]:
    """Load documents, exiting with an error if the directory is missing."""
    src = data_dir or resolve_data_directory()
    try:
        return load_data_dir(src)
    except FileNotFoundError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e


def _run_search(
    documents: list[Document], files: list[str] | None, term: str
) -> tuple[list[SearchResult], list[MatchDebugRecord]]:
    selected = resolve_selection(documents, files) if files else [d.id for d in documents]
    return search_documents(documents, selected, term, observer=_LoggingObserver())


def _result_to_json(result: SearchResult, term: str, limit: int | None) -> dict[str, Any]:
    paragraphs = result.found_paragraphs[:limit] if limit is not None else result.found_paragraphs
    return {
        "file": result.file_name,
        "paragraphs": [render_spans_as_markdown(format_paragraph(p, term)) for p in paragraphs],
        "paragraph_count": len(result.found_paragraphs),
        "total_paragraphs": result.total_paragraphs,
        "occurrences": result.occurrence_count,
    }


def _debug_to_json(record: MatchDebugRecord) -> dict[str, Any]:
    return {
        "file": record.file_name,
        "paragraph_index": record.paragraph_index,
        "original": record.original_paragraph,
        "processed": record.processed_paragraph,
        "sentences": [str(d) for d in record.trace.decisions],
    }


@app.command()
def files(data_dir: DataDirOption = None) -> None:
    """List loadable documents with their paragraph counts."""
    documents = _load(data_dir)
    typer.echo(f"{len(documents)} files:\n")
    for doc in documents:
        typer.echo(
            f"  {doc.name} ({doc.kind}, {doc.size} bytes) - "
            f"{count_paragraphs(doc.content)} paragraphs  [id={doc.id}]"
        )


@app.command()
def search(
    term: str = typer.Argument(..., help="Literal search term (case-insensitive)"),
    data_dir: DataDirOption = None,
    file: FileOption = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Max paragraphs shown per file"),
    ] = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    debug: bool = typer.Option(False, "--debug", help="Include restructuring traces"),
) -> None:
    """Search documents for a literal term."""
    documents = _load(data_dir)
    results, debug_records = _run_search(documents, file, term)

    if output_json:
        data: dict[str, Any] = {
            "term": term,
            "results": [_result_to_json(r, term, limit) for r in results],
            "total_paragraphs": sum(len(r.found_paragraphs) for r in results),
            "total_occurrences": sum(r.occurrence_count for r in results),
        }
        if debug:
            data["debug"] = [_debug_to_json(d) for d in debug_records]
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    if not results:
        typer.echo(f'No results found for "{term}"')
        return

    total = sum(len(r.found_paragraphs) for r in results)
    typer.echo(f"Found {total} paragraphs in {len(results)} files:\n")
    for r in results:
        typer.echo(
            typer.style(r.file_name, bold=True)
            + f"  {len(r.found_paragraphs)} paragraph(s), {r.occurrence_count} occurrence(s)"
        )
        paragraphs = r.found_paragraphs[:limit] if limit is not None else r.found_paragraphs
        for paragraph in paragraphs:
            typer.echo("  " + render_spans_for_terminal(format_paragraph(paragraph, term)))
        if len(paragraphs) < len(r.found_paragraphs):
            typer.echo(f"  ... ({len(r.found_paragraphs) - len(paragraphs)} more)")
        typer.echo()

    if debug:
        for record in debug_records:
            typer.echo(f"[{record.file_name} #{record.paragraph_index}]")
            for decision in record.trace.decisions:
                typer.echo(f"    {decision}")


@app.command(name="segment")
def segment_cmd(
    path: Path = typer.Argument(..., help="File to analyse"),
    show: int = typer.Option(0, "--show", "-s", help="Print the first N paragraphs"),
) -> None:
    """Show how a file is split into paragraphs."""
    try:
        document = load_file(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Cannot read {}: {}", path, e)
        raise typer.Exit(1) from e

    paragraphs, report = segment(document.content)
    typer.echo(f"{document.name}: {report.original_length} chars")
    typer.echo(
        f"  line endings: CR={report.has_carriage_returns} CRLF={report.has_windows_line_endings}"
        f"  \\n={report.single_newline_count}  \\n\\n={report.double_newline_count}"
    )
    for candidate in report.candidates:
        marker = "*" if candidate.key == report.chosen else " "
        typer.echo(
            f"  {marker} {candidate.name}: {candidate.paragraph_count} paragraphs, "
            f"avg {candidate.avg_length} chars"
        )
    typer.echo(f"Chosen: {report.chosen_candidate.name} (by {report.decided_by})")
    for paragraph in paragraphs[:show]:
        typer.echo(f"  [{paragraph.index}] {paragraph.text[:100]}")


@app.command()
def export(
    term: str = typer.Argument(..., help="Literal search term"),
    data_dir: DataDirOption = None,
    file: FileOption = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Where to write the .docx"),
    ] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write anything"),
) -> None:
    """Search and export the results to a DOCX document."""
    documents = _load(data_dir)
    results, _ = _run_search(documents, file, term)
    if not results:
        typer.echo(f'No results found for "{term}", nothing to export.')
        raise typer.Exit(1)

    try:
        writer = DocxWriter(output_dir or DEFAULT_EXPORT_DIR, dry_run=dry_run)
        path = export_results(results, term, writer)
    except (OSError, ValueError) as e:
        logger.error("Export failed: {}", e)
        raise typer.Exit(1) from e

    if path is not None:
        typer.echo(f"Exported to {path}")


@app.command()
def index(
    data_dir: DataDirOption = None,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing index"),
) -> None:
    """Write an index file listing the files in the data directory."""
    src = data_dir or resolve_data_directory()
    if not src.is_dir():
        logger.error("Data directory not found: {}", src)
        raise typer.Exit(1)

    index_path = src / INDEX_FILENAME
    if index_path.exists() and not force:
        logger.error("{} already exists, use --force to overwrite", index_path)
        raise typer.Exit(1)

    names = list_supported_files(src)
    index_path.write_text(generate_index_content(names), encoding="utf-8")
    typer.echo(f"Wrote {index_path} ({len(names)} files)")


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from lexical_search.mcp.server import run_mcp_server

    run_mcp_server()
