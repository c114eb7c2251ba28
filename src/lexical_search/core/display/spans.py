"""Render highlighted spans for the terminal or as markdown."""

import io
from collections.abc import Iterable

import typer

from lexical_search.models.span import HighlightedSpan

_HIGHLIGHT_MARK = "=="


def render_spans_for_terminal(spans: Iterable[HighlightedSpan]) -> str:
    """Render spans with ANSI styles; matches are black on yellow."""
    out = io.StringIO()
    for span in spans:
        fg = "cyan" if span.code else None
        bg = None
        if span.matched:
            fg, bg = "black", "yellow"
        out.write(
            typer.style(
                span.text,
                fg=fg,
                bg=bg,
                bold=span.bold or span.matched or None,
                italic=span.italic or None,
                strikethrough=span.strikethrough or None,
            )
        )
    return out.getvalue()


def render_spans_as_markdown(spans: Iterable[HighlightedSpan]) -> str:
    """Re-emit inline markers; matches are wrapped in ``==...==``.

    Each span is wrapped on its own, so a bold run split by a match comes
    out as several bold runs.
    """
    out = io.StringIO()
    for span in spans:
        text = span.text
        if span.matched:
            text = f"{_HIGHLIGHT_MARK}{text}{_HIGHLIGHT_MARK}"
        if span.code:
            text = f"`{text}`"
        if span.strikethrough:
            text = f"~~{text}~~"
        if span.italic:
            text = f"*{text}*"
        if span.bold:
            text = f"**{text}**"
        out.write(text)
    return out.getvalue()
