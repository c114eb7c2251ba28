"""Overlay search-term matches onto styled spans."""

import re
from collections.abc import Iterable

from lexical_search.core.format.inline import parse_formatting
from lexical_search.models.span import HighlightedSpan, StyledSpan


def highlight(spans: Iterable[StyledSpan], term: str) -> list[HighlightedSpan]:
    """Split spans at every case-insensitive occurrence of term.

    Style flags are copied to every piece; matched pieces keep the casing of
    the source text. A blank term marks nothing.
    """
    needle = term.strip()
    if not needle:
        return [HighlightedSpan.from_styled(span) for span in spans]

    # Capturing group: odd indices of re.split are the matches.
    pattern = re.compile(f"({re.escape(needle)})", re.IGNORECASE)
    result: list[HighlightedSpan] = []
    for span in spans:
        for i, part in enumerate(pattern.split(span.text)):
            if part:
                result.append(HighlightedSpan.from_styled(span, text=part, matched=i % 2 == 1))
    return result


def format_paragraph(text: str, term: str) -> list[HighlightedSpan]:
    """Parse inline formatting of a paragraph and highlight term in it."""
    return highlight(parse_formatting(text), term)
