"""Tokenize markdown-style inline formatting into styled spans."""

import re

from lexical_search.models.span import StyledSpan

# Bold must come before italic, otherwise **x** parses as two empty italics.
_INLINE_PATTERN = re.compile(r"\*\*.*?\*\*|\*.*?\*|`.*?`|~~.*?~~")


def _styled(token: str) -> StyledSpan:
    if len(token) >= 4 and token.startswith("**") and token.endswith("**"):
        return StyledSpan(token[2:-2], bold=True)
    if len(token) >= 4 and token.startswith("~~") and token.endswith("~~"):
        return StyledSpan(token[2:-2], strikethrough=True)
    if token.startswith("`"):
        return StyledSpan(token[1:-1], code=True)
    return StyledSpan(token[1:-1], italic=True)


def parse_formatting(text: str) -> list[StyledSpan]:
    """Split text into plain and formatted spans, stripping the markers.

    Recognizes **bold**, *italic*, `code` and ~~strikethrough~~. Markers
    without a partner on the same line stay in the text as literals.
    """
    spans: list[StyledSpan] = []
    last = 0
    for match in _INLINE_PATTERN.finditer(text):
        if match.start() > last:
            spans.append(StyledSpan(text[last : match.start()]))
        token = match.group()
        styled = _styled(token)
        # An empty pair such as "**" is kept as literal text.
        spans.append(styled if styled.text else StyledSpan(token))
        last = match.end()
    if last < len(text):
        spans.append(StyledSpan(text[last:]))
    return spans


def strip_formatting(text: str) -> str:
    """Return text with inline formatting markers removed."""
    return "".join(span.text for span in parse_formatting(text))
