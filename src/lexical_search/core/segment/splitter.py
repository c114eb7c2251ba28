"""Split loosely structured text files into searchable paragraphs.

Source files mix conventions: some separate paragraphs with blank lines, most
put one entry per line, and a few carry markdown noise (headings, bullets,
fences, rules). No single delimiter works for all of them, so four candidate
splits are computed and an ordered list of rules picks one.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from lexical_search.config import DEFAULT_THRESHOLDS, SegmentationThresholds
from lexical_search.models.document import Paragraph, SegmentationReport, SplitCandidate

SINGLE_NEWLINE = "single-newline"
DOUBLE_NEWLINE = "double-newline"
MEANINGFUL_LINES = "meaningful-lines"
PARAGRAPH_BLOCKS = "paragraph-blocks"

STRATEGY_NAMES: dict[str, str] = {
    SINGLE_NEWLINE: "Single newline (\\n) - Standard",
    DOUBLE_NEWLINE: "Double newline (\\n\\n) - Spaced paragraphs",
    MEANINGFUL_LINES: "Meaningful lines (length > 10)",
    PARAGRAPH_BLOCKS: "Paragraph blocks (empty line separated)",
}

_NOISE_LINE_PATTERNS = (
    re.compile(r"^#+\s*$"),  # heading marker only
    re.compile(r"^[-*+]\s*$"),  # bullet only
    re.compile(r"^```\s*$"),  # code fence
    re.compile(r"^---+\s*$"),  # horizontal rule
)

_BLANK_LINE_RUN = re.compile(r"\n\s*\n")

_SAMPLE_SIZE = 3
_SAMPLE_WIDTH = 100


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _is_meaningful_line(line: str, min_length: int) -> bool:
    stripped = line.strip()
    if len(stripped) <= min_length:
        return False
    return not any(p.match(stripped) for p in _NOISE_LINE_PATTERNS)


def _split_candidates(text: str, th: SegmentationThresholds) -> dict[str, list[str]]:
    lines = text.split("\n")
    return {
        SINGLE_NEWLINE: [p for p in lines if len(p.strip()) >= th.short_line_min_length],
        DOUBLE_NEWLINE: [p for p in text.split("\n\n") if p.strip()],
        MEANINGFUL_LINES: [p for p in lines if _is_meaningful_line(p, th.meaningful_min_length)],
        PARAGRAPH_BLOCKS: [p for p in _BLANK_LINE_RUN.split(text) if p.strip()],
    }


# --- Strategy selection ---

Counts = dict[str, int]


@dataclass(frozen=True)
class SelectionRule:
    """Picks `strategy` when `applies(counts, thresholds)` is true."""

    name: str
    strategy: str
    applies: Callable[[Counts, SegmentationThresholds], bool]


@dataclass(frozen=True)
class SafetyOverride:
    """Replaces an implausible choice; `choose` returns None to keep it."""

    name: str
    choose: Callable[[Counts, str, int, SegmentationThresholds], str | None]


def _mostly_single_line_entries(c: Counts, th: SegmentationThresholds) -> bool:
    meaningful = c[MEANINGFUL_LINES]
    return (
        meaningful > th.meaningful_min_count
        and meaningful < c[SINGLE_NEWLINE] * th.meaningful_max_ratio
    )


def _more_lines_than_blocks(c: Counts, th: SegmentationThresholds) -> bool:
    return c[SINGLE_NEWLINE] > c[DOUBLE_NEWLINE] and c[SINGLE_NEWLINE] > th.line_min_count


def _spaced_paragraphs(c: Counts, th: SegmentationThresholds) -> bool:
    return c[DOUBLE_NEWLINE] > th.block_min_count


def _blank_line_blocks(c: Counts, _th: SegmentationThresholds) -> bool:
    return c[PARAGRAPH_BLOCKS] > c[DOUBLE_NEWLINE]


# Evaluated in order; first match wins.
SELECTION_RULES: tuple[SelectionRule, ...] = (
    SelectionRule("mostly-single-line-entries", MEANINGFUL_LINES, _mostly_single_line_entries),
    SelectionRule("more-lines-than-blocks", SINGLE_NEWLINE, _more_lines_than_blocks),
    SelectionRule("spaced-paragraphs", DOUBLE_NEWLINE, _spaced_paragraphs),
    SelectionRule("blank-line-blocks", PARAGRAPH_BLOCKS, _blank_line_blocks),
)


def _oversized(
    c: Counts, chosen: str, _text_length: int, th: SegmentationThresholds
) -> str | None:
    chosen_count = c[chosen]
    if chosen_count <= th.oversized_count:
        return None
    double = c[DOUBLE_NEWLINE]
    if 0 < double < chosen_count / th.oversized_double_divisor:
        return DOUBLE_NEWLINE
    meaningful = c[MEANINGFUL_LINES]
    if 0 < meaningful < chosen_count / th.oversized_meaningful_divisor:
        return MEANINGFUL_LINES
    return None


def _undersized(
    c: Counts, chosen: str, text_length: int, th: SegmentationThresholds
) -> str | None:
    chosen_count = c[chosen]
    if chosen_count >= th.undersized_count or text_length <= th.undersized_text_length:
        return None
    if c[SINGLE_NEWLINE] > chosen_count * th.undersized_growth_factor:
        return SINGLE_NEWLINE
    return None


# Applied in order to the running choice.
SAFETY_OVERRIDES: tuple[SafetyOverride, ...] = (
    SafetyOverride("oversized", _oversized),
    SafetyOverride("undersized", _undersized),
)


def choose_strategy(
    counts: Counts,
    text_length: int,
    thresholds: SegmentationThresholds = DEFAULT_THRESHOLDS,
) -> tuple[str, str]:
    """Pick a splitting strategy from candidate paragraph counts.

    Args:
        counts: Paragraph count per strategy key.
        text_length: Length of the normalized text.
        thresholds: Limits used by the rules and overrides.

    Returns:
        Tuple of (strategy key, name of the rule or override that decided).
    """
    chosen, decided_by = SINGLE_NEWLINE, "default"
    for rule in SELECTION_RULES:
        if rule.applies(counts, thresholds):
            chosen, decided_by = rule.strategy, rule.name
            break

    for override in SAFETY_OVERRIDES:
        replacement = override.choose(counts, chosen, text_length, thresholds)
        if replacement is not None:
            chosen, decided_by = replacement, override.name

    return chosen, decided_by


def _describe(key: str, paragraphs: list[str]) -> SplitCandidate:
    avg = round(sum(len(p) for p in paragraphs) / len(paragraphs)) if paragraphs else 0
    sample = tuple(
        p[:_SAMPLE_WIDTH] + ("..." if len(p) > _SAMPLE_WIDTH else "")
        for p in paragraphs[:_SAMPLE_SIZE]
    )
    return SplitCandidate(
        key=key,
        name=STRATEGY_NAMES[key],
        paragraph_count=len(paragraphs),
        avg_length=avg,
        sample=sample,
    )


def segment(
    text: str,
    thresholds: SegmentationThresholds | None = None,
) -> tuple[list[Paragraph], SegmentationReport]:
    """Split a document body into paragraphs.

    Args:
        text: Raw document content, any line-ending convention.
        thresholds: Override the default heuristic limits.

    Returns:
        Tuple of (paragraphs in source order, report on the decision).
    """
    th = thresholds or DEFAULT_THRESHOLDS
    normalized = normalize_line_endings(text)
    candidates = _split_candidates(normalized, th)
    counts = {key: len(paragraphs) for key, paragraphs in candidates.items()}

    chosen, decided_by = choose_strategy(counts, len(normalized), th)

    report = SegmentationReport(
        original_length=len(text),
        normalized_length=len(normalized),
        has_carriage_returns="\r" in text,
        has_windows_line_endings="\r\n" in text,
        double_newline_count=normalized.count("\n\n"),
        single_newline_count=normalized.count("\n"),
        chosen=chosen,
        candidates=tuple(_describe(key, paragraphs) for key, paragraphs in candidates.items()),
        decided_by=decided_by,
    )
    logger.debug(
        "Segmented {} chars into {} paragraphs via {} ({})",
        len(normalized), counts[chosen], chosen, decided_by,
    )
    paragraphs = [Paragraph(index=i, text=p) for i, p in enumerate(candidates[chosen])]
    return paragraphs, report


def count_paragraphs(text: str) -> int:
    """Return how many paragraphs `segment` would produce."""
    paragraphs, _ = segment(text)
    return len(paragraphs)
