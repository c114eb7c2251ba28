"""Domain models for loaded documents, segmentation and search."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class Document:
    """A loaded source file. Never mutated by the pipeline."""

    id: str
    name: str
    content: str
    size: int
    kind: str = "text/plain"


@dataclass(frozen=True)
class Paragraph:
    """One searchable unit produced by the segmenter."""

    index: int
    text: str


@dataclass(frozen=True)
class SplitCandidate:
    """Summary of one candidate splitting strategy."""

    key: str
    name: str
    paragraph_count: int
    avg_length: int
    sample: tuple[str, ...] = ()


@dataclass(frozen=True)
class SegmentationReport:
    """Why a document was split the way it was."""

    original_length: int
    normalized_length: int
    has_carriage_returns: bool
    has_windows_line_endings: bool
    double_newline_count: int
    single_newline_count: int
    chosen: str
    candidates: tuple[SplitCandidate, ...]
    decided_by: str = "default"

    @property
    def chosen_candidate(self) -> SplitCandidate:
        return next(c for c in self.candidates if c.key == self.chosen)


@dataclass(frozen=True)
class SearchResult:
    """Matched paragraphs of one document."""

    document_id: str
    file_name: str
    found_paragraphs: tuple[str, ...]
    total_paragraphs: int
    occurrence_count: int


SentenceAction = Literal["base", "match", "skip"]


@dataclass(frozen=True)
class SentenceDecision:
    """Whether a pipe-delimited clause survived restructuring."""

    text: str
    action: SentenceAction

    def __str__(self) -> str:
        return f"[{self.action.upper()}] {self.text}"


@dataclass(frozen=True)
class RestructureTrace:
    """Step-by-step record of restructuring one paragraph."""

    contains_separator: bool
    piece_count: int
    sentences: tuple[str, ...] = ()
    decisions: tuple[SentenceDecision, ...] = ()
    final_paragraph: str = ""


@dataclass(frozen=True)
class MatchDebugRecord:
    """Diagnostic trace for a matched paragraph."""

    file_name: str
    paragraph_index: int
    original_paragraph: str
    processed_paragraph: str
    term: str
    trace: RestructureTrace
