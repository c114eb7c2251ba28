"""Configuration constants for lexical-search."""

from dataclasses import dataclass
from pathlib import Path

# Directory with source documents. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("data"),
    Path("~/.local/share/lexical-search").expanduser(),
    Path("~/.config/lexical-search").expanduser(),
]

# Optional listing of the files to load, one name per line.
INDEX_FILENAME: str = "index.txt"

# Only these suffixes are picked up from the data directory.
SUPPORTED_SUFFIXES: tuple[str, ...] = (".md", ".txt")

# Where exports land when no --output-dir is given.
DEFAULT_EXPORT_DIR: Path = Path(".")

# Environment variable read by the MCP server to locate documents.
DATA_DIR_ENV: str = "LEXICAL_SEARCH_DATA_DIR"


@dataclass(frozen=True)
class SegmentationThresholds:
    """Empirical limits used when choosing a paragraph splitting strategy.

    The defaults were tuned by hand on real note collections; tighten them
    only against a corpus that shows a better split.
    """

    # Candidate filters
    short_line_min_length: int = 3
    meaningful_min_length: int = 10

    # Selection rules
    meaningful_min_count: int = 5
    meaningful_max_ratio: float = 0.8
    line_min_count: int = 3
    block_min_count: int = 3

    # Safety overrides
    oversized_count: int = 500
    oversized_double_divisor: int = 5
    oversized_meaningful_divisor: int = 3
    undersized_count: int = 5
    undersized_text_length: int = 1000
    undersized_growth_factor: int = 2


DEFAULT_THRESHOLDS = SegmentationThresholds()


def resolve_data_directory() -> Path:
    """Return the first existing data directory, or the first candidate."""
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
