"""Load text and markdown files from a data directory into Documents."""

from collections.abc import Iterable, Sequence
from pathlib import Path

from loguru import logger

from lexical_search.config import INDEX_FILENAME, SUPPORTED_SUFFIXES
from lexical_search.models.document import Document

_INDEX_HEADER = """\
# Files available for lexical search
# Lines starting with # are comments and are ignored
# One file per line

"""


def _kind_for(path: Path) -> str:
    return "text/markdown" if path.suffix == ".md" else "text/plain"


def load_file(path: Path) -> Document:
    """Read a single file as a Document.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    content = path.read_text(encoding="utf-8")
    return Document(
        id=f"data-{path.name}",
        name=path.name,
        content=content,
        size=len(content.encode("utf-8")),
        kind=_kind_for(path),
    )


def read_index_file(index_path: Path) -> list[str]:
    """Parse an index file into the list of file names it names."""
    names: list[str] = []
    for line in index_path.read_text(encoding="utf-8").split("\n"):
        name = line.strip()
        if not name or name.startswith("#"):
            continue
        if name.endswith(SUPPORTED_SUFFIXES):
            names.append(name)
    return names


def list_supported_files(data_dir: Path) -> list[str]:
    """Names of all supported files in data_dir, ignoring the index file."""
    return [
        p.name
        for p in sorted(data_dir.iterdir())
        if p.is_file() and p.suffix in SUPPORTED_SUFFIXES and p.name != INDEX_FILENAME
    ]


def discover_files(data_dir: Path) -> list[str]:
    """List loadable file names in data_dir.

    Uses the index file when present, otherwise every supported file.
    """
    index_path = data_dir / INDEX_FILENAME
    if index_path.is_file():
        names = read_index_file(index_path)
        if names:
            logger.debug("Using {} ({} files)", index_path, len(names))
            return names

    return list_supported_files(data_dir)


def load_data_dir(data_dir: Path) -> list[Document]:
    """Load all available documents from data_dir.

    Files that are missing or unreadable are skipped with a warning.

    Args:
        data_dir: Directory with .md/.txt files and an optional index file.

    Returns:
        Loaded documents in discovery order.
    """
    if not data_dir.is_dir():
        msg = f"Data directory not found: {data_dir}"
        raise FileNotFoundError(msg)

    names = discover_files(data_dir)
    documents: list[Document] = []
    for name in names:
        try:
            documents.append(load_file(data_dir / name))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping {}: {}", name, e)
            continue

    logger.info("Loaded {} of {} files from {}", len(documents), len(names), data_dir)
    return documents


def resolve_selection(documents: Sequence[Document], names: Iterable[str]) -> list[str]:
    """Map file names or ids to document ids, dropping unknown names."""
    by_key: dict[str, str] = {}
    for doc in documents:
        by_key[doc.id] = doc.id
        by_key[doc.name] = doc.id

    selected: list[str] = []
    for name in names:
        doc_id = by_key.get(name)
        if doc_id is None:
            logger.warning("Unknown file: {}", name)
            continue
        if doc_id not in selected:
            selected.append(doc_id)
    return selected


def generate_index_content(filenames: Iterable[str]) -> str:
    """Build the body of an index file listing filenames."""
    return _INDEX_HEADER + "\n".join(filenames) + "\n"
