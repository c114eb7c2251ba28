"""Shared test fixtures."""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from lexical_search.models.document import Document
from tests.unit.fakes import make_doc

NOTES_MD = """\
Python is great for scripting
Rust is fast and safe
Python notebooks | for data | with python kernels | and plots
Nothing relevant here
"""

RECIPES_TXT = """\
Cooking recipes
A python cake recipe
"""

EMPTY_HANDED_TXT = """\
Nothing to see
at all here
"""


@pytest.fixture
def documents() -> list[Document]:
    """Three small documents; only the first two mention python."""
    return [
        make_doc("notes.md", NOTES_MD),
        make_doc("recipes.txt", RECIPES_TXT),
        make_doc("other.txt", EMPTY_HANDED_TXT),
    ]


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A data directory holding the same three documents on disk."""
    source = tmp_path / "data"
    source.mkdir()
    (source / "notes.md").write_text(NOTES_MD, encoding="utf-8")
    (source / "recipes.txt").write_text(RECIPES_TXT, encoding="utf-8")
    (source / "other.txt").write_text(EMPTY_HANDED_TXT, encoding="utf-8")
    return source


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Point loguru back at the real stderr after each test."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="INFO")
