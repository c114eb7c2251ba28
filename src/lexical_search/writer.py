"""DOCX export sink for rendered search results."""

import re
from pathlib import Path

import docx
from docx.document import Document as DocxDocument
from docx.enum.text import WD_COLOR_INDEX
from docx.shared import Pt
from docx.text.paragraph import Paragraph as DocxParagraph
from loguru import logger

from lexical_search.models.span import ExportEntry, ExportPayload, HighlightedSpan

CODE_FONT = "Courier New"
DOCX_SUFFIX = ".docx"

# Control characters XML 1.0 forbids; tab, LF and CR are allowed.
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


class DocxWriter:
    """Write export payloads as .docx files into an output directory.

    - Never overwrite an existing file: names get -1, -2, ... appended.
    - In dry-run mode, build nothing on disk and only log what would happen.
    """

    def __init__(self, outdir: str | Path, *, dry_run: bool = False) -> None:
        self.outdir = str(Path(outdir).resolve())
        self.dry_run = dry_run

        if not dry_run and not Path(self.outdir).is_dir():
            msg = f"Output directory {self.outdir!r} not found"
            raise ValueError(msg)

        logger.debug("Writer ready, outdir {!r}, dry_run {!r}", self.outdir, dry_run)
        # Names handed out before, so two exports in one session never collide.
        self._unique_names: set[str] = set()
        self.written: list[Path] = []

    def make_unique_name(self, base: str, *, suffix: str = DOCX_SUFFIX) -> str:
        """Generate a unique file name.

        Append numbers to "base" until (base + suffix) matches neither an
        existing file nor any previous result of this function.
        """
        unique_str = ""
        unique_count = 0
        while True:
            fname = str((Path(self.outdir) / (base + unique_str + suffix)).resolve())
            if not fname.startswith(self.outdir + "/"):
                msg = f"Path escapes outdir: {fname!r}"
                raise ValueError(msg)
            if fname not in self._unique_names and not Path(fname).exists():
                break
            unique_count += 1
            unique_str = f"-{unique_count}"

        self._unique_names.add(fname)
        return base + unique_str + suffix

    def write(self, payload: ExportPayload, basename: str) -> Path | None:
        """Serialize payload to <outdir>/<basename>.docx.

        Returns:
            Path of the written file, or None in dry-run mode.
        """
        fname = str(Path(self.outdir) / self.make_unique_name(basename))
        if self.dry_run:
            logger.info("dry-run: would write {!r} ({} entries)", fname, len(payload.entries))
            return None

        document = build_docx(payload)
        document.save(fname)
        self.written.append(Path(fname))
        logger.info("Wrote {} entries to {}", len(payload.entries), fname)
        return Path(fname)


def _xml_safe(text: str) -> str:
    """Drop characters python-docx refuses to store, such as form feeds."""
    return _XML_ILLEGAL.sub("", text)


def _add_run(paragraph: DocxParagraph, span: HighlightedSpan) -> None:
    run = paragraph.add_run(_xml_safe(span.text))
    run.bold = span.bold or None
    run.italic = span.italic or None
    if span.strikethrough:
        run.font.strike = True
    if span.code:
        run.font.name = CODE_FONT
    if span.matched:
        run.font.highlight_color = WD_COLOR_INDEX.YELLOW


def _add_entry(document: DocxDocument, entry: ExportEntry) -> None:
    paragraph = document.add_paragraph()
    paragraph.paragraph_format.space_after = Pt(10)
    for span in entry.spans:
        _add_run(paragraph, span)


def build_docx(payload: ExportPayload) -> DocxDocument:
    """Lay out a payload as a python-docx Document (not saved)."""
    document = docx.Document()
    document.add_heading(_xml_safe(payload.title), level=0)
    document.add_paragraph(f"Generated on: {payload.generated_on.isoformat()}")

    for section in payload.sections:
        document.add_heading(_xml_safe(f"File: {section.summary.file_name}"), level=1)
        document.add_paragraph(_xml_safe(section.summary.line))
        for entry in section.entries:
            _add_entry(document, entry)

    return document
