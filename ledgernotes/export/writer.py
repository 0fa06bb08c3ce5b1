"""Write exports to disk.

Each format is produced from the same DocumentModel. ``export_all`` runs
every format independently: one failing format is logged and reported in
the result while the others are still written.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from ledgernotes.export.builder import build_document
from ledgernotes.export.document import render_docx
from ledgernotes.export.ir import DocumentModel
from ledgernotes.export.markup import render_html_page
from ledgernotes.export.text import render_markdown
from ledgernotes.logging_config import log_export
from ledgernotes.protocols import ExportError
from ledgernotes.types import Note
from ledgernotes.utils import sanitize_filename

logger = logging.getLogger(__name__)

FORMAT_MARKDOWN = "md"
FORMAT_HTML = "html"
FORMAT_DOCX = "docx"
FORMATS = (FORMAT_MARKDOWN, FORMAT_HTML, FORMAT_DOCX)


@dataclass
class ExportResult:
    """Outcome of a multi-format export."""

    written: Dict[str, Path] = field(default_factory=dict)
    errors: Dict[str, ExportError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def export_path(title: str, fmt: str, out_dir: Union[str, Path]) -> Path:
    return Path(out_dir) / f"{sanitize_filename(title)}.{fmt}"


def _write(doc: DocumentModel, fmt: str, path: Path) -> None:
    if fmt == FORMAT_MARKDOWN:
        path.write_text(render_markdown(doc), encoding="utf-8")
    elif fmt == FORMAT_HTML:
        path.write_text(render_html_page(doc), encoding="utf-8")
    else:
        render_docx(doc).save(str(path))


def write_export(
    note: Note,
    fmt: str,
    out_dir: Union[str, Path],
    doc: Optional[DocumentModel] = None,
) -> Path:
    """Render ``note`` in one format and write it under ``out_dir``.

    Raises:
        ValueError: If the format is unknown.
        ExportError: If rendering or writing fails.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format: {fmt} (expected one of {', '.join(FORMATS)})")

    doc = doc or build_document(note)
    path = export_path(note.title, fmt, out_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _write(doc, fmt, path)
    except Exception as e:
        log_export(note.id, fmt, path, success=False)
        raise ExportError(fmt, str(e)) from e

    log_export(note.id, fmt, path)
    return path


def export_all(
    note: Note,
    out_dir: Union[str, Path],
    formats: Iterable[str] = FORMATS,
) -> ExportResult:
    """Write every requested format; failures do not block the others."""
    doc = build_document(note)
    result = ExportResult()
    for fmt in formats:
        try:
            result.written[fmt] = write_export(note, fmt, out_dir, doc=doc)
        except ExportError as e:
            logger.error(f"Export of note {note.id} as {fmt} failed: {e}", exc_info=True)
            result.errors[fmt] = e
    return result
