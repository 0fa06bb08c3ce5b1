"""Note export: Markdown, HTML and Word documents from one model."""

from ledgernotes.export.builder import build_document, ledger_table
from ledgernotes.export.document import render_docx
from ledgernotes.export.ir import (
    DocumentModel,
    LedgerTable,
    Paragraph,
    Placeholder,
    Run,
    TotalLine,
)
from ledgernotes.export.markup import render_html, render_html_page
from ledgernotes.export.rich_html import html_to_text, parse_blocks, rgb_to_hex, word_count
from ledgernotes.export.text import render_markdown
from ledgernotes.export.writer import (
    FORMATS,
    ExportResult,
    export_all,
    export_path,
    write_export,
)

__all__ = [
    "DocumentModel",
    "ExportResult",
    "FORMATS",
    "LedgerTable",
    "Paragraph",
    "Placeholder",
    "Run",
    "TotalLine",
    "build_document",
    "export_all",
    "export_path",
    "html_to_text",
    "ledger_table",
    "parse_blocks",
    "render_docx",
    "render_html",
    "render_html_page",
    "render_markdown",
    "rgb_to_hex",
    "word_count",
    "write_export",
]
