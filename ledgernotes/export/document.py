"""Word-processor (.docx) export via python-docx."""

import logging

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import RGBColor

from ledgernotes.export.ir import (
    LIST_BULLET,
    PLACEHOLDER_EMPTY,
    DocumentModel,
    LedgerTable,
    Paragraph,
    Placeholder,
    Run,
)
from ledgernotes.ledger.coercion import format_amount, parse_number

logger = logging.getLogger(__name__)

PLACEHOLDER_DOCX = {
    PLACEHOLDER_EMPTY: "Empty ledger.",
}
INVALID_DOCX = "Error parsing ledger data."

ALIGNMENTS = {
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}
LIST_STYLES = {LIST_BULLET: "List Bullet"}
NUMBERED_STYLE = "List Number"
TABLE_STYLE = "Table Grid"


def _shade(run, fill: str) -> None:
    """Apply a background fill to a run (w:shd on the run properties)."""
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    run._r.get_or_add_rPr().append(shd)


def _mark_header_row(row) -> None:
    tr_pr = row._tr.get_or_add_trPr()
    header = OxmlElement("w:tblHeader")
    header.set(qn("w:val"), "true")
    tr_pr.append(header)


def _add_run(paragraph, run: Run) -> None:
    docx_run = paragraph.add_run(run.text)
    if run.bold:
        docx_run.bold = True
    if run.italic:
        docx_run.italic = True
    if run.underline:
        docx_run.underline = True
    if run.strike:
        docx_run.font.strike = True
    if run.color:
        docx_run.font.color.rgb = RGBColor.from_string(run.color)
    if run.highlight:
        _shade(docx_run, run.highlight)


def _write_cell(cell, text: str, bold: bool = False, right: bool = False) -> None:
    paragraph = cell.paragraphs[0]
    run = paragraph.add_run(text)
    if bold:
        run.bold = True
    if right:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.RIGHT


def add_ledger_table(document, table: LedgerTable):
    """Append the ledger as a grid table; returns the python-docx table."""
    width = len(table.headers)
    grid = document.add_table(rows=1, cols=width)
    grid.style = TABLE_STYLE

    header_row = grid.rows[0]
    _mark_header_row(header_row)
    for index, name in enumerate(table.headers):
        _write_cell(header_row.cells[index], name, bold=True)

    for row in table.rows:
        cells = grid.add_row().cells
        for index, value in enumerate(row):
            if table.is_sum_column(index):
                _write_cell(cells[index], format_amount(parse_number(value)), right=True)
            else:
                _write_cell(cells[index], value)

    for total in table.totals:
        cells = grid.add_row().cells
        if total.index == 0:
            _write_cell(cells[0], f"{total.label}: {total.value}", bold=True, right=True)
            continue
        _write_cell(cells[total.index - 1], total.label, bold=True, right=True)
        _write_cell(cells[total.index], total.value, bold=True, right=True)

    return grid


def add_paragraph(document, paragraph: Paragraph):
    if paragraph.heading:
        docx_paragraph = document.add_heading("", level=paragraph.heading)
    elif paragraph.list_style:
        style = LIST_STYLES.get(paragraph.list_style, NUMBERED_STYLE)
        docx_paragraph = document.add_paragraph(style=style)
    else:
        docx_paragraph = document.add_paragraph()

    for run in paragraph.runs:
        _add_run(docx_paragraph, run)
    if paragraph.alignment in ALIGNMENTS:
        docx_paragraph.alignment = ALIGNMENTS[paragraph.alignment]
    return docx_paragraph


def render_docx(doc: DocumentModel):
    """Lay the document model out as a python-docx ``Document``."""
    document = Document()
    document.add_heading(doc.title, level=0)

    meta = document.add_paragraph()
    meta.add_run("Mode: ").bold = True
    meta.add_run(doc.mode)
    tags = document.add_paragraph()
    tags.add_run("Tags: ").bold = True
    tags.add_run(", ".join(doc.tags))

    for block in doc.blocks:
        if isinstance(block, LedgerTable):
            add_ledger_table(document, block)
        elif isinstance(block, Placeholder):
            document.add_paragraph(PLACEHOLDER_DOCX.get(block.reason, INVALID_DOCX))
        elif isinstance(block, Paragraph):
            add_paragraph(document, block)
    return document
