"""Styled HTML export.

``render_html`` produces the note body (a ledger table or the note's rich
markup); ``render_html_page`` wraps it in a printable A4 page that can be
handed to any HTML-to-PDF converter.
"""

from html import escape
from typing import List

from ledgernotes.export.ir import (
    PLACEHOLDER_EMPTY,
    DocumentModel,
    LedgerTable,
    Paragraph,
    Placeholder,
)
from ledgernotes.ledger.coercion import format_amount, parse_number

CELL_STYLE = "padding: 8px; border: 1px solid #ddd;"
HEADER_STYLE = f"{CELL_STYLE} text-align: left; background-color: #f2f2f2;"
RIGHT_STYLE = f"{CELL_STYLE} text-align: right;"
TABLE_STYLE = "width: 100%; border-collapse: collapse; font-family: sans-serif;"

PLACEHOLDER_HTML = {
    PLACEHOLDER_EMPTY: "<p>Empty ledger.</p>",
}
INVALID_HTML = "<p>Error parsing ledger data.</p>"


def _colspan(span: int) -> str:
    return f' colspan="{span}"' if span > 1 else ""


def _total_row(table: LedgerTable, index: int, label: str, value: str) -> str:
    """One <tfoot> row: label spans the columns left of the total.

    colspan arithmetic: ``index`` columns before the value cell and
    ``len(headers) - index - 1`` after it; empty spans are omitted.
    """
    cells: List[str] = []
    if index > 0:
        cells.append(f'<th{_colspan(index)} style="{RIGHT_STYLE}">{escape(label)}</th>')
        cells.append(f'<th style="{RIGHT_STYLE}">{escape(value)}</th>')
    else:
        cells.append(f'<th style="{RIGHT_STYLE}">{escape(label)}: {escape(value)}</th>')
    trailing = len(table.headers) - index - 1
    if trailing > 0:
        cells.append(f'<th{_colspan(trailing)} style="{CELL_STYLE}"></th>')
    return "<tr>" + "".join(cells) + "</tr>"


def ledger_html(table: LedgerTable) -> str:
    header_html = "".join(f'<th style="{HEADER_STYLE}">{escape(h)}</th>' for h in table.headers)

    body_rows = []
    for row in table.rows:
        cells = []
        for index, cell in enumerate(row):
            if table.is_sum_column(index):
                text = format_amount(parse_number(cell))
                cells.append(f'<td style="{RIGHT_STYLE}">{escape(text)}</td>')
            else:
                cells.append(f'<td style="{CELL_STYLE}">{escape(cell)}</td>')
        body_rows.append("<tr>" + "".join(cells) + "</tr>")

    total_rows = [_total_row(table, t.index, t.label, t.value) for t in table.totals]

    return (
        f'<table style="{TABLE_STYLE}">'
        f"<thead><tr>{header_html}</tr></thead>"
        f"<tbody>{''.join(body_rows)}</tbody>"
        f"<tfoot>{''.join(total_rows)}</tfoot>"
        "</table>"
    )


def render_html(doc: DocumentModel) -> str:
    """HTML body of the note."""
    if not doc.is_ledger:
        return doc.source_html

    parts = []
    for block in doc.blocks:
        if isinstance(block, LedgerTable):
            parts.append(ledger_html(block))
        elif isinstance(block, Placeholder):
            parts.append(PLACEHOLDER_HTML.get(block.reason, INVALID_HTML))
        elif isinstance(block, Paragraph):
            parts.append(f"<p>{escape(block.text)}</p>")
    return "".join(parts)


def render_html_page(doc: DocumentModel) -> str:
    """Standalone printable page: title, mode/tags block, then the body."""
    title = escape(doc.title)
    meta = (
        f"<strong>Mode:</strong> {escape(doc.mode)}<br/>"
        f"<strong>Tags:</strong> {escape(', '.join(doc.tags))}"
    )
    return (
        "<!DOCTYPE html>\n"
        '<html><head><meta charset="utf-8">'
        f"<title>{title}</title>"
        "<style>@page { size: A4; margin: 0; } "
        "body { width: 210mm; padding: 20mm; font-family: Arial, sans-serif; "
        "box-sizing: border-box; }</style>"
        "</head><body>"
        f"<h1>{title}</h1>"
        f'<div style="font-size: 12px; color: #555; margin-bottom: 20px;">{meta}</div>'
        f"<div>{render_html(doc)}</div>"
        "</body></html>\n"
    )
