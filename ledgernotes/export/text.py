"""Markdown / structured plain-text export."""

from typing import List

from ledgernotes.export.ir import (
    PLACEHOLDER_EMPTY,
    DocumentModel,
    LedgerTable,
    Paragraph,
    Placeholder,
)
from ledgernotes.export.rich_html import html_to_text

PLACEHOLDER_TEXT = {
    PLACEHOLDER_EMPTY: "Empty ledger.",
}
INVALID_TEXT = "Could not parse ledger data."


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\r", " ").replace("\n", " ")


def _row(cells: List[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def ledger_markdown(table: LedgerTable) -> str:
    """Pipe table with one bold total row per flagged column.

    The total label sits in the first column and the value in the
    aggregated column; a total for column 0 shares the first cell.
    """
    if not table.headers:
        return PLACEHOLDER_TEXT[PLACEHOLDER_EMPTY]

    width = len(table.headers)
    lines = [
        _row([_cell(h) for h in table.headers]),
        "|" + "".join("---:|" if table.is_sum_column(i) else "---|" for i in range(width)),
    ]
    lines.extend(_row([_cell(c) for c in row]) for row in table.rows)

    for total in table.totals:
        cells = [""] * width
        if total.index == 0:
            cells[0] = f"**{_cell(total.label)}: {total.value}**"
        else:
            cells[0] = f"**{_cell(total.label)}**"
            cells[total.index] = f"**{total.value}**"
        lines.append(_row(cells))
    return "\n".join(lines)


def _body(doc: DocumentModel) -> str:
    if not doc.is_ledger:
        return html_to_text(doc.source_html)

    parts = []
    for block in doc.blocks:
        if isinstance(block, LedgerTable):
            parts.append(ledger_markdown(block))
        elif isinstance(block, Placeholder):
            parts.append(PLACEHOLDER_TEXT.get(block.reason, INVALID_TEXT))
        elif isinstance(block, Paragraph):
            parts.append(block.text)
    return "\n\n".join(parts)


def render_markdown(doc: DocumentModel) -> str:
    """Header block (title, mode, tags) followed by the note body."""
    header = (
        f"# {doc.title}\n\n"
        f"**Mode:** {doc.mode}\n"
        f"**Tags:** {', '.join(doc.tags)}\n\n"
        "---\n\n"
    )
    return header + _body(doc)
