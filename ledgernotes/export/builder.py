"""Build the export DocumentModel from a note.

Building reads a snapshot of the note and never mutates it.
"""

import logging

from ledgernotes.export.ir import (
    PLACEHOLDER_EMPTY,
    PLACEHOLDER_INVALID,
    DocumentModel,
    LedgerTable,
    Placeholder,
    TotalLine,
)
from ledgernotes.export.rich_html import parse_blocks
from ledgernotes.ledger.coercion import format_amount
from ledgernotes.ledger.engine import compute_totals
from ledgernotes.ledger.migration import decode_ledger
from ledgernotes.protocols import LedgerDecodeError
from ledgernotes.types import LedgerData, Note, NoteMode

logger = logging.getLogger(__name__)


def ledger_table(data: LedgerData) -> LedgerTable:
    """Project LedgerData into the export table, totals included."""
    totals = [
        TotalLine(
            index=index,
            header=data.headers[index],
            amount=amount,
            value=format_amount(amount),
        )
        for index, amount in compute_totals(data)
    ]
    return LedgerTable(
        headers=list(data.headers),
        rows=[list(row.data) for row in data.rows],
        sum_columns=list(data.sum_column_indices),
        totals=totals,
    )


def build_document(note: Note) -> DocumentModel:
    """Convert a note into the shared export representation."""
    doc = DocumentModel(
        title=note.title,
        mode=note.mode.value,
        tags=list(note.tags),
        is_ledger=note.mode is NoteMode.LEDGER,
    )

    if note.mode is not NoteMode.LEDGER:
        doc.source_html = note.content or ""
        doc.blocks = list(parse_blocks(note.content))
        return doc

    try:
        data = decode_ledger(note.content)
    except LedgerDecodeError as e:
        logger.warning(f"Exporting note {note.id} with unreadable ledger: {e}")
        doc.blocks = [Placeholder(PLACEHOLDER_INVALID)]
        return doc

    if data is None or not data.headers:
        doc.blocks = [Placeholder(PLACEHOLDER_EMPTY)]
    else:
        doc.blocks = [ledger_table(data)]
    return doc
