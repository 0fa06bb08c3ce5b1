"""Ledger engine: row/column CRUD and per-column totals.

The engine mutates one LedgerData in place and keeps its invariants:

- every row has exactly one cell per header
- every flagged sum column is a valid header index
"""

import logging
from typing import Callable, List, Optional, Tuple

from ledgernotes.ledger.coercion import parse_number
from ledgernotes.ledger.migration import new_row_id, serialize_ledger
from ledgernotes.types import LedgerData, LedgerRow, today_iso

logger = logging.getLogger(__name__)

# Header names that mark column 0 as a date column (pre-filled on add_row)
DATE_HEADERS = frozenset({"date", "tgl", "tanggal", "day"})


def compute_totals(data: LedgerData) -> List[Tuple[int, float]]:
    """Sum every flagged column over all rows.

    Non-numeric and empty cells count as zero. Pairs are returned in the
    order the columns were flagged, not header order.
    """
    totals = []
    for index in data.sum_column_indices:
        total = sum(
            parse_number(row.data[index]) if index < len(row.data) else 0.0 for row in data.rows
        )
        totals.append((index, total))
    return totals


class LedgerEngine:
    """Owns a LedgerData and exposes its mutations.

    Args:
        data: The ledger to edit (mutated in place)
        on_change: Called with the ledger after every mutation
        today_fn: Returns today's date as YYYY-MM-DD
    """

    def __init__(
        self,
        data: LedgerData,
        on_change: Optional[Callable[[LedgerData], None]] = None,
        today_fn: Callable[[], str] = today_iso,
    ):
        self._data = data
        self._on_change = on_change
        self._today_fn = today_fn

    @property
    def data(self) -> LedgerData:
        return self._data

    @property
    def headers(self) -> List[str]:
        return self._data.headers

    @property
    def rows(self) -> List[LedgerRow]:
        return self._data.rows

    @property
    def sum_column_indices(self) -> List[int]:
        return self._data.sum_column_indices

    @property
    def row_count(self) -> int:
        return len(self._data.rows)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self._data)

    def _check_column(self, col_index: int) -> None:
        if not 0 <= col_index < len(self._data.headers):
            raise IndexError(
                f"Column index {col_index} out of range for {len(self._data.headers)} columns"
            )

    # === Cells and rows ===

    def set_cell(self, row_index: int, col_index: int, value: str) -> None:
        """Replace one cell's text."""
        if not 0 <= row_index < len(self._data.rows):
            raise IndexError(f"Row index {row_index} out of range for {self.row_count} rows")
        self._check_column(col_index)
        row = self._data.rows[row_index]
        if row.data[col_index] == value:
            return
        row.data[col_index] = value
        self._changed()

    def add_row(self) -> LedgerRow:
        """Append an empty row; a leading date column gets today's date."""
        cells = [""] * len(self._data.headers)
        if cells and self._data.headers[0].strip().lower() in DATE_HEADERS:
            cells[0] = self._today_fn()
        row = LedgerRow(id=new_row_id(), data=cells)
        self._data.rows.append(row)
        self._changed()
        return row

    def remove_row(self, row_id: str) -> bool:
        """Remove a row by identity. Returns False if no row has that id."""
        kept = [row for row in self._data.rows if row.id != row_id]
        if len(kept) == len(self._data.rows):
            return False
        self._data.rows = kept
        self._changed()
        return True

    # === Columns ===

    def add_column(self, name: str) -> int:
        """Append a column, extending every row with an empty cell.

        Returns:
            Index of the new column
        """
        self._data.headers.append(name)
        for row in self._data.rows:
            row.data.append("")
        self._changed()
        return len(self._data.headers) - 1

    def rename_column(self, col_index: int, name: str) -> None:
        self._check_column(col_index)
        if self._data.headers[col_index] == name:
            return
        self._data.headers[col_index] = name
        self._changed()

    def remove_column(self, col_index: int) -> None:
        """Remove a column and re-index the flagged sum columns."""
        self._check_column(col_index)
        del self._data.headers[col_index]
        for row in self._data.rows:
            del row.data[col_index]
        self._data.sum_column_indices = [
            i - 1 if i > col_index else i
            for i in self._data.sum_column_indices
            if i != col_index
        ]
        self._changed()

    def toggle_sum_column(self, col_index: int) -> bool:
        """Flag or unflag a column for aggregation.

        Returns:
            True if the column is flagged after the toggle
        """
        self._check_column(col_index)
        indices = self._data.sum_column_indices
        if col_index in indices:
            self._data.sum_column_indices = [i for i in indices if i != col_index]
            flagged = False
        else:
            indices.append(col_index)
            flagged = True
        self._changed()
        return flagged

    # === Reading ===

    def totals(self) -> List[Tuple[int, float]]:
        return compute_totals(self._data)

    def to_json(self) -> str:
        return serialize_ledger(self._data)

    def to_dict(self) -> dict:
        return self._data.to_dict()
