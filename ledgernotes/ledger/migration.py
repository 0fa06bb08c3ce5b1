"""Ledger payload decoding and migration.

Ledger notes have been stored in three shapes over time:

1. A list of items ``{description|label, quantity, price, operation}``
2. A dynamic table with a single ``sumColumnIndex``
3. The current dynamic table with ``sumColumnIndices``

``migrate_ledger`` turns any stored content into current LedgerData and
reports whether the note's content has to be rewritten. It never raises:
unreadable content falls back to the default schema.
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ledgernotes.ledger.coercion import format_plain_number, parse_number_or_none
from ledgernotes.protocols import LedgerDecodeError
from ledgernotes.types import LedgerData, LedgerRow, today_iso

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = ["Date", "Name", "Transport", "Work Result", "Notes"]
DEFAULT_SUM_COLUMNS = [2, 3]
LEGACY_HEADERS = ["Description", "Value"]

# Migration sources (reported in MigrationResult.source)
SOURCE_DEFAULT = "default"
SOURCE_CURRENT = "current"
SOURCE_SUM_COLUMN_INDEX = "sum_column_index"
SOURCE_ITEM_LIST = "item_list"
SOURCE_INVALID = "invalid"


@dataclass
class MigrationResult:
    """Outcome of migrating stored ledger content."""

    data: LedgerData
    rewrite: bool
    source: str


def new_row_id() -> str:
    return str(uuid.uuid4())


def default_ledger_data(today: Optional[str] = None) -> LedgerData:
    """The schema a fresh ledger starts with: one row dated today."""
    row = [today or today_iso()] + [""] * (len(DEFAULT_HEADERS) - 1)
    return LedgerData(
        headers=list(DEFAULT_HEADERS),
        rows=[LedgerRow(id=new_row_id(), data=row)],
        sum_column_indices=list(DEFAULT_SUM_COLUMNS),
    )


def serialize_ledger(data: LedgerData) -> str:
    """Compact JSON form stored in ``Note.content``."""
    return json.dumps(data.to_dict(), ensure_ascii=False, separators=(",", ":"))


def _legacy_items_to_ledger(items: List[Any]) -> LedgerData:
    stamp = int(time.time() * 1000)
    rows = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise LedgerDecodeError(f"Legacy ledger item {index} is not an object")
        quantity = parse_number_or_none(item.get("quantity"))
        price = parse_number_or_none(item.get("price"))
        quantity = 1.0 if quantity is None else quantity
        price = 0.0 if price is None else price
        sign = -1 if item.get("operation") == "-" else 1
        value = sign * quantity * price
        description = item.get("description") or item.get("label") or ""
        rows.append(
            LedgerRow(
                id=str(item.get("id") or f"{stamp}-{index}"),
                data=[str(description), format_plain_number(value)],
            )
        )
    return LedgerData(headers=list(LEGACY_HEADERS), rows=rows, sum_column_indices=[1])


def _cell_text(value: Any) -> str:
    """Text of a stored cell or header, written the way JSON spells scalars."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_plain_number(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _coerce_index(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _current_to_ledger(payload: Dict[str, Any]) -> Tuple[LedgerData, bool, str]:
    """Decode a headers/rows payload, repairing invariants.

    Returns (data, repaired, source).
    """
    headers = payload.get("headers")
    rows = payload.get("rows")
    if not isinstance(headers, list) or not isinstance(rows, list):
        raise LedgerDecodeError("Ledger headers and rows must be lists")

    repaired = False
    source = SOURCE_CURRENT
    width = len(headers)

    ledger_rows = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict) or not isinstance(row.get("data"), list):
            raise LedgerDecodeError(f"Ledger row {index} is malformed")
        cells = [_cell_text(cell) for cell in row["data"]]
        if any(not isinstance(cell, str) for cell in row["data"]):
            repaired = True
        if len(cells) != width:
            cells = (cells + [""] * width)[:width]
            repaired = True
        row_id = row.get("id")
        if not row_id:
            row_id = new_row_id()
            repaired = True
        elif not isinstance(row_id, str):
            repaired = True
        ledger_rows.append(LedgerRow(id=str(row_id), data=cells))

    if "sumColumnIndex" in payload:
        legacy_index = payload.get("sumColumnIndex")
        raw_indices = [] if legacy_index is None else [legacy_index]
        repaired = True
        source = SOURCE_SUM_COLUMN_INDEX
    else:
        raw_indices = payload.get("sumColumnIndices") or []
        if not isinstance(raw_indices, list):
            raise LedgerDecodeError("sumColumnIndices must be a list")

    sum_indices: List[int] = []
    for raw in raw_indices:
        index = _coerce_index(raw)
        if index is not None and type(raw) is not int:
            repaired = True
        if index is None or not 0 <= index < width or index in sum_indices:
            repaired = True
            continue
        sum_indices.append(index)

    if any(not isinstance(h, str) for h in headers):
        repaired = True
    data = LedgerData(
        headers=[_cell_text(h) for h in headers], rows=ledger_rows, sum_column_indices=sum_indices
    )
    return data, repaired, source


def _decode(content: Optional[str]) -> Optional[Tuple[LedgerData, bool, str]]:
    if content is None or not content.strip():
        return None
    try:
        payload = json.loads(content)
    except (TypeError, ValueError) as e:
        raise LedgerDecodeError(f"Ledger content is not valid JSON: {e}") from e

    if payload is None:
        return None
    if isinstance(payload, dict) and "headers" in payload and "rows" in payload:
        return _current_to_ledger(payload)
    if isinstance(payload, list):
        return _legacy_items_to_ledger(payload), True, SOURCE_ITEM_LIST
    raise LedgerDecodeError(f"Unrecognised ledger payload of type {type(payload).__name__}")


def decode_ledger(content: Optional[str]) -> Optional[LedgerData]:
    """Strictly decode ledger content.

    Returns None for empty content (or JSON ``null``). Legacy shapes are
    upgraded in the returned value only.

    Raises:
        LedgerDecodeError: If the content is malformed or of an unknown shape.
    """
    decoded = _decode(content)
    return decoded[0] if decoded else None


def migrate_ledger(
    content: Optional[str], today_fn: Callable[[], str] = today_iso
) -> MigrationResult:
    """Produce valid LedgerData from whatever a Ledger note stores.

    Idempotent: migrating the serialized result again yields equal data with
    ``rewrite=False``.
    """
    try:
        decoded = _decode(content)
    except LedgerDecodeError as e:
        logger.warning(f"Failed to parse ledger data, resetting to default: {e}")
        return MigrationResult(default_ledger_data(today_fn()), True, SOURCE_INVALID)

    if decoded is None:
        return MigrationResult(default_ledger_data(today_fn()), True, SOURCE_DEFAULT)

    data, rewrite, source = decoded
    return MigrationResult(data, rewrite, source)
