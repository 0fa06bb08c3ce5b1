"""Ledger mode: numeric coercion, legacy migration and the table engine."""

from .coercion import format_amount, format_plain_number, parse_number, parse_number_or_none
from .engine import DATE_HEADERS, LedgerEngine, compute_totals
from .migration import (
    DEFAULT_HEADERS,
    DEFAULT_SUM_COLUMNS,
    MigrationResult,
    decode_ledger,
    default_ledger_data,
    migrate_ledger,
    serialize_ledger,
)

__all__ = [
    "DATE_HEADERS",
    "DEFAULT_HEADERS",
    "DEFAULT_SUM_COLUMNS",
    "LedgerEngine",
    "MigrationResult",
    "compute_totals",
    "decode_ledger",
    "default_ledger_data",
    "format_amount",
    "format_plain_number",
    "migrate_ledger",
    "parse_number",
    "parse_number_or_none",
    "serialize_ledger",
]
