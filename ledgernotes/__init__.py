"""
ledgernotes - Multi-mode notes with a tabular ledger.

Notes, diaries, tasks and theses are rich text; ledgers are dynamic tables
with per-column totals. Everything exports to Markdown, HTML and Word.
"""

from .core import Notebook
from .types import LedgerData, LedgerRow, Note, NoteMode

try:
    from importlib.metadata import version

    __version__ = version("ledgernotes")
except Exception:
    __version__ = "0.0.0"

__all__ = ["LedgerData", "LedgerRow", "Note", "NoteMode", "Notebook"]
