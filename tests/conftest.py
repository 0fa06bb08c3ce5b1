"""
Pytest fixtures and test configuration for ledgernotes tests.
"""

import logging
from datetime import datetime, timezone
from typing import List

import pytest

from ledgernotes.core.autosave import ManualTimer
from ledgernotes.core.notebook import Notebook
from ledgernotes.core.surface import HeadlessSurface
from ledgernotes.storage.memory import InMemoryNoteStore
from ledgernotes.storage.sqlite import SQLiteNoteStore
from ledgernotes.types import LedgerData, LedgerRow, Note, NoteMode
from ledgernotes.utils import Settings

TODAY = "2024-05-01"


class RecordingStore(InMemoryNoteStore):
    """In-memory store that records every update and can be told to fail."""

    def __init__(self, notes=None):
        super().__init__(notes)
        self.updates: List[Note] = []
        self.fail_next = 0

    def update(self, note: Note) -> None:
        if self.fail_next:
            self.fail_next -= 1
            raise OSError("disk full")
        self.updates.append(note.copy())
        super().update(note)


@pytest.fixture(autouse=True)
def data_home(tmp_path, monkeypatch):
    """Point the data home at a temp dir and clear config env overrides."""
    home = tmp_path / "home"
    monkeypatch.setenv("LEDGERNOTES_DATA_DIR", str(home))
    monkeypatch.delenv("LEDGERNOTES_DB", raising=False)
    monkeypatch.delenv("LEDGERNOTES_DEBOUNCE_MS", raising=False)
    monkeypatch.delenv("LEDGERNOTES_LOG_LEVEL", raising=False)
    return home


@pytest.fixture(autouse=True)
def clean_ledgernotes_logger():
    """Remove handlers added by setup_ledgernotes_logging between tests."""
    logger = logging.getLogger("ledgernotes")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def today():
    return lambda: TODAY


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def sqlite_store(tmp_path):
    return SQLiteNoteStore(tmp_path / "notes.db")


@pytest.fixture
def surface():
    return HeadlessSurface()


@pytest.fixture
def timer():
    return ManualTimer()


@pytest.fixture
def settings(tmp_path):
    return Settings(debounce_ms=1000, export_dir=tmp_path / "exports")


@pytest.fixture
def notebook(store, settings):
    return Notebook(store=store, settings=settings)


def _make_note(**overrides) -> Note:
    """Create a realistic Note for testing."""
    stamp = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    defaults = dict(
        id=None,
        title="Test note",
        content="<p>Hello</p>",
        tags=[],
        mode=NoteMode.NOTE,
        created_at=stamp,
        updated_at=stamp,
    )
    defaults.update(overrides)
    return Note(**defaults)


def _make_ledger(headers, rows, sums) -> LedgerData:
    return LedgerData(
        headers=list(headers),
        rows=[LedgerRow(id=f"r{i}", data=list(r)) for i, r in enumerate(rows)],
        sum_column_indices=list(sums),
    )


@pytest.fixture
def make_note():
    return _make_note


@pytest.fixture
def make_ledger():
    return _make_ledger
