"""Note storage backends."""

from ledgernotes.storage.memory import InMemoryNoteStore
from ledgernotes.storage.schema import SCHEMA_VERSION
from ledgernotes.storage.sqlite import SQLiteNoteStore

__all__ = ["InMemoryNoteStore", "SCHEMA_VERSION", "SQLiteNoteStore"]
