"""In-memory note storage, for tests and throwaway sessions."""

from typing import Dict, List, Optional

from ledgernotes.protocols import NoteNotFoundError
from ledgernotes.types import Note, utc_now


class InMemoryNoteStore:
    """NoteStore kept in a dict. Notes are copied in and out."""

    def __init__(self, notes: Optional[List[Note]] = None):
        self._notes: Dict[int, Note] = {}
        self._next_id = 1
        for note in notes or []:
            self.add(note)

    def _insert(self, note: Note) -> int:
        stored = note.copy()
        stored.id = self._next_id
        self._next_id += 1
        stored.created_at = stored.created_at or utc_now()
        stored.updated_at = stored.updated_at or stored.created_at
        self._notes[stored.id] = stored
        return stored.id

    def get_all(self) -> List[Note]:
        notes = sorted(
            self._notes.values(), key=lambda n: (n.updated_at, n.id), reverse=True
        )
        return [n.copy() for n in notes]

    def get(self, note_id: int) -> Optional[Note]:
        note = self._notes.get(note_id)
        return note.copy() if note else None

    def add(self, note: Note) -> int:
        return self._insert(note)

    def update(self, note: Note) -> None:
        if note.id not in self._notes:
            raise NoteNotFoundError(note.id)
        stored = note.copy()
        stored.created_at = stored.created_at or self._notes[note.id].created_at
        stored.updated_at = stored.updated_at or utc_now()
        self._notes[note.id] = stored

    def delete(self, note_id: int) -> None:
        self._notes.pop(note_id, None)

    def replace_all(self, notes: List[Note]) -> List[int]:
        self._notes = {}
        return [self._insert(note) for note in notes]
