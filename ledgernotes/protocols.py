"""
ledgernotes Protocol Definitions
================================

The interface contracts between the editing core and its collaborators.

Components and their roles:
- NoteStore:        Durable copy of every note. Source of truth on (re)load.
- RichTextSurface:  The externally-owned rich-text widget. A black box that
                    displays HTML and reports user edits.
- CancellableTimer: The only source of time-based suspension. Drives the
                    auto-save debounce.

Error handling philosophy:
- Invalid arguments raise ValueError
- Ledger engine index errors raise IndexError (programming errors)
- Storage failures raise StorageError (backend-specific subclass)
- Malformed ledger payloads raise LedgerDecodeError where a caller asked to
  decode strictly; migration recovers instead of raising
- Restore failures raise RestoreError before anything is written
"""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol, runtime_checkable

from ledgernotes.types import Note

# =============================================================================
# ERRORS
# =============================================================================


class LedgerNotesError(Exception):
    """Base for all ledgernotes errors."""

    pass


class StorageError(LedgerNotesError):
    """Raised by store implementations on storage failures."""

    pass


class NoteNotFoundError(LedgerNotesError, KeyError):
    """Raised when a note id does not exist in the store."""

    def __init__(self, note_id: int):
        self.note_id = note_id
        super().__init__(f"Note not found: {note_id}")

    def __str__(self) -> str:
        return f"Note not found: {self.note_id}"


class LedgerDecodeError(LedgerNotesError, ValueError):
    """Raised when ledger content cannot be decoded into LedgerData."""

    pass


class RestoreError(LedgerNotesError):
    """Raised when a backup cannot be restored. Nothing has been written."""

    pass


class ExportError(LedgerNotesError):
    """Raised when an export format fails to render or write."""

    def __init__(self, fmt: str, message: str):
        self.format = fmt
        super().__init__(f"{fmt} export failed: {message}")


# =============================================================================
# PERSISTENCE
# =============================================================================


@runtime_checkable
class NoteStore(Protocol):
    """Durable note storage.

    Implementations are explicitly constructed and injected; there is no
    module-level storage handle.
    """

    def get_all(self) -> List[Note]:
        """All notes, most recently updated first."""
        ...

    def get(self, note_id: int) -> Optional[Note]:
        """A single note, or None."""
        ...

    def add(self, note: Note) -> int:
        """Insert a note (its id is ignored) and return the new id."""
        ...

    def update(self, note: Note) -> None:
        """Overwrite an existing note. Raises NoteNotFoundError if missing."""
        ...

    def delete(self, note_id: int) -> None:
        """Remove a note. Missing ids are ignored."""
        ...

    def replace_all(self, notes: List[Note]) -> List[int]:
        """Atomically replace every note; ids are reassigned."""
        ...


# =============================================================================
# EDITING SURFACE
# =============================================================================


ChangeCallback = Callable[[str], None]


@runtime_checkable
class RichTextSurface(Protocol):
    """The externally-owned rich-text widget.

    ``render`` is a programmatic write and must not emit a change event.
    Change callbacks receive the current HTML after user-driven edits only.
    """

    def render(self, html: str) -> None: ...

    def on_change(self, callback: ChangeCallback) -> None: ...

    def enable(self) -> None: ...

    def disable(self) -> None: ...


# =============================================================================
# TIMERS
# =============================================================================


@runtime_checkable
class CancellableTimer(Protocol):
    """A single-shot, re-armable delayed action.

    Arming an armed timer replaces the previous deadline and callback.
    """

    @property
    def armed(self) -> bool: ...

    def arm(self, delay: float, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...
