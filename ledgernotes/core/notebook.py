"""The Notebook: main entry point for ledgernotes.

Wires storage, the content reconciler, auto-save, export and backup
together. Typical use::

    nb = Notebook()
    note = nb.create_note("Groceries", NoteMode.LEDGER)
    with nb.open(note.id) as session:
        session.ledger.set_cell(0, 1, "Milk")
    nb.export(note.id, "docx")
"""

import logging
from typing import Callable, Iterable, List, Optional, Union

from ledgernotes.core.autosave import AutoSaveScheduler, ManualTimer
from ledgernotes.core.reconciler import ContentReconciler, EditorState
from ledgernotes.core.serializers import SerializersMixin
from ledgernotes.core.surface import HeadlessSurface
from ledgernotes.core.validation import MAX_TITLE_LENGTH, sanitize_string, sanitize_tags
from ledgernotes.features.stats import StatsMixin
from ledgernotes.ledger.engine import LedgerEngine
from ledgernotes.protocols import CancellableTimer, NoteNotFoundError, NoteStore, RichTextSurface
from ledgernotes.storage.sqlite import SQLiteNoteStore
from ledgernotes.types import Note, NoteMode, today_iso, utc_now
from ledgernotes.utils import Settings, load_settings

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Note"


class EditingSession:
    """One open note: a reconciler feeding an auto-save scheduler.

    The scheduler subscribes to the reconciler, so every effective edit
    (surface typing, ledger mutation, title/tags/mode change) re-arms the
    debounce timer. Closing the session flushes any unsaved change.
    """

    def __init__(
        self,
        note: Note,
        store: NoteStore,
        surface: Optional[RichTextSurface] = None,
        timer: Optional[CancellableTimer] = None,
        debounce: float = 1.0,
        today_fn: Callable[[], str] = today_iso,
    ):
        self.surface = surface or HeadlessSurface()
        self.timer = timer or ManualTimer()
        self.reconciler = ContentReconciler(self.surface, today_fn=today_fn)
        self.scheduler = AutoSaveScheduler(store, self.timer, debounce=debounce)
        self.reconciler.subscribe(self.scheduler.observe)
        self._open(note)

    def _open(self, note: Note) -> None:
        # Baseline first so repairs made while loading are saved
        self.scheduler.reset(note)
        self.reconciler.load(note)

    @property
    def note(self) -> Note:
        return self.reconciler.note

    @property
    def state(self) -> EditorState:
        return self.reconciler.state

    @property
    def ledger(self) -> LedgerEngine:
        return self.reconciler.ledger

    def set_title(self, title: str) -> None:
        self.reconciler.set_title(title)

    def set_tags(self, tags: Union[str, Iterable[str], None]) -> None:
        self.reconciler.set_tags(tags)

    def set_mode(self, mode: Union[NoteMode, str]) -> None:
        self.reconciler.set_mode(mode)

    def set_content(self, html: str) -> None:
        self.reconciler.set_content(html)

    def switch(self, note: Note) -> None:
        """Save the current note if needed and open another one."""
        self.scheduler.flush()
        self._open(note)

    def flush(self) -> bool:
        return self.scheduler.flush()

    def close(self) -> None:
        if self.reconciler.is_open:
            self.scheduler.flush()
        self.scheduler.close()
        self.reconciler.close()

    def __enter__(self) -> "EditingSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Notebook(SerializersMixin, StatsMixin):
    """Main interface for notebook operations.

    Args:
        store: Note storage. Defaults to SQLite at the configured path.
        settings: Runtime settings. Defaults to ``load_settings()``.
    """

    def __init__(self, store: Optional[NoteStore] = None, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        if store is None:
            store = SQLiteNoteStore(self.settings.resolved_db_path())
        self._store = store
        logger.debug(f"Notebook initialized with storage: {type(self._store).__name__}")

    @property
    def store(self) -> NoteStore:
        return self._store

    def list_notes(self) -> List[Note]:
        """All notes, most recently updated first."""
        return self._store.get_all()

    def get_note(self, note_id: int) -> Note:
        note = self._store.get(note_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    def create_note(
        self,
        title: str = DEFAULT_TITLE,
        mode: Union[NoteMode, str] = NoteMode.NOTE,
        content: str = "",
        tags: Union[str, Iterable[str], None] = None,
    ) -> Note:
        """Create and store a new note.

        Ledger notes may start with empty content; the default ledger is
        created the first time the note is opened.
        """
        now = utc_now()
        note = Note(
            title=sanitize_string(title, "title", MAX_TITLE_LENGTH, required=False),
            content=content or "",
            tags=sanitize_tags(tags),
            mode=NoteMode.parse(mode),
            created_at=now,
            updated_at=now,
        )
        note.id = self._store.add(note)
        logger.info(f"Created note {note.id} ({note.mode.value})")
        return note

    def delete_note(self, note_id: int) -> None:
        self._store.delete(note_id)
        logger.info(f"Deleted note {note_id}")

    def open(
        self,
        note_id: int,
        surface: Optional[RichTextSurface] = None,
        timer: Optional[CancellableTimer] = None,
    ) -> EditingSession:
        """Open a note for editing.

        Without a timer the session uses a ManualTimer, so nothing is saved
        until ``flush()`` or ``close()``.
        """
        note = self.get_note(note_id)
        return EditingSession(
            note,
            self._store,
            surface=surface,
            timer=timer,
            debounce=self.settings.debounce_seconds,
        )
