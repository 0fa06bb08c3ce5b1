"""Content reconciliation between the rich-text surface and the open note.

The reconciler keeps exactly one authoritative working copy of the open note.
Depending on the note's mode, either the rich-text surface or a LedgerEngine
is the live editing representation; the other one is inactive.

State machine::

    CLOSED --load()--> LOADING --+--> RICH_EDITING   (non-Ledger modes)
                                 +--> LEDGER_EDITING (Ledger mode)

    RICH_EDITING <--set_mode()--> LEDGER_EDITING

Mode transitions are deliberately lossy: entering Ledger starts from the
default schema, leaving Ledger starts from a blank document.
"""

import json
import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional, Union

from ledgernotes.core.validation import MAX_TITLE_LENGTH, sanitize_string, sanitize_tags
from ledgernotes.export.rich_html import word_count
from ledgernotes.ledger.engine import LedgerEngine
from ledgernotes.ledger.migration import default_ledger_data, migrate_ledger, serialize_ledger
from ledgernotes.logging_config import log_load, log_migration
from ledgernotes.protocols import LedgerNotesError, RichTextSurface
from ledgernotes.types import LedgerData, Note, NoteMode, today_iso

logger = logging.getLogger(__name__)

# What the rich-text widget reports for an empty document
EMPTY_DOCUMENT = "<p><br></p>"

NoteListener = Callable[[Note], None]


class EditorState(str, Enum):
    CLOSED = "closed"
    LOADING = "loading"
    RICH_EDITING = "rich_editing"
    LEDGER_EDITING = "ledger_editing"


def looks_like_json_object(content: str) -> bool:
    """True if rich content is actually a JSON object (a mis-encoded ledger)."""
    if not content or not content.strip().startswith("{"):
        return False
    try:
        json.loads(content)
    except ValueError:
        return False
    return True


class ContentReconciler:
    """Owns the working copy of the open note.

    Args:
        surface: The rich-text widget (any RichTextSurface)
        today_fn: Returns today's date for default ledgers and new rows
    """

    def __init__(self, surface: RichTextSurface, today_fn: Callable[[], str] = today_iso):
        self._surface = surface
        self._today_fn = today_fn
        self._note: Optional[Note] = None
        self._ledger: Optional[LedgerEngine] = None
        self._state = EditorState.CLOSED
        self._listeners: List[NoteListener] = []
        surface.on_change(self._on_surface_change)

    # === Accessors ===

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def note(self) -> Note:
        """The working copy. Mutate it only through the reconciler."""
        return self._require_note()

    @property
    def ledger(self) -> LedgerEngine:
        """The live ledger engine; only available in LEDGER_EDITING."""
        if self._ledger is None or self._state is not EditorState.LEDGER_EDITING:
            raise LedgerNotesError("The open note is not in Ledger mode")
        return self._ledger

    @property
    def is_open(self) -> bool:
        return self._note is not None

    @property
    def word_count(self) -> int:
        note = self._require_note()
        if note.mode is NoteMode.LEDGER:
            return 0
        return word_count(note.content)

    def subscribe(self, listener: NoteListener) -> None:
        """Register a callback invoked with the working note after each mutation."""
        self._listeners.append(listener)

    def _require_note(self) -> Note:
        if self._note is None:
            raise LedgerNotesError("No note is open")
        return self._note

    def _notify(self) -> None:
        note = self._require_note()
        for listener in list(self._listeners):
            listener(note)

    # === Lifecycle ===

    def load(self, note: Note) -> Note:
        """Open a note for editing and return the working copy.

        Ledger notes are migrated synchronously; rich notes whose content is a
        JSON object are treated as corrupt and cleared. Either repair counts as
        a mutation and is reported to subscribers.
        """
        self._state = EditorState.LOADING
        working = note.copy()
        self._note = working
        self._ledger = None
        repaired = False

        if working.mode is NoteMode.LEDGER:
            result = migrate_ledger(working.content, self._today_fn)
            log_migration(working.id, result.source, result.rewrite)
            if result.rewrite:
                working.content = serialize_ledger(result.data)
                repaired = True
            self._enter_ledger(result.data)
        else:
            if looks_like_json_object(working.content):
                logger.warning(f"Note {working.id} holds JSON in {working.mode.value} mode, clearing")
                working.content = ""
                repaired = True
            self._enter_rich()

        log_load(working.id, working.mode.value, self._state.value)
        if repaired:
            self._notify()
        return working

    def close(self) -> None:
        self._note = None
        self._ledger = None
        self._state = EditorState.CLOSED
        self._surface.disable()

    def _enter_ledger(self, data: LedgerData) -> None:
        # Changes are attributed to the engine that made them
        def on_change(changed: LedgerData) -> None:
            self._on_ledger_change(engine, changed)

        engine = LedgerEngine(data, on_change=on_change, today_fn=self._today_fn)
        self._ledger = engine
        self._surface.disable()
        self._state = EditorState.LEDGER_EDITING

    def _enter_rich(self) -> None:
        self._ledger = None
        self._surface.render(self._require_note().content)
        self._surface.enable()
        self._state = EditorState.RICH_EDITING

    # === Mutations ===

    def set_title(self, title: str) -> None:
        note = self._require_note()
        title = sanitize_string(title, "title", MAX_TITLE_LENGTH, required=False)
        if title == note.title:
            return
        note.title = title
        self._notify()

    def set_tags(self, tags: Union[str, Iterable[str], None]) -> None:
        """Replace the tags from a list or a comma-separated string."""
        note = self._require_note()
        cleaned = sanitize_tags(tags)
        if cleaned == note.tags:
            return
        note.tags = cleaned
        self._notify()

    def set_mode(self, mode: Union[NoteMode, str]) -> None:
        """Switch the open note's mode.

        Entering Ledger derives a fresh default ledger; leaving Ledger starts
        a blank rich document. Switching between rich modes keeps the content.
        """
        note = self._require_note()
        new_mode = NoteMode.parse(mode)
        if new_mode is note.mode:
            return
        previous = note.mode
        note.mode = new_mode

        if new_mode is NoteMode.LEDGER:
            data = default_ledger_data(self._today_fn())
            note.content = serialize_ledger(data)
            self._enter_ledger(data)
        elif previous is NoteMode.LEDGER:
            note.content = ""
            self._enter_rich()

        logger.debug(f"Note {note.id} mode {previous.value} -> {new_mode.value}")
        self._notify()

    def set_content(self, html: str) -> None:
        """Replace rich content programmatically and mirror it on the surface."""
        self._require_note()
        if self._state is not EditorState.RICH_EDITING:
            raise LedgerNotesError("Rich content cannot be edited in Ledger mode")
        self._on_surface_change(html)
        self._surface.render(self._require_note().content)

    def _on_surface_change(self, html: str) -> None:
        if self._note is None or self._state is not EditorState.RICH_EDITING:
            logger.debug(f"Ignoring surface change in state {self._state.value}")
            return
        content = "" if html == EMPTY_DOCUMENT else html
        if content == self._note.content:
            return
        self._note.content = content
        self._notify()

    def _on_ledger_change(self, engine: LedgerEngine, data: LedgerData) -> None:
        if engine is not self._ledger or self._state is not EditorState.LEDGER_EDITING:
            logger.warning("Ignoring change from a ledger that is no longer open")
            return
        note = self._require_note()
        content = serialize_ledger(data)
        if content == note.content:
            return
        note.content = content
        self._notify()
