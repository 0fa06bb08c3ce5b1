"""Debounced auto-save.

The scheduler watches the working note and writes it to the store once the
user has been quiet for the debounce window, and only when the note differs
from the last persisted baseline in content, title, mode or tags.

The baseline is keyed by note id: switching notes resets it and drops any
pending save, so a stale snapshot can never land on the wrong note.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from ledgernotes.logging_config import log_save
from ledgernotes.protocols import CancellableTimer, NoteStore
from ledgernotes.types import TRACKED_FIELDS, Note, note_differs, utc_now

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0


# =============================================================================
# TIMERS
# =============================================================================


class ManualTimer:
    """Timer driven by an explicit clock.

    Time only moves when ``advance`` is called, which makes debounce
    behaviour deterministic. The CLI uses it without ever advancing and
    flushes explicitly.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._deadline: Optional[float] = None
        self._callback: Optional[Callable[[], None]] = None

    @property
    def armed(self) -> bool:
        return self._deadline is not None

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def arm(self, delay: float, callback: Callable[[], None]) -> None:
        self._deadline = self.now + delay
        self._callback = callback

    def cancel(self) -> None:
        self._deadline = None
        self._callback = None

    def advance(self, seconds: float) -> bool:
        """Move the clock forward, firing the callback if its deadline passes.

        Returns:
            True if the callback fired
        """
        self.now += seconds
        if self._deadline is None or self.now < self._deadline:
            return False
        callback = self._callback
        self.cancel()
        if callback is not None:
            callback()
        return True


class LoopTimer:
    """Timer on an asyncio event loop (single-threaded, via ``call_later``)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def armed(self) -> bool:
        return self._handle is not None and not self._handle.cancelled()

    def arm(self, delay: float, callback: Callable[[], None]) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()

        def _fire() -> None:
            self._handle = None
            callback()

        self._handle = loop.call_later(delay, _fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


# =============================================================================
# SCHEDULER
# =============================================================================


def changed_fields(current: Note, baseline: Note) -> List[str]:
    return [name for name in TRACKED_FIELDS if getattr(current, name) != getattr(baseline, name)]


class AutoSaveScheduler:
    """Debounces edits and persists the open note.

    Args:
        store: Persistence collaborator (its ``update`` is called)
        timer: Cancellable timer driving the debounce window
        debounce: Quiescence period in seconds
        now_fn: Clock used to stamp ``updated_at``
    """

    def __init__(
        self,
        store: NoteStore,
        timer: CancellableTimer,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        now_fn: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._timer = timer
        self._debounce = debounce
        self._now_fn = now_fn
        self._baseline: Optional[Note] = None
        self._pending: Optional[Note] = None
        self.last_error: Optional[Exception] = None

    @property
    def baseline(self) -> Optional[Note]:
        """Snapshot of the note as last persisted."""
        return self._baseline

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def is_dirty(self) -> bool:
        """True if the latest observed snapshot differs from the baseline."""
        return (
            self._pending is not None
            and self._baseline is not None
            and note_differs(self._pending, self._baseline)
        )

    def reset(self, note: Note) -> None:
        """Adopt ``note`` as the persisted baseline, discarding any pending save."""
        self._timer.cancel()
        self._pending = None
        self._baseline = note.copy()
        self.last_error = None

    def observe(self, note: Note) -> None:
        """Record an edit and (re)arm the debounce timer."""
        if self._baseline is None or note.id != self._baseline.id:
            logger.debug(f"Note identity changed to {note.id}, resetting auto-save baseline")
            self.reset(note)
            return
        self._pending = note.copy()
        self._timer.cancel()
        self._timer.arm(self._debounce, self._fire)

    def flush(self) -> bool:
        """Save immediately if the latest snapshot differs from the baseline.

        Returns:
            True if a save was performed successfully
        """
        self._timer.cancel()
        return self._save_pending()

    def close(self) -> None:
        """Cancel any pending save (note closed or swapped out)."""
        self._timer.cancel()
        self._pending = None
        self._baseline = None

    def _fire(self) -> None:
        self._save_pending()

    def _next_timestamp(self) -> datetime:
        now = self._now_fn()
        previous = self._baseline.updated_at if self._baseline else None
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    def _save_pending(self) -> bool:
        snapshot = self._pending
        self._pending = None
        if snapshot is None or self._baseline is None:
            return False
        if snapshot.id != self._baseline.id:
            logger.debug(f"Dropping stale snapshot for note {snapshot.id}")
            return False

        fields = changed_fields(snapshot, self._baseline)
        if not fields:
            return False

        snapshot.updated_at = self._next_timestamp()
        try:
            self._store.update(snapshot)
        except Exception as e:
            # Baseline is kept so the next differing debounce cycle retries;
            # the snapshot stays pending for an explicit flush()
            self.last_error = e
            if self._pending is None:
                self._pending = snapshot
            logger.error(f"Auto-save failed for note {snapshot.id}: {e}", exc_info=True)
            log_save(snapshot.id, fields, success=False)
            return False

        self.last_error = None
        self._baseline = snapshot.copy()
        log_save(snapshot.id, fields)
        return True
