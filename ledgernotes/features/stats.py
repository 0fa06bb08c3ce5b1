"""Dashboard statistics mixin for ledgernotes.

Summarises the notebook the way the dashboard shows it: note and word
counts, notes per mode and a one-week activity strip.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta, timezone
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from ledgernotes.export.rich_html import word_count
from ledgernotes.types import Note, NoteMode, utc_now

if TYPE_CHECKING:
    from ledgernotes.core.notebook import Notebook

logger = logging.getLogger(__name__)

ACTIVITY_DAYS = 7


@dataclass
class DayActivity:
    """Notes last updated on one day."""

    day: date
    label: str  # short weekday name, e.g. "Mon"
    count: int = 0


@dataclass
class NotebookStats:
    """Aggregate notebook numbers.

    Attributes:
        total_notes: Number of notes
        total_words: Words across all rich (non-Ledger) notes
        average_words: total_words / total_notes, rounded (0 when empty)
        mode_counts: Notes per mode value, every mode present
        activity: Last seven days, oldest first
    """

    total_notes: int = 0
    total_words: int = 0
    average_words: int = 0
    mode_counts: Dict[str, int] = field(default_factory=dict)
    activity: List[DayActivity] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_notes": self.total_notes,
            "total_words": self.total_words,
            "average_words": self.average_words,
            "mode_counts": dict(self.mode_counts),
            "activity": [
                {"date": a.day.isoformat(), "label": a.label, "count": a.count}
                for a in self.activity
            ],
        }


def _updated_day(note: Note) -> Optional[date]:
    stamp = note.updated_at or note.created_at
    if stamp is None:
        return None
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone(timezone.utc)
    return stamp.date()


def compute_stats(notes: Iterable[Note], today: Optional[date] = None) -> NotebookStats:
    """Compute dashboard statistics for ``notes``."""
    notes = list(notes)
    today = today or utc_now().date()

    total_words = sum(word_count(n.content) for n in notes if n.mode is not NoteMode.LEDGER)
    mode_counts = {mode.value: 0 for mode in NoteMode}
    for note in notes:
        mode_counts[note.mode.value] += 1

    days = [today - timedelta(days=offset) for offset in range(ACTIVITY_DAYS - 1, -1, -1)]
    activity = {day: DayActivity(day=day, label=day.strftime("%a")) for day in days}
    for note in notes:
        day = _updated_day(note)
        if day in activity:
            activity[day].count += 1

    return NotebookStats(
        total_notes=len(notes),
        total_words=total_words,
        average_words=round(total_words / len(notes)) if notes else 0,
        mode_counts=mode_counts,
        activity=[activity[day] for day in days],
    )


class StatsMixin:
    """Statistics over every stored note."""

    def stats(self: "Notebook", today: Optional[date] = None) -> NotebookStats:
        notes = self._store.get_all()
        result = compute_stats(notes, today=today)
        logger.debug(f"Computed stats over {result.total_notes} notes")
        return result
