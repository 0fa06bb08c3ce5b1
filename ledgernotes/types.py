"""
Shared note types for ledgernotes.

All note dataclasses live here. They are the shared vocabulary between the
ledger engine, the reconciler, the auto-save scheduler, the exporters and the
storage backends.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from dateutil.parser import parse as parse_datetime

# === Shared Utility Functions ===


def utc_now() -> datetime:
    """Get the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def today_iso() -> str:
    """Today's date (UTC) as YYYY-MM-DD."""
    return utc_now().date().isoformat()


def to_millis(dt: Optional[datetime]) -> Optional[int]:
    """Convert a datetime to integer milliseconds since the epoch."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def parse_timestamp(value: Union[int, float, str, datetime, None]) -> Optional[datetime]:
    """Parse a timestamp from millis, an ISO string or a datetime.

    Returns None for empty values. Raises ValueError for unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        parsed = parse_datetime(value)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise ValueError(f"Invalid timestamp: {value!r}")


# === Enums ===


class NoteMode(str, Enum):
    """Content mode of a note.

    The mode alone decides how ``Note.content`` is encoded: LEDGER notes hold
    a serialized LedgerData, every other mode holds rich HTML.
    """

    NOTE = "Note"
    DIARY = "Diary"
    TASK = "Task"
    THESIS = "Thesis"
    LEDGER = "Ledger"

    @classmethod
    def parse(cls, value: Union["NoteMode", str]) -> "NoteMode":
        """Resolve a mode from its value or name, case-insensitively."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for mode in cls:
            if text.lower() in (mode.value.lower(), mode.name.lower()):
                return mode
        raise ValueError(f"Unknown note mode: {value!r}")


VALID_MODE_VALUES = frozenset(m.value for m in NoteMode)


# === Ledger Types ===


@dataclass
class LedgerRow:
    """One ledger row. ``id`` is stable and independent of position."""

    id: str
    data: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "data": list(self.data)}


@dataclass
class LedgerData:
    """Dynamic ledger table.

    ``sum_column_indices`` behaves as a set but keeps the order in which the
    columns were flagged; totals are reported in that order.
    """

    headers: List[str] = field(default_factory=list)
    rows: List[LedgerRow] = field(default_factory=list)
    sum_column_indices: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted (camelCase) shape."""
        return {
            "headers": list(self.headers),
            "rows": [row.to_dict() for row in self.rows],
            "sumColumnIndices": list(self.sum_column_indices),
        }

    def copy(self) -> "LedgerData":
        return copy.deepcopy(self)


# === Notes ===


@dataclass
class Note:
    """A note record.

    Attributes:
        id: Storage-assigned identifier (None until added)
        title: Note title
        content: Rich HTML, or serialized LedgerData for LEDGER notes
        tags: Ordered, duplicate-free tag list
        mode: Content mode
        created_at: Creation time (UTC)
        updated_at: Last persisted change (UTC), refreshed by auto-save
    """

    id: Optional[int] = None
    title: str = ""
    content: str = ""
    tags: List[str] = field(default_factory=list)
    mode: NoteMode = NoteMode.NOTE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def copy(self) -> "Note":
        """Independent snapshot of this note."""
        return copy.deepcopy(self)

    def to_dict(self, include_id: bool = True) -> Dict[str, Any]:
        """Convert to the JSON interchange shape used by backups."""
        data: Dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "mode": self.mode.value,
            "createdAt": to_millis(self.created_at),
            "updatedAt": to_millis(self.updated_at),
        }
        if include_id:
            data = {"id": self.id, **data}
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        """Create a note from the JSON interchange shape.

        Accepts camelCase (backup files) and snake_case timestamp keys.
        """
        created = data.get("createdAt", data.get("created_at"))
        updated = data.get("updatedAt", data.get("updated_at"))
        return cls(
            id=data.get("id"),
            title=data.get("title") or "",
            content=data.get("content") or "",
            tags=list(data.get("tags") or []),
            mode=NoteMode.parse(data.get("mode") or NoteMode.NOTE.value),
            created_at=parse_timestamp(created),
            updated_at=parse_timestamp(updated),
        )


# Fields compared by the auto-save diff.
TRACKED_FIELDS = ("content", "title", "mode", "tags")


def note_differs(a: Note, b: Note) -> bool:
    """True if two snapshots differ in any auto-save tracked field (by value)."""
    return any(getattr(a, name) != getattr(b, name) for name in TRACKED_FIELDS)
