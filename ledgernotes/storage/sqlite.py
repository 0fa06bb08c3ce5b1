"""SQLite note storage.

Connections are opened per operation through ``_connect()``, which commits
on success, rolls back on error and always closes the connection.
"""

import contextlib
import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ledgernotes.protocols import NoteNotFoundError, StorageError
from ledgernotes.storage.schema import init_db
from ledgernotes.types import Note, NoteMode, utc_now
from ledgernotes.utils import get_ledgernotes_home

logger = logging.getLogger(__name__)


def _dt_to_text(dt: Optional[datetime]) -> str:
    dt = dt or utc_now()
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def _text_to_dt(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _parse_tags(raw: Optional[str]) -> List[str]:
    try:
        tags = json.loads(raw or "[]")
    except json.JSONDecodeError:
        logger.warning(f"Ignoring malformed tags column: {raw!r}")
        return []
    return [str(t) for t in tags] if isinstance(tags, list) else []


def _row_to_note(row: sqlite3.Row) -> Note:
    try:
        mode = NoteMode.parse(row["mode"])
    except ValueError:
        logger.warning(f"Note {row['id']} has unknown mode {row['mode']!r}, treating as Note")
        mode = NoteMode.NOTE
    return Note(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        tags=_parse_tags(row["tags"]),
        mode=mode,
        created_at=_text_to_dt(row["created_at"]),
        updated_at=_text_to_dt(row["updated_at"]),
    )


def _note_params(note: Note):
    created = _dt_to_text(note.created_at)
    updated = _dt_to_text(note.updated_at) if note.updated_at else created
    return (
        note.title,
        note.content,
        json.dumps(list(note.tags), ensure_ascii=False),
        note.mode.value,
        created,
        updated,
    )


class SQLiteNoteStore:
    """Note storage backed by a single SQLite file.

    Args:
        db_path: Database file. Defaults to ``<data home>/notes.db``.
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else get_ledgernotes_home() / "notes.db"
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    @contextlib.contextmanager
    def _connect(self):
        """Context manager that handles transactions AND closes connection."""
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {self.db_path}: {e}") from e
        try:
            yield conn
            conn.commit()
        except Exception as e:
            logger.debug(f"Transaction failed, rolling back: {e}")
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._connect() as conn:
            init_db(conn, self.db_path)

    # === NoteStore ===

    def get_all(self) -> List[Note]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM notes ORDER BY updated_at DESC, id DESC").fetchall()
        return [_row_to_note(row) for row in rows]

    def get(self, note_id: int) -> Optional[Note]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM notes WHERE id = ?", (note_id,)).fetchone()
        return _row_to_note(row) if row else None

    def add(self, note: Note) -> int:
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO notes (title, content, tags, mode, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                _note_params(note),
            )
            note_id = cur.lastrowid
        logger.debug(f"Added note {note_id}")
        return note_id

    def update(self, note: Note) -> None:
        if note.id is None:
            raise ValueError("Cannot update a note without an id")
        with self._connect() as conn:
            cur = conn.execute(
                """
                UPDATE notes
                SET title = ?, content = ?, tags = ?, mode = ?, created_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (*_note_params(note), note.id),
            )
            if cur.rowcount == 0:
                raise NoteNotFoundError(note.id)

    def delete(self, note_id: int) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))

    def replace_all(self, notes: List[Note]) -> List[int]:
        """Delete every note and insert ``notes`` in one transaction."""
        ids = []
        with self._connect() as conn:
            conn.execute("DELETE FROM notes")
            for note in notes:
                cur = conn.execute(
                    """
                    INSERT INTO notes (title, content, tags, mode, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    _note_params(note),
                )
                ids.append(cur.lastrowid)
        logger.info(f"Replaced all notes ({len(ids)} restored)")
        return ids
