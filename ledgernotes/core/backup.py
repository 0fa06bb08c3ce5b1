"""Backup and restore of the whole notebook.

A backup is a pretty-printed JSON array of notes in the interchange shape
(``Note.to_dict``). Restoring validates the entire file against
``BACKUP_SCHEMA`` before anything is written; ids are dropped so storage
assigns fresh ones.
"""

import json
import logging
from datetime import date
from typing import Iterable, List, Optional

from jsonschema import Draft7Validator

from ledgernotes.protocols import RestoreError
from ledgernotes.types import VALID_MODE_VALUES, Note, utc_now

logger = logging.getLogger(__name__)

_TIMESTAMP = {"type": ["integer", "number", "string", "null"]}

BACKUP_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "ledgernotes backup",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["title", "content"],
        "properties": {
            "id": {},
            "title": {"type": "string"},
            "content": {"type": "string"},
            "tags": {"type": "array", "items": {"type": "string"}},
            "mode": {"type": "string", "enum": sorted(VALID_MODE_VALUES)},
            "createdAt": _TIMESTAMP,
            "updatedAt": _TIMESTAMP,
        },
    },
}

_validator = Draft7Validator(BACKUP_SCHEMA)


def backup_filename(today: Optional[date] = None) -> str:
    """Default backup file name, e.g. ``notes_backup_2024-05-01.json``."""
    today = today or utc_now().date()
    return f"notes_backup_{today.isoformat()}.json"


def dump_notes(notes: Iterable[Note]) -> str:
    """Serialize notes to the backup format (ids included)."""
    return json.dumps([note.to_dict() for note in notes], indent=2, ensure_ascii=False)


def parse_backup(text: str) -> List[Note]:
    """Parse and validate a backup file.

    Returns:
        Notes without ids, ready for ``NoteStore.replace_all``.

    Raises:
        RestoreError: If the text is not JSON, not an array of notes, or
            any note fails validation.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RestoreError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise RestoreError("Invalid backup format: expected a JSON array of notes")

    errors = sorted(_validator.iter_errors(data), key=lambda err: list(err.path))
    if errors:
        first = errors[0]
        path = ".".join(str(part) for part in first.path) or "(root)"
        raise RestoreError(f"Invalid backup format at {path}: {first.message}")

    now = utc_now()
    notes = []
    for index, item in enumerate(data):
        try:
            note = Note.from_dict(item)
        except (ValueError, OverflowError, OSError) as e:
            raise RestoreError(f"Invalid backup format at {index}: bad timestamp ({e})") from e
        # Storage assigns fresh ids
        note.id = None
        note.created_at = note.created_at or now
        note.updated_at = note.updated_at or note.created_at
        notes.append(note)

    logger.debug(f"Parsed backup with {len(notes)} notes")
    return notes
