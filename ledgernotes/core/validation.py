"""Input validation helpers shared by the reconciler, notebook and CLI.

Canonical helpers:
- ``sanitize_string``: string validation + control-char stripping
- ``sanitize_tags``: tag list / comma string normalisation
- ``parse_note_id``: integer id validation
"""

import logging
import re
from typing import Any, Iterable, List, Union

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 500
MAX_TAG_LENGTH = 100
MAX_TAGS = 100


def sanitize_string(
    value: Any, field_name: str, max_length: int = 1000, required: bool = True
) -> str:
    """Sanitize and validate string inputs.

    Args:
        value: The value to sanitize.
        field_name: Name of the field for error messages.
        max_length: Maximum allowed string length.
        required: If True, empty strings are rejected.

    Returns:
        Sanitized string.

    Raises:
        ValueError: If validation fails.
    """
    if value is None and not required:
        return ""

    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string, got {type(value).__name__}")

    if required and not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    if len(value) > max_length:
        raise ValueError(f"{field_name} too long (max {max_length} characters, got {len(value)})")

    # Remove null bytes and control characters except newlines and tabs
    return re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)


def sanitize_tags(value: Union[str, Iterable[str], None]) -> List[str]:
    """Normalise tags from a list or a comma-separated string.

    Entries are trimmed, empty ones dropped and duplicates removed keeping
    the first occurrence, so the result is an ordered set.

    Raises:
        ValueError: If a tag is not a string or limits are exceeded.
    """
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)

    tags: List[str] = []
    for i, item in enumerate(items):
        tag = sanitize_string(item, f"tags[{i}]", MAX_TAG_LENGTH, required=False).strip()
        if tag and tag not in tags:
            tags.append(tag)

    if len(tags) > MAX_TAGS:
        raise ValueError(f"tags too many items (max {MAX_TAGS}, got {len(tags)})")
    return tags


def parse_note_id(value: Any) -> int:
    """Validate a note id from user input."""
    if isinstance(value, bool):
        raise ValueError("note id must be an integer")
    try:
        note_id = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"note id must be an integer, got {value!r}")
    if note_id < 1:
        raise ValueError(f"note id must be positive, got {note_id}")
    return note_id
