"""Shared helper functions for CLI commands."""

import argparse
import json
from datetime import datetime
from typing import Any, Optional

from ledgernotes.core.validation import parse_note_id, sanitize_string


def validate_input(value: str, field_name: str, max_length: int = 1000) -> str:
    """Validate and sanitize CLI inputs."""
    return sanitize_string(value, field_name, max_length, required=False)


def note_id_arg(value: str) -> int:
    """argparse type for note ids."""
    try:
        return parse_note_id(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def print_json(data: Any) -> None:
    """Print data as formatted JSON."""
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


def format_timestamp(dt: Optional[datetime]) -> str:
    if dt is None:
        return "-"
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")
