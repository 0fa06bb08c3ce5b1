"""Logging configuration for ledgernotes.

Every module logs through ``logging.getLogger(__name__)``, so all records
land under the ``ledgernotes`` logger. ``setup_ledgernotes_logging`` adds a
daily file handler under the data home; the ``log_*`` helpers emit
``key=value`` event lines that are easy to grep.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from ledgernotes.utils import get_ledgernotes_home

LOGGER_NAME = "ledgernotes"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(LOGGER_NAME)


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.environ.get("LEDGERNOTES_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def get_log_dir() -> Path:
    return get_ledgernotes_home() / "logs"


def setup_ledgernotes_logging(level: Union[int, str, None] = None) -> logging.Logger:
    """Attach a file handler writing ``logs/local-YYYY-MM-DD.log``.

    Safe to call repeatedly: an existing file handler for today's file is
    reused rather than duplicated.

    Args:
        level: Logging level name or number. Defaults to
            ``LEDGERNOTES_LOG_LEVEL`` or INFO.

    Returns:
        The ``ledgernotes`` logger.
    """
    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"local-{datetime.now().strftime('%Y-%m-%d')}.log"

    logger.setLevel(_resolve_level(level))

    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(
            log_file
        ):
            return logger

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
    return logger


def _fmt(value) -> str:
    text = str(value)
    return f'"{text}"' if " " in text else text


def log_load(note_id: Optional[int], mode: str, state: str) -> None:
    """Log that a note was opened for editing."""
    logger.info(f"event=load note_id={note_id} mode={_fmt(mode)} state={state}")


def log_save(note_id: Optional[int], changed: Iterable[str], success: bool = True) -> None:
    """Log an auto-save attempt."""
    fields = ",".join(changed) or "-"
    logger.info(f"event=save note_id={note_id} fields={fields} success={success}")


def log_migration(note_id: Optional[int], source: str, rewrite: bool) -> None:
    """Log a ledger migration decision."""
    logger.info(f"event=migration note_id={note_id} source={source} rewrite={rewrite}")


def log_export(note_id: Optional[int], fmt: str, path: Optional[Path], success: bool = True) -> None:
    """Log an export result."""
    logger.info(
        f"event=export note_id={note_id} format={fmt} path={_fmt(path)} success={success}"
    )
