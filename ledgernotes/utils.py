"""Shared helpers: data home, settings and filenames."""

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 1000
DEFAULT_HOME_DIRNAME = ".ledgernotes"


def get_ledgernotes_home() -> Path:
    """Data directory: ``LEDGERNOTES_DATA_DIR`` or ``~/.ledgernotes``."""
    env_dir = os.environ.get("LEDGERNOTES_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / DEFAULT_HOME_DIRNAME


@dataclass
class Settings:
    """Runtime settings resolved from config.json and the environment."""

    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    db_path: Optional[Path] = None
    export_dir: Optional[Path] = None
    log_level: str = "WARNING"

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    def resolved_db_path(self) -> Path:
        return self.db_path or get_ledgernotes_home() / "notes.db"

    def resolved_export_dir(self) -> Path:
        return self.export_dir or Path.cwd()


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            config = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.debug(f"Ignoring unreadable config {config_path}: {e}")
        return {}
    if not isinstance(config, dict):
        logger.debug(f"Ignoring config {config_path}: not a JSON object")
        return {}
    return config


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings.

    Precedence: environment variables, then ``<home>/config.json``, then
    defaults. Recognised config keys::

        {"autosave": {"debounce_ms": 1000},
         "storage": {"db_path": "..."},
         "export": {"output_dir": "..."},
         "logging": {"level": "INFO"}}
    """
    config = _read_config_file(config_path or get_ledgernotes_home() / "config.json")
    settings = Settings()

    autosave = config.get("autosave") or {}
    settings.debounce_ms = _positive_int(autosave.get("debounce_ms"), DEFAULT_DEBOUNCE_MS)

    db_path = (config.get("storage") or {}).get("db_path")
    if db_path:
        settings.db_path = Path(db_path).expanduser()

    output_dir = (config.get("export") or {}).get("output_dir")
    if output_dir:
        settings.export_dir = Path(output_dir).expanduser()

    level = (config.get("logging") or {}).get("level")
    if isinstance(level, str) and level:
        settings.log_level = level.upper()

    # Environment overrides
    env_debounce = os.environ.get("LEDGERNOTES_DEBOUNCE_MS")
    if env_debounce:
        settings.debounce_ms = _positive_int(env_debounce, settings.debounce_ms)
    env_db = os.environ.get("LEDGERNOTES_DB")
    if env_db:
        settings.db_path = Path(env_db).expanduser()

    return settings


def sanitize_filename(title: str) -> str:
    """Export filename stem: whitespace runs become ``_``."""
    stem = re.sub(r"\s+", "_", (title or "").strip())
    # Path separators would escape the output directory
    stem = stem.replace("/", "_").replace("\\", "_")
    return stem or "untitled"
