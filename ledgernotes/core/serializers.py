"""Export, backup and restore operations for the Notebook."""

import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from ledgernotes.core.backup import backup_filename, dump_notes, parse_backup
from ledgernotes.export.writer import FORMATS, ExportResult, export_all, write_export
from ledgernotes.protocols import RestoreError

if TYPE_CHECKING:
    from ledgernotes.core.notebook import Notebook

logger = logging.getLogger(__name__)


class SerializersMixin:
    """Export/backup operations for the Notebook."""

    def _export_dir(self: "Notebook", out_dir: Union[str, Path, None]) -> Path:
        return Path(out_dir) if out_dir else self.settings.resolved_export_dir()

    def export(
        self: "Notebook",
        note_id: int,
        format: str = "md",
        out_dir: Union[str, Path, None] = None,
    ) -> Path:
        """Export one note in one format.

        Args:
            note_id: Note to export
            format: One of "md", "html" or "docx"
            out_dir: Target directory (defaults to the configured export dir)

        Returns:
            Path of the written file
        """
        note = self.get_note(note_id)
        return write_export(note, format, self._export_dir(out_dir))

    def export_all(
        self: "Notebook",
        note_id: int,
        out_dir: Union[str, Path, None] = None,
    ) -> ExportResult:
        """Export one note in every format; one failing format does not stop the rest."""
        note = self.get_note(note_id)
        return export_all(note, self._export_dir(out_dir), FORMATS)

    def dump(self: "Notebook") -> str:
        """Every note in the backup format."""
        return dump_notes(self._store.get_all())

    def backup(
        self: "Notebook",
        path: Union[str, Path, None] = None,
        today: Optional[date] = None,
    ) -> Path:
        """Write a backup file and return its path.

        ``path`` may be a directory, in which case the default
        ``notes_backup_<date>.json`` name is used inside it.
        """
        if path is None:
            target = self._export_dir(None) / backup_filename(today)
        else:
            target = Path(path)
            if target.is_dir():
                target = target / backup_filename(today)

        content = self.dump()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.info(f"Backup written to {target}")
        return target

    def restore(self: "Notebook", path: Union[str, Path]) -> int:
        """Replace every note with the contents of a backup file.

        The file is fully validated first; on any error nothing is written.

        Returns:
            Number of notes restored

        Raises:
            RestoreError: If the file cannot be read or is not a valid backup
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RestoreError(f"Cannot read backup {path}: {e}") from e

        notes = parse_backup(text)
        ids = self._store.replace_all(notes)
        logger.info(f"Restored {len(ids)} notes from {path}")
        return len(ids)
