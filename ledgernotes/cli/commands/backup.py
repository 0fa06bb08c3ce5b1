"""Backup and restore commands for ledgernotes CLI."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgernotes import Notebook


def cmd_backup(args, nb: "Notebook"):
    """Write every note to a JSON backup file."""
    path = nb.backup(getattr(args, "path", None))
    print(f"✓ Backed up {len(nb.list_notes())} notes to {path}")


def cmd_restore(args, nb: "Notebook"):
    """Replace all notes with a backup. Requires --yes."""
    if not args.yes:
        print("Restoring replaces ALL existing notes. Re-run with --yes to confirm.")
        raise SystemExit(1)

    count = nb.restore(args.path)
    print(f"✓ Restored {count} notes from {args.path}")
