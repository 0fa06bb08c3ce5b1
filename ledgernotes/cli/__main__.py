"""
ledgernotes CLI - Command-line interface for multi-mode notes.

Usage:
    ledgernotes list [--json]
    ledgernotes new TITLE [--mode MODE] [--tags T1,T2]
    ledgernotes show ID [--json]
    ledgernotes edit ID [--title T] [--tags T1,T2] [--mode MODE] [--content HTML]
    ledgernotes ledger ID show|add-row|remove-row|add-column|rename-column|remove-column|toggle-sum|set
    ledgernotes export ID [--format md|html|docx|all] [--out DIR]
    ledgernotes backup [PATH]
    ledgernotes restore PATH --yes
    ledgernotes stats [--json]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ledgernotes import Notebook
from ledgernotes.cli.commands.backup import cmd_backup, cmd_restore
from ledgernotes.cli.commands.export import cmd_export
from ledgernotes.cli.commands.helpers import note_id_arg
from ledgernotes.cli.commands.ledger import cmd_ledger
from ledgernotes.cli.commands.notes import cmd_delete, cmd_edit, cmd_list, cmd_new, cmd_show
from ledgernotes.cli.commands.stats import cmd_stats
from ledgernotes.export.writer import FORMATS
from ledgernotes.logging_config import setup_ledgernotes_logging
from ledgernotes.protocols import LedgerNotesError
from ledgernotes.types import NoteMode
from ledgernotes.utils import load_settings

# Set up logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

MODE_CHOICES = [m.value for m in NoteMode]

COMMANDS = {
    "list": cmd_list,
    "new": cmd_new,
    "show": cmd_show,
    "delete": cmd_delete,
    "edit": cmd_edit,
    "ledger": cmd_ledger,
    "export": cmd_export,
    "backup": cmd_backup,
    "restore": cmd_restore,
    "stats": cmd_stats,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledgernotes",
        description="Multi-mode notes with a tabular ledger",
    )
    parser.add_argument("--db", help="Database file (overrides config and LEDGERNOTES_DB)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # list
    p_list = subparsers.add_parser("list", help="List notes")
    p_list.add_argument("--json", "-j", action="store_true")

    # new
    p_new = subparsers.add_parser("new", help="Create a note")
    p_new.add_argument("title", help="Note title")
    p_new.add_argument("--mode", "-m", choices=MODE_CHOICES, default=NoteMode.NOTE.value)
    p_new.add_argument("--tags", "-t", help="Comma-separated tags")

    # show
    p_show = subparsers.add_parser("show", help="Show a note")
    p_show.add_argument("id", type=note_id_arg)
    p_show.add_argument("--json", "-j", action="store_true")

    # delete
    p_delete = subparsers.add_parser("delete", help="Delete a note")
    p_delete.add_argument("id", type=note_id_arg)

    # edit
    p_edit = subparsers.add_parser("edit", help="Edit a note")
    p_edit.add_argument("id", type=note_id_arg)
    p_edit.add_argument("--title")
    p_edit.add_argument("--tags", help="Comma-separated tags (replaces existing)")
    p_edit.add_argument("--mode", choices=MODE_CHOICES)
    p_edit.add_argument("--content", help="Rich content (HTML)")

    # ledger
    p_ledger = subparsers.add_parser("ledger", help="Edit a Ledger-mode note")
    p_ledger.add_argument("id", type=note_id_arg)
    ledger_sub = p_ledger.add_subparsers(dest="ledger_action", required=True)

    l_show = ledger_sub.add_parser("show", help="Show the table and totals")
    l_show.add_argument("--json", "-j", action="store_true")

    ledger_sub.add_parser("add-row", help="Append a row")

    l_remove_row = ledger_sub.add_parser("remove-row", help="Remove a row")
    l_remove_row.add_argument("row", help="Row id or 0-based position")

    l_add_col = ledger_sub.add_parser("add-column", help="Append a column")
    l_add_col.add_argument("name")

    l_rename_col = ledger_sub.add_parser("rename-column", help="Rename a column")
    l_rename_col.add_argument("column", type=int, help="0-based column index")
    l_rename_col.add_argument("name")

    l_remove_col = ledger_sub.add_parser("remove-column", help="Remove a column")
    l_remove_col.add_argument("column", type=int, help="0-based column index")

    l_toggle = ledger_sub.add_parser("toggle-sum", help="Toggle totals for a column")
    l_toggle.add_argument("column", type=int, help="0-based column index")

    l_set = ledger_sub.add_parser("set", help="Set a cell")
    l_set.add_argument("row", type=int, help="0-based row index")
    l_set.add_argument("column", type=int, help="0-based column index")
    l_set.add_argument("value")

    # export
    p_export = subparsers.add_parser("export", help="Export a note")
    p_export.add_argument("id", type=note_id_arg)
    p_export.add_argument("--format", "-f", choices=[*FORMATS, "all"], default="all")
    p_export.add_argument("--out", "-o", help="Output directory")

    # backup / restore
    p_backup = subparsers.add_parser("backup", help="Back up all notes to JSON")
    p_backup.add_argument("path", nargs="?", help="File or directory")

    p_restore = subparsers.add_parser("restore", help="Replace all notes from a backup")
    p_restore.add_argument("path")
    p_restore.add_argument("--yes", "-y", action="store_true", help="Confirm replacing all notes")

    # stats
    p_stats = subparsers.add_parser("stats", help="Show notebook statistics")
    p_stats.add_argument("--json", "-j", action="store_true")

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.db:
        settings.db_path = Path(args.db).expanduser()
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)
        settings.log_level = "DEBUG"

    # Initialize the notebook with error handling
    try:
        setup_ledgernotes_logging(settings.log_level)
        nb = Notebook(settings=settings)
    except (OSError, LedgerNotesError) as e:
        logger.error(f"Failed to open notebook: {e}")
        sys.exit(1)

    # Dispatch with error handling
    try:
        COMMANDS[args.command](args, nb)
    except (ValueError, IndexError, LedgerNotesError) as e:
        logger.error(f"{e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
