"""Ledger commands for ledgernotes CLI."""

from typing import TYPE_CHECKING

from ledgernotes.cli.commands.helpers import print_json, validate_input
from ledgernotes.export.builder import ledger_table
from ledgernotes.export.text import ledger_markdown
from ledgernotes.ledger.engine import LedgerEngine

if TYPE_CHECKING:
    from ledgernotes import Notebook


def _resolve_row_id(engine: LedgerEngine, row: str) -> str:
    """Accept a row id or a 0-based row position."""
    if any(r.id == row for r in engine.rows):
        return row
    try:
        index = int(row)
    except ValueError:
        raise ValueError(f"No row with id {row!r}")
    if not 0 <= index < engine.row_count:
        raise ValueError(f"Row index {index} out of range (0-{engine.row_count - 1})")
    return engine.rows[index].id


def _print_ledger(engine: LedgerEngine) -> None:
    print(ledger_markdown(ledger_table(engine.data)))
    print()
    print(f"Total Rows: {engine.row_count}")
    for index, row in enumerate(engine.rows):
        print(f"  [{index}] {row.id}")


def cmd_ledger(args, nb: "Notebook"):
    """Handle ledger subcommands on a Ledger-mode note."""
    with nb.open(args.id) as session:
        engine = session.ledger
        action = args.ledger_action

        if action == "show":
            if getattr(args, "json", False):
                print_json(engine.to_dict())
            else:
                _print_ledger(engine)

        elif action == "add-row":
            row = engine.add_row()
            print(f"✓ Added row {row.id}")

        elif action == "remove-row":
            row_id = _resolve_row_id(engine, args.row)
            engine.remove_row(row_id)
            print(f"✓ Removed row {row_id}")

        elif action == "add-column":
            index = engine.add_column(validate_input(args.name, "column name", 200))
            print(f"✓ Added column {index}: {args.name}")

        elif action == "rename-column":
            engine.rename_column(args.column, validate_input(args.name, "column name", 200))
            print(f"✓ Renamed column {args.column} to {args.name}")

        elif action == "remove-column":
            name = engine.headers[args.column] if 0 <= args.column < len(engine.headers) else None
            engine.remove_column(args.column)
            print(f"✓ Removed column {args.column}: {name}")

        elif action == "toggle-sum":
            flagged = engine.toggle_sum_column(args.column)
            state = "on" if flagged else "off"
            print(f"✓ Totals for {engine.headers[args.column]}: {state}")

        elif action == "set":
            engine.set_cell(args.row, args.column, validate_input(args.value, "value", 1000))
            print(f"✓ Set [{args.row}, {args.column}]")

        session.flush()
        error = session.scheduler.last_error

    if error is not None:
        raise error
