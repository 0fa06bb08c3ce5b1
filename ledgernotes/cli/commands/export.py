"""Export command for ledgernotes CLI."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgernotes import Notebook


def cmd_export(args, nb: "Notebook"):
    """Export a note as md, html, docx or all three."""
    fmt = args.format or "all"
    out_dir = getattr(args, "out", None)

    if fmt != "all":
        path = nb.export(args.id, fmt, out_dir)
        print(f"✓ Exported to {path}")
        return

    result = nb.export_all(args.id, out_dir)
    for written_fmt, path in result.written.items():
        print(f"✓ {written_fmt}: {path}")
    for failed_fmt, error in result.errors.items():
        print(f"✗ {failed_fmt}: {error}")
    if not result.ok:
        raise SystemExit(1)
