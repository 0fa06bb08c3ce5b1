"""Note commands: list, new, show, delete, edit."""

from typing import TYPE_CHECKING

from ledgernotes.cli.commands.helpers import format_timestamp, print_json, validate_input
from ledgernotes.export.builder import build_document
from ledgernotes.export.text import render_markdown

if TYPE_CHECKING:
    from ledgernotes import Notebook


def cmd_list(args, nb: "Notebook"):
    """List notes, most recently updated first."""
    notes = nb.list_notes()

    if getattr(args, "json", False):
        print_json([n.to_dict() for n in notes])
        return

    if not notes:
        print("No notes yet.")
        return

    for note in notes:
        tags = f"  [{', '.join(note.tags)}]" if note.tags else ""
        title = note.title or "Untitled Note"
        print(f"{note.id:>4}  {note.mode.value:<7} {format_timestamp(note.updated_at)}  {title}{tags}")


def cmd_new(args, nb: "Notebook"):
    """Create a note."""
    title = validate_input(args.title, "title", 500)
    note = nb.create_note(title=title, mode=args.mode, tags=getattr(args, "tags", None))
    print(f"✓ Created note {note.id}: {note.title} ({note.mode.value})")


def cmd_show(args, nb: "Notebook"):
    """Print a note as Markdown."""
    note = nb.get_note(args.id)
    if getattr(args, "json", False):
        print_json(note.to_dict())
        return
    print(render_markdown(build_document(note)))


def cmd_delete(args, nb: "Notebook"):
    """Delete a note."""
    note = nb.get_note(args.id)
    nb.delete_note(note.id)
    print(f"✓ Deleted note {note.id}: {note.title}")


def cmd_edit(args, nb: "Notebook"):
    """Change title, tags, mode or rich content, then save."""
    with nb.open(args.id) as session:
        if args.title is not None:
            session.set_title(validate_input(args.title, "title", 500))
        if args.tags is not None:
            session.set_tags(args.tags)
        if args.mode is not None:
            session.set_mode(args.mode)
        if args.content is not None:
            session.set_content(args.content)

        saved = session.flush()
        error = session.scheduler.last_error

    if error is not None:
        raise error
    if saved:
        print(f"✓ Saved note {args.id}")
    else:
        print("No changes.")
