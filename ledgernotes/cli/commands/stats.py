"""Stats command for ledgernotes CLI."""

from typing import TYPE_CHECKING

from ledgernotes.cli.commands.helpers import print_json

if TYPE_CHECKING:
    from ledgernotes import Notebook


def cmd_stats(args, nb: "Notebook"):
    """Show dashboard statistics."""
    stats = nb.stats()

    if getattr(args, "json", False):
        print_json(stats.to_dict())
        return

    print(f"Total notes:   {stats.total_notes}")
    print(f"Total words:   {stats.total_words}")
    print(f"Average words: {stats.average_words}")
    print()
    print("By mode:")
    for mode, count in stats.mode_counts.items():
        print(f"  {mode:<7} {count}")
    print()
    print("Last 7 days:")
    for day in stats.activity:
        bar = "#" * day.count
        print(f"  {day.label} {day.day.isoformat()} {day.count:>3} {bar}")
