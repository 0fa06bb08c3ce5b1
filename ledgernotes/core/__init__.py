"""ledgernotes core: editing, auto-save, backup and the Notebook facade.

    from ledgernotes.core import Notebook
"""

from ledgernotes.core.autosave import AutoSaveScheduler, LoopTimer, ManualTimer
from ledgernotes.core.backup import backup_filename, dump_notes, parse_backup
from ledgernotes.core.notebook import EditingSession, Notebook
from ledgernotes.core.reconciler import ContentReconciler, EditorState
from ledgernotes.core.surface import HeadlessSurface

__all__ = [
    "AutoSaveScheduler",
    "ContentReconciler",
    "EditingSession",
    "EditorState",
    "HeadlessSurface",
    "LoopTimer",
    "ManualTimer",
    "Notebook",
    "backup_filename",
    "dump_notes",
    "parse_backup",
]
