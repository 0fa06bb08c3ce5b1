"""Feature modules for ledgernotes.

Each feature is implemented as a mixin class that provides specific
functionality to the Notebook class.
"""

from ledgernotes.features.stats import DayActivity, NotebookStats, StatsMixin, compute_stats

__all__ = ["DayActivity", "NotebookStats", "StatsMixin", "compute_stats"]
