"""Headless rich-text surface.

Implements the RichTextSurface protocol without a real widget. Used by the
CLI and by tests: ``render`` is a programmatic write (no event), ``type``
simulates a user edit and notifies listeners while the surface is enabled.
"""

import logging
from typing import List

from ledgernotes.protocols import ChangeCallback

logger = logging.getLogger(__name__)


class HeadlessSurface:
    """In-memory stand-in for the rich-text widget."""

    def __init__(self, html: str = ""):
        self.html = html
        self.enabled = True
        self._listeners: List[ChangeCallback] = []

    def render(self, html: str) -> None:
        self.html = html

    def on_change(self, callback: ChangeCallback) -> None:
        self._listeners.append(callback)

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def type(self, html: str) -> bool:
        """Simulate a user edit replacing the document with ``html``.

        Returns:
            False if the surface is read-only and the edit was rejected
        """
        if not self.enabled:
            logger.debug("Ignoring edit on disabled surface")
            return False
        self.html = html
        for callback in list(self._listeners):
            callback(html)
        return True
