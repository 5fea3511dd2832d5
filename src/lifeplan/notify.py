# src/lifeplan/notify.py

"""
Completion sound.

The store only signals that an occurrence was completed; how (or whether)
that is heard is decided here.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

logger = logging.getLogger(__name__)


class BellNotifier:
    """Rings the terminal bell on completion (silent when disabled or not a TTY)."""

    def __init__(self, *, enabled: bool = True, stream: TextIO | None = None) -> None:
        self.enabled = enabled
        self._stream = stream

    def task_completed(self, task, occurrence: str) -> None:
        logger.debug("Completed id=%s occurrence=%s", getattr(task, "id", "?"), occurrence)
        if not self.enabled:
            return
        stream = self._stream or sys.stdout
        if self._stream is None and not stream.isatty():
            return
        stream.write("\a")
        stream.flush()
