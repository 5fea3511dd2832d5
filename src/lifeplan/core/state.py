# src/lifeplan/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..tags.tag_store import TagStore
from ..tasks.filters import ViewPreferences
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    task_store: TaskStore
    tag_store: TagStore

    # Day the console is looking at; None means "today".
    current_date: date | None = None
    preferences: ViewPreferences = field(default_factory=ViewPreferences)

    # Shared key/value backend of both stores (closed on shutdown).
    storage: Any = None

    lock: threading.Lock = field(default_factory=threading.Lock)

    def today(self) -> date:
        return self.current_date or date.today()
