# src/lifeplan/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/stores/notifier).
"""

from __future__ import annotations

import logging
from datetime import date

from ..config import get_settings
from ..core.state import AppState
from ..notify import BellNotifier
from ..storage.kv_store import SqliteKeyValueStorage
from ..tags.tag_store import TagStore
from ..tasks.demo import seed_if_empty
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = SqliteKeyValueStorage(settings.store_db_path)
    task_store = TaskStore(
        storage,
        key=settings.tasks_key,
        notifier=BellNotifier(enabled=settings.completion_sound),
    )
    tag_store = TagStore(storage, key=settings.tags_key)

    if getattr(settings, "seed_demo", False):
        seed_if_empty(task_store, date.today())

    return AppState(settings=settings, task_store=task_store, tag_store=tag_store, storage=storage)
