# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from lifeplan.core.state import AppState
from lifeplan.tags.tag_store import TagStore
from lifeplan.tasks.task_store import TaskStore

from .fakes import InMemoryStorage, RecordingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="lifeplan",
        log_level="INFO",
        # Paths (tmp per test run)
        data_dir=tmp_path,
        store_db_path=tmp_path / "store.sqlite3",
        tasks_key="task-store",
        tags_key="tags-store",
        # Behaviour
        completion_sound=False,
        duplicate_when_dragging=False,
        focus_session_minutes=25,
        seed_demo=False,
        console_enabled=False,
    )


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def store(storage: InMemoryStorage, notifier: RecordingNotifier) -> TaskStore:
    return TaskStore(storage, notifier=notifier)


@pytest.fixture()
def state(settings: SimpleNamespace, storage: InMemoryStorage, store: TaskStore) -> AppState:
    """
    AppState wired with in-memory storage, looking at Monday 2024-05-06.
    """
    return AppState(
        settings=settings,
        task_store=store,
        tag_store=TagStore(storage),
        current_date=date(2024, 5, 6),
        storage=storage,
    )
