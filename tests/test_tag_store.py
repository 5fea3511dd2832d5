# tests/test_tag_store.py

from __future__ import annotations

import json

from lifeplan.tags.tag_store import DEFAULT_TAGS, TagStore

from .fakes import FailingStorage, InMemoryStorage


def test_defaults_and_edits_persist(storage: InMemoryStorage) -> None:
    tags = TagStore(storage)
    assert tags.tags == DEFAULT_TAGS == ("Deen", "Growth", "Work", "Study", "Health")

    tags.add_tag("Family")
    tags.add_tag("Work")  # already there
    tags.update_tag("Study", "Reading")
    tags.delete_tag("Deen")

    expected = ("Growth", "Work", "Reading", "Health", "Family")
    assert tags.tags == expected
    assert json.loads(storage.items["tags-store"]) == {"state": {"tags": list(expected)}, "version": 0}
    assert TagStore(storage).tags == expected


def test_noop_edits_do_not_write(storage: InMemoryStorage) -> None:
    tags = TagStore(storage)

    tags.add_tag("  ")
    tags.update_tag("Missing", "X")
    tags.update_tag("Work", " ")
    tags.delete_tag("Missing")

    assert storage.writes == 0


def test_reset_to_defaults(storage: InMemoryStorage) -> None:
    tags = TagStore(storage)
    tags.delete_tag("Work")
    tags.reset_to_defaults()

    assert tags.tags == DEFAULT_TAGS


def test_broken_storage_falls_back_to_defaults() -> None:
    tags = TagStore(FailingStorage())
    tags.add_tag("Family")

    assert tags.tags[-1] == "Family"
