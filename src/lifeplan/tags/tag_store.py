# src/lifeplan/tags/tag_store.py

from __future__ import annotations

import json
import logging

from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_TAGS_KEY = "tags-store"
DEFAULT_TAGS: tuple[str, ...] = ("Deen", "Growth", "Work", "Study", "Health")


class TagStore:
    """
    The user's tag vocabulary (what the tag picker offers).

    Records keep their own tag lists; renaming or deleting a tag here does not
    rewrite existing records.
    """

    def __init__(self, storage: KeyValueStorage | None = None, *, key: str = DEFAULT_TAGS_KEY) -> None:
        self._storage = storage
        self._key = key
        self._tags: list[str] = self._load()

    def _load(self) -> list[str]:
        if self._storage is None:
            return list(DEFAULT_TAGS)
        try:
            raw = self._storage.get_item(self._key)
        except Exception:
            logger.exception("Failed to read tags slot key=%s; using defaults.", self._key)
            return list(DEFAULT_TAGS)
        if not raw:
            return list(DEFAULT_TAGS)
        try:
            data = json.loads(raw)
        except ValueError:
            logger.exception("Tags slot key=%s is not valid JSON; using defaults.", self._key)
            return list(DEFAULT_TAGS)

        tags = (data.get("state") or {}).get("tags") if isinstance(data, dict) else data
        if not isinstance(tags, list):
            return list(DEFAULT_TAGS)
        return [str(t) for t in tags if str(t).strip()]

    def _persist(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set_item(
                self._key,
                json.dumps({"state": {"tags": self._tags}, "version": 0}, ensure_ascii=False),
            )
        except Exception:
            logger.exception("Failed to persist tags key=%s", self._key)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._tags)

    def add_tag(self, tag: str) -> None:
        tag = tag.strip()
        if not tag or tag in self._tags:
            return
        self._tags.append(tag)
        self._persist()

    def update_tag(self, old: str, new: str) -> None:
        new = new.strip()
        if not new or old not in self._tags:
            return
        self._tags = [new if t == old else t for t in self._tags]
        self._persist()

    def delete_tag(self, tag: str) -> None:
        if tag not in self._tags:
            return
        self._tags = [t for t in self._tags if t != tag]
        self._persist()

    def reset_to_defaults(self) -> None:
        self._tags = list(DEFAULT_TAGS)
        self._persist()
