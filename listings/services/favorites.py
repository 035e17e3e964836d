"""Favorite listings persisted through a key-value store."""

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

from listings.core.config import settings
from listings.core.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Minimal string key-value storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store, mostly for tests and short-lived sessions."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """Store kept as a single JSON object on disk.

    The file is rewritten through a temporary file and ``os.replace`` so a
    crash never leaves it half written.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path if path is not None else settings.FAVORITES_FILE)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Could not read store file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class FavoritesController:
    """In-memory favorites set for one session, mirrored to a store.

    Stored as a JSON array of property identifiers under a single key. The
    store is read once, on construction, and written on every mutation.
    """

    def __init__(self, store: KeyValueStore, key: str | None = None) -> None:
        self.store = store
        self.key = key if key is not None else settings.FAVORITES_KEY
        self._favorites: dict[str, None] = {}
        self._load()

    def _load(self) -> None:
        raw = self.store.get(self.key)
        if not raw:
            return
        try:
            ids = json.loads(raw)
            if not isinstance(ids, list):
                raise ValueError("favorites must be a JSON array")
        except ValueError as e:
            logger.error("Error loading favorites, clearing stored value: %s", e)
            self.store.remove(self.key)
            return
        self._favorites = dict.fromkeys(str(i) for i in ids)

    def _save(self) -> None:
        self.store.set(self.key, json.dumps(list(self._favorites)))

    @property
    def favorites(self) -> list[str]:
        """Favorited identifiers in the order they were added."""
        return list(self._favorites)

    @property
    def count(self) -> int:
        return len(self._favorites)

    def is_favorite(self, property_id: str) -> bool:
        return property_id in self._favorites

    def toggle(self, property_id: str) -> bool:
        """Add or remove a favorite; returns whether it is now a favorite."""
        if property_id in self._favorites:
            del self._favorites[property_id]
            added = False
        else:
            self._favorites[property_id] = None
            added = True
        self._save()
        return added

    def clear(self) -> None:
        """Forget every favorite and drop the stored key."""
        self._favorites = {}
        self.store.remove(self.key)
