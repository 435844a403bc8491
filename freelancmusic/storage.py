# freelancmusic/storage.py
"""
Key-value persistence for the client preferences.

Two entries are kept: the favourite profile IDs (a JSON array under
``FAVORITES_KEY``) and the display theme (the literal ``"light"`` or
``"dark"`` under ``THEME_KEY``). Reads never raise: a missing or
malformed entry is logged and replaced by its default.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .models import THEMES, Theme


logger = logging.getLogger(__name__)

FAVORITES_KEY = "freelancmusic_favorites"
THEME_KEY = "theme"


class KeyValueStore:
    """String-to-string store that outlives the process."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore(KeyValueStore):
    """Keep every entry in one JSON object on disk.

    Writes are serialised with a lock and go through a temporary file
    that is renamed over the target, so a crash never leaves a half
    written file behind.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.path.with_name(f"{self.path.name}.tmp")
            with temp_path.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            temp_path.replace(self.path)


class PreferenceStore:
    """Read and write favourites and theme on top of a ``KeyValueStore``."""

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv

    def load_favorites(self) -> List[str]:
        """Return the stored favourite IDs.

        Returns
        -------
        List[str]
            The IDs in the order they were favourited. Missing or
            malformed data yields an empty list.
        """
        raw = self.kv.get(FAVORITES_KEY)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("Failed to parse favorites %r: %s", raw, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Ignoring favorites %r: expected a JSON array", raw)
            return []
        ids: List[str] = []
        for item in data:
            # bool is an int subclass but never an id
            if isinstance(item, bool) or not isinstance(item, (str, int)):
                logger.warning("Skipping malformed favorite id %r", item)
                continue
            sid = str(item)
            if sid not in ids:
                ids.append(sid)
        return ids

    def save_favorites(self, ids: Iterable[str]) -> None:
        self.kv.set(FAVORITES_KEY, json.dumps([str(i) for i in ids]))

    def load_theme(self, ambient: Theme) -> Theme:
        """Return the stored theme, or ``ambient`` when none is usable."""
        raw = self.kv.get(THEME_KEY)
        if raw is None:
            return ambient
        if raw not in THEMES:
            logger.warning("Ignoring stored theme %r", raw)
            return ambient
        return raw

    def save_theme(self, theme: Theme) -> None:
        self.kv.set(THEME_KEY, theme)
