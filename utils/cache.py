from __future__ import annotations

from pathlib import Path
from typing import Dict
import json
import threading

from loguru import logger

from .fileio import atomic_write_text


def make_cache_key(engine: str, text: str, source: str, target: str) -> str:
    return f"{engine}::{source}::{target}::{text}"


class TranslationMemory:
    """Persistent map of already translated texts.

    Only successful translations are stored, so a fallback to the original
    text is never remembered.
    """

    def __init__(self, path: Path, *, auto_flush: bool = False) -> None:
        self.path = Path(path)
        self.auto_flush = auto_flush
        self._lock = threading.Lock()
        self._data: Dict[str, str] = {}
        self._dirty = False
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Ignoring unreadable translation memory {self.path}: {exc}")
            return
        if isinstance(data, dict):
            self._data = {str(key): str(value) for key, value in data.items()}

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            if self._data.get(key) == value:
                return
            self._data[key] = value
            self._dirty = True
        if self.auto_flush:
            self.flush()

    def flush(self) -> None:
        with self._lock:
            if not self._dirty:
                return
            content = json.dumps(self._data, ensure_ascii=False, indent=2)
            atomic_write_text(self.path, content + "\n")
            self._dirty = False
