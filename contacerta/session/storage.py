"""
Durable Client Storage Module
=============================

String key/value storage that survives restarts.

FileStorage keeps every key in one JSON document. A missing, unreadable
or corrupt file is treated as empty storage; it is overwritten by the
next write.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from contacerta.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


class KeyValueStorage(ABC):
    """Abstract string storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Stored value, or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""


class MemoryStorage(KeyValueStorage):
    """Process-local storage, used in tests and for ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage(KeyValueStorage):
    """
    Storage backed by a single JSON file.

    Usage:
        storage = FileStorage(settings.storage_file)
        storage.set("contacerta:org:<identity>", pointer.to_storage())
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("storage_read_failed", path=str(self.path), error=str(e))
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("storage_corrupt", path=str(self.path))
            return {}
        if not isinstance(data, dict):
            logger.warning("storage_corrupt", path=str(self.path))
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)
