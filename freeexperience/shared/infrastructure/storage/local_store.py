# 📄 File: freeexperience/shared/infrastructure/storage/local_store.py
#
# 🧭 Purpose (Layman Explanation):
# A small notebook on disk where the app keeps users, profiles, projects and applications
# when no cloud database is configured. It has a fixed size, like a browser's local storage.
#
# 🧪 Purpose (Technical Summary):
# Synchronous string key-value store with a capacity ceiling measured in characters of
# keys plus values. Persists to a single JSON file (atomic replace) or stays in memory
# when no path is given. Exceeding the ceiling raises StorageQuotaExceededError, and a
# file that cannot be written raises StorageUnavailableError; both leave the store unchanged.
#
# 🔗 Dependencies:
# - json, os, tempfile: File persistence
# - freeexperience.shared.core.exceptions: StorageQuotaExceededError, StorageUnavailableError
#
# 🔄 Connected Modules / Calls From:
# Local repositories (session, specialists, projects, applications, assets), AppContext

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from freeexperience.shared.core.exceptions import StorageQuotaExceededError, StorageUnavailableError
from freeexperience.shared.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class LocalKeyValueStore:
    """
    Origin-scoped durable key-value store.

    Mirrors the browser storage contract: string keys, string values,
    ``get_item`` returns None for missing keys, writes beyond the quota fail.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        quota_bytes: int = DEFAULT_QUOTA_BYTES
    ):
        self.path = Path(path) if path else None
        self.quota_bytes = quota_bytes
        self._items: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(
                f"Local store file {self.path} is unreadable, starting empty: {e}",
                extra={"path": str(self.path)}
            )
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Local store file {self.path} does not hold an object, starting empty")
            return {}

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _persist(self, items: Dict[str, str], key: Optional[str] = None) -> None:
        """
        Write ``items`` to the backing file.

        Raises:
            StorageUnavailableError: If the file cannot be written
        """
        if self.path is None:
            return

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".local_store.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(
                f"Local store file {self.path} could not be written: {e}",
                extra={"path": str(self.path), "key": key}
            )
            raise StorageUnavailableError(
                f"Local store file could not be written: {e.strerror or e}",
                key=key,
                path=str(self.path)
            ) from e

    def _commit(self, items: Dict[str, str], key: Optional[str] = None) -> None:
        # Memory changes only after the file holds the same contents
        self._persist(items, key)
        self._items = items

    @staticmethod
    def _entry_size(key: str, value: str) -> int:
        return len(key) + len(value)

    @property
    def used_bytes(self) -> int:
        return sum(self._entry_size(k, v) for k, v in self._items.items())

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``.

        Raises:
            StorageQuotaExceededError: If the write would exceed the quota
            StorageUnavailableError: If the backing file cannot be written
        """
        current = self._items.get(key)
        used = self.used_bytes
        if current is not None:
            used -= self._entry_size(key, current)
        required = used + self._entry_size(key, value)

        if required > self.quota_bytes:
            logger.warning(
                f"Local store quota exceeded writing {key}",
                extra={"key": key, "quota_bytes": self.quota_bytes, "required_bytes": required}
            )
            raise StorageQuotaExceededError(
                key=key,
                quota_bytes=self.quota_bytes,
                required_bytes=required
            )

        self._commit({**self._items, key: value}, key)

    def remove_item(self, key: str) -> None:
        if key in self._items:
            self._commit({k: v for k, v in self._items.items() if k != key}, key)

    def keys(self) -> List[str]:
        return list(self._items)

    def clear(self) -> None:
        self._commit({})

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items
