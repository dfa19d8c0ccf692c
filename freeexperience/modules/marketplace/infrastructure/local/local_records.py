# 📄 File: freeexperience/modules/marketplace/infrastructure/local/local_records.py
#
# 🧭 Purpose (Layman Explanation):
# Reads and writes JSON notes in the local notebook, and quietly ignores notes that got
# scribbled over so one damaged entry never breaks a page.
#
# 🧪 Purpose (Technical Summary):
# Typed JSON helpers over LocalKeyValueStore. Text that does not parse, or parses to the
# wrong shape, is logged and read as the default. Capacity and write errors from the store
# propagate unchanged; snapshot/restore let multi-key writes roll back.
#
# 🔗 Dependencies:
# - json: Value encoding
# - freeexperience.shared.infrastructure.storage: LocalKeyValueStore
#
# 🔄 Connected Modules / Calls From:
# Local repositories, local session store

import json
from typing import Any, Callable, Dict, List, Optional

from freeexperience.shared.core.exceptions import MalformedStoredDataError
from freeexperience.shared.infrastructure.storage import LocalKeyValueStore
from freeexperience.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Storage keys shared with earlier releases of the web client
USERS_KEY = "users"
ACTIVE_USER_KEY = "user"
LEGACY_PROFILE_KEY = "specialistProfile"
PROFILE_KEY_PREFIX = "specialistProfile:"
SPECIALISTS_KEY = "specialists"
PROJECTS_KEY = "projects"
APPLICATIONS_KEY = "applications"
ARTICLES_KEY = "articles"


def profile_key(user_id: str) -> str:
    return f"{PROFILE_KEY_PREFIX}{user_id}"


class LocalRecords:
    """Typed JSON access to one LocalKeyValueStore"""

    def __init__(self, store: LocalKeyValueStore):
        self.store = store

    def _parse(self, key: str, raw: str) -> Any:
        try:
            return json.loads(raw)
        except ValueError as e:
            raise MalformedStoredDataError(f"Value under {key} is not valid JSON", key=key) from e

    def read_json(self, key: str, default: Any = None) -> Any:
        raw = self.store.get_item(key)
        if raw is None:
            return default

        try:
            return self._parse(key, raw)
        except MalformedStoredDataError as e:
            logger.warning(
                f"Ignoring malformed local data: {e.message}",
                extra={"key": key, "error_code": e.error_code}
            )
            return default

    def read_object(self, key: str) -> Optional[Dict[str, Any]]:
        value = self.read_json(key)
        if value is not None and not isinstance(value, dict):
            logger.warning(f"Ignoring local data under {key}: expected an object", extra={"key": key})
            return None
        return value

    def read_list(self, key: str) -> List[Any]:
        value = self.read_json(key, [])
        if not isinstance(value, list):
            logger.warning(f"Ignoring local data under {key}: expected a list", extra={"key": key})
            return []
        return value

    def write_json(self, key: str, value: Any) -> None:
        self.store.set_item(key, json.dumps(value, ensure_ascii=False, default=str))

    def remove(self, key: str) -> None:
        self.store.remove_item(key)

    def upsert(self, key: str, record: Dict[str, Any], same: Callable[[Any], bool]) -> None:
        """Replace the first list entry matching ``same`` or append ``record``."""
        records = self.read_list(key)
        for index, existing in enumerate(records):
            if same(existing):
                records[index] = record
                break
        else:
            records.append(record)
        self.write_json(key, records)

    def snapshot(self, key: str) -> Optional[str]:
        """Raw stored text under ``key``, for a later ``restore``."""
        return self.store.get_item(key)

    def restore(self, key: str, raw: Optional[str]) -> None:
        if raw is None:
            self.store.remove_item(key)
        else:
            self.store.set_item(key, raw)
