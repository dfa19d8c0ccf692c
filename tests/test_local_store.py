"""
Tests for the local durable key-value store and its JSON helpers.
"""
import json

import pytest

from freeexperience.modules.marketplace.infrastructure.local import LocalRecords
from freeexperience.shared.core.exceptions import StorageQuotaExceededError, StorageUnavailableError
from freeexperience.shared.infrastructure.storage import LocalKeyValueStore


class TestLocalKeyValueStore:

    def test_missing_key_reads_none(self):
        assert LocalKeyValueStore().get_item("nothing") is None

    def test_set_get_remove(self):
        store = LocalKeyValueStore()
        store.set_item("user", "{}")

        assert store.get_item("user") == "{}"
        assert "user" in store

        store.remove_item("user")
        assert store.get_item("user") is None
        assert len(store) == 0

    def test_quota_failure_leaves_store_unchanged(self):
        store = LocalKeyValueStore(quota_bytes=20)
        store.set_item("a", "12345")

        with pytest.raises(StorageQuotaExceededError) as exc_info:
            store.set_item("b", "x" * 50)

        assert store.keys() == ["a"]
        assert store.get_item("a") == "12345"
        assert exc_info.value.details["key"] == "b"
        assert exc_info.value.status_code == 507

    def test_overwrite_counts_replaced_value_once(self):
        store = LocalKeyValueStore(quota_bytes=10)
        store.set_item("k", "12345678")

        store.set_item("k", "87654321")

        assert store.used_bytes == 9

    def test_values_survive_reopening(self, tmp_path):
        path = tmp_path / "store" / "local.json"
        LocalKeyValueStore(path).set_item("projects", "[]")

        reopened = LocalKeyValueStore(path)

        assert reopened.get_item("projects") == "[]"

    def test_unreadable_file_starts_empty(self, tmp_path):
        path = tmp_path / "local.json"
        path.write_text("{not json", encoding="utf-8")

        assert len(LocalKeyValueStore(path)) == 0

    def test_non_object_file_starts_empty(self, tmp_path):
        path = tmp_path / "local.json"
        path.write_text(json.dumps(["a", "b"]), encoding="utf-8")

        assert len(LocalKeyValueStore(path)) == 0

    def test_unwritable_file_leaves_store_unchanged(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = LocalKeyValueStore(blocker / "local.json")

        with pytest.raises(StorageUnavailableError) as exc_info:
            store.set_item("user", "{}")

        assert store.get_item("user") is None
        assert exc_info.value.error_code == "STORAGE_UNAVAILABLE"
        assert exc_info.value.details["key"] == "user"
        assert exc_info.value.status_code == 503

    def test_failed_remove_and_clear_keep_items(self, tmp_path):
        store = LocalKeyValueStore(tmp_path / "local.json")
        store.set_item("user", "{}")
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store.path = blocker / "local.json"

        with pytest.raises(StorageUnavailableError):
            store.remove_item("user")
        with pytest.raises(StorageUnavailableError):
            store.clear()

        assert store.get_item("user") == "{}"
        assert list(tmp_path.glob("**/.local_store.*")) == []


class TestLocalRecords:

    def test_malformed_json_reads_as_default(self, local_kv, records):
        local_kv.set_item("projects", "{broken")

        assert records.read_json("projects", []) == []
        assert records.read_list("projects") == []

    def test_wrong_shape_reads_as_default(self, local_kv, records):
        local_kv.set_item("user", json.dumps([1, 2]))
        local_kv.set_item("projects", json.dumps({"id": "1"}))

        assert records.read_object("user") is None
        assert records.read_list("projects") == []

    def test_upsert_replaces_matching_entry(self, records):
        records.write_json("projects", [{"id": "1", "title": "old"}, {"id": "2"}])

        records.upsert("projects", {"id": "1", "title": "new"}, lambda r: r.get("id") == "1")
        records.upsert("projects", {"id": "3"}, lambda r: r.get("id") == "3")

        assert records.read_list("projects") == [{"id": "1", "title": "new"}, {"id": "2"}, {"id": "3"}]

    def test_quota_error_propagates_from_writes(self):
        records = LocalRecords(LocalKeyValueStore(quota_bytes=10))

        with pytest.raises(StorageQuotaExceededError):
            records.write_json("projects", [{"id": "a-very-long-identifier"}])
