"""
Tests for the in-memory store.

These exercise ``MemStorage`` directly: id assignment, copy
semantics, linear-scan lookups and the demo data set.
"""

import pytest

from certguard_api.app.core.storage import (
    ACCESS_POLICIES,
    AUDIT_LOGS,
    CERTIFICATES,
    CERTIFICATE_TO_GROUP,
    MemStorage,
    PERMISSIONS,
    SCHEDULES,
    USERS,
    USER_GROUPS,
    USER_TO_GROUP,
    seed_demo_data,
)


class TestIdentifiers:
    def test_ids_start_at_one_per_table(self, storage):
        assert storage.insert(USERS, {"username": "a"})["id"] == 1
        assert storage.insert(USER_GROUPS, {"name": "g"})["id"] == 1
        assert storage.insert(USERS, {"username": "b"})["id"] == 2

    def test_ids_are_not_reused_after_delete(self, storage):
        first = storage.insert(USERS, {"username": "a"})
        storage.delete(USERS, first["id"])
        second = storage.insert(USERS, {"username": "b"})
        assert second["id"] == 2

    def test_update_can_not_change_id(self, storage):
        row = storage.insert(USERS, {"username": "a"})
        updated = storage.update(USERS, row["id"], {"id": 99, "username": "b"})
        assert updated == {"id": 1, "username": "b"}
        assert storage.get(USERS, 99) is None


class TestCopies:
    def test_returned_records_are_detached(self, storage):
        row = storage.insert(ACCESS_POLICIES, {"name": "p", "allowed_urls": ["a.com"]})
        row["allowed_urls"].append("b.com")
        fetched = storage.get(ACCESS_POLICIES, row["id"])
        fetched["name"] = "changed"
        assert storage.get(ACCESS_POLICIES, row["id"]) == {"id": 1, "name": "p", "allowed_urls": ["a.com"]}

    def test_inserted_values_are_copied(self, storage):
        values = {"name": "p", "allowed_urls": ["a.com"]}
        storage.insert(ACCESS_POLICIES, values)
        values["allowed_urls"].append("b.com")
        assert storage.get(ACCESS_POLICIES, 1)["allowed_urls"] == ["a.com"]


class TestLookups:
    def test_find_matches_all_criteria(self, storage):
        storage.insert(USER_TO_GROUP, {"user_id": 1, "group_id": 1})
        storage.insert(USER_TO_GROUP, {"user_id": 1, "group_id": 2})
        storage.insert(USER_TO_GROUP, {"user_id": 2, "group_id": 2})
        assert [r["id"] for r in storage.find(USER_TO_GROUP, user_id=1)] == [1, 2]
        assert [r["id"] for r in storage.find(USER_TO_GROUP, user_id=1, group_id=2)] == [2]
        assert storage.find(USER_TO_GROUP, user_id=3) == []

    def test_missing_records(self, storage):
        assert storage.get(USERS, 1) is None
        assert storage.update(USERS, 1, {"username": "x"}) is None
        assert storage.delete(USERS, 1) is False
        assert storage.exists(USERS, 1) is False

    def test_unknown_table(self, storage):
        with pytest.raises(KeyError):
            storage.insert("widgets", {})

    def test_delete_does_not_cascade(self, storage):
        group = storage.insert(USER_GROUPS, {"name": "g"})
        storage.insert(USER_TO_GROUP, {"user_id": 1, "group_id": group["id"]})
        storage.delete(USER_GROUPS, group["id"])
        assert storage.count(USER_TO_GROUP) == 1


def test_seed_demo_data():
    storage = MemStorage()
    seed_demo_data(storage)
    assert storage.count(USERS) == 2
    assert storage.count(USER_GROUPS) == 3
    assert storage.count(CERTIFICATES) == 3
    assert storage.count(ACCESS_POLICIES) == 2
    assert storage.count(SCHEDULES) == 1
    assert storage.count(CERTIFICATE_TO_GROUP) == 3
    assert storage.count(PERMISSIONS) == 2
    assert [log["status"] for log in storage.list(AUDIT_LOGS)].count("blocked") == 1
    assert storage.get(USERS, 1)["password"] != "admin123"
