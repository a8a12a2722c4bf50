"""
Audit log, dashboard statistics and health endpoint tests.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from certguard_api.app.core.storage import AUDIT_LOGS, CERTIFICATES, MemStorage
from certguard_api.app.services.statistics_service import StatisticsService


BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def add_log(storage, minutes, **values):
    row = {
        "user_id": None,
        "action": "SIGN_DOCUMENT",
        "certificate_id": None,
        "details": None,
        "status": "allowed",
        "ip_address": None,
        "timestamp": BASE_TIME + timedelta(minutes=minutes),
    }
    row.update(values)
    return storage.insert(AUDIT_LOGS, row)


class TestAuditLogs:
    def test_record_entry(self, client):
        response = client.post(
            "/api/audit-logs",
            json={"userId": 2, "action": "ACCESS_SYSTEM", "certificateId": 1, "details": {"system": "SEFAZ"}},
        )
        assert response.status_code == 201
        entry = response.json()
        assert entry["status"] == "allowed"
        assert entry["details"] == {"system": "SEFAZ"}
        assert entry["timestamp"]

    def test_action_is_required(self, client):
        response = client.post("/api/audit-logs", json={"userId": 2})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "action"

    def test_listing_is_newest_first(self, client, storage):
        for minutes in (5, 1, 30, 12):
            add_log(storage, minutes)
        timestamps = [entry["timestamp"] for entry in client.get("/api/audit-logs").json()]
        assert len(timestamps) == 4
        assert timestamps == sorted(timestamps, reverse=True)

    def test_limit(self, client, storage):
        for minutes in (7, 3, 14, 0, 11, 9, 2, 13, 5, 1, 12, 4, 8, 6, 10):
            add_log(storage, minutes)
        entries = client.get("/api/audit-logs", params={"limit": 10}).json()
        assert len(entries) == 10
        expected = [(BASE_TIME + timedelta(minutes=m)) for m in range(14, 4, -1)]
        assert [datetime.fromisoformat(e["timestamp"].replace("Z", "+00:00")) for e in entries] == expected

    def test_limit_must_be_positive(self, client):
        assert client.get("/api/audit-logs", params={"limit": 0}).status_code == 400

    def test_same_timestamp_keeps_insertion_order_reversed(self, client, storage):
        first = add_log(storage, 0, action="A")
        second = add_log(storage, 0, action="B")
        ids = [entry["id"] for entry in client.get("/api/audit-logs").json()]
        assert ids == [second["id"], first["id"]]

    def test_logs_for_user(self, client, storage, make_user):
        user = make_user()
        other = make_user()
        add_log(storage, 1, user_id=user["id"])
        add_log(storage, 2, user_id=other["id"])

        entries = client.get(f"/api/users/{user['id']}/audit-logs").json()
        assert [entry["action"] for entry in entries] == ["CREATE_USER", "SIGN_DOCUMENT"]
        assert all(entry["userId"] == user["id"] for entry in entries)
        assert client.get("/api/users/77/audit-logs").status_code == 404

    def test_history_survives_user_deletion(self, client, make_user):
        user = make_user()
        assert client.delete(f"/api/users/{user['id']}").status_code == 204

        response = client.get(f"/api/users/{user['id']}/audit-logs")
        assert response.status_code == 200
        assert [entry["action"] for entry in response.json()] == ["DELETE_USER", "CREATE_USER"]

    def test_logs_for_certificate(self, client, make_certificate):
        cert = make_certificate()
        client.put(f"/api/certificates/{cert['id']}", json={"name": "Renovado"})

        entries = client.get(f"/api/certificates/{cert['id']}/audit-logs").json()
        assert {entry["action"] for entry in entries} == {"CREATE_CERTIFICATE", "UPDATE_CERTIFICATE"}
        assert client.get("/api/certificates/77/audit-logs").status_code == 404

    def test_history_survives_certificate_deletion(self, client, make_certificate):
        cert = make_certificate()
        client.delete(f"/api/certificates/{cert['id']}")
        entries = client.get(f"/api/certificates/{cert['id']}/audit-logs").json()
        assert entries[0]["action"] == "DELETE_CERTIFICATE"


class TestStats:
    def test_empty_store(self, client):
        assert client.get("/api/stats").json() == {
            "activeUsers": 0,
            "activeCertificates": 0,
            "totalCertificates": 0,
            "expiredCertificates": 0,
            "activeGroups": 0,
            "restrictionsCount": 0,
            "blockedAccess": 0,
        }

    def test_counts(self, client, storage, make_user, make_group, make_certificate, make_policy):
        make_user()
        make_user(isActive=False)
        make_group()
        make_certificate()
        make_certificate(name="Assinatura antiga", expiresAt="2020-01-01T00:00:00Z")
        make_policy()
        add_log(storage, 1, status="blocked")
        add_log(storage, 2, status="Bloqueado")
        add_log(storage, 3, status="allowed")

        stats = client.get("/api/stats").json()
        assert stats["activeUsers"] == 1
        assert stats["totalCertificates"] == 2
        assert stats["activeCertificates"] == 1
        assert stats["expiredCertificates"] == 1
        assert stats["activeGroups"] == 1
        assert stats["restrictionsCount"] == 1
        assert stats["blockedAccess"] == 2

    def test_expiry_is_relative_to_now(self):
        storage = MemStorage()
        storage.insert(CERTIFICATES, {"name": "A", "expires_at": datetime(2025, 6, 1)})
        storage.insert(CERTIFICATES, {"name": "B", "expires_at": datetime(2025, 6, 1, tzinfo=timezone.utc)})

        before = asyncio.run(StatisticsService.overview(storage, now=datetime(2025, 5, 31, tzinfo=timezone.utc)))
        at_expiry = asyncio.run(StatisticsService.overview(storage, now=datetime(2025, 6, 1, tzinfo=timezone.utc)))
        assert (before.active_certificates, before.expired_certificates) == (2, 0)
        assert (at_expiry.active_certificates, at_expiry.expired_certificates) == (0, 2)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
