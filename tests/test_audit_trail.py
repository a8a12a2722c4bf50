"""
Every successful write through the API leaves an audit entry with the
caller's address; failed writes leave none.
"""

import pytest

from certguard_api.app.core.storage import AUDIT_LOGS


def actions(storage):
    return [log["action"] for log in storage.list(AUDIT_LOGS)]


def test_user_writes_are_audited(client, storage, make_user):
    user = make_user()
    client.put(f"/api/users/{user['id']}", json={"fullName": "Maria Costa", "password": "novasenha"})
    client.delete(f"/api/users/{user['id']}")

    logs = storage.list(AUDIT_LOGS)
    assert actions(storage) == ["CREATE_USER", "UPDATE_USER", "DELETE_USER"]
    assert all(log["user_id"] == user["id"] for log in logs)
    assert all(log["ip_address"] == "testclient" for log in logs)
    assert logs[0]["details"] == {"username": user["username"]}
    assert logs[1]["details"] == {"updates": ["full_name", "password"]}
    assert "novasenha" not in str(logs[1]["details"])


def test_group_writes_are_audited(client, storage, make_group):
    group = make_group()
    client.put(f"/api/user-groups/{group['id']}", json={"description": "Contas a pagar"})
    client.delete(f"/api/user-groups/{group['id']}")

    assert actions(storage) == ["CREATE_GROUP", "UPDATE_GROUP", "DELETE_GROUP"]
    assert all(log["details"]["groupId"] == group["id"] for log in storage.list(AUDIT_LOGS))


def test_membership_changes_are_audited(client, storage, make_user, make_group):
    user = make_user()
    group = make_group()
    client.post("/api/user-groups/members", json={"userId": user["id"], "groupId": group["id"]})
    client.delete(f"/api/user-groups/{group['id']}/members/{user['id']}")

    logs = storage.list(AUDIT_LOGS)[2:]
    assert [log["action"] for log in logs] == ["ADD_GROUP_MEMBER", "REMOVE_GROUP_MEMBER"]
    assert all(log["user_id"] == user["id"] for log in logs)
    assert all(log["details"] == {"groupId": group["id"]} for log in logs)


def test_policy_writes_are_audited(client, storage, make_policy):
    policy = make_policy()
    client.put(f"/api/access-policies/{policy['id']}", json={"description": "Somente dias úteis"})
    client.delete(f"/api/access-policies/{policy['id']}")

    assert actions(storage) == ["CREATE_POLICY", "UPDATE_POLICY", "DELETE_POLICY"]


def test_certificate_associations_are_audited(client, storage, make_certificate, make_policy, make_group):
    cert = make_certificate()
    policy = make_policy()
    group = make_group()
    client.post("/api/certificates/policies", json={"certificateId": cert["id"], "policyId": policy["id"]})
    client.post("/api/certificates/groups", json={"certificateId": cert["id"], "groupId": group["id"]})
    client.delete(f"/api/certificates/{cert['id']}/policies/{policy['id']}")
    client.delete(f"/api/certificates/{cert['id']}/groups/{group['id']}")

    logs = [log for log in storage.list(AUDIT_LOGS) if log["certificate_id"] == cert["id"]]
    assert [log["action"] for log in logs] == [
        "CREATE_CERTIFICATE",
        "ASSIGN_POLICY",
        "SHARE_CERTIFICATE",
        "REMOVE_POLICY",
        "UNSHARE_CERTIFICATE",
    ]


def test_schedule_writes_are_audited(client, storage):
    body = {"name": "Plantão", "startDate": "2025-01-01T00:00:00Z", "startTime": "08:00", "endTime": "12:00"}
    schedule = client.post("/api/schedules", json=body).json()
    client.put(f"/api/schedules/{schedule['id']}", json={"endTime": "13:00"})
    client.delete(f"/api/schedules/{schedule['id']}")

    assert actions(storage) == ["CREATE_SCHEDULE", "UPDATE_SCHEDULE", "DELETE_SCHEDULE"]


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("put", "/api/users/9", {"fullName": "Ninguém"}),
        ("delete", "/api/user-groups/9", None),
        ("post", "/api/user-groups/members", {"userId": 9, "groupId": 9}),
        ("delete", "/api/access-policies/9", None),
        ("delete", "/api/schedules/9", None),
        ("post", "/api/users", {"username": "ab"}),
    ],
)
def test_failed_writes_are_not_audited(client, storage, method, path, body):
    kwargs = {"json": body} if body is not None else {}
    response = getattr(client, method)(path, **kwargs)
    assert response.status_code in (400, 404)
    assert storage.count(AUDIT_LOGS) == 0


def test_audit_trail_is_listed_by_the_api(client, make_user, make_group):
    make_user()
    make_group()
    entries = client.get("/api/audit-logs").json()
    assert [entry["action"] for entry in entries] == ["CREATE_GROUP", "CREATE_USER"]
