"""
User group tests, including membership management and the
no-cascade behaviour on delete.
"""

from certguard_api.app.core.storage import USER_TO_GROUP


def test_group_crud(client, make_group):
    group = make_group("Financeiro", description="Equipe financeira")
    assert group["id"] == 1

    response = client.put(f"/api/user-groups/{group['id']}", json={"description": "Contas a pagar"})
    assert response.status_code == 200
    assert response.json() == {"id": 1, "name": "Financeiro", "description": "Contas a pagar"}

    assert client.get("/api/user-groups").json() == [response.json()]
    assert client.delete(f"/api/user-groups/{group['id']}").status_code == 204
    assert client.get(f"/api/user-groups/{group['id']}").status_code == 404
    assert client.delete(f"/api/user-groups/{group['id']}").status_code == 404


def test_group_name_is_validated(client):
    response = client.post("/api/user-groups", json={"name": "TI"})
    assert response.status_code == 400


class TestMembership:
    def test_add_and_list_members(self, client, make_user, make_group):
        alice = make_user()
        bob = make_user()
        group = make_group()
        for user in (alice, bob):
            response = client.post(
                "/api/user-groups/members", json={"userId": user["id"], "groupId": group["id"]}
            )
            assert response.status_code == 201
            assert response.json()["groupId"] == group["id"]

        members = client.get(f"/api/user-groups/{group['id']}/members").json()
        assert [m["id"] for m in members] == [alice["id"], bob["id"]]
        assert all("password" not in m for m in members)

    def test_adding_twice_returns_existing_membership(self, client, storage, make_user, make_group):
        user = make_user()
        group = make_group()
        body = {"userId": user["id"], "groupId": group["id"]}
        first = client.post("/api/user-groups/members", json=body).json()
        second = client.post("/api/user-groups/members", json=body).json()
        assert first == second
        assert storage.count(USER_TO_GROUP) == 1

    def test_membership_requires_existing_records(self, client, make_user, make_group):
        user = make_user()
        group = make_group()
        response = client.post("/api/user-groups/members", json={"userId": 99, "groupId": group["id"]})
        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"
        response = client.post("/api/user-groups/members", json={"userId": user["id"], "groupId": 99})
        assert response.status_code == 404
        assert response.json()["detail"] == "User group not found"

    def test_remove_member(self, client, make_user, make_group):
        user = make_user()
        group = make_group()
        client.post("/api/user-groups/members", json={"userId": user["id"], "groupId": group["id"]})

        response = client.delete(f"/api/user-groups/{group['id']}/members/{user['id']}")
        assert response.status_code == 204
        assert client.get(f"/api/user-groups/{group['id']}/members").json() == []
        assert client.delete(f"/api/user-groups/{group['id']}/members/{user['id']}").status_code == 404

    def test_members_of_unknown_group(self, client):
        assert client.get("/api/user-groups/3/members").status_code == 404

    def test_deleted_users_are_skipped_in_member_list(self, client, storage, make_user, make_group):
        user = make_user()
        group = make_group()
        client.post("/api/user-groups/members", json={"userId": user["id"], "groupId": group["id"]})
        client.delete(f"/api/users/{user['id']}")

        assert client.get(f"/api/user-groups/{group['id']}/members").json() == []
        assert storage.count(USER_TO_GROUP) == 1


def test_deleting_group_keeps_membership_rows(client, storage, make_user, make_group):
    user = make_user()
    group = make_group()
    client.post("/api/user-groups/members", json={"userId": user["id"], "groupId": group["id"]})

    assert client.delete(f"/api/user-groups/{group['id']}").status_code == 204
    assert client.get(f"/api/user-groups/{group['id']}").status_code == 404

    rows = storage.find(USER_TO_GROUP, group_id=group["id"])
    assert len(rows) == 1
    # The dangling row is not reported as a group of the user.
    assert client.get(f"/api/users/{user['id']}/groups").json() == []
