"""
User endpoint tests: creation, partial update, deletion and the
groups-for-user listing.
"""

from certguard_api.app.core.security import verify_password
from certguard_api.app.core.storage import USERS


class TestCreateUser:
    def test_returns_201_with_new_ids(self, client, make_user):
        ids = [make_user()["id"] for _ in range(3)]
        assert all(i > 0 for i in ids)
        assert len(set(ids)) == 3

    def test_response_uses_camel_case_and_hides_password(self, client):
        response = client.post(
            "/api/users",
            json={
                "username": "jsilva",
                "password": "secret123",
                "fullName": "João Silva",
                "email": "joao@acmecorp.com",
                "role": "admin",
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["fullName"] == "João Silva"
        assert body["role"] == "admin"
        assert body["isActive"] is True
        assert "password" not in body

    def test_password_is_stored_hashed(self, client, storage, make_user):
        user = make_user(password="segredo99")
        stored = storage.get(USERS, user["id"])
        assert stored["password"] != "segredo99"
        assert verify_password("segredo99", stored["password"])

    def test_duplicate_username_is_rejected(self, client, make_user):
        make_user(username="jsilva")
        response = client.post(
            "/api/users",
            json={
                "username": "jsilva",
                "password": "secret123",
                "fullName": "Outro Silva",
                "email": "outro@acmecorp.com",
            },
        )
        assert response.status_code == 409

    def test_invalid_body_returns_400_with_field_errors(self, client):
        response = client.post(
            "/api/users",
            json={"username": "ab", "password": "123", "fullName": "Jo", "email": "nope"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        fields = {err["field"] for err in body["errors"]}
        assert {"username", "password", "fullName", "email"} <= fields


class TestReadUpdateDelete:
    def test_list_users(self, client, make_user):
        make_user()
        make_user()
        assert len(client.get("/api/users").json()) == 2

    def test_get_unknown_user_returns_404(self, client):
        response = client.get("/api/users/42")
        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    def test_get_deleted_user_returns_404(self, client, make_user):
        user = make_user()
        assert client.delete(f"/api/users/{user['id']}").status_code == 204
        assert client.get(f"/api/users/{user['id']}").status_code == 404
        assert client.delete(f"/api/users/{user['id']}").status_code == 404

    def test_partial_update_keeps_other_fields(self, client, make_user):
        user = make_user()
        response = client.put(f"/api/users/{user['id']}", json={"isActive": False})
        assert response.status_code == 200
        updated = response.json()
        assert updated["isActive"] is False
        assert {k: v for k, v in updated.items() if k != "isActive"} == {
            k: v for k, v in user.items() if k != "isActive"
        }

    def test_update_password_is_hashed(self, client, storage, make_user):
        user = make_user()
        client.put(f"/api/users/{user['id']}", json={"password": "novasenha"})
        assert verify_password("novasenha", storage.get(USERS, user["id"])["password"])

    def test_rename_to_taken_username_conflicts(self, client, make_user):
        make_user(username="taken")
        other = make_user()
        response = client.put(f"/api/users/{other['id']}", json={"username": "taken"})
        assert response.status_code == 409

    def test_update_unknown_user_returns_404(self, client):
        assert client.put("/api/users/9", json={"role": "admin"}).status_code == 404

    def test_non_integer_id_is_a_validation_error(self, client):
        assert client.get("/api/users/abc").status_code == 400


class TestUserGroups:
    def test_groups_for_user(self, client, make_user, make_group):
        user = make_user()
        finance = make_group("Financeiro")
        legal = make_group("Jurídico")
        make_group("TI - Infraestrutura")
        for group in (finance, legal):
            client.post("/api/user-groups/members", json={"userId": user["id"], "groupId": group["id"]})

        groups = client.get(f"/api/users/{user['id']}/groups").json()
        assert [g["name"] for g in groups] == ["Financeiro", "Jurídico"]

    def test_groups_for_unknown_user(self, client):
        assert client.get("/api/users/5/groups").status_code == 404
