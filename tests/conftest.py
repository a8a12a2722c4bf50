import pytest
from fastapi.testclient import TestClient

from certguard_api.app.core.storage import MemStorage
from certguard_api.app.main import create_app


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def app(storage):
    return create_app(storage=storage, seed=False)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    counter = {"n": 0}

    def _make_user(**overrides):
        counter["n"] += 1
        body = {
            "username": f"user{counter['n']}",
            "password": "secret123",
            "fullName": f"Test User {counter['n']}",
            "email": f"user{counter['n']}@acmecorp.com",
        }
        body.update(overrides)
        response = client.post("/api/users", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_user


@pytest.fixture
def make_group(client):
    def _make_group(name="Financeiro", **overrides):
        response = client.post("/api/user-groups", json={"name": name, **overrides})
        assert response.status_code == 201, response.text
        return response.json()

    return _make_group


@pytest.fixture
def make_certificate(client):
    def _make_certificate(name="e-CNPJ Acme", **overrides):
        body = {
            "name": name,
            "type": "A1",
            "entityType": "PJ",
            "expiresAt": "2099-01-01T00:00:00Z",
            "createdBy": 1,
            "allowedActions": ["signing"],
        }
        body.update(overrides)
        response = client.post("/api/certificates", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_certificate


@pytest.fixture
def make_policy(client):
    def _make_policy(name="Horário Comercial", **overrides):
        response = client.post("/api/access-policies", json={"name": name, **overrides})
        assert response.status_code == 201, response.text
        return response.json()

    return _make_policy
