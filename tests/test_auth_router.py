from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from betterlife.api import deps
from betterlife.application.use_cases.get_advice import GetAdviceUseCase
from betterlife.infrastructure.identity.demo_identity_service import DemoIdentityService
from betterlife.infrastructure.security.password_hasher import PasswordHasher
from betterlife.infrastructure.storage.key_value_store import InMemoryKeyValueStore
from betterlife.main import app


class EchoInferencePort:
    def __init__(self):
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return "Eat ugali with sukuma wiki."


@pytest.fixture
def client():
    identity = DemoIdentityService(
        store=InMemoryKeyValueStore(),
        password_hasher=PasswordHasher(),
        token_service=deps._get_token_service(),
    )
    app.dependency_overrides[deps.get_identity_port] = lambda: identity
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_sign_up_returns_session_token(client):
    response = client.post(
        "/v1/auth/signup",
        json={"email": "wanjiru@example.com", "password": "pw", "full_name": "Wanjiru"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["user"]["id"] == "mock-user-1"
    assert payload["user"]["user_metadata"] == {"full_name": "Wanjiru"}
    assert payload["session"]["token_type"] == "bearer"


def test_duplicate_sign_up_is_bad_request(client):
    client.post("/v1/auth/signup", json={"email": "a@example.com", "password": "pw"})

    response = client.post("/v1/auth/signup", json={"email": "a@example.com", "password": "pw"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_wrong_password_is_unauthorized(client):
    client.post("/v1/auth/signup", json={"email": "a@example.com", "password": "pw"})

    response = client.post("/v1/auth/signin", json={"email": "a@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_token_identifies_caller_on_advice(client):
    inference = EchoInferencePort()
    app.dependency_overrides[deps.get_get_advice_use_case] = lambda: GetAdviceUseCase(inference_port=inference)
    token = client.post(
        "/v1/auth/signup",
        json={"email": "a@example.com", "password": "pw", "full_name": "Wanjiru"},
    ).json()["session"]["access_token"]

    response = client.post(
        "/v1/advice",
        json={"topic": "diet", "query": "What should I eat?"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 200
    assert response.json() == {"topic": "diet", "text": "Eat ugali with sukuma wiki."}
    assert "What should I eat?" in inference.prompts[0]


def test_garbage_token_is_unauthorized(client):
    response = client.post(
        "/v1/advice",
        json={"topic": "diet", "query": "hi"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401


def _sign_up(client, email: str) -> str:
    response = client.post("/v1/auth/signup", json={"email": email, "password": "pw"})
    return response.json()["session"]["access_token"]


def test_sign_out_requires_token(client):
    response = client.post("/v1/auth/signout")

    assert response.status_code == 401


def test_sign_out_ends_only_the_callers_session(client):
    app.dependency_overrides[deps.get_get_advice_use_case] = (
        lambda: GetAdviceUseCase(inference_port=EchoInferencePort())
    )
    alice = _sign_up(client, "alice@example.com")
    bob = _sign_up(client, "bob@example.com")

    signed_out = client.post("/v1/auth/signout", headers={"Authorization": f"Bearer {alice}"})
    alice_after = client.post(
        "/v1/advice",
        json={"topic": "diet", "query": "hi"},
        headers={"Authorization": f"Bearer {alice}"},
    )
    bob_after = client.post(
        "/v1/advice",
        json={"topic": "diet", "query": "hi"},
        headers={"Authorization": f"Bearer {bob}"},
    )

    assert signed_out.json() == {"ok": True}
    assert alice_after.status_code == 401
    assert bob_after.status_code == 200
