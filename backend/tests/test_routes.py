"""
HTTP tests for the settings and chat endpoints, using FastAPI's TestClient
around an app built with a fake-transport session manager.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import MODELS, TransportFactory, bad_request_error, capacity_error
from gemini.registry import CredentialRegistry
from gemini.session_manager import NO_KEY_REPORT, FallbackSessionManager
from main import create_app
from store import MemoryStore


def _client(registry: CredentialRegistry, factory: TransportFactory) -> TestClient:
    manager = FallbackSessionManager(registry, transport_factory=factory)
    return TestClient(create_app(manager))


@pytest.fixture
def client(registry, factory):
    return _client(registry, factory)


@pytest.fixture
def unconfigured(factory):
    return _client(CredentialRegistry(MemoryStore(), models=MODELS), factory)


class TestSettingsRoutes:

    def test_health(self, client):
        assert client.get("/").json() == {"status": "ok", "service": "tutor"}

    def test_get_settings(self, client):
        body = client.get("/settings").json()
        assert body == {
            "has_credential": True,
            "preferred_model": "model-a",
            "current_model": "model-a",
            "models": MODELS,
        }

    def test_set_credential(self, unconfigured):
        assert unconfigured.get("/settings").json()["has_credential"] is False

        res = unconfigured.put("/settings/credential", json={"api_key": "new-key"})

        assert res.status_code == 204
        assert unconfigured.get("/settings").json()["has_credential"] is True

    def test_blank_credential_rejected(self, unconfigured):
        res = unconfigured.put("/settings/credential", json={"api_key": "   "})
        assert res.status_code == 400
        assert unconfigured.get("/settings").json()["has_credential"] is False

    def test_set_model(self, client):
        assert client.put("/settings/model", json={"model": "model-b"}).status_code == 204
        assert client.get("/settings").json()["preferred_model"] == "model-b"

    def test_unknown_model_rejected(self, client):
        res = client.put("/settings/model", json={"model": "model-z"})
        assert res.status_code == 400


class TestChatRoutes:

    def test_start(self, client, registry):
        registry.set_preferred_model("model-c")
        res = client.post("/chat/start")
        assert res.status_code == 200
        assert res.json() == {"model": "model-c"}

    def test_start_without_key(self, unconfigured):
        res = unconfigured.post("/chat/start")
        assert res.status_code == 400

    def test_message(self, client):
        res = client.post("/chat/message", json={"text": "What is 3 * 4?", "mode": "guide"})

        assert res.status_code == 200
        body = res.json()
        assert body["reply_text"] == "reply from model-a"
        assert body["model"] == "model-a"
        assert body["turn"]["role"] == "assistant"
        assert body["turn"]["text"] == "reply from model-a"

    def test_message_reports_fallback_model(self, client, factory):
        factory.script["model-a"] = capacity_error
        body = client.post("/chat/message", json={"text": "hi"}).json()
        assert body["model"] == "model-b"
        assert client.get("/settings").json()["current_model"] == "model-b"

    def test_message_with_image_only(self, client, factory):
        res = client.post("/chat/message", json={"image": "data:image/png;base64,AAAA"})
        assert res.status_code == 200
        payload = factory.last.sessions[0].sent[0]
        assert payload[1].inline_media.mime_type == "image/png"

    def test_empty_message_rejected(self, client):
        res = client.post("/chat/message", json={"text": "   "})
        assert res.status_code == 422

    def test_unknown_mode_rejected(self, client):
        res = client.post("/chat/message", json={"text": "hi", "mode": "cheat"})
        assert res.status_code == 422

    def test_bad_image(self, client):
        res = client.post("/chat/message", json={"text": "hi", "image": "garbage"})
        assert res.status_code == 400

    def test_message_without_key(self, unconfigured):
        res = unconfigured.post("/chat/message", json={"text": "hi"})
        assert res.status_code == 400
        assert "API key" in res.json()["detail"]

    def test_remote_failure_is_503(self, client, factory):
        factory.script["model-a"] = bad_request_error

        res = client.post("/chat/message", json={"text": "hi"})

        assert res.status_code == 503
        detail = res.json()["detail"]
        assert detail["model"] == "model-a"
        assert detail["message"].startswith("API error:")

    def test_summary(self, client, factory):
        factory.script["model-a"] = "**STUDENT SUPPORT REPORT**"
        turns = [
            {"role": "user", "text": "help with fractions"},
            {"role": "assistant", "text": "Sure, what is 1/2 + 1/4?"},
        ]

        res = client.post("/chat/summary", json={"turns": turns})

        assert res.status_code == 200
        assert res.json() == {"summary_text": "**STUDENT SUPPORT REPORT**"}

    def test_summary_never_fails(self, unconfigured):
        res = unconfigured.post("/chat/summary", json={"turns": []})
        assert res.status_code == 200
        assert res.json()["summary_text"] == NO_KEY_REPORT
