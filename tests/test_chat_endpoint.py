# tests/test_chat_endpoint.py
import pytest
from fastapi.testclient import TestClient
from studyspace.core.config import settings
from studyspace.core.services.chat_service import ChatService, ChatServiceError
from studyspace.dependencies import get_chat_service
from studyspace.main import app

client = TestClient(app)

AUTH = {"Authorization": "Bearer student-token"}


class FakeChatService(ChatService):
    def __init__(self, answer="Mitochondria make ATP.", error=None):
        self.model = "fake"
        self.groq_client = object()
        self.answer = answer
        self.error = error
        self.calls = []

    def complete(self, prompt, temperature=0.7):
        self.calls.append((prompt, temperature))
        if self.error:
            raise ChatServiceError(self.error)
        return self.answer


@pytest.fixture
def chat_service():
    service = FakeChatService()
    app.dependency_overrides[get_chat_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def test_chat_returns_response_field(chat_service):
    response = client.post("/api/v1/chat", json={"prompt": "What do mitochondria do?", "temperature": 0.2}, headers=AUTH)
    assert response.status_code == 200
    assert response.json() == {"response": "Mitochondria make ATP."}
    assert chat_service.calls == [("What do mitochondria do?", 0.2)]


def test_chat_requires_bearer_token(chat_service):
    response = client.post("/api/v1/chat", json={"prompt": "hi"})
    assert response.status_code == 401
    assert chat_service.calls == []


def test_chat_checks_configured_tokens(chat_service, monkeypatch):
    monkeypatch.setattr(settings, "chat_access_tokens", ["other-token"])
    response = client.post("/api/v1/chat", json={"prompt": "hi"}, headers=AUTH)
    assert response.status_code == 401
    monkeypatch.setattr(settings, "chat_access_tokens", ["student-token"])
    response = client.post("/api/v1/chat", json={"prompt": "hi"}, headers=AUTH)
    assert response.status_code == 200


def test_chat_without_api_key_is_500():
    app.dependency_overrides[get_chat_service] = lambda: ChatService(None)
    try:
        response = client.post("/api/v1/chat", json={"prompt": "hi"}, headers=AUTH)
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 500
    assert response.json() == {"detail": "API key not configured."}


def test_chat_upstream_failure_is_502():
    app.dependency_overrides[get_chat_service] = lambda: FakeChatService(error="Upstream model error: boom")
    try:
        response = client.post("/api/v1/chat", json={"prompt": "hi"}, headers=AUTH)
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 502


def test_chat_service_without_key_raises():
    with pytest.raises(ChatServiceError):
        ChatService(None).complete("hi")
