# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from support import CHAT_URL, FakeRenderer, RecordingBackend
from studyspace.core.services.study_space import StudySpace
from studyspace.core.storage import StorageAdapter
from studyspace.dependencies import get_study_space
from studyspace.main import app


@pytest.fixture
def storage():
    return StorageAdapter()


@pytest.fixture
def chat_backend():
    return RecordingBackend(json={"response": "Photosynthesis turns light into sugar."})


@pytest.fixture
def renderer():
    return FakeRenderer([f"Page {i} text." for i in range(1, 8)])


@pytest.fixture
def study_space(storage, chat_backend, renderer):
    return StudySpace(storage, CHAT_URL, renderer=renderer, transport=chat_backend.transport)


@pytest.fixture
def client(study_space):
    app.dependency_overrides[get_study_space] = lambda: study_space
    yield TestClient(app)
    app.dependency_overrides.clear()
