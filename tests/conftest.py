import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from formsmith.config import get_settings
from formsmith.models.forms import FormDocument
from formsmith.services.sessions import get_draft_store, get_response_store


# --- Canned storage API documents ---

CATEGORIZE_API_QUESTION = {
    "id": "q1",
    "type": "categorize",
    "title": "Sort the animals",
    "required": True,
    "order": 0,
    "categories": ["Mammal", "Bird"],
    "items": [
        {"id": "i1", "text": "Dog", "category": "Mammal", "_id": "665f00000000000000000001"},
        {"id": "i2", "text": "Eagle", "category": "Bird"},
    ],
}

CLOZE_API_QUESTION = {
    "id": "q2",
    "type": "cloze",
    "title": "Fill in the colours",
    "required": False,
    "order": 1,
    "text": "The sky is _____ and grass is _____.",
    "blanks": [
        {"id": "b1", "correctAnswer": "blue"},
        {"id": "b2", "correctAnswer": "green"},
    ],
}

COMPREHENSION_API_QUESTION = {
    "id": "q3",
    "type": "comprehension",
    "title": "Read about cats",
    "required": True,
    "order": 2,
    "image": "/uploads/cats.png",
    "passage": "Cats sleep for most of the day.",
    "questions": [
        {"id": "s1", "question": "Who sleeps?", "type": "text", "correctAnswer": "Cats"},
        {
            "id": "s2",
            "question": "How long?",
            "type": "multiple-choice",
            "options": ["Most of the day", "An hour"],
            "correctAnswer": "Most of the day",
        },
    ],
}

FORM_API_DOC = {
    "_id": "form123",
    "title": "Science quiz",
    "description": "Week 3 revision",
    "headerImage": "/uploads/header.png",
    "questions": [CATEGORIZE_API_QUESTION, CLOZE_API_QUESTION, COMPREHENSION_API_QUESTION],
    "createdAt": "2025-01-01T00:00:00Z",
    "updatedAt": "2025-01-02T00:00:00Z",
    "isPublished": True,
    "shareLink": "share789",
    "__v": 0,
}

DRAFT_API_DOC = {
    "_id": "form456",
    "title": "Untitled draft",
    "description": "",
    "questions": [],
    "createdAt": "2025-02-01T00:00:00Z",
    "updatedAt": "2025-02-01T00:00:00Z",
    "isPublished": False,
}

RESPONSE_API_DOC = {
    "_id": "resp1",
    "formId": "form123",
    "responses": [
        {"questionId": "q1", "answers": {"i1": "Mammal", "i2": "Bird"}},
        {"questionId": "q3", "answers": {"s1": "Cats"}},
    ],
    "submittedAt": "2025-01-03T00:00:00Z",
}

UPLOAD_API_RESULT = {"filename": "photo-1700000000.png", "path": "/uploads/photo-1700000000.png"}


def make_response(status_code: int = 200, json_data=None, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data
    resp.text = text
    return resp


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Point the storage client at a fixed test origin."""
    monkeypatch.setenv("API_URL", "http://storage.test/api")
    monkeypatch.setenv("SHARE_BASE_URL", "http://app.test/preview")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def fresh_stores():
    get_draft_store.cache_clear()
    get_response_store.cache_clear()
    yield
    get_draft_store.cache_clear()
    get_response_store.cache_clear()


@pytest.fixture
def sample_form() -> FormDocument:
    return FormDocument.model_validate(FORM_API_DOC)


@pytest.fixture
def mock_http(mocker):
    """Mocked requests.Session used by the storage client."""
    session = MagicMock()
    mocker.patch("formsmith.services.storage.get_session", return_value=session)
    return session


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from formsmith.main import api
    return TestClient(api)
