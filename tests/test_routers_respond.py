import pytest

from formsmith.exceptions import NetworkError
from formsmith.models.forms import FormDocument, FormResponse
from conftest import FORM_API_DOC, RESPONSE_API_DOC


@pytest.fixture
def mock_storage(mocker):
    storage = mocker.patch("formsmith.services.respond.storage")
    storage.get_form_by_share_link.return_value = FormDocument.model_validate(FORM_API_DOC)
    storage.submit_response.return_value = FormResponse.model_validate(RESPONSE_API_DOC)
    return storage


@pytest.fixture
def session_id(api_client, mock_storage):
    resp = api_client.post("/api/respond/share789")
    assert resp.status_code == 200
    return resp.json()["session_id"]


def _answer(api_client, session_id, question_id, key, value):
    return api_client.put(
        f"/api/respond/sessions/{session_id}/answers/{question_id}",
        json={"key": key, "value": value},
    )


class TestStart:
    def test_renders_shared_form(self, api_client, mock_storage):
        data = api_client.post("/api/respond/share789").json()
        form = data["form"]
        assert form["title"] == "Science quiz"
        assert form["header_image_url"] == "http://storage.test/uploads/header.png"
        assert [q["body"]["type"] for q in form["questions"]] == ["categorize", "cloze", "comprehension"]
        assert data["answers"] == {}

    def test_unknown_link(self, api_client, mock_storage):
        mock_storage.get_form_by_share_link.side_effect = NetworkError("not found", status_code=404)
        resp = api_client.post("/api/respond/missing")
        assert resp.status_code == 404
        assert resp.json()["notifications"] == [{"kind": "error", "message": "Form not found or not published"}]


class TestAnswers:
    def test_prefills_view(self, api_client, session_id):
        resp = _answer(api_client, session_id, "q2", "blank_1", "green")
        assert resp.status_code == 200
        cloze = resp.json()["form"]["questions"][1]["body"]
        assert cloze["values"] == {"blank_0": "", "blank_1": "green"}

    def test_unknown_question(self, api_client, session_id):
        resp = _answer(api_client, session_id, "q99", "x", "y")
        assert resp.status_code == 400


class TestSubmit:
    def test_missing_required(self, api_client, session_id, mock_storage):
        _answer(api_client, session_id, "q1", "i1", "Mammal")
        resp = api_client.post(f"/api/respond/sessions/{session_id}/submit")
        assert resp.status_code == 400
        assert resp.json()["missing"] == ["q3"]
        assert resp.json()["notifications"] == [
            {"kind": "warning", "message": "Please fill in all required questions"},
        ]
        mock_storage.submit_response.assert_not_called()

    def test_submits(self, api_client, session_id, mock_storage):
        _answer(api_client, session_id, "q1", "i1", "Mammal")
        _answer(api_client, session_id, "q3", "s2", "An hour")
        resp = api_client.post(f"/api/respond/sessions/{session_id}/submit")
        assert resp.status_code == 200
        data = resp.json()
        assert data["response"]["_id"] == "resp1"
        assert data["notifications"][0]["kind"] == "success"
        assert api_client.get(f"/api/respond/sessions/{session_id}").status_code == 404

    def test_storage_failure(self, api_client, session_id, mock_storage):
        mock_storage.submit_response.side_effect = NetworkError("Submit response failed: refused")
        _answer(api_client, session_id, "q1", "i1", "Mammal")
        _answer(api_client, session_id, "q3", "s1", "Cats")
        resp = api_client.post(f"/api/respond/sessions/{session_id}/submit")
        assert resp.status_code == 502
        assert resp.json()["notifications"] == [{"kind": "error", "message": "Error submitting response"}]
        assert api_client.get(f"/api/respond/sessions/{session_id}").json()["answers"]["q1"] == {"i1": "Mammal"}

    def test_close(self, api_client, session_id):
        assert api_client.delete(f"/api/respond/sessions/{session_id}").status_code == 200
        assert api_client.post(f"/api/respond/sessions/{session_id}/submit").status_code == 404


class TestStatus:
    def test_counts_sessions(self, api_client, session_id):
        data = api_client.get("/api/status").json()
        assert data["storage_api"] == "http://storage.test/api"
        assert data["open_response_sessions"] == 1
        assert data["open_drafts"] == 0
