import pytest

from formsmith.exceptions import NetworkError
from formsmith.models.forms import FormDocument, FormSummary
from conftest import DRAFT_API_DOC, FORM_API_DOC


@pytest.fixture
def mock_forms(mocker):
    return mocker.patch("formsmith.mcp_server.forms_service")


@pytest.fixture
def mock_storage(mocker):
    return mocker.patch("formsmith.services.drafts.storage")


class TestFormsList:
    def test_returns_dict(self, mock_forms):
        mock_forms.list_forms.return_value = [
            FormSummary(id="form123", title="Quiz", question_count=2, is_published=False),
        ]
        from formsmith.mcp_server import forms_list
        result = forms_list.fn()
        assert result["count"] == 1
        assert result["forms"][0]["title"] == "Quiz"

    def test_storage_error(self, mock_forms):
        mock_forms.list_forms.side_effect = NetworkError("List forms failed: refused")
        from formsmith.mcp_server import forms_list
        result = forms_list.fn()
        assert result["error"] == "storage_error"


class TestDraftTools:
    def test_build_and_preview(self):
        from formsmith.mcp_server import draft_add_question, draft_open, draft_preview, draft_update_question
        draft_id = draft_open.fn(title="Quiz")["draft_id"]
        form = draft_add_question.fn(draft_id, "cloze")["form"]
        qid = form["questions"][0]["id"]
        draft_update_question.fn(draft_id, qid, {"text": "A _____ B _____ C"})
        preview = draft_preview.fn(draft_id)
        assert preview["questions"][0]["body"]["segments"] == ["A ", " B ", " C"]

    def test_bad_kind(self):
        from formsmith.mcp_server import draft_add_question, draft_open
        draft_id = draft_open.fn(title="Quiz")["draft_id"]
        assert draft_add_question.fn(draft_id, "essay")["error"] == "builder_error"

    def test_reorder_out_of_range(self):
        from formsmith.mcp_server import draft_open, draft_reorder
        draft_id = draft_open.fn(title="Quiz")["draft_id"]
        assert draft_reorder.fn(draft_id, 0, 1)["error"] == "builder_error"

    def test_unknown_draft(self):
        from formsmith.mcp_server import draft_preview
        assert draft_preview.fn("nope")["error"] == "not_found"

    def test_save_untitled(self, mock_storage):
        from formsmith.mcp_server import draft_open, draft_save
        draft_id = draft_open.fn()["draft_id"]
        result = draft_save.fn(draft_id)
        assert result["error"] == "validation_error"
        assert result["notifications"] == [{"kind": "warning", "message": "Please enter a form title"}]
        mock_storage.create_form.assert_not_called()

    def test_save(self, mock_storage):
        mock_storage.create_form.return_value = FormDocument.model_validate(DRAFT_API_DOC)
        from formsmith.mcp_server import draft_open, draft_save
        draft_id = draft_open.fn(title="Quiz")["draft_id"]
        result = draft_save.fn(draft_id)
        assert result["form"]["_id"] == "form456"
        assert result["notifications"] == [{"kind": "success", "message": "Form created"}]


class TestFormPublish:
    @pytest.fixture
    def mock_forms_storage(self, mocker):
        storage = mocker.patch("formsmith.services.forms.storage")
        storage.share_url.return_value = "http://app.test/preview/share789"
        return storage

    def test_success(self, mock_forms_storage):
        mock_forms_storage.publish_form.return_value = FormDocument.model_validate(FORM_API_DOC)
        from formsmith.mcp_server import form_publish
        result = form_publish.fn("form123")
        assert result["shareUrl"] == "http://app.test/preview/share789"
        assert result["notifications"] == [{"kind": "success", "message": "Form published"}]

    def test_failure(self, mock_forms_storage):
        mock_forms_storage.publish_form.side_effect = NetworkError("down")
        from formsmith.mcp_server import form_publish
        result = form_publish.fn("form123")
        assert result["error"] == "storage_error"
        assert result["notifications"] == [{"kind": "error", "message": "Error publishing form"}]
