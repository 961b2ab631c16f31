import pytest

from formsmith.exceptions import NetworkError
from formsmith.models.forms import FormDocument
from formsmith.notifications import CollectingNotifier
from formsmith.services import forms as forms_service
from conftest import DRAFT_API_DOC, FORM_API_DOC


@pytest.fixture
def mock_storage(mocker):
    return mocker.patch("formsmith.services.forms.storage")


@pytest.fixture
def notifier():
    return CollectingNotifier()


def _messages(notifier):
    return [(n.kind, n.message) for n in notifier.notifications]


class TestListForms:
    def test_summaries(self, notifier, mock_storage):
        mock_storage.list_forms.return_value = [
            FormDocument.model_validate(FORM_API_DOC),
            FormDocument.model_validate(DRAFT_API_DOC),
        ]
        mock_storage.share_url.side_effect = lambda f: f"http://app.test/preview/{f.share_link}" if f.share_link else None
        summaries = forms_service.list_forms(notifier)
        assert [s.question_count for s in summaries] == [3, 0]
        assert summaries[0].share_url == "http://app.test/preview/share789"
        assert summaries[1].share_url is None
        assert summaries[1].is_published is False
        assert notifier.notifications == []

    def test_failure(self, notifier, mock_storage):
        mock_storage.list_forms.side_effect = NetworkError("down")
        with pytest.raises(NetworkError):
            forms_service.list_forms(notifier)
        assert _messages(notifier) == [("error", "Error fetching forms")]


class TestGetForm:
    def test_failure(self, notifier, mock_storage):
        mock_storage.get_form.side_effect = NetworkError("gone", status_code=404)
        with pytest.raises(NetworkError):
            forms_service.get_form("form123", notifier)
        assert _messages(notifier) == [("error", "Error fetching form")]


class TestPublish:
    def test_success(self, notifier, mock_storage):
        mock_storage.publish_form.return_value = FormDocument.model_validate(FORM_API_DOC)
        mock_storage.share_url.return_value = "http://app.test/preview/share789"
        result = forms_service.publish_form("form123", notifier)
        assert result.share_url == "http://app.test/preview/share789"
        assert _messages(notifier) == [("success", "Form published")]

    def test_failure(self, notifier, mock_storage):
        mock_storage.publish_form.side_effect = NetworkError("down")
        with pytest.raises(NetworkError):
            forms_service.publish_form("form123", notifier)
        assert _messages(notifier) == [("error", "Error publishing form")]


class TestDelete:
    def test_success(self, notifier, mock_storage):
        forms_service.delete_form("form123", notifier)
        mock_storage.delete_form.assert_called_once_with("form123")
        assert _messages(notifier) == [("success", "Form deleted")]

    def test_failure(self, notifier, mock_storage):
        mock_storage.delete_form.side_effect = NetworkError("gone", status_code=404)
        with pytest.raises(NetworkError):
            forms_service.delete_form("form123", notifier)
        assert _messages(notifier) == [("error", "Error deleting form")]
