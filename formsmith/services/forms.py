"""Stored forms: listing, publishing, deletion and collected responses."""

from formsmith.exceptions import NetworkError
from formsmith.models.forms import FormDocument, FormResponse, FormSummary, PublishResult
from formsmith.notifications import Notifier
from formsmith.services import storage


def _summarize(form: FormDocument) -> FormSummary:
    return FormSummary(
        id=form.id,
        title=form.title,
        description=form.description,
        question_count=len(form.questions),
        is_published=form.is_published,
        share_url=storage.share_url(form),
        created_at=form.created_at,
    )


def list_forms(notifier: Notifier) -> list[FormSummary]:
    try:
        forms = storage.list_forms()
    except NetworkError:
        notifier.error("Error fetching forms")
        raise
    return [_summarize(form) for form in forms]


def get_form(form_id: str, notifier: Notifier) -> FormDocument:
    try:
        return storage.get_form(form_id)
    except NetworkError:
        notifier.error("Error fetching form")
        raise


def publish_form(form_id: str, notifier: Notifier) -> PublishResult:
    try:
        form = storage.publish_form(form_id)
    except NetworkError:
        notifier.error("Error publishing form")
        raise
    notifier.success("Form published")
    return PublishResult(form=form, share_url=storage.share_url(form))


def delete_form(form_id: str, notifier: Notifier) -> None:
    try:
        storage.delete_form(form_id)
    except NetworkError:
        notifier.error("Error deleting form")
        raise
    notifier.success("Form deleted")


def list_responses(form_id: str) -> list[FormResponse]:
    return storage.list_responses(form_id)


def get_response(response_id: str) -> FormResponse:
    return storage.get_response(response_id)
