from fastapi import APIRouter

from formsmith.models.forms import FormDocument, FormResponse, FormSummary, PublishResult
from formsmith.notifications import CollectingNotifier
from formsmith.services import forms as forms_service

router = APIRouter(prefix="/api/forms", tags=["forms"])


@router.get("")
def list_forms() -> list[FormSummary]:
    with CollectingNotifier().reporting() as notifier:
        return forms_service.list_forms(notifier)


@router.get("/{form_id}")
def get_form(form_id: str) -> FormDocument:
    with CollectingNotifier().reporting() as notifier:
        return forms_service.get_form(form_id, notifier)


@router.delete("/{form_id}")
def delete_form(form_id: str) -> dict:
    with CollectingNotifier().reporting() as notifier:
        forms_service.delete_form(form_id, notifier)
    return {"deleted": form_id, "notifications": [n.model_dump() for n in notifier.notifications]}


@router.post("/{form_id}/publish")
def publish_form(form_id: str) -> PublishResult:
    with CollectingNotifier().reporting() as notifier:
        result = forms_service.publish_form(form_id, notifier)
    return result.model_copy(update={"notifications": notifier.notifications})


@router.get("/{form_id}/responses")
def list_responses(form_id: str) -> list[FormResponse]:
    return forms_service.list_responses(form_id)


@router.get("/{form_id}/responses/{response_id}")
def get_response(form_id: str, response_id: str) -> FormResponse:
    return forms_service.get_response(response_id)
