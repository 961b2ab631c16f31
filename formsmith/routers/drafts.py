from typing import Any

from fastapi import APIRouter, File, UploadFile

from formsmith.models.drafts import (
    AddQuestionRequest,
    DraftResponse,
    OpenDraftRequest,
    QuestionAction,
    ReorderRequest,
    UpdateDetailsRequest,
)
from formsmith.models.render import FormView
from formsmith.notifications import CollectingNotifier
from formsmith.services import builder
from formsmith.services import drafts as drafts_service

router = APIRouter(prefix="/api/drafts", tags=["drafts"])


def _draft(draft_id: str, form, notifier: CollectingNotifier | None = None) -> DraftResponse:
    notifications = notifier.notifications if notifier else []
    return DraftResponse(draft_id=draft_id, form=form, notifications=notifications)


@router.post("")
def open_draft(request: OpenDraftRequest) -> DraftResponse:
    with CollectingNotifier().reporting() as notifier:
        draft_id, form = drafts_service.open_draft(
            notifier, form_id=request.form_id, title=request.title, description=request.description,
        )
    return _draft(draft_id, form, notifier)


@router.get("/{draft_id}")
def get_draft(draft_id: str) -> DraftResponse:
    return _draft(draft_id, drafts_service.get_draft(draft_id))


@router.delete("/{draft_id}")
def close_draft(draft_id: str) -> dict:
    drafts_service.close_draft(draft_id)
    return {"closed": draft_id}


@router.patch("/{draft_id}")
def update_details(draft_id: str, request: UpdateDetailsRequest) -> DraftResponse:
    form = drafts_service.edit_draft(
        draft_id, builder.update_details, title=request.title, description=request.description,
    )
    return _draft(draft_id, form)


@router.post("/{draft_id}/questions")
def add_question(draft_id: str, request: AddQuestionRequest) -> DraftResponse:
    return _draft(draft_id, drafts_service.edit_draft(draft_id, builder.add_question, request.type))


@router.patch("/{draft_id}/questions/{question_id}")
def update_question(draft_id: str, question_id: str, patch: dict[str, Any]) -> DraftResponse:
    return _draft(draft_id, drafts_service.edit_draft(draft_id, builder.update_question, question_id, patch))


@router.delete("/{draft_id}/questions/{question_id}")
def delete_question(draft_id: str, question_id: str) -> DraftResponse:
    return _draft(draft_id, drafts_service.edit_draft(draft_id, builder.delete_question, question_id))


@router.post("/{draft_id}/reorder")
def reorder_question(draft_id: str, request: ReorderRequest) -> DraftResponse:
    form = drafts_service.edit_draft(
        draft_id, builder.reorder_question, request.from_index, request.to_index,
    )
    return _draft(draft_id, form)


@router.post("/{draft_id}/questions/{question_id}/actions")
def apply_action(draft_id: str, question_id: str, action: QuestionAction) -> DraftResponse:
    return _draft(draft_id, drafts_service.edit_draft(draft_id, builder.apply_action, question_id, action))


@router.get("/{draft_id}/preview")
def preview_draft(draft_id: str) -> FormView:
    return drafts_service.preview_draft(draft_id)


@router.post("/{draft_id}/save")
def save_draft(draft_id: str) -> DraftResponse:
    with CollectingNotifier().reporting() as notifier:
        form = drafts_service.save_draft(draft_id, notifier)
    return _draft(draft_id, form, notifier)


@router.post("/{draft_id}/header-image")
def upload_header_image(draft_id: str, image: UploadFile = File(...)) -> DraftResponse:
    form = drafts_service.upload_header_image(
        draft_id, image.filename or "image", image.file.read(), image.content_type or "application/octet-stream",
    )
    return _draft(draft_id, form)


@router.post("/{draft_id}/questions/{question_id}/image")
def upload_question_image(draft_id: str, question_id: str, image: UploadFile = File(...)) -> DraftResponse:
    form = drafts_service.upload_question_image(
        draft_id, question_id,
        image.filename or "image", image.file.read(), image.content_type or "application/octet-stream",
    )
    return _draft(draft_id, form)
