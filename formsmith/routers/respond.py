from fastapi import APIRouter

from formsmith.models.respond import AnswerEntryRequest, ResponseSessionView, SubmitResult
from formsmith.notifications import CollectingNotifier
from formsmith.services import respond as respond_service
from formsmith.services.render import render_form

router = APIRouter(prefix="/api/respond", tags=["respond"])


def _view(session_id: str, session, notifier: CollectingNotifier | None = None) -> ResponseSessionView:
    return ResponseSessionView(
        session_id=session_id,
        form=render_form(session.form, session.answers),
        answers=session.answers,
        notifications=notifier.notifications if notifier else [],
    )


@router.post("/{share_link}")
def start_session(share_link: str) -> ResponseSessionView:
    with CollectingNotifier().reporting() as notifier:
        session_id, session = respond_service.start_session(share_link, notifier)
    return _view(session_id, session, notifier)


@router.get("/sessions/{session_id}")
def get_session(session_id: str) -> ResponseSessionView:
    return _view(session_id, respond_service.get_session(session_id))


@router.put("/sessions/{session_id}/answers/{question_id}")
def set_answer(session_id: str, question_id: str, request: AnswerEntryRequest) -> ResponseSessionView:
    session = respond_service.set_answer(session_id, question_id, request.key, request.value)
    return _view(session_id, session)


@router.delete("/sessions/{session_id}")
def close_session(session_id: str) -> dict:
    respond_service.close_session(session_id)
    return {"closed": session_id}


@router.post("/sessions/{session_id}/submit")
def submit(session_id: str) -> SubmitResult:
    with CollectingNotifier().reporting() as notifier:
        response = respond_service.submit(session_id, notifier)
    return SubmitResult(response=response, notifications=notifier.notifications)
