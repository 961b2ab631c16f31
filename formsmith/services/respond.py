"""Respondent sessions: load a shared form, collect answers, submit."""

import logging

from formsmith.exceptions import FormValidationError, NetworkError, SessionNotFoundError
from formsmith.models.forms import FormResponse
from formsmith.notifications import Notifier
from formsmith.services import storage
from formsmith.services.builder import find_question
from formsmith.services.responses import assemble_payload, set_answer_entry, validate
from formsmith.services.sessions import ResponseSession, get_response_store

log = logging.getLogger("formsmith.respond")


def start_session(share_link: str, notifier: Notifier) -> tuple[str, ResponseSession]:
    try:
        form = storage.get_form_by_share_link(share_link)
    except NetworkError:
        notifier.error("Form not found or not published")
        raise
    session = ResponseSession(form=form)
    session_id = get_response_store().open(session)
    log.info("Opened response session %s for form %s", session_id, form.id)
    return session_id, session


def get_session(session_id: str) -> ResponseSession:
    return get_response_store().get(session_id)


def close_session(session_id: str) -> None:
    get_response_store().close(session_id)


def set_answer(session_id: str, question_id: str, key: str, value: str) -> ResponseSession:
    """Record one answer entry for a question in the session's form."""
    def apply(session: ResponseSession) -> ResponseSession:
        if find_question(session.form, question_id) is None:
            raise FormValidationError(f"Form has no question {question_id}")
        return ResponseSession(
            form=session.form,
            answers=set_answer_entry(session.answers, question_id, key, value),
        )

    return get_response_store().update(session_id, apply)


def submit(session_id: str, notifier: Notifier) -> FormResponse:
    """Validate and submit a session's answers, then close the session.

    Unanswered required questions block submission before any network call.
    """
    session = get_session(session_id)
    result = validate(session.form, session.answers)
    if not result.ready:
        notifier.warning("Please fill in all required questions")
        raise FormValidationError("Required questions are unanswered", missing=result.missing)
    payload = assemble_payload(session.answers)
    try:
        response = storage.submit_response(session.form.id, payload)
    except NetworkError:
        notifier.error("Error submitting response")
        raise
    try:
        close_session(session_id)
    except SessionNotFoundError:
        log.warning("Response session %s closed while submitting", session_id)
    notifier.success("Your response has been submitted")
    return response
