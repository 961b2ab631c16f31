"""Open drafts: builder edits, preview, save and image uploads."""

import logging
from collections.abc import Callable

from formsmith.exceptions import FormValidationError, NetworkError, SessionNotFoundError, UploadError
from formsmith.models.forms import FormDocument
from formsmith.models.render import FormView
from formsmith.notifications import Notifier
from formsmith.services import builder, storage
from formsmith.services.render import render_form
from formsmith.services.sessions import Draft, get_draft_store

log = logging.getLogger("formsmith.drafts")


def open_draft(
    notifier: Notifier,
    form_id: str | None = None,
    title: str = "",
    description: str = "",
) -> tuple[str, FormDocument]:
    """Start a draft, either empty or loaded from a stored form."""
    if form_id:
        try:
            form = storage.get_form(form_id)
        except NetworkError:
            notifier.error("Error fetching form")
            raise
    else:
        form = builder.new_form(title, description)
    draft_id = get_draft_store().open(Draft(form=form))
    log.info("Opened draft %s (form %s)", draft_id, form.id or "new")
    return draft_id, form


def get_draft(draft_id: str) -> FormDocument:
    return get_draft_store().get(draft_id).form


def close_draft(draft_id: str) -> None:
    get_draft_store().close(draft_id)


def edit_draft(draft_id: str, op: Callable[..., FormDocument], *args, **kwargs) -> FormDocument:
    """Apply a builder operation to the live draft and return the new snapshot."""
    draft = get_draft_store().update(draft_id, lambda d: Draft(form=op(d.form, *args, **kwargs)))
    return draft.form


def preview_draft(draft_id: str) -> FormView:
    return render_form(get_draft(draft_id))


def _adopt_identity(current: FormDocument, saved: FormDocument) -> FormDocument:
    # keep edits made while the save was in flight
    return current.model_copy(update={
        "id": saved.id,
        "created_at": saved.created_at,
        "updated_at": saved.updated_at,
        "is_published": saved.is_published,
        "share_link": saved.share_link,
    })


def _complete(draft_id: str, op: Callable[[FormDocument], FormDocument]) -> FormDocument:
    draft = get_draft_store().complete(draft_id, lambda d: Draft(form=op(d.form)))
    if draft is None:
        raise SessionNotFoundError(f"Draft {draft_id} was closed before the request finished")
    return draft.form


def save_draft(draft_id: str, notifier: Notifier) -> FormDocument:
    """Create or update the stored form behind a draft.

    An untitled form is rejected before any network call. On failure the
    draft is left exactly as it was.
    """
    form = get_draft(draft_id)
    if not form.title.strip():
        notifier.warning("Please enter a form title")
        raise FormValidationError("Form title is required")
    try:
        if form.id:
            saved = storage.update_form(form.id, form)
        else:
            saved = storage.create_form(form)
    except NetworkError as e:
        notifier.error(f"Error saving form: {e}")
        raise
    saved_form = _complete(draft_id, lambda current: _adopt_identity(current, saved))
    notifier.success("Form updated" if form.id else "Form created")
    return saved_form


def upload_header_image(draft_id: str, filename: str, content: bytes, content_type: str) -> FormDocument:
    """Upload an image and make it the draft's header image.

    A failed upload is logged only; the previous header image stays.
    """
    get_draft(draft_id)
    try:
        result = storage.upload_image(filename, content, content_type)
    except UploadError as e:
        log.error("Header image upload for draft %s failed: %s", draft_id, e)
        raise
    return _complete(draft_id, lambda form: builder.set_header_image(form, result.path))


def upload_question_image(
    draft_id: str,
    question_id: str,
    filename: str,
    content: bytes,
    content_type: str,
) -> FormDocument:
    get_draft(draft_id)
    try:
        result = storage.upload_image(filename, content, content_type)
    except UploadError as e:
        log.error("Image upload for question %s in draft %s failed: %s", question_id, draft_id, e)
        raise
    return _complete(draft_id, lambda form: builder.set_question_image(form, question_id, result.path))
