from fastmcp import FastMCP

from formsmith.exceptions import BuilderError, FormValidationError, NetworkError, SessionNotFoundError
from formsmith.notifications import CollectingNotifier
from formsmith.services import builder
from formsmith.services import drafts as drafts_service
from formsmith.services import forms as forms_service

mcp = FastMCP("Formsmith")

_HANDLED = (BuilderError, FormValidationError, NetworkError, SessionNotFoundError)


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    result = _error_dict(e)
    notifications = getattr(e, "notifications", [])
    if notifications:
        result["notifications"] = [n.model_dump() for n in notifications]
    return result


def _error_dict(e: Exception) -> dict:
    if isinstance(e, FormValidationError):
        return {"error": "validation_error", "message": str(e), "missing": e.missing}
    if isinstance(e, BuilderError):
        return {"error": "builder_error", "message": str(e)}
    if isinstance(e, SessionNotFoundError):
        return {"error": "not_found", "message": str(e), "action": "Open a new draft with draft_open"}
    if isinstance(e, NetworkError):
        return {"error": "storage_error", "message": str(e), "action": "Check that the form storage API is running, then retry"}
    return {"error": "unknown_error", "message": str(e)}


def _draft_dict(draft_id: str, form, notifier: CollectingNotifier | None = None) -> dict:
    result = {"draft_id": draft_id, "form": form.model_dump(mode="json", by_alias=True)}
    if notifier:
        result["notifications"] = [n.model_dump() for n in notifier.notifications]
    return result


# --- Stored forms ---

@mcp.tool
def forms_list() -> dict:
    """List stored forms with their title, question count, publish state and share URL."""
    try:
        with CollectingNotifier().reporting() as notifier:
            forms = forms_service.list_forms(notifier)
        return {"forms": [f.model_dump(mode="json") for f in forms], "count": len(forms)}
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def form_get(form_id: str) -> dict:
    """Get a stored form with all of its questions."""
    try:
        with CollectingNotifier().reporting() as notifier:
            form = forms_service.get_form(form_id, notifier)
        return form.model_dump(mode="json", by_alias=True)
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def form_publish(form_id: str) -> dict:
    """Publish a stored form. Returns the form and the share URL respondents can open."""
    try:
        with CollectingNotifier().reporting() as notifier:
            result = forms_service.publish_form(form_id, notifier)
        result = result.model_copy(update={"notifications": notifier.notifications})
        return result.model_dump(mode="json", by_alias=True)
    except _HANDLED as e:
        return _handle_mcp_error(e)


# --- Drafts ---

@mcp.tool
def draft_open(form_id: str | None = None, title: str = "") -> dict:
    """Open a draft for editing. Pass form_id to edit a stored form, or a title to start a new one.
    Returns the draft_id used by the other draft tools."""
    try:
        with CollectingNotifier().reporting() as notifier:
            draft_id, form = drafts_service.open_draft(notifier, form_id=form_id, title=title)
        return _draft_dict(draft_id, form, notifier)
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def draft_add_question(draft_id: str, question_type: str) -> dict:
    """Append a question to a draft. question_type: categorize, cloze or comprehension.
    The question starts with sample content that can be changed with draft_update_question."""
    try:
        return _draft_dict(draft_id, drafts_service.edit_draft(draft_id, builder.add_question, question_type))
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def draft_update_question(draft_id: str, question_id: str, patch: dict) -> dict:
    """Change fields of one question, e.g. {"title": "...", "required": true} or
    {"text": "The _____ is blue."} for cloze. id, order and type cannot be changed."""
    try:
        return _draft_dict(draft_id, drafts_service.edit_draft(draft_id, builder.update_question, question_id, patch))
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def draft_reorder(draft_id: str, from_index: int, to_index: int) -> dict:
    """Move a question from one position to another (0-based)."""
    try:
        return _draft_dict(
            draft_id, drafts_service.edit_draft(draft_id, builder.reorder_question, from_index, to_index),
        )
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def draft_preview(draft_id: str) -> dict:
    """Render a draft the way respondents will see it: cloze segments and blanks,
    category selectors, comprehension inputs."""
    try:
        return drafts_service.preview_draft(draft_id).model_dump(mode="json")
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def draft_save(draft_id: str) -> dict:
    """Save a draft to form storage. The form needs a non-empty title."""
    try:
        with CollectingNotifier().reporting() as notifier:
            form = drafts_service.save_draft(draft_id, notifier)
        return _draft_dict(draft_id, form, notifier)
    except _HANDLED as e:
        return _handle_mcp_error(e)
