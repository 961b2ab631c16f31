"""Client for the form storage REST API and its image upload endpoint."""

import logging

import requests

from formsmith.config import get_settings
from formsmith.exceptions import NetworkError, UploadError
from formsmith.http_client import get_session
from formsmith.models.forms import FormDocument, FormResponse, QuestionAnswer, UploadResult

log = logging.getLogger("formsmith.storage")


def _api_url(path: str) -> str:
    return f"{get_settings().api_url.rstrip('/')}/{path.lstrip('/')}"


def _request(method: str, url: str, action: str, error_cls=NetworkError, **kwargs) -> requests.Response:
    """Send one request and raise error_cls on transport failure or HTTP error."""
    try:
        resp = get_session().request(method, url, timeout=get_settings().request_timeout, **kwargs)
    except requests.RequestException as e:
        log.error("%s failed: %s", action, e)
        raise error_cls(f"{action} failed: {e}") from e
    if resp.status_code >= 400:
        log.error("%s failed (HTTP %s): %s", action, resp.status_code, resp.text[:500])
        raise error_cls(
            f"{action} failed (HTTP {resp.status_code}): {resp.text[:500]}",
            status_code=resp.status_code,
        )
    return resp


def _form_body(form: FormDocument) -> dict:
    return form.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"id"})


# --- Forms ---

def create_form(form: FormDocument) -> FormDocument:
    """Store a new form. The returned document carries the assigned id."""
    resp = _request("POST", _api_url("/forms"), "Create form", json=_form_body(form))
    return FormDocument.model_validate(resp.json())


def list_forms() -> list[FormDocument]:
    resp = _request("GET", _api_url("/forms"), "List forms")
    return [FormDocument.model_validate(item) for item in resp.json()]


def get_form(form_id: str) -> FormDocument:
    resp = _request("GET", _api_url(f"/forms/{form_id}"), f"Fetch form {form_id}")
    return FormDocument.model_validate(resp.json())


def get_form_by_share_link(share_link: str) -> FormDocument:
    """Fetch a published form by its public share link."""
    resp = _request("GET", _api_url(f"/forms/share/{share_link}"), f"Fetch shared form {share_link}")
    return FormDocument.model_validate(resp.json())


def update_form(form_id: str, form: FormDocument) -> FormDocument:
    resp = _request("PUT", _api_url(f"/forms/{form_id}"), f"Update form {form_id}", json=_form_body(form))
    return FormDocument.model_validate(resp.json())


def delete_form(form_id: str) -> None:
    _request("DELETE", _api_url(f"/forms/{form_id}"), f"Delete form {form_id}")


def publish_form(form_id: str) -> FormDocument:
    """Mark a form published; storage assigns its share link."""
    resp = _request("PATCH", _api_url(f"/forms/{form_id}/publish"), f"Publish form {form_id}")
    return FormDocument.model_validate(resp.json())


def share_url(form: FormDocument) -> str | None:
    if not form.is_published or not form.share_link:
        return None
    return f"{get_settings().share_base_url.rstrip('/')}/{form.share_link}"


# --- Responses ---

def submit_response(form_id: str, payload: list[QuestionAnswer]) -> FormResponse:
    body = {"responses": [item.model_dump(mode="json", by_alias=True) for item in payload]}
    resp = _request("POST", _api_url(f"/responses/{form_id}"), f"Submit response to {form_id}", json=body)
    return FormResponse.model_validate(resp.json())


def list_responses(form_id: str) -> list[FormResponse]:
    resp = _request("GET", _api_url(f"/responses/{form_id}"), f"List responses for {form_id}")
    return [FormResponse.model_validate(item) for item in resp.json()]


def get_response(response_id: str) -> FormResponse:
    resp = _request("GET", _api_url(f"/responses/response/{response_id}"), f"Fetch response {response_id}")
    return FormResponse.model_validate(resp.json())


# --- Uploads ---

def upload_image(filename: str, content: bytes, content_type: str = "application/octet-stream") -> UploadResult:
    """Store an image and return its path relative to the API origin."""
    url = f"{get_settings().api_origin}/upload"
    resp = _request(
        "POST", url, f"Upload {filename}", error_cls=UploadError,
        files={"image": (filename, content, content_type)},
    )
    return UploadResult.model_validate(resp.json())
