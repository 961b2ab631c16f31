from pydantic import BaseModel

from formsmith.models.common import Notification
from formsmith.models.forms import FormResponse
from formsmith.models.render import FormView


class AnswerEntryRequest(BaseModel):
    key: str  # item id, blank_<i> or sub-question id
    value: str


class ResponseSessionView(BaseModel):
    session_id: str
    form: FormView
    answers: dict[str, dict[str, str]]
    notifications: list[Notification] = []


class SubmitResult(BaseModel):
    response: FormResponse
    notifications: list[Notification] = []
