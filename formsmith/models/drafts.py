from typing import Literal

from pydantic import BaseModel

from formsmith.models.common import Notification
from formsmith.models.forms import FormDocument
from formsmith.models.questions import QuestionType

ActionName = Literal[
    "add_category", "rename_category", "remove_category",
    "add_item", "update_item", "remove_item",
    "set_text", "add_blank", "update_blank", "remove_blank",
    "set_passage", "add_sub_question", "update_sub_question",
    "set_sub_question_type", "remove_sub_question",
    "add_option", "update_option", "remove_option",
]


class QuestionAction(BaseModel):
    action: ActionName
    index: int | None = None  # category / item / blank / sub-question position
    option_index: int | None = None
    value: str | None = None  # new label, text, answer or sub-question type
    category: str | None = None  # update_item only
    correct_answer: str | None = None  # update_sub_question only


class OpenDraftRequest(BaseModel):
    form_id: str | None = None  # load a stored form instead of starting empty
    title: str = ""
    description: str = ""


class UpdateDetailsRequest(BaseModel):
    title: str | None = None
    description: str | None = None


class AddQuestionRequest(BaseModel):
    type: QuestionType


class ReorderRequest(BaseModel):
    from_index: int
    to_index: int


class DraftResponse(BaseModel):
    draft_id: str
    form: FormDocument
    notifications: list[Notification] = []
