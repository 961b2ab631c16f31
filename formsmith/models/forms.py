from datetime import datetime

from pydantic import Field

from formsmith.models.common import Notification
from formsmith.models.questions import Question, WireModel


class FormDocument(WireModel):
    id: str | None = Field(default=None, alias="_id")
    title: str = ""
    description: str | None = ""
    header_image: str | None = None
    questions: list[Question] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_published: bool = False
    share_link: str | None = None


class FormSummary(WireModel):
    id: str | None = None
    title: str
    description: str | None = ""
    question_count: int
    is_published: bool
    share_url: str | None = None
    created_at: datetime | None = None


class QuestionAnswer(WireModel):
    question_id: str
    answers: dict[str, str]


class FormResponse(WireModel):
    id: str | None = Field(default=None, alias="_id")
    form_id: str | None = None
    responses: list[QuestionAnswer] = Field(default_factory=list)
    submitted_at: datetime | None = None


class UploadResult(WireModel):
    filename: str
    path: str


class PublishResult(WireModel):
    form: FormDocument
    share_url: str | None = None
    notifications: list[Notification] = []
