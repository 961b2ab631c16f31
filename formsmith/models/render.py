from typing import Literal, Union

from pydantic import BaseModel


class ClozeView(BaseModel):
    type: Literal["cloze"] = "cloze"
    segments: list[str]
    slots: list[str]
    values: dict[str, str] = {}
    declared_blanks: int  # len(blanks), independent of the marker count


class ItemSelector(BaseModel):
    item_id: str
    text: str
    options: list[str]
    value: str = ""


class CategorizeView(BaseModel):
    type: Literal["categorize"] = "categorize"
    categories: list[str]
    items: list[ItemSelector]


class SubQuestionInput(BaseModel):
    id: str
    number: int
    question: str
    input: Literal["text", "choice"]
    options: list[str] = []
    value: str = ""


class ComprehensionView(BaseModel):
    type: Literal["comprehension"] = "comprehension"
    passage: str
    questions: list[SubQuestionInput]


class QuestionView(BaseModel):
    id: str
    number: int
    title: str
    required: bool
    image_url: str | None = None
    body: Union[CategorizeView, ClozeView, ComprehensionView]


class FormView(BaseModel):
    id: str | None = None
    title: str
    description: str | None = ""
    header_image_url: str | None = None
    questions: list[QuestionView]
