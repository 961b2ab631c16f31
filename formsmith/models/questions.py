import uuid
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from formsmith.exceptions import BuilderError

BLANK_MARKER = "_____"

QuestionType = Literal["categorize", "cloze", "comprehension"]
SubQuestionType = Literal["text", "multiple-choice"]


class WireModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# --- Variant parts ---

class CategorizeItem(WireModel):
    id: str
    text: str
    category: str  # label from the parent question's categories


class Blank(WireModel):
    id: str
    correct_answer: str = ""


class SubQuestion(WireModel):
    id: str
    question: str = ""
    type: SubQuestionType = "text"
    options: list[str] | None = None  # only for multiple-choice
    correct_answer: str = ""

    @model_validator(mode="before")
    @classmethod
    def _normalize_options(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("type") == "multiple-choice":
            if data.get("options") is None:
                data["options"] = []
        else:
            data["options"] = None
        return data


# --- Variants ---

class QuestionBase(WireModel):
    id: str
    title: str = ""
    required: bool = False
    order: int = 0
    image: str | None = None


class CategorizeQuestion(QuestionBase):
    type: Literal["categorize"] = "categorize"
    categories: list[str] = Field(default_factory=list)
    items: list[CategorizeItem] = Field(default_factory=list)


class ClozeQuestion(QuestionBase):
    type: Literal["cloze"] = "cloze"
    text: str = ""
    blanks: list[Blank] = Field(default_factory=list)


class ComprehensionQuestion(QuestionBase):
    type: Literal["comprehension"] = "comprehension"
    passage: str = ""
    questions: list[SubQuestion] = Field(default_factory=list)


Question = Annotated[
    Union[CategorizeQuestion, ClozeQuestion, ComprehensionQuestion],
    Field(discriminator="type"),
]

QUESTION_CLASSES: dict[str, type[QuestionBase]] = {
    "categorize": CategorizeQuestion,
    "cloze": ClozeQuestion,
    "comprehension": ComprehensionQuestion,
}

# Fields a patch may never touch.
FIXED_FIELDS = frozenset({"id", "order", "type"})


def new_id() -> str:
    return uuid.uuid4().hex


def create_default(kind: str) -> CategorizeQuestion | ClozeQuestion | ComprehensionQuestion:
    """Build a new question of the given kind pre-filled with sample content.

    The editor never starts from an empty shape: categorize gets two categories
    with one item each, cloze a sentence with two blanks, comprehension a
    passage with a single free-text sub-question.
    """
    if kind == "categorize":
        return CategorizeQuestion(
            id=new_id(),
            categories=["Category 1", "Category 2"],
            items=[
                CategorizeItem(id=new_id(), text="Item 1", category="Category 1"),
                CategorizeItem(id=new_id(), text="Item 2", category="Category 2"),
            ],
        )
    if kind == "cloze":
        return ClozeQuestion(
            id=new_id(),
            text=f"This is a {BLANK_MARKER} test with {BLANK_MARKER} blanks.",
            blanks=[
                Blank(id=new_id(), correct_answer="sample"),
                Blank(id=new_id(), correct_answer="multiple"),
            ],
        )
    if kind == "comprehension":
        return ComprehensionQuestion(
            id=new_id(),
            passage="Read the following passage and answer the questions below.",
            questions=[
                SubQuestion(id=new_id(), question="What is the main topic?", type="text"),
            ],
        )
    raise BuilderError(f"Unknown question type: {kind!r}")
