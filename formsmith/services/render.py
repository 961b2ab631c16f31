"""Pure view derivations shared by the builder preview and the respondent view."""

from collections.abc import Mapping

from formsmith.config import get_settings
from formsmith.models.forms import FormDocument
from formsmith.models.questions import (
    BLANK_MARKER,
    CategorizeQuestion,
    ClozeQuestion,
    ComprehensionQuestion,
    QuestionBase,
)
from formsmith.models.render import (
    CategorizeView,
    ClozeView,
    ComprehensionView,
    FormView,
    ItemSelector,
    QuestionView,
    SubQuestionInput,
)


def blank_key(index: int) -> str:
    return f"blank_{index}"


def resolve_asset_url(path: str | None) -> str | None:
    """Turn an uploaded asset path into an absolute URL on the API origin."""
    if not path:
        return None
    return f"{get_settings().api_origin}{path}"


def split_cloze(question: ClozeQuestion, answers: Mapping[str, str] | None = None) -> ClozeView:
    """Split cloze text on the blank marker.

    The slot count always follows the marker count in the text. The number of
    declared blanks is reported as-is, even when the two disagree.
    """
    answers = answers or {}
    segments = question.text.split(BLANK_MARKER)
    slots = [blank_key(i) for i in range(len(segments) - 1)]
    return ClozeView(
        segments=segments,
        slots=slots,
        values={slot: answers.get(slot, "") for slot in slots},
        declared_blanks=len(question.blanks),
    )


def match_categorize(question: CategorizeQuestion, answers: Mapping[str, str] | None = None) -> CategorizeView:
    answers = answers or {}
    return CategorizeView(
        categories=list(question.categories),
        items=[
            ItemSelector(
                item_id=item.id,
                text=item.text,
                options=list(question.categories),
                value=answers.get(item.id, ""),
            )
            for item in question.items
        ],
    )


def match_comprehension(question: ComprehensionQuestion, answers: Mapping[str, str] | None = None) -> ComprehensionView:
    answers = answers or {}
    inputs = []
    for number, sub in enumerate(question.questions, start=1):
        if sub.type == "text":
            inputs.append(SubQuestionInput(
                id=sub.id, number=number, question=sub.question,
                input="text", value=answers.get(sub.id, ""),
            ))
        else:
            inputs.append(SubQuestionInput(
                id=sub.id, number=number, question=sub.question,
                input="choice", options=list(sub.options or []),
                value=answers.get(sub.id, ""),
            ))
    return ComprehensionView(passage=question.passage, questions=inputs)


def render_body(question: QuestionBase, answers: Mapping[str, str] | None = None):
    if isinstance(question, CategorizeQuestion):
        return match_categorize(question, answers)
    if isinstance(question, ClozeQuestion):
        return split_cloze(question, answers)
    if isinstance(question, ComprehensionQuestion):
        return match_comprehension(question, answers)
    raise TypeError(f"Unsupported question variant: {type(question).__name__}")


def render_question(question: QuestionBase, number: int, answers: Mapping[str, str] | None = None) -> QuestionView:
    return QuestionView(
        id=question.id,
        number=number,
        title=question.title,
        required=question.required,
        image_url=resolve_asset_url(question.image),
        body=render_body(question, answers),
    )


def render_form(form: FormDocument, answers: Mapping[str, Mapping[str, str]] | None = None) -> FormView:
    """Build the full view of a form, prefilled with any answers given so far."""
    answers = answers or {}
    return FormView(
        id=form.id,
        title=form.title,
        description=form.description,
        header_image_url=resolve_asset_url(form.header_image),
        questions=[
            render_question(question, number, answers.get(question.id))
            for number, question in enumerate(form.questions, start=1)
        ],
    )
