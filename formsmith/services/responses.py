"""Respondent answer state: completeness checks and submission payloads.

Answers are held as a mapping from question id to that question's own
mapping (item id -> category, blank_<i> -> text, sub-question id -> text or
option). Helpers return new mappings; nothing here compares answers against
the correct answers stored on questions.
"""

from collections.abc import Mapping

from pydantic import BaseModel

from formsmith.models.forms import FormDocument, QuestionAnswer
from formsmith.services.render import blank_key

Answers = Mapping[str, Mapping[str, str]]


class ValidationResult(BaseModel):
    missing: list[str] = []

    @property
    def ready(self) -> bool:
        return not self.missing


def validate(form: FormDocument, answers: Answers) -> ValidationResult:
    """List required questions with no entry in answers.

    Only the presence of the question id is checked; an empty mapping counts
    as answered.
    """
    missing = [q.id for q in form.questions if q.required and q.id not in answers]
    return ValidationResult(missing=missing)


def assemble_payload(answers: Answers) -> list[QuestionAnswer]:
    return [
        QuestionAnswer(question_id=question_id, answers=dict(entries))
        for question_id, entries in answers.items()
    ]


def set_answer_entry(answers: Answers, question_id: str, key: str, value: str) -> dict[str, dict[str, str]]:
    updated = {qid: dict(entries) for qid, entries in answers.items()}
    updated[question_id] = {**updated.get(question_id, {}), key: value}
    return updated


def choose_category(answers: Answers, question_id: str, item_id: str, category: str) -> dict[str, dict[str, str]]:
    return set_answer_entry(answers, question_id, item_id, category)


def fill_blank(answers: Answers, question_id: str, index: int, value: str) -> dict[str, dict[str, str]]:
    return set_answer_entry(answers, question_id, blank_key(index), value)


def answer_sub_question(answers: Answers, question_id: str, sub_question_id: str, value: str) -> dict[str, dict[str, str]]:
    # one value per sub-question id, so a new choice replaces the previous one
    return set_answer_entry(answers, question_id, sub_question_id, value)
