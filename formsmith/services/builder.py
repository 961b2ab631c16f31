"""Builder operations over a form's ordered question list.

Every function takes a FormDocument snapshot and returns the next one; the
snapshot passed in is never modified. Operations addressed at a question id
that is not in the form return the form unchanged. Operations that do not fit
the targeted question (wrong kind, unknown field, index out of range) raise
BuilderError, since they indicate a caller bug rather than user input.
"""

from collections.abc import Callable, Mapping

from pydantic import ValidationError

from formsmith.exceptions import BuilderError
from formsmith.models.drafts import QuestionAction
from formsmith.models.forms import FormDocument
from formsmith.models.questions import (
    FIXED_FIELDS,
    Blank,
    CategorizeItem,
    CategorizeQuestion,
    ClozeQuestion,
    ComprehensionQuestion,
    QuestionBase,
    SubQuestion,
    create_default,
    new_id,
)


def new_form(title: str = "", description: str = "") -> FormDocument:
    return FormDocument(title=title, description=description)


def find_question(form: FormDocument, question_id: str) -> QuestionBase | None:
    for question in form.questions:
        if question.id == question_id:
            return question
    return None


def _with_questions(form: FormDocument, questions: list) -> FormDocument:
    return form.model_copy(update={"questions": questions})


def _renumber(questions: list) -> list:
    """Reassign every order to its positional index."""
    return [
        q if q.order == index else q.model_copy(update={"order": index})
        for index, q in enumerate(questions)
    ]


# --- Form-level operations ---

def update_details(
    form: FormDocument,
    title: str | None = None,
    description: str | None = None,
) -> FormDocument:
    update = {}
    if title is not None:
        update["title"] = title
    if description is not None:
        update["description"] = description
    return form.model_copy(update=update) if update else form


def set_header_image(form: FormDocument, path: str | None) -> FormDocument:
    return form.model_copy(update={"header_image": path})


def add_question(form: FormDocument, kind: str) -> FormDocument:
    """Append a default question of the given kind and renumber all orders.

    Stored forms may carry gaps in their orders.
    """
    return _with_questions(form, _renumber([*form.questions, create_default(kind)]))


def _normalize_patch(question: QuestionBase, patch: Mapping) -> dict:
    fields = type(question).model_fields
    by_alias = {field.alias: name for name, field in fields.items() if field.alias}
    normalized = {}
    for key, value in patch.items():
        name = key if key in fields else by_alias.get(key)
        if name is None or name in FIXED_FIELDS:
            raise BuilderError(f"{key!r} cannot be patched on a {question.type} question")
        normalized[name] = value
    return normalized


def update_question(form: FormDocument, question_id: str, patch: Mapping) -> FormDocument:
    """Replace fields of one question, keeping its id, order and kind.

    Keys may be given by attribute name or wire name. A key that does not
    belong to the question's kind raises BuilderError.
    """
    questions = list(form.questions)
    for index, question in enumerate(questions):
        if question.id != question_id:
            continue
        data = question.model_dump()
        data.update(_normalize_patch(question, patch))
        try:
            questions[index] = type(question).model_validate(data)
        except ValidationError as e:
            raise BuilderError(f"Invalid patch for question {question_id}: {e}") from e
        return _with_questions(form, questions)
    return form


def delete_question(form: FormDocument, question_id: str) -> FormDocument:
    """Remove one question; the rest are renumbered so no order gap remains."""
    remaining = [q for q in form.questions if q.id != question_id]
    if len(remaining) == len(form.questions):
        return form
    return _with_questions(form, _renumber(remaining))


def reorder_question(form: FormDocument, from_index: int, to_index: int) -> FormDocument:
    """Move the question at from_index to to_index and renumber all orders."""
    count = len(form.questions)
    if not (0 <= from_index < count and 0 <= to_index < count):
        raise BuilderError(
            f"Cannot move question {from_index} -> {to_index} in a form of {count} questions"
        )
    questions = list(form.questions)
    moved = questions.pop(from_index)
    questions.insert(to_index, moved)
    return _with_questions(form, _renumber(questions))


def set_question_image(form: FormDocument, question_id: str, path: str | None) -> FormDocument:
    return update_question(form, question_id, {"image": path})


# --- Variant sub-operations ---

def _variant(form: FormDocument, question_id: str, cls: type[QuestionBase]):
    question = find_question(form, question_id)
    if question is None:
        return None
    if not isinstance(question, cls):
        expected = cls.model_fields["type"].default
        raise BuilderError(f"Question {question_id} is a {question.type} question, not {expected}")
    return question


def _check_index(sequence: list, index: int, what: str) -> None:
    if not 0 <= index < len(sequence):
        raise BuilderError(f"No {what} at index {index}")


def add_category(form: FormDocument, question_id: str) -> FormDocument:
    q = _variant(form, question_id, CategorizeQuestion)
    if q is None:
        return form
    categories = [*q.categories, f"Category {len(q.categories) + 1}"]
    return update_question(form, question_id, {"categories": categories})


def rename_category(form: FormDocument, question_id: str, index: int, label: str) -> FormDocument:
    """Change a category label in place.

    Items assigned to the old label keep it; they are not rewritten.
    """
    q = _variant(form, question_id, CategorizeQuestion)
    if q is None:
        return form
    _check_index(q.categories, index, "category")
    categories = list(q.categories)
    categories[index] = label
    return update_question(form, question_id, {"categories": categories})


def remove_category(form: FormDocument, question_id: str, index: int) -> FormDocument:
    q = _variant(form, question_id, CategorizeQuestion)
    if q is None:
        return form
    _check_index(q.categories, index, "category")
    categories = [c for i, c in enumerate(q.categories) if i != index]
    return update_question(form, question_id, {"categories": categories})


def add_item(form: FormDocument, question_id: str) -> FormDocument:
    q = _variant(form, question_id, CategorizeQuestion)
    if q is None:
        return form
    item = CategorizeItem(
        id=new_id(),
        text=f"Item {len(q.items) + 1}",
        category=q.categories[0] if q.categories else "Category 1",
    )
    return update_question(form, question_id, {"items": [*q.items, item]})


def update_item(
    form: FormDocument,
    question_id: str,
    index: int,
    text: str | None = None,
    category: str | None = None,
) -> FormDocument:
    q = _variant(form, question_id, CategorizeQuestion)
    if q is None:
        return form
    _check_index(q.items, index, "item")
    update = {}
    if text is not None:
        update["text"] = text
    if category is not None:
        update["category"] = category
    items = list(q.items)
    items[index] = items[index].model_copy(update=update)
    return update_question(form, question_id, {"items": items})


def remove_item(form: FormDocument, question_id: str, index: int) -> FormDocument:
    q = _variant(form, question_id, CategorizeQuestion)
    if q is None:
        return form
    _check_index(q.items, index, "item")
    items = [item for i, item in enumerate(q.items) if i != index]
    return update_question(form, question_id, {"items": items})


def update_cloze_text(form: FormDocument, question_id: str, text: str) -> FormDocument:
    # blanks are left as they are even if the marker count changes
    if _variant(form, question_id, ClozeQuestion) is None:
        return form
    return update_question(form, question_id, {"text": text})


def add_blank(form: FormDocument, question_id: str) -> FormDocument:
    q = _variant(form, question_id, ClozeQuestion)
    if q is None:
        return form
    return update_question(form, question_id, {"blanks": [*q.blanks, Blank(id=new_id())]})


def update_blank(form: FormDocument, question_id: str, index: int, correct_answer: str) -> FormDocument:
    q = _variant(form, question_id, ClozeQuestion)
    if q is None:
        return form
    _check_index(q.blanks, index, "blank")
    blanks = list(q.blanks)
    blanks[index] = blanks[index].model_copy(update={"correct_answer": correct_answer})
    return update_question(form, question_id, {"blanks": blanks})


def remove_blank(form: FormDocument, question_id: str, index: int) -> FormDocument:
    q = _variant(form, question_id, ClozeQuestion)
    if q is None:
        return form
    _check_index(q.blanks, index, "blank")
    blanks = [b for i, b in enumerate(q.blanks) if i != index]
    return update_question(form, question_id, {"blanks": blanks})


def update_passage(form: FormDocument, question_id: str, passage: str) -> FormDocument:
    if _variant(form, question_id, ComprehensionQuestion) is None:
        return form
    return update_question(form, question_id, {"passage": passage})


def add_sub_question(form: FormDocument, question_id: str) -> FormDocument:
    q = _variant(form, question_id, ComprehensionQuestion)
    if q is None:
        return form
    sub = SubQuestion(id=new_id(), question="", type="text")
    return update_question(form, question_id, {"questions": [*q.questions, sub]})


def _replace_sub_question(form, question_id, q, index, sub):
    subs = list(q.questions)
    subs[index] = sub
    return update_question(form, question_id, {"questions": subs})


def update_sub_question(
    form: FormDocument,
    question_id: str,
    index: int,
    question: str | None = None,
    correct_answer: str | None = None,
) -> FormDocument:
    q = _variant(form, question_id, ComprehensionQuestion)
    if q is None:
        return form
    _check_index(q.questions, index, "sub-question")
    update = {}
    if question is not None:
        update["question"] = question
    if correct_answer is not None:
        update["correct_answer"] = correct_answer
    return _replace_sub_question(form, question_id, q, index, q.questions[index].model_copy(update=update))


def set_sub_question_type(form: FormDocument, question_id: str, index: int, sub_type: str) -> FormDocument:
    """Switch a sub-question between free text and multiple choice.

    Switching to multiple choice starts over with two placeholder options;
    switching to text drops the options.
    """
    q = _variant(form, question_id, ComprehensionQuestion)
    if q is None:
        return form
    _check_index(q.questions, index, "sub-question")
    if sub_type == "multiple-choice":
        options = ["Option 1", "Option 2"]
    elif sub_type == "text":
        options = None
    else:
        raise BuilderError(f"Unknown sub-question type: {sub_type!r}")
    sub = q.questions[index].model_copy(update={"type": sub_type, "options": options})
    return _replace_sub_question(form, question_id, q, index, sub)


def remove_sub_question(form: FormDocument, question_id: str, index: int) -> FormDocument:
    q = _variant(form, question_id, ComprehensionQuestion)
    if q is None:
        return form
    _check_index(q.questions, index, "sub-question")
    subs = [s for i, s in enumerate(q.questions) if i != index]
    return update_question(form, question_id, {"questions": subs})


def _choice_sub_question(q: ComprehensionQuestion, index: int) -> SubQuestion:
    _check_index(q.questions, index, "sub-question")
    sub = q.questions[index]
    if sub.type != "multiple-choice":
        raise BuilderError(f"Sub-question {sub.id} has no options")
    return sub


def add_option(form: FormDocument, question_id: str, index: int) -> FormDocument:
    q = _variant(form, question_id, ComprehensionQuestion)
    if q is None:
        return form
    sub = _choice_sub_question(q, index)
    options = [*(sub.options or []), f"Option {len(sub.options or []) + 1}"]
    return _replace_sub_question(form, question_id, q, index, sub.model_copy(update={"options": options}))


def update_option(form: FormDocument, question_id: str, index: int, option_index: int, value: str) -> FormDocument:
    q = _variant(form, question_id, ComprehensionQuestion)
    if q is None:
        return form
    sub = _choice_sub_question(q, index)
    options = list(sub.options or [])
    _check_index(options, option_index, "option")
    options[option_index] = value
    return _replace_sub_question(form, question_id, q, index, sub.model_copy(update={"options": options}))


def remove_option(form: FormDocument, question_id: str, index: int, option_index: int) -> FormDocument:
    q = _variant(form, question_id, ComprehensionQuestion)
    if q is None:
        return form
    sub = _choice_sub_question(q, index)
    options = list(sub.options or [])
    _check_index(options, option_index, "option")
    options = [o for i, o in enumerate(options) if i != option_index]
    return _replace_sub_question(form, question_id, q, index, sub.model_copy(update={"options": options}))


# --- Named actions (HTTP / MCP surface) ---

def _index(action: QuestionAction) -> int:
    if action.index is None:
        raise BuilderError(f"Action {action.action!r} requires an index")
    return action.index


def _option_index(action: QuestionAction) -> int:
    if action.option_index is None:
        raise BuilderError(f"Action {action.action!r} requires an option_index")
    return action.option_index


def _value(action: QuestionAction) -> str:
    if action.value is None:
        raise BuilderError(f"Action {action.action!r} requires a value")
    return action.value


_ACTIONS: dict[str, Callable[[FormDocument, str, QuestionAction], FormDocument]] = {
    "add_category": lambda f, q, a: add_category(f, q),
    "rename_category": lambda f, q, a: rename_category(f, q, _index(a), _value(a)),
    "remove_category": lambda f, q, a: remove_category(f, q, _index(a)),
    "add_item": lambda f, q, a: add_item(f, q),
    "update_item": lambda f, q, a: update_item(f, q, _index(a), text=a.value, category=a.category),
    "remove_item": lambda f, q, a: remove_item(f, q, _index(a)),
    "set_text": lambda f, q, a: update_cloze_text(f, q, _value(a)),
    "add_blank": lambda f, q, a: add_blank(f, q),
    "update_blank": lambda f, q, a: update_blank(f, q, _index(a), _value(a)),
    "remove_blank": lambda f, q, a: remove_blank(f, q, _index(a)),
    "set_passage": lambda f, q, a: update_passage(f, q, _value(a)),
    "add_sub_question": lambda f, q, a: add_sub_question(f, q),
    "update_sub_question": lambda f, q, a: update_sub_question(
        f, q, _index(a), question=a.value, correct_answer=a.correct_answer,
    ),
    "set_sub_question_type": lambda f, q, a: set_sub_question_type(f, q, _index(a), _value(a)),
    "remove_sub_question": lambda f, q, a: remove_sub_question(f, q, _index(a)),
    "add_option": lambda f, q, a: add_option(f, q, _index(a)),
    "update_option": lambda f, q, a: update_option(f, q, _index(a), _option_index(a), _value(a)),
    "remove_option": lambda f, q, a: remove_option(f, q, _index(a), _option_index(a)),
}


def apply_action(form: FormDocument, question_id: str, action: QuestionAction) -> FormDocument:
    """Run the sub-operation named by action.action against one question."""
    return _ACTIONS[action.action](form, question_id, action)
