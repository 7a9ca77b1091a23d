"""Work out which current option a canonical answer selected.

Each strategy looks at one historical encoding of the selection and returns
the matching option or None. Chains are evaluated in order and stop at the
first match; no match is an expected outcome after schema drift.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

from mcanswers.engine.coercion import normalize_option_text, stringify_id, to_finite_number
from mcanswers.engine.models import CanonicalAnswer, Option, Question
from mcanswers.engine.values import Kind, is_id_like, kind_of

OptionStrategy = Callable[[Question, CanonicalAnswer], Optional[Option]]


def option_at(options: Sequence[Option], position: Any) -> Optional[Option]:
    """Option at a 0-based position, falling back to a 1-based reading."""
    if kind_of(position) is not Kind.NUMBER:
        return None
    if isinstance(position, float):
        if not position.is_integer():
            return None
        position = int(position)
    for candidate in (position, position - 1):
        if 0 <= candidate < len(options):
            return options[candidate]
    return None


def option_by_text(options: Sequence[Option], text: str) -> Optional[Option]:
    normalized = normalize_option_text(text)
    for option in options:
        if normalize_option_text(option.text) == normalized:
            return option
    return None


def option_by_id(options: Sequence[Option], value: Any) -> Optional[Option]:
    if not is_id_like(value):
        return None
    wanted = stringify_id(value)
    for option in options:
        if option.id == wanted:
            return option
    return None


# --- Strategies used when the stored answer has no selected id ---

def by_index(question: Question, answer: CanonicalAnswer) -> Optional[Option]:
    return option_at(question.options, answer.selected_answer_index)


def by_text(question: Question, answer: CanonicalAnswer) -> Optional[Option]:
    text = answer.selected_answer_text
    if not isinstance(text, str) or not text.strip():
        return None
    return option_by_text(question.options, text)


# --- Strategies used when a selected id is present ---

def by_id(question: Question, answer: CanonicalAnswer) -> Optional[Option]:
    return option_by_id(question.options, answer.selected_answer_id)


def by_numeric_id(question: Question, answer: CanonicalAnswer) -> Optional[Option]:
    """Ids that are really positions, e.g. ``1`` or ``"2"``."""
    if not is_id_like(answer.selected_answer_id):
        return None
    return option_at(question.options, to_finite_number(answer.selected_answer_id))


def by_id_as_text(question: Question, answer: CanonicalAnswer) -> Optional[Option]:
    """Display text that was stored in the id field."""
    if not is_id_like(answer.selected_answer_id):
        return None
    return option_by_text(question.options, stringify_id(answer.selected_answer_id))


WITHOUT_ID: tuple[OptionStrategy, ...] = (by_index, by_text)
WITH_ID: tuple[OptionStrategy, ...] = (by_id, by_numeric_id, by_id_as_text)


def first_match(
    strategies: Sequence[OptionStrategy],
    question: Question,
    answer: CanonicalAnswer,
) -> Optional[Option]:
    for strategy in strategies:
        option = strategy(question, answer)
        if option is not None:
            return option
    return None


def resolve_selected_option(
    question: Question,
    answer: Optional[CanonicalAnswer] = None,
) -> Optional[Option]:
    """Return the option the answer selected, or None when nothing matches."""
    if answer is None:
        return None
    if answer.selected_answer_id is None:
        return first_match(WITHOUT_ID, question, answer)
    return first_match(WITH_ID, question, answer)
