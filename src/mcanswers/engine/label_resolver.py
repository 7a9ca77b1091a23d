"""Best available display text for a student's selection."""

from __future__ import annotations

from typing import Callable, Optional

from mcanswers.engine.coercion import clean_text, stringify_id
from mcanswers.engine.models import CanonicalAnswer, Option, Question
from mcanswers.engine.option_resolver import option_at, option_by_id, option_by_text
from mcanswers.engine.values import is_id_like

LabelStrategy = Callable[[Question, CanonicalAnswer, Optional[Option]], Optional[str]]


def from_resolved_option(question, answer, resolved_option) -> Optional[str]:
    if resolved_option is not None and resolved_option.text:
        return resolved_option.text
    return None


def from_stored_text(question, answer, resolved_option) -> Optional[str]:
    return clean_text(answer.selected_answer_text)


def from_index(question, answer, resolved_option) -> Optional[str]:
    option = option_at(question.options, answer.selected_answer_index)
    return option.text if option is not None else None


def from_raw_id(question, answer, resolved_option) -> Optional[str]:
    """Option text for the id if it still matches, else the id itself."""
    value = answer.selected_answer_id
    if not is_id_like(value):
        return None
    raw = stringify_id(value)
    option = option_by_id(question.options, raw) or option_by_text(question.options, raw)
    return option.text if option is not None else raw


LABEL_CHAIN: tuple[LabelStrategy, ...] = (
    from_resolved_option,
    from_stored_text,
    from_index,
    from_raw_id,
)


def resolve_selected_label(
    question: Question,
    answer: Optional[CanonicalAnswer] = None,
    resolved_option: Optional[Option] = None,
) -> Optional[str]:
    if answer is None:
        # Only an already resolved option can label a missing answer.
        return from_resolved_option(question, CanonicalAnswer(), resolved_option)
    for strategy in LABEL_CHAIN:
        label = strategy(question, answer, resolved_option)
        if label is not None:
            return label
    return None
