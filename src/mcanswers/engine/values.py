"""Shapes of raw stored answer values and the key aliases probed on them."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable


class _Missing:
    """Marker for an absent key or tuple position (distinct from JSON null)."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class Kind(str, Enum):
    MISSING = "missing"
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    OTHER = "other"


def kind_of(value: Any) -> Kind:
    """Classify a decoded JSON value. ``bool`` is never a number."""
    if value is MISSING:
        return Kind.MISSING
    if value is None:
        return Kind.NULL
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, (int, float)):
        return Kind.NUMBER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (list, tuple)):
        return Kind.ARRAY
    if isinstance(value, Mapping):
        return Kind.OBJECT
    return Kind.OTHER


def is_scalar(value: Any) -> bool:
    """True for the values allowed to open a compact positional tuple."""
    return kind_of(value) in (Kind.STRING, Kind.NUMBER, Kind.NULL, Kind.MISSING)


def is_id_like(value: Any) -> bool:
    return kind_of(value) in (Kind.STRING, Kind.NUMBER)


# Probed in order; the first key satisfying the field's acceptance test wins.
QUESTION_ID_KEYS = ("questionId", "question_id", "id", "promptId", "prompt_id", "key", "qid")

SELECTED_ID_KEYS = (
    "selectedAnswerId",
    "selected_answer_id",
    "answerId",
    "answer_id",
    "optionId",
    "option_id",
    "selectedOptionId",
    "selected_option_id",
    "selectedOption",
    "selected_option",
    "selected",
    "value",
    "choice",
    "response",
)

SELECTED_TEXT_KEYS = (
    "selectedAnswerText",
    "selected_answer_text",
    "selectedText",
    "selectedOptionText",
    "selected_option_text",
    "answerText",
    "answer_text",
    "optionText",
    "option_text",
    "answer",
    "text",
)

SELECTED_INDEX_KEYS = (
    "selectedAnswerIndex",
    "selected_answer_index",
    "selectedIndex",
    "answerIndex",
    "answer_index",
    "index",
    "optionIndex",
)

CORRECTNESS_KEYS = (
    "isCorrect",
    "correct",
    "is_correct",
    "wasCorrect",
    "result",
    "status",
    "outcome",
    "passed",
)

# Keys of a nested selection object such as {"id": "o2", "text": "Bravo"}.
NESTED_SELECTION_KEYS = (
    "id",
    "value",
    "text",
    "label",
    "optionId",
    "option_id",
    "selectedOptionId",
    "selected_option_id",
    "selectedAnswerId",
    "selected_answer_id",
    "answerId",
    "answer_id",
    "choice",
)


def _present(value: Any) -> bool:
    return value is not MISSING


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _not_null(value: Any) -> bool:
    return value is not MISSING and value is not None


def probe(
    obj: Mapping,
    keys: tuple[str, ...],
    accept: Callable[[Any], bool] = _present,
) -> Any:
    """Return the value of the first key in ``keys`` that ``accept`` admits."""
    for key in keys:
        value = obj.get(key, MISSING)
        if accept(value):
            return value
    return MISSING


def probe_string(obj: Mapping, keys: tuple[str, ...]) -> Any:
    return probe(obj, keys, _is_string)


def probe_not_null(obj: Mapping, keys: tuple[str, ...]) -> Any:
    return probe(obj, keys, _not_null)
