"""Rebuild canonical per-question answers from any historically stored shape.

Stored answers have been written as positional tuples, alias-heavy objects,
doubly JSON-encoded strings, ``"questionId:value"`` strings and nested
per-question maps. Question ids are also regenerated whenever a lesson is
edited, so a record's own id is trusted only when it still exists; its
position in the stored list is the fallback.

``normalize`` never raises: anything it cannot place is dropped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from mcanswers.engine.coercion import clean_text, extract_selected_value, to_boolean, to_finite_number
from mcanswers.engine.models import CanonicalAnswer, CanonicalMap, Question
from mcanswers.engine.values import (
    CORRECTNESS_KEYS,
    MISSING,
    QUESTION_ID_KEYS,
    SELECTED_ID_KEYS,
    SELECTED_INDEX_KEYS,
    SELECTED_TEXT_KEYS,
    Kind,
    is_scalar,
    kind_of,
    probe,
    probe_string,
)

logger = logging.getLogger(__name__)

MAX_TUPLE_LENGTH = 4
MAX_DEPTH = 32


@dataclass(frozen=True)
class DualWrite:
    stored_id: str
    positional_id: str


@dataclass
class NormalizeReport:
    """Counters describing one normalize() pass."""
    records: int = 0
    dropped: int = 0
    dual_writes: list[DualWrite] = field(default_factory=list)

    @property
    def dual_write_count(self) -> int:
        return len(self.dual_writes)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


class _Normalizer:
    def __init__(self, questions: Sequence[Question], report: NormalizeReport):
        self.questions = list(questions)
        self.known_ids = {q.id for q in self.questions}
        self.report = report
        self.result: CanonicalMap = {}

    def _fallback_id(self, fallback_index: Optional[int]) -> Optional[str]:
        if fallback_index is None or not 0 <= fallback_index < len(self.questions):
            return None
        return self.questions[fallback_index].id

    def ensure_entry(
        self,
        question_id: Any,
        selected: Any,
        correctness: Any,
        fallback_index: Optional[int] = None,
        selected_text: Any = MISSING,
        selected_index: Any = MISSING,
    ) -> None:
        self.report.records += 1
        fallback_id = self._fallback_id(fallback_index)
        known_id = question_id if isinstance(question_id, str) and question_id in self.known_ids else None
        resolved_id = known_id or fallback_id
        if not resolved_id:
            self.report.dropped += 1
            logger.debug("Dropping answer record with unknown question id %r", question_id)
            return

        targets = [resolved_id]
        if fallback_id and fallback_id != resolved_id:
            targets.append(fallback_id)
            self.report.dual_writes.append(DualWrite(stored_id=resolved_id, positional_id=fallback_id))
            logger.info(
                "Answer stored for question %s also written to positional question %s",
                resolved_id,
                fallback_id,
            )

        selection = extract_selected_value(selected)
        text = clean_text(selected_text)
        index = None
        if kind_of(selected_index) is Kind.NUMBER or clean_text(selected_index):
            index = to_finite_number(selected_index)
        is_correct = to_boolean(correctness)

        for target in targets:
            entry = self.result.get(target)
            if entry is None:
                entry = self.result[target] = CanonicalAnswer(question_id=target)
            if selection is not MISSING:
                entry.selected_answer_id = selection
            if text is not None:
                entry.selected_answer_text = text
            if index is not None:
                entry.selected_answer_index = index
            if is_correct is not None:
                entry.is_correct = is_correct

    def walk(self, value: Any, fallback_index: Optional[int] = None, depth: int = 0) -> None:
        if depth > MAX_DEPTH:
            self.report.dropped += 1
            logger.debug("Dropping answer value nested deeper than %d levels", MAX_DEPTH)
            return
        kind = kind_of(value)
        if kind is Kind.STRING:
            self._walk_string(value, fallback_index, depth)
        elif kind is Kind.ARRAY:
            self._walk_array(value, fallback_index, depth)
        elif kind is Kind.OBJECT:
            self._walk_object(value, fallback_index, depth)
        elif kind in (Kind.NUMBER, Kind.BOOL):
            self.ensure_entry(None, value, value, fallback_index)

    def _walk_string(self, value: str, fallback_index: Optional[int], depth: int) -> None:
        text = value.strip()
        if not text:
            return
        try:
            decoded = json.loads(text, parse_constant=_reject_constant)
        except (ValueError, RecursionError):
            if ":" in text:
                question_id, _, selected = text.partition(":")
                self.ensure_entry(question_id or None, selected, None, fallback_index)
            return
        self.walk(decoded, fallback_index, depth + 1)

    def _walk_array(self, value: Sequence, fallback_index: Optional[int], depth: int) -> None:
        if not value:
            return
        if len(value) <= MAX_TUPLE_LENGTH and is_scalar(value[0]):
            # [questionId?, selected, correctness?, selectedText?]
            padded = list(value) + [MISSING] * (MAX_TUPLE_LENGTH - len(value))
            question_id, selected, correctness, selected_text = padded
            self.ensure_entry(
                question_id if isinstance(question_id, str) else None,
                selected,
                correctness,
                fallback_index,
                selected_text,
            )
            return
        for index, item in enumerate(value):
            self.walk(item, index, depth + 1)

    def _walk_object(self, value: Mapping, fallback_index: Optional[int], depth: int) -> None:
        if not value:
            return
        question_id = probe_string(value, QUESTION_ID_KEYS)
        selected = probe(value, SELECTED_ID_KEYS)
        selected_text = probe_string(value, SELECTED_TEXT_KEYS)
        selected_index = probe(value, SELECTED_INDEX_KEYS)
        correctness = probe(value, CORRECTNESS_KEYS)

        # A single answer record; never also read as a per-question map.
        if (
            question_id
            or selected is not MISSING
            or correctness is not MISSING
            or selected_text
            or selected_index is not MISSING
        ):
            self.ensure_entry(
                question_id or None,
                selected,
                correctness,
                fallback_index,
                selected_text,
                selected_index,
            )
            return

        for key, item in value.items():
            key = str(key)
            item_kind = kind_of(item)
            if item_kind is Kind.OBJECT:
                self.walk({"questionId": key, **item}, fallback_index, depth + 1)
            elif item_kind is Kind.ARRAY:
                self.ensure_entry(key, MISSING, MISSING, fallback_index)
            else:
                self.ensure_entry(key, item, MISSING, fallback_index)


def normalize(
    raw: Any,
    questions: Sequence[Question],
    report: Optional[NormalizeReport] = None,
) -> CanonicalMap:
    """Map current question id -> CanonicalAnswer for a raw stored payload.

    Pass a ``NormalizeReport`` to collect counts of dropped records and of
    records written under both their stored and their positional question id.
    """
    if not raw:
        return {}
    normalizer = _Normalizer(questions, report if report is not None else NormalizeReport())
    normalizer.walk(raw)
    return normalizer.result
