"""Rewrite stored positional answer lists into the current canonical shape.

Used to backfill old assignments after lessons were edited: every answer
gets the current question id for its position and, when its selection can
still be matched, the current option id, position and text.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from mcanswers.engine.coercion import to_finite_number
from mcanswers.engine.models import CanonicalAnswer, Option, Question
from mcanswers.engine.option_resolver import by_id, by_index, by_text, first_match
from mcanswers.engine.values import Kind, kind_of

logger = logging.getLogger(__name__)

# Stored ids win over positions here, unlike resolve_selected_option, so a
# stale id never hides a still-valid index.
REPAIR_CHAIN = (by_id, by_index, by_text)


@dataclass
class RepairResult:
    answers: Any
    changed: bool = False


@dataclass
class AssignmentRecord:
    id: str
    answers: Any
    questions: list[Question] = field(default_factory=list)


@dataclass
class BackfillReport:
    scanned: int = 0
    updated_ids: list[str] = field(default_factory=list)
    assignments: list[AssignmentRecord] = field(default_factory=list)
    limit: int = 50

    @property
    def updated_count(self) -> int:
        return len(self.updated_ids)

    def summary(self, applied: bool = False) -> dict:
        return {
            "scanned": self.scanned,
            "updatedCount": self.updated_count,
            "updatedIds": self.updated_ids[: self.limit],
            "updatedIdsTruncated": self.updated_count > self.limit,
            "applied": applied,
        }


def _as_answer(stored: dict) -> CanonicalAnswer:
    """View a stored object through its canonical field names only."""
    index = stored.get("selectedAnswerIndex")
    text = stored.get("selectedAnswerText")
    selected = stored.get("selectedAnswerId")
    return CanonicalAnswer(
        selected_answer_id=selected if kind_of(selected) in (Kind.STRING, Kind.NUMBER) else None,
        selected_answer_text=text if isinstance(text, str) else None,
        selected_answer_index=to_finite_number(index),
    )


def _repair_one(stored: dict, question: Question, known_ids: set[str]) -> dict:
    answer = copy.deepcopy(stored)
    stored_id = answer.get("questionId")
    if not isinstance(stored_id, str) or stored_id not in known_ids:
        answer["questionId"] = question.id

    option: Optional[Option] = first_match(REPAIR_CHAIN, question, _as_answer(answer))
    if option is None:
        return answer
    answer["selectedAnswerId"] = option.id
    answer["selectedAnswerIndex"] = question.options.index(option)
    if not answer.get("selectedAnswerText"):
        answer["selectedAnswerText"] = option.text
    return answer


def repair_answers(answers: Any, questions: Sequence[Question]) -> RepairResult:
    """Return a repaired copy of a positional answer list; the input is untouched."""
    if kind_of(answers) is not Kind.ARRAY:
        return RepairResult(answers=answers)
    questions = list(questions)
    known_ids = {q.id for q in questions}
    repaired = []
    for index, stored in enumerate(answers):
        if kind_of(stored) is not Kind.OBJECT or index >= len(questions):
            repaired.append(stored)
            continue
        repaired.append(_repair_one(dict(stored), questions[index], known_ids))
    return RepairResult(answers=repaired, changed=repaired != list(answers))


def backfill_assignments(
    assignments: Sequence[AssignmentRecord],
    limit: int = 50,
) -> BackfillReport:
    """Repair every assignment; the report keeps the repaired copies."""
    report = BackfillReport(limit=limit)
    for assignment in assignments:
        report.scanned += 1
        if kind_of(assignment.answers) is not Kind.ARRAY or not assignment.questions:
            report.assignments.append(assignment)
            continue
        result = repair_answers(assignment.answers, assignment.questions)
        if result.changed:
            report.updated_ids.append(assignment.id)
            logger.debug("Assignment %s needs answer repair", assignment.id)
            assignment = AssignmentRecord(
                id=assignment.id,
                answers=result.answers,
                questions=assignment.questions,
            )
        report.assignments.append(assignment)
    return report
