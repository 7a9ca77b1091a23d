"""Lesson question/option models and the canonical answer record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Option(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    text: str = ""
    is_correct: Optional[bool] = Field(default=None, alias="isCorrect")


class Question(BaseModel):
    """A lesson question; option order is significant for positional matching."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    options: list[Option] = Field(default_factory=list)


SelectedId = Union[str, int, float]


@dataclass
class CanonicalAnswer:
    """One question's answer, rebuilt from whatever legacy shape was stored."""
    question_id: Optional[str] = None
    selected_answer_id: Optional[SelectedId] = None
    selected_answer_text: Optional[str] = None
    selected_answer_index: Optional[Union[int, float]] = None
    is_correct: Optional[bool] = None

    def to_dict(self) -> dict:
        """Serialize to the camelCase shape the answers column stores."""
        return {
            "questionId": self.question_id,
            "selectedAnswerId": self.selected_answer_id,
            "selectedAnswerText": self.selected_answer_text,
            "selectedAnswerIndex": self.selected_answer_index,
            "isCorrect": self.is_correct,
        }


CanonicalMap = dict[str, CanonicalAnswer]
