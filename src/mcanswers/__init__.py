"""Normalize and resolve historically stored multiple-choice answers."""

from mcanswers.engine.label_resolver import resolve_selected_label
from mcanswers.engine.models import CanonicalAnswer, Option, Question
from mcanswers.engine.normalizer import NormalizeReport, normalize
from mcanswers.engine.option_resolver import resolve_selected_option
from mcanswers.engine.repair import repair_answers

__version__ = "0.1.0"

__all__ = [
    "CanonicalAnswer",
    "NormalizeReport",
    "Option",
    "Question",
    "normalize",
    "repair_answers",
    "resolve_selected_label",
    "resolve_selected_option",
]
