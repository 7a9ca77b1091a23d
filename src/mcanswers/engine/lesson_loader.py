"""YAML/JSON loaders for lesson question sets and stored assignments."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mcanswers.engine.models import Question
from mcanswers.engine.repair import AssignmentRecord


class LessonFileError(ValueError):
    """A lesson or assignments file is missing or malformed."""


def read_document(path: Path) -> Any:
    """Parse a ``.json`` file as JSON and anything else as YAML."""
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except FileNotFoundError:
        raise LessonFileError(f"File not found: {path}") from None
    except UnicodeDecodeError as e:
        raise LessonFileError(f"{path} is not UTF-8 text: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise LessonFileError(f"Could not parse {path}: {e}") from e


def parse_questions(data: Any) -> list[Question]:
    """Accept either a list of questions or ``{"questions": [...]}``."""
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        raise LessonFileError("Expected a list of questions")
    try:
        return [Question.model_validate(item) for item in data]
    except ValidationError as e:
        raise LessonFileError(f"Invalid question: {e}") from e


def load_questions(path: Path) -> list[Question]:
    data = read_document(path)
    try:
        return parse_questions(data)
    except LessonFileError as e:
        raise LessonFileError(f"{path}: {e}") from e


def load_assignments(path: Path) -> tuple[Any, list[dict], list[AssignmentRecord]]:
    """Load assignments as (whole document, raw assignments, records).

    The document is either the assignment list itself or a mapping holding
    it under ``assignments``; raw assignments and records share one order.
    Each assignment is ``{"id", "answers", "questions"}``; the question set
    may also sit under ``lesson.questions``.
    """
    document = read_document(path)
    items = document.get("assignments") if isinstance(document, dict) else document
    if not isinstance(items, list):
        raise LessonFileError(f"{path}: expected a list of assignments")

    records = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise LessonFileError(f"{path}: assignment #{position} is not a mapping")
        questions = item.get("questions")
        if questions is None and isinstance(item.get("lesson"), dict):
            questions = item["lesson"].get("questions")
        try:
            parsed = parse_questions(questions or [])
        except LessonFileError as e:
            raise LessonFileError(f"{path}: assignment #{position}: {e}") from e
        assignment_id = item.get("id")
        records.append(AssignmentRecord(
            id=str(position if assignment_id is None else assignment_id),
            answers=item.get("answers"),
            questions=parsed,
        ))
    return document, items, records
