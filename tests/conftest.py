"""Shared fixtures for mcanswers tests."""

from __future__ import annotations

import json

import pytest
import yaml

from mcanswers.engine.models import Question

LESSON = [
    {
        "id": "q1",
        "options": [
            {"id": "o1", "text": "Alpha"},
            {"id": "o2", "text": "Bravo", "isCorrect": True},
            {"id": "o3", "text": "Charlie"},
        ],
    },
    {
        "id": "q2",
        "options": [
            {"id": "o4", "text": "Delta"},
            {"id": "o5", "text": "Echo"},
            {"id": "o6", "text": "Foxtrot", "isCorrect": True},
        ],
    },
]


@pytest.fixture
def questions() -> list[Question]:
    return [Question.model_validate(q) for q in LESSON]


@pytest.fixture
def lesson_file(tmp_path):
    """The two-question lesson written as YAML."""
    path = tmp_path / "lesson.yaml"
    with open(path, "w") as f:
        yaml.dump({"questions": LESSON}, f)
    return path


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path
    return _write
