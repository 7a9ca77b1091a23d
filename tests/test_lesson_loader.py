"""Tests for lesson and assignment file loading."""

import json

import pytest

from mcanswers.engine.lesson_loader import LessonFileError, load_assignments, load_questions


def test_load_questions_yaml(lesson_file):
    questions = load_questions(lesson_file)
    assert [q.id for q in questions] == ["q1", "q2"]
    assert questions[0].options[1].text == "Bravo"
    assert questions[0].options[1].is_correct is True
    assert questions[0].options[0].is_correct is None


def test_load_questions_json_list(write_json):
    path = write_json("lesson.json", [{"id": 10, "options": [{"id": 1, "text": "One"}]}])
    questions = load_questions(path)
    assert questions[0].id == "10"
    assert questions[0].options[0].id == "1"


def test_missing_file(tmp_path):
    with pytest.raises(LessonFileError, match="not found"):
        load_questions(tmp_path / "nope.yaml")


def test_invalid_question(write_json):
    path = write_json("lesson.json", {"questions": [{"options": []}]})
    with pytest.raises(LessonFileError, match="Invalid question"):
        load_questions(path)


def test_not_a_list(write_json):
    with pytest.raises(LessonFileError):
        load_questions(write_json("lesson.json", {"title": "no questions"}))


def test_unparseable_yaml(tmp_path):
    path = tmp_path / "lesson.yaml"
    path.write_text("questions: [unclosed")
    with pytest.raises(LessonFileError, match="Could not parse"):
        load_questions(path)


def test_load_assignments(write_json):
    lesson = {"questions": [{"id": "q1", "options": [{"id": "o1", "text": "Alpha"}]}]}
    path = write_json("assignments.json", {"assignments": [
        {"id": "a1", "answers": [{"selectedAnswerIndex": 0}], "lesson": lesson},
        {"id": 7, "answers": None, "questions": lesson["questions"]},
        {"answers": []},
    ]})
    document, items, records = load_assignments(path)
    assert document["assignments"] is items
    assert len(items) == 3
    assert [r.id for r in records] == ["a1", "7", "2"]
    assert records[0].questions[0].id == "q1"
    assert records[1].answers is None
    assert records[2].questions == []


def test_load_assignments_rejects_scalars(tmp_path):
    path = tmp_path / "assignments.json"
    path.write_text(json.dumps(["a1"]))
    with pytest.raises(LessonFileError, match="not a mapping"):
        load_assignments(path)


def test_load_assignments_plain_list(write_json):
    path = write_json("assignments.json", [{"id": "a1", "answers": []}])
    document, items, records = load_assignments(path)
    assert document is items
    assert records[0].id == "a1"


def test_null_assignment_id_uses_position(write_json):
    path = write_json("assignments.json", [{"id": "a1"}, {"id": None, "answers": []}])
    _, _, records = load_assignments(path)
    assert [r.id for r in records] == ["a1", "1"]


def test_tab_indented_json_lesson(tmp_path):
    path = tmp_path / "lesson.json"
    path.write_text(json.dumps(
        {"questions": [{"id": "q1", "options": [{"id": "o1", "text": "Alpha"}]}]},
        indent="\t",
    ))
    questions = load_questions(path)
    assert questions[0].options[0].text == "Alpha"


def test_invalid_json(tmp_path):
    path = tmp_path / "lesson.json"
    path.write_text('{"questions": [')
    with pytest.raises(LessonFileError, match="Could not parse"):
        load_questions(path)


def test_non_utf8_lesson(tmp_path):
    path = tmp_path / "lesson.yaml"
    path.write_bytes(b"questions:\n- id: \xff\xfe\n")
    with pytest.raises(LessonFileError, match="not UTF-8"):
        load_questions(path)
