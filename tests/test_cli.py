"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from mcanswers.cli import main


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(main, ["--config", str(tmp_path / "config.yaml"), *map(str, args)])
    return _run


@pytest.fixture
def answers_file(write_json):
    return write_json("answers.json", [
        {"questionId": "q1", "selectedAnswerId": "o2", "isCorrect": True},
        {"questionId": "q2", "selectedAnswerText": "Echo", "isCorrect": "wrong"},
    ])


def test_normalize(run, answers_file, lesson_file):
    result = run("normalize", answers_file, "--questions", lesson_file)
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["q1"] == {
        "questionId": "q1",
        "selectedAnswerId": "o2",
        "selectedAnswerText": None,
        "selectedAnswerIndex": None,
        "isCorrect": True,
    }
    assert data["q2"]["selectedAnswerText"] == "Echo"


def test_normalize_legacy_string(run, tmp_path, lesson_file):
    answers = tmp_path / "answers.txt"
    answers.write_text("q2:o6\n")
    result = run("normalize", answers, "--questions", lesson_file)
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["q2"]["selectedAnswerId"] == "o6"


def test_review(run, answers_file, lesson_file):
    result = run("review", answers_file, "--questions", lesson_file)
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["q1: Bravo [correct]", "q2: Echo [incorrect]"]


def test_review_no_answer(run, write_json, lesson_file):
    answers = write_json("answers.json", {"q1": "o1"})
    result = run("review", answers, "--questions", lesson_file)
    assert result.output.splitlines() == ["q1: Alpha", "q2: (no answer)"]


def test_bad_lesson_file(run, answers_file, write_json):
    lesson = write_json("lesson.json", [{"id": "q1", "options": 5}])
    result = run("normalize", answers_file, "--questions", lesson)
    assert result.exit_code == 1
    assert "Invalid question" in result.output


def test_invalid_config(tmp_path, answers_file, lesson_file):
    config = tmp_path / "bad.yaml"
    config.write_text("json_indent: -3\n")
    result = CliRunner().invoke(
        main, ["--config", str(config), "normalize", str(answers_file), "--questions", str(lesson_file)]
    )
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


class TestBackfill:
    @pytest.fixture
    def assignments_file(self, write_json):
        questions = [{"id": "q1", "options": [{"id": "o1", "text": "Alpha"}, {"id": "o2", "text": "Bravo"}]}]
        return write_json("assignments.json", [
            {"id": "a1", "answers": [{"questionId": "old", "selectedAnswerText": "bravo"}], "questions": questions},
            {"id": "a2", "answers": [{"questionId": "q1", "selectedAnswerId": "o1", "selectedAnswerIndex": 0,
                                      "selectedAnswerText": "Alpha"}], "questions": questions},
        ])

    def test_dry_run(self, run, assignments_file):
        before = assignments_file.read_text()
        result = run("backfill", assignments_file)
        assert result.exit_code == 0, result.output
        summary = json.loads(result.output)
        assert summary == {
            "scanned": 2,
            "updatedCount": 1,
            "updatedIds": ["a1"],
            "updatedIdsTruncated": False,
            "applied": False,
        }
        assert assignments_file.read_text() == before

    def test_apply_to_output(self, run, assignments_file, tmp_path):
        output = tmp_path / "repaired.json"
        result = run("backfill", assignments_file, "--apply", "--output", output)
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["applied"] is True
        repaired = json.loads(output.read_text())
        assert repaired[0]["answers"] == [{
            "questionId": "q1",
            "selectedAnswerText": "bravo",
            "selectedAnswerId": "o2",
            "selectedAnswerIndex": 1,
        }]
        assert repaired[1]["answers"][0]["selectedAnswerId"] == "o1"
        assert repaired[0]["questions"][0]["id"] == "q1"

    def test_apply_in_place_yaml(self, run, tmp_path):
        import yaml

        path = tmp_path / "assignments.yaml"
        path.write_text(yaml.dump([{
            "id": "a1",
            "answers": [{"selectedAnswerIndex": 1}],
            "questions": [{"id": "q1", "options": [{"id": "o1", "text": "Alpha"}, {"id": "o2", "text": "Bravo"}]}],
        }]))
        result = run("backfill", path, "--apply")
        assert result.exit_code == 0, result.output
        repaired = yaml.safe_load(path.read_text())
        assert repaired[0]["answers"][0]["selectedAnswerId"] == "o2"


def test_non_utf8_answers(run, tmp_path, lesson_file):
    answers = tmp_path / "answers.txt"
    answers.write_bytes(b"q1:\xff\xfe")
    result = run("normalize", answers, "--questions", lesson_file)
    assert result.exit_code == 1
    assert "not UTF-8" in result.output


def test_backfill_keeps_wrapper_document(run, write_json):
    questions = [{"id": "q1", "options": [{"id": "o1", "text": "Alpha"}, {"id": "o2", "text": "Bravo"}]}]
    path = write_json("assignments.json", {
        "version": 3,
        "assignments": [{"id": "a1", "answers": [{"selectedAnswerIndex": 1}], "questions": questions}],
        "exportedBy": "nightly",
    })
    result = run("backfill", path, "--apply")
    assert result.exit_code == 0, result.output
    written = json.loads(path.read_text())
    assert written["version"] == 3
    assert written["exportedBy"] == "nightly"
    assert written["assignments"][0]["answers"][0]["selectedAnswerId"] == "o2"
