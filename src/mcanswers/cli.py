"""CLI entry point for mcanswers."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError

from mcanswers.config.settings import Settings
from mcanswers.engine.lesson_loader import LessonFileError

_file = click.Path(exists=True, dir_okay=False, path_type=Path)


def _load_questions(path: Path):
    from mcanswers.engine.lesson_loader import load_questions

    try:
        return load_questions(path)
    except LessonFileError as e:
        raise click.ClickException(str(e)) from e


def _parse(answers: Path, lesson: Path):
    from mcanswers.engine.normalizer import NormalizeReport, normalize

    questions = _load_questions(lesson)
    report = NormalizeReport()
    try:
        # Read as text so legacy "questionId:value" payloads reach the normalizer.
        raw = answers.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise click.ClickException(f"{answers} is not UTF-8 text: {e}") from e
    parsed = normalize(raw, questions, report=report)
    if report.dual_write_count or report.dropped:
        click.echo(
            f"{report.records} record(s): {report.dual_write_count} written to two questions, "
            f"{report.dropped} dropped",
            err=True,
        )
    return questions, parsed


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.yaml (default: ~/.mcanswers/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostics to stderr")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """mcanswers: make sense of stored multiple-choice answers."""
    try:
        settings = Settings.load(config_path)
    except (ValidationError, yaml.YAMLError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    logging.basicConfig(
        stream=sys.stderr,
        level="DEBUG" if verbose else settings.get_log_level(),
        format="mcanswers: %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@main.command()
@click.argument("answers", type=_file)
@click.option("--questions", "lesson", type=_file, required=True, help="Lesson question set (YAML or JSON)")
@click.pass_context
def normalize(ctx: click.Context, answers: Path, lesson: Path) -> None:
    """Print the canonical per-question answers as JSON."""
    settings: Settings = ctx.obj["settings"]
    _, parsed = _parse(answers, lesson)
    click.echo(json.dumps(
        {question_id: answer.to_dict() for question_id, answer in parsed.items()},
        indent=settings.json_indent or None,
    ))


@main.command()
@click.argument("answers", type=_file)
@click.option("--questions", "lesson", type=_file, required=True, help="Lesson question set (YAML or JSON)")
def review(answers: Path, lesson: Path) -> None:
    """Show the selected option label for every question."""
    from mcanswers.engine.label_resolver import resolve_selected_label
    from mcanswers.engine.option_resolver import resolve_selected_option

    questions, parsed = _parse(answers, lesson)
    for question in questions:
        answer = parsed.get(question.id)
        option = resolve_selected_option(question, answer)
        label = resolve_selected_label(question, answer, option)
        suffix = ""
        if answer is not None and answer.is_correct is not None:
            suffix = " [correct]" if answer.is_correct else " [incorrect]"
        click.echo(f"{question.id}: {label or '(no answer)'}{suffix}")


@main.command()
@click.argument("assignments", type=_file)
@click.option("--apply", "apply_changes", is_flag=True, help="Write the repaired answers")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write repaired assignments (default: in place)",
)
@click.pass_context
def backfill(ctx: click.Context, assignments: Path, apply_changes: bool, output: Optional[Path]) -> None:
    """Rewrite stored answers to current question and option ids."""
    from mcanswers.engine.lesson_loader import load_assignments
    from mcanswers.engine.repair import backfill_assignments

    settings: Settings = ctx.obj["settings"]
    try:
        document, items, records = load_assignments(assignments)
    except LessonFileError as e:
        raise click.ClickException(str(e)) from e

    report = backfill_assignments(records, limit=settings.report_id_limit)
    if apply_changes:
        for item, original, repaired in zip(items, records, report.assignments):
            if repaired is not original:
                item["answers"] = repaired.answers
        target = output or assignments
        with open(target, "w", encoding="utf-8") as f:
            if target.suffix in (".yaml", ".yml"):
                yaml.safe_dump(document, f, sort_keys=False, allow_unicode=True)
            else:
                json.dump(document, f, indent=settings.json_indent or None, ensure_ascii=False)
                f.write("\n")

    click.echo(json.dumps(report.summary(applied=apply_changes), indent=settings.json_indent or None))
