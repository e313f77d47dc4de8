"""CLI commands for authoring, taking and reviewing assessments."""

from __future__ import annotations

import typing as t
from pathlib import Path

import yaml
from sqlalchemy.orm import Session

import classroom.lib.cli as click
import classroom.lib.json as json
from classroom.assessment import (
    Action,
    actions_for,
    Attempt,
    Draft,
    DraftDocument,
    Rejected,
    ResultView,
    summarize,
    Verdict,
)
from classroom.core import di, KeyProvider, LoggingProvider, TimestampProvider
from classroom.core.config import AssessmentSettings
from classroom.model import Assessment, AssessmentID, AssessmentStatus, Question, QuestionKind, UserRole
from classroom.storage import assessment as assessment_storage

_VerdictStyle: dict[Verdict, tuple[str, str]] = {
    Verdict.Correct: ("✓", "green"),
    Verdict.Incorrect: ("✗", "red"),
    Verdict.Ungraded: ("-", "yellow"),
}


@click.group("assessment")
def assessment():
    """Author, take and review assessments."""
    ...


@assessment.command("list")
@click.option("--course", "course_id", help="Only assessments for this course")
@click.option("--status", type=click.EnumType(AssessmentStatus), help="Only assessments with this status")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print as JSON")
@di.inject
def assessment_list(
    course_id: str | None,
    status: AssessmentStatus | None,
    as_json: bool,
    role: UserRole = di.Provide["role"],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """List assessments with the actions available to the current role."""
    with session.begin():
        assessments = assessment_storage.find(course_id=course_id, status=status, session=session)

    if as_json:
        click.echo(json.dumps([_dump(a, role) for a in assessments], indent=2))
        return

    if not assessments:
        click.echo("No assessments found.")
        return

    for a in assessments:
        actions = ", ".join(x.value for x in actions_for(a, role))
        state = f"completed ({a.score}%)" if a.is_completed else "pending"
        click.echo(f"{a.assessment_id}  {a.title}")
        click.echo(f"    course {a.course_id}, due {a.due_date:%Y-%m-%d}, {a.total_points} points, {state}")
        click.echo(f"    actions: {actions}")


@assessment.command("show")
@click.argument("assessment_id", type=click.KeyParamType(AssessmentID))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print as JSON")
@di.inject
def assessment_show(
    assessment_id: AssessmentID,
    as_json: bool,
    role: UserRole = di.Provide["role"],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Show an assessment and its questions.

    Correct answers are shown to instructors only.
    """
    with session.begin():
        a = _get_or_fail(assessment_id, session=session)

    if as_json:
        click.echo(json.dumps(_dump(a, role), indent=2))
        return

    click.echo(click.style(a.title, bold=True))
    click.echo(a.description)
    click.echo(f"Course {a.course_id}, due {a.due_date:%Y-%m-%d}, {a.total_points} points, {a.status.value}")
    for i, q in enumerate(a.questions, start=1):
        click.echo()
        click.echo(f"{i}. {q.prompt} ({q.points} points, {q.kind.value})")
        for j, option in enumerate(q.options, start=1):
            click.echo(f"   {j}) {option}")
        if role.is_instructor:
            click.echo(f"   answer: {q.correct_answer or '(ungraded)'}")


@assessment.command("create")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@di.inject
def assessment_create(
    path: Path,
    role: UserRole = di.Provide["role"],
    settings: AssessmentSettings = di.Provide["config.assessment", di.as_(AssessmentSettings)],
    assessment_ids: KeyProvider = di.Provide["assessment_ids"],
    question_ids: KeyProvider = di.Provide["question_ids"],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Create an assessment from a YAML or JSON document.

    PATH is a document with a title, description, due_date, optional
    course_id and a list of questions.
    """
    if not role.is_instructor:
        raise click.ClickException(f"a {role.value} may not create assessments")

    document = DraftDocument.model_validate(yaml.safe_load(path.read_text(encoding="utf8")) or {})
    draft = Draft(settings=settings, assessment_ids=assessment_ids, question_ids=question_ids)
    rejected = draft.load(document)
    for r in rejected:
        click.echo(click.style("skipped question: ", fg="yellow") + r.message, err=True)

    with session.begin():
        outcome = draft.commit(session=session)

    if isinstance(outcome, Rejected):
        raise click.ClickException(outcome.message)

    a = outcome.value
    click.echo(f"Created assessment {a.assessment_id}: {a.title}")
    click.echo(f"    {len(a.questions)} questions, {a.total_points} points, due {a.due_date:%Y-%m-%d}")


@assessment.command("take")
@click.argument("assessment_id", type=click.KeyParamType(AssessmentID))
@di.inject
def assessment_take(
    assessment_id: AssessmentID,
    role: UserRole = di.Provide["role"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Answer and submit a pending assessment.

    Leaving an answer empty leaves the question unanswered; submission
    is refused until every question has an answer.
    """
    with session.begin():
        a = _get_or_fail(assessment_id, session=session)
    _require(Action.Start, a, role)

    attempt = Attempt(utcnow=utcnow)
    attempt.start(a)
    click.echo(click.style(a.title, bold=True))
    click.echo(a.description)

    pending: list[Question] = list(a.questions)
    while True:
        for q in pending:
            n = a.questions.index(q) + 1
            attempt.answer(q.question_id, _ask(q, n, len(a.questions)))

        progress = attempt.progress
        click.echo(f"\nAnswered {progress.answered} of {progress.total} questions.")
        if click.confirm("Submit your answers?", default=True):
            with session.begin():
                outcome = attempt.submit(session=session)
            if isinstance(outcome, Rejected):
                click.echo(click.style(outcome.message, fg="yellow"))
                pending = attempt.unanswered()
                continue
            click.echo(click.style(f"Submitted. Your score: {outcome.value.score}%", fg="green"))
            return

        if click.confirm("Exit this assessment? Your answers will be discarded.", default=False):
            attempt.cancel(confirm=True)
            click.echo("Attempt abandoned.")
            return
        pending = attempt.unanswered()


@assessment.command("result")
@click.argument("assessment_id", type=click.KeyParamType(AssessmentID))
@click.option("--brief", is_flag=True, default=False, help="Only show the score")
@di.inject
def assessment_result(
    assessment_id: AssessmentID,
    brief: bool,
    role: UserRole = di.Provide["role"],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Review the answers and score of a completed assessment."""
    with session.begin():
        a = _get_or_fail(assessment_id, session=session)
    _require(Action.ViewResults, a, role)

    view = ResultView(a)
    if brief:
        view.minimize()
    click.echo(click.style(f"{a.title}: {view.score}%", bold=True))
    if not view.minimized:
        for row in view.rows:
            mark, color = _VerdictStyle[row.verdict]
            click.echo(f"\nQuestion {row.number} of {len(a.questions)}: {row.prompt}")
            click.echo(f"  Your answer: {row.answer}")
            if row.correct_answer is not None:
                click.echo(f"  Correct answer: {row.correct_answer} " + click.style(mark, fg=color))
            else:
                click.echo("  " + click.style("not graded", fg=color))
        if view.feedback:
            click.echo(f"\nFeedback: {view.feedback}")
    view.close()


@assessment.command("remove")
@click.argument("assessment_id", type=click.KeyParamType(AssessmentID))
@click.option("-y", "--yes", is_flag=True, default=False, help="Do not ask for confirmation")
@di.inject
def assessment_remove(
    assessment_id: AssessmentID,
    yes: bool,
    role: UserRole = di.Provide["role"],
    session: Session = di.Provide["storage.persistent.session"],
    logging_provider: LoggingProvider = di.Provide["logging"],
) -> None:
    """Delete an assessment and any results it holds."""
    logger = logging_provider.get_logger()
    with session.begin():
        a = _get_or_fail(assessment_id, session=session)
        _require(Action.Remove, a, role)
        if not yes and not click.confirm(f"Remove {a.title!r}?", default=False):
            click.echo("Nothing removed.")
            return
        assessment_storage.delete(assessment_id, session=session)
    logger.info("removed assessment", extra={"assessment_id": assessment_id, "title": a.title})
    click.echo(f"Removed assessment {assessment_id}.")


@assessment.command("stats")
@click.option("--course", "course_id", help="Only assessments for this course")
@di.inject
def assessment_stats(
    course_id: str | None,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Summarize pending and completed assessments."""
    with session.begin():
        summary = summarize(assessment_storage.find(course_id=course_id, session=session))

    click.echo(f"Total: {summary.total}")
    click.echo(f"Pending: {summary.pending}")
    click.echo(f"Completed: {summary.completed}")
    if summary.average_score is not None:
        click.echo(f"Average score: {summary.average_score:.1f}%")


def _get_or_fail(assessment_id: AssessmentID, *, session: Session) -> Assessment:
    a = assessment_storage.get(assessment_id, session=session)
    if a is None:
        raise click.ClickException(f"assessment {assessment_id} not found")
    return a


def _require(action: Action, a: Assessment, role: UserRole) -> None:
    if action not in actions_for(a, role):
        verb = action.value.replace("_", " ")
        raise click.ClickException(f"cannot {verb} {a.status.value} assessment as {role.value}")


def _dump(a: Assessment, role: UserRole) -> dict[str, t.Any]:
    data = a.model_dump(mode="json")
    if not role.is_instructor:
        for q in data["questions"]:
            q.pop("correct_answer", None)
    return data


def _ask(q: Question, n: int, total: int) -> str:
    click.echo(f"\nQuestion {n} of {total} ({q.points} points)")
    click.echo(q.prompt)
    if q.kind is QuestionKind.MultipleChoice and q.options:
        for i, option in enumerate(q.options, start=1):
            click.echo(f"  {i}) {option}")
        reply = t.cast(str, click.prompt("Choice", default="", show_default=False)).strip()
        # exact option text first, then a 1-based index
        if reply in q.options:
            return reply
        if reply.isdigit() and 1 <= int(reply) <= len(q.options):
            return q.options[int(reply) - 1]
        return reply
    return t.cast(str, click.prompt("Answer", default="", show_default=False))
