from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla

from classroom.core import di
from classroom.model import Assessment, AssessmentID, AssessmentStatus, Question, QuestionID

from . import Session
from .table import assessments


def get(
    assessment_id: AssessmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Assessment | None:
    """Get an assessment by ID.

    Ids are not unique in the store; the earliest record wins.
    """
    stmt = (
        sqla
        .select(assessments.__table__)
        .where(assessments.assessment_id == assessment_id)
        .order_by(assessments.seq)
        .limit(1)
    )
    row = session.execute(stmt).mappings().one_or_none()
    return Assessment(**row) if row else None


def find(
    *,
    course_id: str | None = None,
    status: AssessmentStatus | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Assessment, ...]:
    """Find assessments matching criteria, in the order they were added."""
    stmt = sqla.select(assessments.__table__).order_by(assessments.seq)
    if course_id is not None:
        stmt = stmt.where(assessments.course_id == course_id)
    if status is not None:
        stmt = stmt.where(assessments.status == status)
    rows = session.execute(stmt).mappings().all()
    return tuple(Assessment(**row) for row in rows)


def create(
    *,
    assessment_id: AssessmentID,
    course_id: str,
    title: str,
    description: str,
    due_date: datetime.date,
    questions: t.Sequence[Question],
    total_points: int | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Assessment:
    """Append a new pending assessment.

    No duplicate-id check is performed; callers supply a fresh id. When
    `total_points` is omitted it is the sum of the question points.
    """
    if total_points is None:
        total_points = sum(q.points for q in questions)
    result = session.execute(
        sqla.insert(assessments).values(
            assessment_id=assessment_id,
            course_id=course_id,
            title=title,
            description=description,
            due_date=due_date,
            total_points=total_points,
            questions=[q.model_dump(mode="json") for q in questions],
            status=AssessmentStatus.Pending,
        )
    )
    session.flush()

    (seq,) = result.inserted_primary_key  # pyright: ignore[reportGeneralTypeIssues]
    row = session.execute(sqla.select(assessments.__table__).where(assessments.seq == seq)).mappings().one()
    return Assessment(**row)


def update(
    assessment: Assessment,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Assessment | None:
    """Replace the stored assessment having the same id, in place.

    Returns:
        The stored assessment, or None (and no change) if the id is absent
    """
    stmt = (
        sqla
        .update(assessments)
        .where(assessments.assessment_id == assessment.assessment_id)
        .values(
            course_id=assessment.course_id,
            title=assessment.title,
            description=assessment.description,
            due_date=assessment.due_date,
            total_points=assessment.total_points,
            questions=[q.model_dump(mode="json") for q in assessment.questions],
            status=assessment.status,
            score=assessment.score,
            responses=_dump_responses(assessment.responses),
            feedback=assessment.feedback,
            completed_at=assessment.completed_at,
        )
    )
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        return None
    session.flush()
    return get(assessment.assessment_id, session=session)


def complete(
    assessment_id: AssessmentID,
    *,
    score: int,
    responses: t.Mapping[QuestionID, str],
    completed_at: datetime.datetime,
    session: Session = di.Provide["storage.persistent.session"],
) -> Assessment | None:
    """Transition an assessment from Pending to Completed status.

    Args:
        assessment_id: The assessment to transition
        score: Percentage score, 0-100
        responses: Submitted answer for every question, keyed by question id
        completed_at: Submission time
        session: Database session

    Returns:
        Updated assessment or None if not found
    """
    assessment = get(assessment_id, session=session)
    if assessment is None:
        return None

    if assessment.status != AssessmentStatus.Pending:
        msg = f"Cannot complete assessment with status {assessment.status.value}"
        raise ValueError(msg)

    completed = assessment.model_copy(
        update={
            "status": AssessmentStatus.Completed,
            "score": score,
            "responses": dict(responses),
            "completed_at": completed_at,
        }
    )
    # validate the invariants linking status, score and responses
    Assessment.model_validate(completed.model_dump())
    return update(completed, session=session)


def delete(
    assessment_id: AssessmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete an assessment; deleting an unknown id is a no-op.

    Returns:
        True if an assessment was deleted, False if not found
    """
    stmt = sqla.delete(assessments).where(assessments.assessment_id == assessment_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]


def _dump_responses(responses: t.Mapping[QuestionID, str] | None) -> dict[str, str] | None:
    if responses is None:
        return None
    return {str(k): v for k, v in responses.items()}
