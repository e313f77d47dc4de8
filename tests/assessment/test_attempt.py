"""Tests for classroom.assessment.attempt module."""

from __future__ import annotations

import datetime
import typing as t

import pytest
from sqlalchemy.orm import Session

from classroom.assessment import (
    Accepted,
    AssessmentError,
    AssessmentNotFound,
    Attempt,
    AttemptState,
    InvalidTransition,
    Reason,
    Rejected,
)
from classroom.core import TimestampProvider
from classroom.model import Assessment, AssessmentStatus, QuestionID
from classroom.storage import assessment as assessment_storage


@pytest.fixture
def attempt(utcnow: TimestampProvider) -> Attempt:
    return Attempt(utcnow=utcnow)


def stored(assessment: Assessment, session: Session) -> Assessment:
    with session.begin():
        result = assessment_storage.get(assessment.assessment_id, session=session)
    assert result is not None
    return result


class TestStart(object):
    """Tests for Attempt.start()."""

    def test_start(self, attempt: Attempt, test_assessment: Assessment) -> None:
        """start() begins an attempt with no answers."""
        attempt.start(test_assessment)

        assert attempt.state == AttemptState.InProgress
        assert attempt.assessment == test_assessment
        assert attempt.answers == {}
        assert attempt.progress.answered == 0
        assert attempt.progress.total == 2
        assert attempt.progress.remaining == 2

    def test_start_while_in_progress(
        self,
        attempt: Attempt,
        assessment_factory: t.Callable[..., Assessment],
    ) -> None:
        """start() refuses to begin a second attempt before the first ends."""
        attempt.start(assessment_factory())

        with pytest.raises(InvalidTransition):
            attempt.start(assessment_factory())

    def test_start_completed(
        self,
        attempt: Attempt,
        test_assessment: Assessment,
        db_session: Session,
    ) -> None:
        """start() refuses a completed assessment."""
        attempt.start(test_assessment)
        for q in test_assessment.questions:
            attempt.answer(q.question_id, "4")
        with db_session.begin():
            outcome = attempt.submit(session=db_session)
        assert isinstance(outcome, Accepted)

        with pytest.raises(InvalidTransition):
            Attempt().start(outcome.value)


class TestAnswer(object):
    """Tests for Attempt.answer()."""

    def test_answer_replaces(self, attempt: Attempt, test_assessment: Assessment) -> None:
        """answer() records the latest answer for a question."""
        q1 = test_assessment.questions[0]
        attempt.start(test_assessment)

        attempt.answer(q1.question_id, "3")
        attempt.answer(q1.question_id, "4")

        assert attempt.answers == {q1.question_id: "4"}
        assert attempt.progress.answered == 1

    def test_empty_answer_is_unanswered(self, attempt: Attempt, test_assessment: Assessment) -> None:
        """An empty answer leaves the question unanswered."""
        q1 = test_assessment.questions[0]
        attempt.start(test_assessment)

        attempt.answer(q1.question_id, "")

        assert attempt.progress.answered == 0
        assert attempt.unanswered() == test_assessment.questions

    def test_answer_unknown_question(self, attempt: Attempt, test_assessment: Assessment) -> None:
        """answer() refuses a question that is not part of the assessment."""
        attempt.start(test_assessment)

        with pytest.raises(AssessmentError):
            attempt.answer(QuestionID(), "4")

    def test_answer_before_start(self, attempt: Attempt, test_assessment: Assessment) -> None:
        """answer() requires an attempt in progress."""
        with pytest.raises(InvalidTransition):
            attempt.answer(test_assessment.questions[0].question_id, "4")


class TestSubmit(object):
    """Tests for Attempt.submit()."""

    def test_submit(
        self,
        attempt: Attempt,
        test_assessment: Assessment,
        db_session: Session,
    ) -> None:
        """submit() scores the answers and completes the assessment."""
        q1, q2 = test_assessment.questions
        attempt.start(test_assessment)
        # answered out of order; stored answers follow question order
        attempt.answer(q2.question_id, "6")
        attempt.answer(q1.question_id, "4")

        with db_session.begin():
            outcome = attempt.submit(session=db_session)

        assert isinstance(outcome, Accepted)
        assert outcome.value.score == 50
        assert outcome.value.answers == ["4", "6"]
        assert attempt.state == AttemptState.Submitted
        assert attempt.assessment is None

        result = stored(test_assessment, db_session)
        assert result.status == AssessmentStatus.Completed
        assert result.score == 50
        assert result.answers == ["4", "6"]
        assert result.answers is not None and len(result.answers) == len(result.questions)
        assert result.completed_at is not None
        assert result.completed_at == datetime.datetime(2024, 4, 10, 12, 30, tzinfo=datetime.UTC)

    def test_submit_all_correct(
        self,
        attempt: Attempt,
        test_assessment: Assessment,
        db_session: Session,
    ) -> None:
        """submit() with every answer right scores 100."""
        attempt.start(test_assessment)
        for q in test_assessment.questions:
            attempt.answer(q.question_id, q.correct_answer or "")

        with db_session.begin():
            outcome = attempt.submit(session=db_session)

        assert isinstance(outcome, Accepted)
        assert outcome.value.score == 100

    def test_submit_incomplete(
        self,
        attempt: Attempt,
        test_assessment: Assessment,
        db_session: Session,
    ) -> None:
        """submit() with a question unanswered is refused and stores nothing."""
        attempt.start(test_assessment)
        attempt.answer(test_assessment.questions[0].question_id, "4")

        with db_session.begin():
            outcome = attempt.submit(session=db_session)

        assert isinstance(outcome, Rejected)
        assert outcome.reason == Reason.IncompleteAnswers
        assert outcome.missing == 1
        assert outcome.message == "Please answer all questions before submitting. 1 questions remaining."
        assert attempt.state == AttemptState.InProgress
        assert attempt.answers == {test_assessment.questions[0].question_id: "4"}

        result = stored(test_assessment, db_session)
        assert result.status == AssessmentStatus.Pending
        assert result.score is None
        assert result.answers is None

    def test_submit_removed_assessment(
        self,
        attempt: Attempt,
        test_assessment: Assessment,
        db_session: Session,
    ) -> None:
        """submit() raises if the assessment was removed during the attempt."""
        attempt.start(test_assessment)
        for q in test_assessment.questions:
            attempt.answer(q.question_id, "4")
        with db_session.begin():
            assessment_storage.delete(test_assessment.assessment_id, session=db_session)

        with pytest.raises(AssessmentNotFound):
            with db_session.begin():
                attempt.submit(session=db_session)

    def test_submit_already_completed(
        self,
        test_assessment: Assessment,
        db_session: Session,
        utcnow: TimestampProvider,
    ) -> None:
        """submit() raises if another attempt completed the assessment first."""
        first, second = Attempt(utcnow=utcnow), Attempt(utcnow=utcnow)
        for a in (first, second):
            a.start(test_assessment)
            for q in test_assessment.questions:
                a.answer(q.question_id, "4")

        with db_session.begin():
            first.submit(session=db_session)
        with pytest.raises(InvalidTransition):
            with db_session.begin():
                second.submit(session=db_session)

        assert stored(test_assessment, db_session).score == 50


class TestCancel(object):
    """Tests for Attempt.cancel()."""

    def test_cancel_unconfirmed(self, attempt: Attempt, test_assessment: Assessment) -> None:
        """cancel() without confirmation keeps the attempt and its answers."""
        q1 = test_assessment.questions[0]
        attempt.start(test_assessment)
        attempt.answer(q1.question_id, "4")

        assert attempt.cancel(confirm=False) is False
        assert attempt.state == AttemptState.InProgress
        assert attempt.answers == {q1.question_id: "4"}

    def test_cancel_confirmed(
        self,
        attempt: Attempt,
        test_assessment: Assessment,
        db_session: Session,
    ) -> None:
        """cancel() with confirmation discards the answers and leaves the store unchanged."""
        attempt.start(test_assessment)
        for q in test_assessment.questions:
            attempt.answer(q.question_id, "4")

        assert attempt.cancel(confirm=True) is True
        assert attempt.state == AttemptState.NotStarted
        assert attempt.assessment is None
        assert attempt.answers == {}

        result = stored(test_assessment, db_session)
        assert result.status == AssessmentStatus.Pending
        assert result.answers is None

    def test_restart_after_cancel(self, attempt: Attempt, test_assessment: Assessment) -> None:
        """A cancelled attempt can start again with no answers."""
        attempt.start(test_assessment)
        attempt.answer(test_assessment.questions[0].question_id, "4")
        attempt.cancel(confirm=True)

        attempt.start(test_assessment)

        assert attempt.answers == {}

    def test_cancel_not_started(self, attempt: Attempt) -> None:
        """cancel() requires an attempt in progress."""
        with pytest.raises(InvalidTransition):
            attempt.cancel(confirm=True)
