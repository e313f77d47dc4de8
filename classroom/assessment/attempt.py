"""Taking an assessment: answering questions, then submitting or abandoning."""

from __future__ import annotations

import datetime
import enum
import logging
import typing as t

from classroom.core import di
from classroom.core.provider import TimestampProvider
from classroom.model import Assessment, BaseModel, Question, QuestionID
from classroom.storage import Session
from classroom.storage import assessment as assessment_storage

from . import scoring
from .errors import AssessmentError, AssessmentNotFound, InvalidTransition
from .outcome import Accepted, Reason, Rejected

logger = logging.getLogger(__name__)


class AttemptState(enum.Enum):
    NotStarted = "not_started"
    InProgress = "in_progress"
    Submitted = "submitted"


class Progress(BaseModel):
    answered: int
    total: int

    @property
    def remaining(self) -> int:
        return self.total - self.answered


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class Attempt(object):
    """One student's pass over a pending assessment.

    Answers live only in the attempt until submission; abandoning the
    attempt discards them and leaves the store untouched.
    """

    def __init__(self, *, utcnow: TimestampProvider = _utcnow):
        self.utcnow = utcnow
        self.state = AttemptState.NotStarted
        self.assessment: Assessment | None = None
        self._answers: dict[QuestionID, str] = {}

    @property
    def answers(self) -> t.Mapping[QuestionID, str]:
        return dict(self._answers)

    def start(self, assessment: Assessment) -> None:
        if self.state is AttemptState.InProgress:
            raise InvalidTransition("another attempt is in progress")
        if assessment.is_completed:
            raise InvalidTransition(f"assessment {assessment.assessment_id} is already completed")
        self.assessment = assessment
        self._answers = {}
        self.state = AttemptState.InProgress
        logger.info(
            "started attempt",
            extra={
                "assessment_id": assessment.assessment_id,
                "questions": len(assessment.questions),
            },
        )

    def answer(self, question_id: QuestionID, text: str) -> None:
        """Record or replace the answer to a question; empty text clears it."""
        assessment = self._active()
        if question_id not in {q.question_id for q in assessment.questions}:
            raise AssessmentError(f"question {question_id} is not part of assessment {assessment.assessment_id}")
        self._answers[question_id] = text

    def unanswered(self) -> list[Question]:
        assessment = self._active()
        return [q for q in assessment.questions if not self._answers.get(q.question_id)]

    @property
    def progress(self) -> Progress:
        assessment = self._active()
        total = len(assessment.questions)
        return Progress(answered=total - len(self.unanswered()), total=total)

    def submit(
        self,
        *,
        session: Session = di.Provide["storage.persistent.session"],
    ) -> Accepted[Assessment] | Rejected:
        """Score the answers and mark the assessment completed.

        Submission is refused while any question is unanswered, in which case
        the attempt stays in progress and nothing is stored.
        """
        assessment = self._active()
        missing = self.unanswered()
        if missing:
            logger.info(
                "submission refused",
                extra={
                    "assessment_id": assessment.assessment_id,
                    "unanswered": len(missing),
                },
            )
            return Rejected(reason=Reason.IncompleteAnswers, missing=len(missing))

        responses = {q.question_id: self._answers[q.question_id] for q in assessment.questions}
        score = scoring.score(assessment.questions, responses)
        try:
            completed = assessment_storage.complete(
                assessment.assessment_id,
                score=score,
                responses=responses,
                completed_at=self.utcnow(),
                session=session,
            )
        except ValueError as e:
            raise InvalidTransition(str(e)) from e
        if completed is None:
            raise AssessmentNotFound(assessment.assessment_id)

        self.assessment = None
        self._answers = {}
        self.state = AttemptState.Submitted
        logger.info(
            "submitted assessment",
            extra={
                "assessment_id": completed.assessment_id,
                "score": completed.score,
            },
        )
        return Accepted(value=completed)

    def cancel(self, *, confirm: bool) -> bool:
        """Abandon the attempt, discarding its answers, if `confirm` is given.

        Returns:
            True if the attempt was abandoned, False if it remains in progress
        """
        assessment = self._active()
        if not confirm:
            return False
        logger.info(
            "abandoned attempt",
            extra={
                "assessment_id": assessment.assessment_id,
                "answered": len([v for v in self._answers.values() if v]),
            },
        )
        self.assessment = None
        self._answers = {}
        self.state = AttemptState.NotStarted
        return True

    def _active(self) -> Assessment:
        if self.state is not AttemptState.InProgress or self.assessment is None:
            raise InvalidTransition(f"no attempt in progress (state: {self.state.value})")
        return self.assessment
