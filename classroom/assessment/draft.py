"""Authoring of new assessments.

A `Draft` accumulates an assessment's metadata and questions, then
commits it to the store once it passes validation. Input problems are
returned as `Rejected` outcomes rather than raised.
"""

from __future__ import annotations

import datetime
import logging
import typing as t

from classroom.core import di
from classroom.core.config import AssessmentSettings
from classroom.core.provider import KeyProvider
from classroom.model import Assessment, AssessmentID, BaseModel, Question, QuestionID, QuestionKind
from classroom.storage import Session
from classroom.storage import assessment as assessment_storage

from .outcome import Accepted, Reason, Rejected

logger = logging.getLogger(__name__)


class QuestionDocument(BaseModel):
    question_id: QuestionID | None = None
    prompt: str = ""
    kind: QuestionKind = QuestionKind.MultipleChoice
    options: list[str] = []
    correct_answer: str | None = None
    points: int | None = None


class DraftDocument(BaseModel):
    """An assessment as written in a YAML or JSON file."""

    # fixed id, so the assessment can be addressed the same way on every run
    assessment_id: AssessmentID | None = None
    title: str = ""
    description: str = ""
    due_date: datetime.date | None = None
    course_id: str | None = None
    questions: list[QuestionDocument] = []


class Draft(object):
    def __init__(
        self,
        *,
        settings: AssessmentSettings | None = None,
        assessment_ids: KeyProvider = AssessmentID,
        question_ids: KeyProvider = QuestionID,
    ):
        self.settings = settings or AssessmentSettings()
        self.assessment_ids = assessment_ids
        self.question_ids = question_ids
        self.discard()

    def discard(self) -> None:
        """Reset to an empty draft."""
        self.assessment_id: AssessmentID | None = None
        self.title = ""
        self.description = ""
        self.due_date: datetime.date | None = None
        self.course_id: str | None = None
        self.questions: list[Question] = []

    @property
    def total_points(self) -> int:
        return sum(q.points for q in self.questions)

    def add_question(
        self,
        prompt: str,
        *,
        kind: QuestionKind = QuestionKind.MultipleChoice,
        options: t.Sequence[str] = (),
        correct_answer: str | None = None,
        points: int | None = None,
        question_id: QuestionID | None = None,
    ) -> Accepted[Question] | Rejected:
        """Append a question to the draft.

        The correct answer of a multiple-choice question is not required to
        be one of its options. Coding questions carry no options. Without a
        `question_id` a fresh one is drawn.
        """
        if not prompt.strip():
            return Rejected(reason=Reason.MissingPrompt)
        if points is None:
            points = self.settings.default_points
        if points < 0:
            return Rejected(reason=Reason.NegativePoints)
        if kind is QuestionKind.MultipleChoice:
            if len(options) > self.settings.max_options:
                return Rejected(reason=Reason.TooManyOptions)
        else:
            options = ()

        question = Question(
            question_id=question_id or t.cast(QuestionID, self.question_ids()),
            prompt=prompt,
            kind=kind,
            options=list(options),
            correct_answer=correct_answer or None,
            points=points,
        )
        self.questions.append(question)
        logger.debug(
            "added question",
            extra={
                "question_id": question.question_id,
                "kind": question.kind,
                "points": question.points,
            },
        )
        return Accepted(value=question)

    def remove_question(self, question_id: QuestionID) -> bool:
        """Remove the question with the given id; an unknown id changes nothing."""
        before = len(self.questions)
        self.questions = [q for q in self.questions if q.question_id != question_id]
        return len(self.questions) != before

    def validate(self) -> Rejected | None:
        if not self.title.strip():
            return Rejected(reason=Reason.MissingTitle)
        if not self.description.strip():
            return Rejected(reason=Reason.MissingDescription)
        if self.due_date is None:
            return Rejected(reason=Reason.MissingDueDate)
        if not self.questions:
            return Rejected(reason=Reason.NoQuestions)
        return None

    def load(self, document: DraftDocument) -> list[Rejected]:
        """Replace the draft's content with a document.

        Returns:
            One outcome for each question of the document that was not added
        """
        self.discard()
        self.assessment_id = document.assessment_id
        self.title = document.title
        self.description = document.description
        self.due_date = document.due_date
        self.course_id = document.course_id

        rejected: list[Rejected] = []
        for qd in document.questions:
            outcome = self.add_question(
                qd.prompt,
                kind=qd.kind,
                options=qd.options,
                correct_answer=qd.correct_answer,
                points=qd.points,
                question_id=qd.question_id,
            )
            if isinstance(outcome, Rejected):
                rejected.append(outcome)
        return rejected

    def commit(
        self,
        *,
        session: Session = di.Provide["storage.persistent.session"],
    ) -> Accepted[Assessment] | Rejected:
        """Store the draft as a new pending assessment and reset the draft.

        A rejected draft is left as it was and nothing is stored.
        """
        rejected = self.validate()
        if rejected is not None:
            logger.info("draft rejected", extra={"reason": rejected.reason, "title": self.title})
            return rejected

        assert self.due_date is not None
        assessment = assessment_storage.create(
            assessment_id=self.assessment_id or t.cast(AssessmentID, self.assessment_ids()),
            course_id=self.course_id or self.settings.default_course_id,
            title=self.title,
            description=self.description,
            due_date=self.due_date,
            questions=self.questions,
            session=session,
        )
        logger.info(
            "created assessment",
            extra={
                "assessment_id": assessment.assessment_id,
                "title": assessment.title,
                "questions": len(assessment.questions),
                "total_points": assessment.total_points,
            },
        )
        self.discard()
        return Accepted(value=assessment)
