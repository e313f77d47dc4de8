import datetime
import enum
import typing as t

import pydantic as p

from .base import BaseModel, WithTimestamps
from .id import AssessmentID, QuestionID


class QuestionKind(enum.Enum):
    MultipleChoice = "multiple-choice"
    Coding = "coding"


class AssessmentStatus(enum.Enum):
    Pending = "pending"
    Completed = "completed"


class Question(BaseModel):
    question_id: QuestionID
    prompt: str
    kind: QuestionKind = QuestionKind.MultipleChoice
    options: list[str] = []
    correct_answer: str | None = None
    points: t.Annotated[int, p.Field(ge=0)] = 10

    @property
    def is_graded(self) -> bool:
        """A question without a correct answer (e.g. most coding questions) can never earn points."""
        return bool(self.correct_answer)

    def matches(self, answer: str | None) -> bool:
        return self.is_graded and answer == self.correct_answer


class Assessment(WithTimestamps, BaseModel):
    assessment_id: AssessmentID
    course_id: str
    title: str
    description: str
    due_date: datetime.date
    questions: list[Question]
    total_points: int

    status: AssessmentStatus = AssessmentStatus.Pending
    score: t.Annotated[int, p.Field(ge=0, le=100)] | None = None
    # keyed by question; use `answers` for the positional view
    responses: dict[QuestionID, str] | None = None
    feedback: str | None = None
    completed_at: datetime.datetime | None = None

    @p.model_validator(mode="after")
    def check_submission(self) -> t.Self:
        if self.score is not None and self.status is not AssessmentStatus.Completed:
            raise ValueError("score may only be set on a completed assessment")
        if self.responses is not None:
            expected = {q.question_id for q in self.questions}
            if set(self.responses) != expected:
                raise ValueError("responses must cover exactly the assessment's questions")
        return self

    @property
    def is_completed(self) -> bool:
        return self.status is AssessmentStatus.Completed

    @property
    def answers(self) -> list[str] | None:
        """Submitted answers in question order, or None before submission."""
        if self.responses is None:
            return None
        return [self.responses[q.question_id] for q in self.questions]
