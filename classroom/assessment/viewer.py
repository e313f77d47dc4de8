"""Read-only review of a completed assessment."""

from __future__ import annotations

import enum

from classroom.model import Assessment, BaseModel, QuestionID, QuestionKind

from .errors import InvalidTransition


class Verdict(enum.Enum):
    Correct = "correct"
    Incorrect = "incorrect"
    Ungraded = "ungraded"


class ResultRow(BaseModel):
    number: int
    question_id: QuestionID
    prompt: str
    kind: QuestionKind
    answer: str
    correct_answer: str | None
    points: int
    verdict: Verdict


class ResultView(object):
    """Per-question review of a completed assessment.

    The view can be minimized to its header and restored; once closed it
    can't be reopened.
    """

    def __init__(self, assessment: Assessment):
        if not assessment.is_completed or assessment.answers is None:
            raise InvalidTransition(f"assessment {assessment.assessment_id} has no results")
        self.assessment = assessment
        self.minimized = False
        self.closed = False

    @property
    def score(self) -> int:
        assert self.assessment.score is not None
        return self.assessment.score

    @property
    def feedback(self) -> str | None:
        return self.assessment.feedback

    @property
    def rows(self) -> list[ResultRow]:
        answers = self.assessment.answers or []
        rows: list[ResultRow] = []
        for i, (question, answer) in enumerate(zip(self.assessment.questions, answers, strict=True), start=1):
            if not question.is_graded:
                verdict = Verdict.Ungraded
            elif question.matches(answer):
                verdict = Verdict.Correct
            else:
                verdict = Verdict.Incorrect
            rows.append(
                ResultRow(
                    number=i,
                    question_id=question.question_id,
                    prompt=question.prompt,
                    kind=question.kind,
                    answer=answer,
                    correct_answer=question.correct_answer,
                    points=question.points,
                    verdict=verdict,
                )
            )
        return rows

    def minimize(self) -> None:
        self._check_open()
        self.minimized = True

    def restore(self) -> None:
        self._check_open()
        self.minimized = False

    def toggle(self) -> None:
        self._check_open()
        self.minimized = not self.minimized

    def close(self) -> None:
        self.closed = True

    def _check_open(self) -> None:
        if self.closed:
            raise InvalidTransition("result view is closed")
