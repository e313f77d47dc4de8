"""Validation outcomes returned by the authoring and taking flows."""

from __future__ import annotations

import enum
import typing as t

from classroom.model import BaseModel

T = t.TypeVar("T")


class Reason(enum.Enum):
    MissingTitle = "missing_title"
    MissingDescription = "missing_description"
    MissingDueDate = "missing_due_date"
    NoQuestions = "no_questions"
    MissingPrompt = "missing_prompt"
    TooManyOptions = "too_many_options"
    NegativePoints = "negative_points"
    IncompleteAnswers = "incomplete_answers"


class Accepted(BaseModel, t.Generic[T]):
    ok: t.Literal[True] = True
    value: T


class Rejected(BaseModel):
    ok: t.Literal[False] = False
    reason: Reason
    # unanswered question count, for IncompleteAnswers
    missing: int | None = None

    @property
    def message(self) -> str:
        match self.reason:
            case Reason.MissingTitle | Reason.MissingDescription | Reason.MissingDueDate | Reason.NoQuestions:
                return "Please fill in all required fields and add at least one question."
            case Reason.MissingPrompt:
                return "Question text is required."
            case Reason.TooManyOptions:
                return "A multiple-choice question has too many options."
            case Reason.NegativePoints:
                return "Points must not be negative."
            case Reason.IncompleteAnswers:
                return f"Please answer all questions before submitting. {self.missing} questions remaining."

