"""The assessment listing: what each role may do with each assessment."""

from __future__ import annotations

import enum
import typing as t

from classroom.model import Assessment, BaseModel, UserRole


class Action(enum.Enum):
    Start = "start"
    ViewResults = "view_results"
    Remove = "remove"


class Summary(BaseModel):
    total: int
    pending: int
    completed: int
    # mean of the scores present, None until one is recorded
    average_score: float | None = None


def actions_for(assessment: Assessment, role: UserRole) -> tuple[Action, ...]:
    if role.is_instructor:
        return (Action.Remove,)
    if assessment.is_completed:
        return (Action.ViewResults,)
    return (Action.Start,)


def summarize(assessments: t.Iterable[Assessment]) -> Summary:
    assessments = list(assessments)
    completed = [a for a in assessments if a.is_completed]
    scores = [a.score for a in completed if a.score is not None]
    return Summary(
        total=len(assessments),
        pending=len(assessments) - len(completed),
        completed=len(completed),
        average_score=sum(scores) / len(scores) if scores else None,
    )
