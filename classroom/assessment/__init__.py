__all__ = [
    "Accepted",
    "Action",
    "AssessmentError",
    "AssessmentNotFound",
    "Attempt",
    "AttemptState",
    "Draft",
    "DraftDocument",
    "InvalidTransition",
    "Progress",
    "Reason",
    "Rejected",
    "ResultRow",
    "ResultView",
    "Summary",
    "Verdict",
    "actions_for",
    "score",
    "summarize",
]

from .attempt import Attempt, AttemptState, Progress
from .board import Action, actions_for, summarize, Summary
from .draft import Draft, DraftDocument
from .errors import AssessmentError, AssessmentNotFound, InvalidTransition
from .outcome import Accepted, Reason, Rejected
from .scoring import score
from .viewer import ResultRow, ResultView, Verdict
