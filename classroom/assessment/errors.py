"""Exceptions for assessment operations.

User-input problems are not exceptions; see `outcome.Rejected`.
"""


class AssessmentError(Exception):
    """Error during an assessment operation."""

    pass


class AssessmentNotFound(AssessmentError):
    """The assessment is no longer in the store."""

    pass


class InvalidTransition(AssessmentError, ValueError):
    """The assessment or attempt is not in a state that allows the operation."""

    pass
