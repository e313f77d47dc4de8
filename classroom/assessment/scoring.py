import decimal
import typing as t

from classroom.model import Question, QuestionID


def earned_points(questions: t.Sequence[Question], responses: t.Mapping[QuestionID, str]) -> int:
    """Points from questions whose response equals their correct answer exactly."""
    return sum(q.points for q in questions if q.matches(responses.get(q.question_id)))


def score(questions: t.Sequence[Question], responses: t.Mapping[QuestionID, str]) -> int:
    """Percentage of available points earned, rounded half-up to an integer.

    An assessment worth zero points scores 0.
    """
    total = sum(q.points for q in questions)
    if total == 0:
        return 0
    pct = decimal.Decimal(100 * earned_points(questions, responses)) / decimal.Decimal(total)
    return int(pct.quantize(decimal.Decimal(1), rounding=decimal.ROUND_HALF_UP))
