"""Tests for classroom.assessment.draft module."""

from __future__ import annotations

import datetime

import pytest
from sqlalchemy.orm import Session

from classroom.assessment import Accepted, Draft, DraftDocument, Reason, Rejected
from classroom.core.config import AssessmentSettings
from classroom.model import AssessmentID, AssessmentStatus, QuestionID, QuestionKind
from classroom.storage import assessment as assessment_storage


@pytest.fixture
def draft() -> Draft:
    d = Draft(settings=AssessmentSettings(default_course_id="7", default_points=10, max_options=4))
    d.title = "Arithmetic Quiz"
    d.description = "Basic arithmetic"
    d.due_date = datetime.date(2024, 4, 15)
    return d


class TestAddQuestion(object):
    """Tests for Draft.add_question()."""

    def test_add_question(self, draft: Draft) -> None:
        """add_question() appends a question with a fresh id."""
        outcome = draft.add_question("What is 2 + 2?", options=["3", "4"], correct_answer="4", points=20)

        assert isinstance(outcome, Accepted)
        assert outcome.value.question_id.startswith("ques$")
        assert draft.questions == [outcome.value]
        assert draft.total_points == 20

    def test_default_points(self, draft: Draft) -> None:
        """add_question() uses the configured points when none are given."""
        outcome = draft.add_question("What is 2 + 2?", options=["4"], correct_answer="4")

        assert isinstance(outcome, Accepted)
        assert outcome.value.points == 10

    def test_empty_prompt_rejected(self, draft: Draft) -> None:
        """add_question() rejects a blank prompt and adds nothing."""
        outcome = draft.add_question("   ", options=["4"], correct_answer="4")

        assert isinstance(outcome, Rejected)
        assert outcome.reason == Reason.MissingPrompt
        assert draft.questions == []

    def test_too_many_options_rejected(self, draft: Draft) -> None:
        """add_question() rejects more options than configured."""
        outcome = draft.add_question("Pick one", options=["a", "b", "c", "d", "e"], correct_answer="a")

        assert isinstance(outcome, Rejected)
        assert outcome.reason == Reason.TooManyOptions

    def test_negative_points_rejected(self, draft: Draft) -> None:
        """add_question() rejects negative points."""
        outcome = draft.add_question("Pick one", options=["a"], correct_answer="a", points=-1)

        assert isinstance(outcome, Rejected)
        assert outcome.reason == Reason.NegativePoints

    def test_correct_answer_need_not_be_an_option(self, draft: Draft) -> None:
        """add_question() accepts a correct answer that is not among the options."""
        outcome = draft.add_question("Pick one", options=["a", "b"], correct_answer="c")

        assert isinstance(outcome, Accepted)
        assert outcome.value.correct_answer == "c"

    def test_coding_question(self, draft: Draft) -> None:
        """add_question() drops options from a coding question and keeps it ungraded."""
        outcome = draft.add_question(
            "Write a function that reverses a string.",
            kind=QuestionKind.Coding,
            options=["ignored"],
            correct_answer="",
        )

        assert isinstance(outcome, Accepted)
        assert outcome.value.options == []
        assert outcome.value.correct_answer is None
        assert not outcome.value.is_graded

    def test_injected_ids(self) -> None:
        """add_question() draws ids from the given key provider."""
        qid = QuestionID()
        d = Draft(question_ids=lambda: qid)

        outcome = d.add_question("Pick one", options=["a"], correct_answer="a")

        assert isinstance(outcome, Accepted)
        assert outcome.value.question_id == qid


class TestRemoveQuestion(object):
    """Tests for Draft.remove_question()."""

    def test_remove_question(self, draft: Draft) -> None:
        """remove_question() removes the question and its points."""
        keep = draft.add_question("Keep", options=["a"], correct_answer="a", points=5)
        drop = draft.add_question("Drop", options=["a"], correct_answer="a", points=7)
        assert isinstance(keep, Accepted) and isinstance(drop, Accepted)

        assert draft.remove_question(drop.value.question_id) is True
        assert draft.questions == [keep.value]
        assert draft.total_points == 5

    def test_remove_unknown_is_noop(self, draft: Draft) -> None:
        """remove_question() with an unknown id leaves the draft unchanged."""
        draft.add_question("Keep", options=["a"], correct_answer="a")
        before = list(draft.questions)

        assert draft.remove_question(QuestionID()) is False
        assert draft.questions == before


class TestValidate(object):
    """Tests for Draft.validate()."""

    def test_valid(self, draft: Draft) -> None:
        """validate() passes a complete draft."""
        draft.add_question("Pick one", options=["a"], correct_answer="a")

        assert draft.validate() is None

    def test_missing_title(self, draft: Draft) -> None:
        """validate() requires a title."""
        draft.add_question("Pick one", options=["a"], correct_answer="a")
        draft.title = ""

        rejected = draft.validate()
        assert rejected is not None
        assert rejected.reason == Reason.MissingTitle

    def test_missing_description(self, draft: Draft) -> None:
        """validate() requires a description."""
        draft.add_question("Pick one", options=["a"], correct_answer="a")
        draft.description = ""

        rejected = draft.validate()
        assert rejected is not None
        assert rejected.reason == Reason.MissingDescription

    def test_missing_due_date(self, draft: Draft) -> None:
        """validate() requires a due date."""
        draft.add_question("Pick one", options=["a"], correct_answer="a")
        draft.due_date = None

        rejected = draft.validate()
        assert rejected is not None
        assert rejected.reason == Reason.MissingDueDate

    def test_no_questions(self, draft: Draft) -> None:
        """validate() requires at least one question."""
        rejected = draft.validate()

        assert rejected is not None
        assert rejected.reason == Reason.NoQuestions
        assert rejected.message == "Please fill in all required fields and add at least one question."


class TestCommit(object):
    """Tests for Draft.commit()."""

    def test_commit(self, draft: Draft, db_session: Session) -> None:
        """commit() stores a pending assessment and resets the draft."""
        draft.add_question("What is 2 + 2?", options=["3", "4"], correct_answer="4", points=20)
        draft.add_question("What is 3 * 3?", options=["6", "9"], correct_answer="9", points=30)

        with db_session.begin():
            outcome = draft.commit(session=db_session)

        assert isinstance(outcome, Accepted)
        a = outcome.value
        assert a.status == AssessmentStatus.Pending
        assert a.total_points == 50
        assert a.course_id == "7"
        assert a.title == "Arithmetic Quiz"
        assert [q.prompt for q in a.questions] == ["What is 2 + 2?", "What is 3 * 3?"]

        assert draft.title == ""
        assert draft.questions == []

        with db_session.begin():
            stored = assessment_storage.find(session=db_session)
        assert [s.assessment_id for s in stored] == [a.assessment_id]

    def test_commit_explicit_course(self, draft: Draft, db_session: Session) -> None:
        """commit() keeps a course id set on the draft."""
        draft.course_id = "42"
        draft.add_question("Pick one", options=["a"], correct_answer="a")

        with db_session.begin():
            outcome = draft.commit(session=db_session)

        assert isinstance(outcome, Accepted)
        assert outcome.value.course_id == "42"

    def test_commit_without_questions_stores_nothing(self, draft: Draft, db_session: Session) -> None:
        """commit() of a draft with no questions is rejected and leaves the store unchanged."""
        with db_session.begin():
            outcome = draft.commit(session=db_session)
            stored = assessment_storage.find(session=db_session)

        assert isinstance(outcome, Rejected)
        assert outcome.reason == Reason.NoQuestions
        assert stored == ()
        assert draft.title == "Arithmetic Quiz"

    def test_commit_injected_id(self, db_session: Session) -> None:
        """commit() draws the assessment id from the given key provider."""
        aid = AssessmentID()
        d = Draft(assessment_ids=lambda: aid)
        d.title, d.description, d.due_date = "Quiz", "A quiz", datetime.date(2024, 4, 20)
        d.add_question("Pick one", options=["a"], correct_answer="a")

        with db_session.begin():
            outcome = d.commit(session=db_session)

        assert isinstance(outcome, Accepted)
        assert outcome.value.assessment_id == aid


class TestLoad(object):
    """Tests for Draft.load()."""

    def test_load_document(self, draft: Draft) -> None:
        """load() replaces the draft with the document's content."""
        draft.add_question("Old", options=["a"], correct_answer="a")
        document = DraftDocument.model_validate({
            "title": "Python Programming Concepts",
            "description": "Python fundamentals",
            "due_date": "2024-04-20",
            "course_id": "2",
            "questions": [
                {"prompt": "Which is immutable?", "options": ["Tuple", "List"], "correct_answer": "Tuple"},
                {"prompt": "Reverse a list.", "kind": "coding", "points": 30},
            ],
        })

        rejected = draft.load(document)

        assert rejected == []
        assert draft.title == "Python Programming Concepts"
        assert draft.due_date == datetime.date(2024, 4, 20)
        assert draft.course_id == "2"
        assert [q.prompt for q in draft.questions] == ["Which is immutable?", "Reverse a list."]
        assert draft.total_points == 40

    def test_load_reports_rejected_questions(self, draft: Draft) -> None:
        """load() skips invalid questions and reports each of them."""
        document = DraftDocument(
            title="Quiz",
            description="A quiz",
            due_date=datetime.date(2024, 4, 15),
            questions=[{"prompt": ""}, {"prompt": "Fine", "options": ["a"], "correct_answer": "a"}],  # pyright: ignore
        )

        rejected = draft.load(document)

        assert [r.reason for r in rejected] == [Reason.MissingPrompt]
        assert [q.prompt for q in draft.questions] == ["Fine"]

    def test_load_keeps_document_id(self, draft: Draft, db_session: Session) -> None:
        """A document that names its assessment id is committed under that id."""
        document = DraftDocument.model_validate({
            "assessment_id": "asmt$PythonConcepts22222222",
            "title": "Python Programming Concepts",
            "description": "Python fundamentals",
            "due_date": "2024-04-20",
            "questions": [{"prompt": "Which is immutable?", "options": ["Tuple", "List"], "correct_answer": "Tuple"}],
        })
        draft.load(document)

        with db_session.begin():
            outcome = draft.commit(session=db_session)

        assert isinstance(outcome, Accepted)
        assert outcome.value.assessment_id == AssessmentID("asmt$PythonConcepts22222222")
        assert draft.assessment_id is None


class TestDiscard(object):
    def test_discard(self, draft: Draft) -> None:
        """discard() empties the draft."""
        draft.add_question("Pick one", options=["a"], correct_answer="a")

        draft.discard()

        assert draft.title == ""
        assert draft.due_date is None
        assert draft.questions == []
        assert draft.total_points == 0
