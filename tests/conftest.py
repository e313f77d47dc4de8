"""Pytest fixtures for classroom tests.

Each test that touches storage gets its own in-memory database, so tests are
isolated without any cleanup.

Usage:
    def test_get(db_session: Session, assessment_factory):
        assessment = assessment_factory(title="Arithmetic Quiz")
        with db_session.begin():
            assert assessment_storage.get(assessment.assessment_id, session=db_session)
"""

from __future__ import annotations

import datetime
import typing as t
from pathlib import Path

import pydantic as p
import pytest
import sqlalchemy
from sqlalchemy.orm import Session

import classroom
from classroom.core import ClassroomContainer, TimestampProvider
from classroom.core.config import SQLiteSettings
from classroom.core.container.storage import provide_engine
from classroom.model import Assessment, AssessmentID, DeploymentEnvironment, Question, QuestionID, QuestionKind
from classroom.storage import assessment as assessment_storage

ClassroomRoot = Path(classroom.__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def config_root() -> p.FileUrl:
    return p.FileUrl(f"file://{ClassroomRoot}/config")


@pytest.fixture(scope="session")
def container(config_root: p.FileUrl) -> t.Generator[ClassroomContainer]:
    """Boot the DI container once for the test session, in the Test environment."""
    ct = ClassroomContainer()
    ClassroomContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=config_root,
        override=(),
    )

    yield ct

    ct.shutdown_resources()


@pytest.fixture
def engine(container: ClassroomContainer) -> t.Generator[sqlalchemy.Engine]:
    """A fresh in-memory database with the schema created."""
    engine = provide_engine(SQLiteSettings(), container.logging())
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine: sqlalchemy.Engine) -> t.Generator[Session]:
    """A session on the test database; callers open transactions with session.begin()."""
    session = Session(bind=engine, autobegin=False, expire_on_commit=False)
    yield session
    session.close()


@pytest.fixture
def utcnow() -> TimestampProvider:
    """Provide a fixed timestamp provider for tests."""
    return lambda: datetime.datetime(2024, 4, 10, 12, 30, tzinfo=datetime.UTC)


@pytest.fixture
def question_factory() -> t.Callable[..., Question]:
    """Factory fixture for questions, which are not stored on their own.

    Usage:
        def test_something(question_factory):
            q = question_factory(prompt="What is 3 * 3?", options=("6", "9"), correct_answer="9")
    """

    def create_question(
        prompt: str = "What is 2 + 2?",
        kind: QuestionKind = QuestionKind.MultipleChoice,
        options: t.Sequence[str] = ("3", "4", "5"),
        correct_answer: str | None = "4",
        points: int = 10,
    ) -> Question:
        return Question(
            question_id=QuestionID(),
            prompt=prompt,
            kind=kind,
            options=list(options),
            correct_answer=correct_answer,
            points=points,
        )

    return create_question


@pytest.fixture
def assessment_factory(
    db_session: Session,
    question_factory: t.Callable[..., Question],
) -> t.Callable[..., Assessment]:
    """Factory fixture for stored pending assessments.

    The default assessment has two multiple-choice questions worth 10 points
    each, with correct answers "4" and "9".
    """

    def create_assessment(
        title: str = "Arithmetic Quiz",
        description: str = "Basic arithmetic",
        course_id: str = "1",
        due_date: datetime.date = datetime.date(2024, 4, 15),
        questions: t.Sequence[Question] | None = None,
        assessment_id: AssessmentID | None = None,
    ) -> Assessment:
        if questions is None:
            questions = [
                question_factory(),
                question_factory(prompt="What is 3 * 3?", options=("6", "9"), correct_answer="9"),
            ]
        with db_session.begin():
            return assessment_storage.create(
                assessment_id=assessment_id or AssessmentID(),
                course_id=course_id,
                title=title,
                description=description,
                due_date=due_date,
                questions=questions,
                session=db_session,
            )

    return create_assessment


@pytest.fixture
def test_assessment(assessment_factory: t.Callable[..., Assessment]) -> Assessment:
    """Provide a pre-created pending assessment."""
    return assessment_factory()
