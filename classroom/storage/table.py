import datetime
import typing as t

from sqlalchemy import func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass
from sqlalchemy.types import JSON

from classroom.model import AssessmentID, AssessmentStatus

from .type import ShortUUIDKeyType, UTCDateTime, value_enum


class base(MappedAsDataclass, DeclarativeBase):
    type_annotation_map = {
        AssessmentID: ShortUUIDKeyType(AssessmentID),
        AssessmentStatus: value_enum(AssessmentStatus),
        datetime.datetime: UTCDateTime,
        list[dict[str, t.Any]]: JSON,
        dict[str, str]: JSON,
    }


class assessments(base):
    __tablename__ = "assessments"

    # insertion order; assessment ids are not checked for uniqueness
    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True, init=False)
    assessment_id: Mapped[AssessmentID] = mapped_column(index=True)
    course_id: Mapped[str]
    title: Mapped[str]
    description: Mapped[str]
    due_date: Mapped[datetime.date]
    total_points: Mapped[int]
    questions: Mapped[list[dict[str, t.Any]]] = mapped_column(default_factory=list)

    status: Mapped[AssessmentStatus] = mapped_column(default=AssessmentStatus.Pending)
    score: Mapped[int | None] = mapped_column(default=None)
    # answers keyed by question id
    responses: Mapped[dict[str, str] | None] = mapped_column(default=None)
    feedback: Mapped[str | None] = mapped_column(default=None)
    completed_at: Mapped[datetime.datetime | None] = mapped_column(default=None)

    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())
