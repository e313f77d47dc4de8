import typing as t

import pydantic as p

from .base import BaseSettings


class AssessmentSettings(BaseSettings):
    # course reference given to assessments authored without one
    default_course_id: str = "1"
    default_points: t.Annotated[int, p.Field(ge=0)] = 10
    max_options: t.Annotated[int, p.Field(ge=2)] = 4
