__all__ = [
    # Base
    "BaseModel",
    "WithCtime",
    "WithMtime",
    "WithTimestamps",
    # Enums
    "DeploymentEnvironment",
    # ID Types
    "AssessmentID",
    "QuestionID",
    # Users
    "UserRole",
    # Assessments
    "Assessment",
    "AssessmentStatus",
    "Question",
    "QuestionKind",
]

from .assessment import Assessment, AssessmentStatus, Question, QuestionKind
from .base import BaseModel, WithCtime, WithMtime, WithTimestamps
from .enum import DeploymentEnvironment
from .id import AssessmentID, QuestionID
from .user import UserRole
