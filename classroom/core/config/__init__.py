__all__ = [
    "AssessmentSettings",
    "FixtureSettings",
    "LoggingSettings",
    "SQLiteSettings",
    "Settings",
    "StorageSettings",
]


from .assessment import AssessmentSettings
from .logging import LoggingSettings
from .settings import Settings
from .storage import FixtureSettings, SQLiteSettings, StorageSettings
