from __future__ import annotations

from pathlib import Path

import pydantic as p

from .base import BaseSettings


class SQLiteSettings(BaseSettings):
    """Embedded database settings.

    With no `path` the database lives in process memory and is discarded on
    exit; a path gives an embedded file that survives restarts.
    """

    path: Path | None = None
    echo: bool = False

    @property
    def url(self) -> str:
        return f"sqlite+pysqlite:///{self.path}" if self.path else "sqlite+pysqlite://"


class FixtureSettings(BaseSettings):
    enabled: bool = True
    path: Path = Path("fixtures/assessments.yaml")


class PersistentSettings(BaseSettings):
    sqlite: SQLiteSettings = p.Field(default_factory=SQLiteSettings)


class StorageSettings(BaseSettings):
    persistent: PersistentSettings = p.Field(default_factory=PersistentSettings)
    fixtures: FixtureSettings = p.Field(default_factory=FixtureSettings)
