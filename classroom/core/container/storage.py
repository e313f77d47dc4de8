from __future__ import annotations

import typing as t
from pathlib import Path

import sqlalchemy
import sqlalchemy.orm
import yaml
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.pool import StaticPool

import classroom.lib.json as json

from ..config.assessment import AssessmentSettings
from ..config.storage import FixtureSettings, SQLiteSettings, StorageSettings
from ..di import NotReady
from ..provider import LoggingProvider

if t.TYPE_CHECKING:
    from classroom.model import Assessment


def provide_engine(config: SQLiteSettings, logging: LoggingProvider) -> sqlalchemy.Engine:
    from classroom.storage.table import base

    logger = logging.get_logger()

    kwargs: dict[str, t.Any] = {}
    if config.path is None:
        # every session must share the one connection holding the in-memory database
        kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})

    engine = sqlalchemy.create_engine(
        config.url, echo=config.echo, json_serializer=json.dumps, json_deserializer=json.loads, **kwargs
    )
    base.metadata.create_all(engine)
    logger.info(
        "initialized SQLAlchemy engine",
        extra={
            "url": config.url,
            "in_memory": config.path is None,
        },
    )
    return engine


def provide_session(engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """Create a new session. Caller is responsible for closing it."""
    maker = sqlalchemy.orm.sessionmaker(engine, expire_on_commit=False, autoflush=False)
    return maker(autobegin=False)


def provide_fixtures(
    config: FixtureSettings,
    assessment_config: AssessmentSettings,
    root: Path | NotReady,
    session: sqlalchemy.orm.Session,
    logging: LoggingProvider,
) -> tuple[Assessment, ...]:
    """Seed the session store with the demo assessments, once per container."""
    from classroom.assessment.draft import Draft, DraftDocument
    from classroom.assessment.outcome import Rejected
    from classroom.storage import assessment as assessment_storage

    logger = logging.get_logger()
    if not config.enabled:
        session.close()
        return ()
    if isinstance(root, NotReady):
        raise RuntimeError("root path is unavailable")

    fp = config.path if config.path.is_absolute() else root / config.path
    documents = [DraftDocument.model_validate(d) for d in yaml.safe_load(fp.read_text(encoding="utf8")) or []]

    seeded: list[Assessment] = []
    with session, session.begin():
        if assessment_storage.find(session=session):
            # a file-backed store that was seeded by an earlier run
            logger.debug("store is not empty, skipping fixtures", extra={"path": fp})
            return ()
        for document in documents:
            draft = Draft(settings=assessment_config)
            rejected = draft.load(document)
            outcome = draft.commit(session=session)
            if rejected or isinstance(outcome, Rejected):
                raise RuntimeError(f"invalid fixture {document.title!r} in {fp}")
            logger.trace("seeded assessment", extra={"assessment_id": outcome.value.assessment_id})
            seeded.append(outcome.value)

    logger.info(
        "loaded fixtures",
        extra={
            "path": fp,
            "assessments": len(seeded),
        },
    )
    return tuple(seeded)


class PersistentContainer(DeclarativeContainer):
    config = Configuration()
    logging: Provider[LoggingProvider] = Resource()

    engine: Provider[sqlalchemy.Engine] = Singleton(
        provide_engine,
        config=config.sqlite.as_(SQLiteSettings),
        logging=logging,
    )
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, engine=engine)


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration(strict=True)
    assessment_config = Configuration()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer, config=config.persistent, logging=logging
    )
    fixtures: Provider[tuple[Assessment, ...]] = Resource(
        provide_fixtures,
        config=config.fixtures.as_(FixtureSettings),
        assessment_config=assessment_config.as_(AssessmentSettings),
        root=root,
        session=persistent.session,
        logging=logging,
    )
