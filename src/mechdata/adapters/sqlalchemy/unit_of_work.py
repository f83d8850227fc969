"""Session lifecycle for the SQLAlchemy adapter.

``startup`` binds one engine per process; every unit of work below opens its own
session from it and hands out the repositories its port promises.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from mechdata.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from mechdata.adapters.sqlalchemy.repositories import (
    SqlAlchemyAvailabilityRepository,
    SqlAlchemyChassisRepository,
    SqlAlchemyComponentTypeRepository,
    SqlAlchemyDatasetMetadataRepository,
    SqlAlchemyEquipmentRepository,
    SqlAlchemyEraRepository,
    SqlAlchemyFactionRepository,
    SqlAlchemyLoadoutRepository,
    SqlAlchemyMechDataRepository,
    SqlAlchemyQuirkRepository,
    SqlAlchemyUnitLocationRepository,
    SqlAlchemyUnitRepository,
)
from mechdata.config.storage import get_database_config
from mechdata.domain.ports.unit_of_work import (
    CatalogRepositories,
    IngestRepositories,
    ReconcileRepositories,
    RepositoryCollection,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Persistence was used before ``startup`` or outside an open unit of work."""


class _Database:
    """The process-wide engine and the session factory bound to it."""

    def __init__(self) -> None:
        self.engine: Engine | None = None
        self.sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine) -> None:
        self.engine = engine
        self.sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def release(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.sessions = None

    def open_session(self) -> Session:
        if self.sessions is None:
            raise StartupError("Call mechdata.adapters.sqlalchemy.startup() first")
        return self.sessions()


_DATABASE = _Database()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the engine, start the mappers and create any missing tables.

    A second call raises unless ``force`` is set, in which case the new engine replaces
    the old one without disposing it.
    """

    if _DATABASE.engine is not None and not force:
        raise StartupError("Persistence is already started; pass force=True to rebind")
    if engine is None:
        engine = create_engine(database_uri or get_database_config().uri, future=True)
    log.info("Using database %s", engine.url.render_as_string(hide_password=True))
    start_mappers()
    create_all_tables(engine)
    _DATABASE.bind(engine)


def is_started() -> bool:
    return _DATABASE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine; safe to call when nothing is bound."""

    _DATABASE.release()


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block; leaving it on an exception rolls back."""

    def __init__(self) -> None:
        if not is_started():
            raise StartupError("Call mechdata.adapters.sqlalchemy.startup() first")
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = _DATABASE.open_session()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SqlAlchemyIngestUnitOfWork(BaseSqlAlchemyUnitOfWork[IngestRepositories]):
    """Unit of work wrapping the ingestion of one parsed unit."""

    def _build_repositories(self, session: Session) -> IngestRepositories:
        return IngestRepositories(
            chassis=SqlAlchemyChassisRepository(session),
            units=SqlAlchemyUnitRepository(session),
            locations=SqlAlchemyUnitLocationRepository(session),
            loadout=SqlAlchemyLoadoutRepository(session),
            equipment=SqlAlchemyEquipmentRepository(session),
            quirks=SqlAlchemyQuirkRepository(session),
            mech_data=SqlAlchemyMechDataRepository(session),
            datasets=SqlAlchemyDatasetMetadataRepository(session),
        )


class SqlAlchemyCatalogUnitOfWork(BaseSqlAlchemyUnitOfWork[CatalogRepositories]):
    """Unit of work for reference catalog seeding and equipment stats."""

    def _build_repositories(self, session: Session) -> CatalogRepositories:
        return CatalogRepositories(
            component_types=SqlAlchemyComponentTypeRepository(session),
            eras=SqlAlchemyEraRepository(session),
            factions=SqlAlchemyFactionRepository(session),
            equipment=SqlAlchemyEquipmentRepository(session),
        )


class SqlAlchemyReconcileUnitOfWork(BaseSqlAlchemyUnitOfWork[ReconcileRepositories]):
    """Unit of work for merging one external catalog record."""

    def _build_repositories(self, session: Session) -> ReconcileRepositories:
        return ReconcileRepositories(
            units=SqlAlchemyUnitRepository(session),
            eras=SqlAlchemyEraRepository(session),
            factions=SqlAlchemyFactionRepository(session),
            availability=SqlAlchemyAvailabilityRepository(session),
        )


if TYPE_CHECKING:
    from mechdata.domain.ports.unit_of_work import (
        CatalogUnitOfWork,
        IngestUnitOfWork,
        ReconcileUnitOfWork,
    )

    _uow_ingest_check: IngestUnitOfWork = SqlAlchemyIngestUnitOfWork()
    _uow_catalog_check: CatalogUnitOfWork = SqlAlchemyCatalogUnitOfWork()
    _uow_reconcile_check: ReconcileUnitOfWork = SqlAlchemyReconcileUnitOfWork()
