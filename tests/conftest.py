from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from mechdata.adapters.sqlalchemy import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyIngestUnitOfWork,
    SqlAlchemyReconcileUnitOfWork,
    create_all_tables,
    shutdown,
    start_mappers,
    startup,
)
from mechdata.domain.catalog import AliasResolver, seed_reference_catalog

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolated_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    data_dir = tmp_path / "mechdata-data"
    monkeypatch.setenv("MECHDATA_DATA_DIR", str(data_dir))
    return data_dir


@pytest.fixture(scope="session")
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # One shared connection so every session sees the same in-memory database.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def started_adapter(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()


@pytest.fixture
def catalog_uow_factory(
    started_adapter: Engine,
) -> Callable[[], SqlAlchemyCatalogUnitOfWork]:
    _ = started_adapter
    return SqlAlchemyCatalogUnitOfWork


@pytest.fixture
def ingest_uow_factory(
    started_adapter: Engine,
) -> Callable[[], SqlAlchemyIngestUnitOfWork]:
    _ = started_adapter
    return SqlAlchemyIngestUnitOfWork


@pytest.fixture
def reconcile_uow_factory(
    started_adapter: Engine,
) -> Callable[[], SqlAlchemyReconcileUnitOfWork]:
    _ = started_adapter
    return SqlAlchemyReconcileUnitOfWork


@pytest.fixture
def seeded_resolver(
    catalog_uow_factory: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> AliasResolver:
    """Seed the reference catalog and return a resolver over its aliases."""

    with catalog_uow_factory() as uow:
        seed_reference_catalog(uow)
        uow.commit()
        return AliasResolver.from_repository(uow.repositories.component_types)
