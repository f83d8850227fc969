"""SQLAlchemy adapter package for mechdata."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyIngestUnitOfWork,
    SqlAlchemyReconcileUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyIngestUnitOfWork",
    "SqlAlchemyReconcileUnitOfWork",
    "StartupError",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
