"""Archive ingestion run settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_int
from .errors import InvalidConfigurationValueError


@dataclass(frozen=True, slots=True)
class IngestConfig:
    max_errors: int = 0
    dataset_version: str | None = None
    progress_every: int = 500


def get_ingest_config() -> IngestConfig:
    max_errors = env_int("MECHDATA_MAX_ERRORS", 0)
    if max_errors < 0:
        raise InvalidConfigurationValueError(
            "MECHDATA_MAX_ERRORS", str(max_errors), "zero (unlimited) or positive"
        )
    return IngestConfig(
        max_errors=max_errors,
        dataset_version=os.getenv("MECHDATA_DATASET_VERSION") or None,
    )
