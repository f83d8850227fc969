"""Public interface for the Master Unit List adapter."""

from __future__ import annotations

from .catalog import MulCatalogReader
from .client import TONNAGE_PARTITIONS, MulAPIError, MulClient
from .detail import parse_availability
from .fetcher import MulFetcher, jittered_delay
from .overrides import OverridesFileError, load_overrides
from .schema import FailureKind, FetchFailure, FetchManifest, MulQuickListUnit, parse_quicklist
from .store import RawResponseStore
from .translator import to_catalog_record

__all__ = [
    "TONNAGE_PARTITIONS",
    "FailureKind",
    "FetchFailure",
    "FetchManifest",
    "MulAPIError",
    "MulCatalogReader",
    "MulClient",
    "MulFetcher",
    "MulQuickListUnit",
    "OverridesFileError",
    "RawResponseStore",
    "jittered_delay",
    "load_overrides",
    "parse_availability",
    "parse_quicklist",
    "to_catalog_record",
]
