"""Master Unit List response schemas and the models of the local raw store."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

log = logging.getLogger(__name__)

_YEAR_RE = re.compile(r"\d{4}")


class MulBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "MUL %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class MulNamedRef(MulBaseModel):
    id: int | None = Field(default=None, alias="Id")
    name: str | None = Field(default=None, alias="Name")


class MulQuickListUnit(MulBaseModel):
    """One entry of a QuickList response."""

    id: int = Field(alias="Id")
    name: str = Field(alias="Name")
    class_name: str | None = Field(default=None, alias="Class")
    variant: str | None = Field(default=None, alias="Variant")
    tonnage: float | None = Field(default=None, alias="Tonnage")
    battle_value: int | None = Field(default=None, alias="BattleValue")
    cost: int | None = Field(default=None, alias="Cost")
    rules: str | None = Field(default=None, alias="Rules")
    date_introduced: str | None = Field(default=None, alias="DateIntroduced")
    technology: MulNamedRef | None = Field(default=None, alias="Technology")
    role: MulNamedRef | None = Field(default=None, alias="Role")
    type: MulNamedRef | None = Field(default=None, alias="Type")

    @property
    def intro_year(self) -> int | None:
        if not self.date_introduced:
            return None
        match = _YEAR_RE.search(self.date_introduced)
        return int(match.group()) if match else None

    @property
    def bv(self) -> int | None:
        return self.battle_value if self.battle_value and self.battle_value > 0 else None

    @property
    def positive_cost(self) -> int | None:
        return self.cost if self.cost and self.cost > 0 else None

    @property
    def role_name(self) -> str | None:
        if self.role is None or self.role.name is None:
            return None
        return self.role.name.strip() or None

    @property
    def technology_name(self) -> str | None:
        return self.technology.name if self.technology else None


_UNIT_LIST = TypeAdapter(list[MulQuickListUnit])


def parse_quicklist(payload: Any) -> list[MulQuickListUnit]:
    """Validate a QuickList body, either ``{"Units": [...]}`` or a bare list."""

    if isinstance(payload, dict):
        units = payload.get("Units")
        if units is None:
            raise ValueError("QuickList payload has no 'Units' key")
        return _UNIT_LIST.validate_python(units)
    if isinstance(payload, list):
        return _UNIT_LIST.validate_python(payload)
    raise ValueError(f"Unexpected QuickList payload type: {type(payload).__name__}")


class FailureKind(StrEnum):
    TRANSIENT = "transient"
    PERMANENT = "permanent"


class FetchFailure(BaseModel):
    """A request that did not produce a stored body."""

    key: str
    url: str
    kind: FailureKind
    status_code: int | None = None
    message: str
    failed_at: datetime


FAILURES_ADAPTER = TypeAdapter(dict[str, FetchFailure])


class FetchManifest(BaseModel):
    fetched_at: datetime
    base_url: str
    types: list[int]
    quicklist_counts: dict[str, int] = Field(default_factory=dict)
    partitions_fetched: int = 0
    partitions_skipped: int = 0
    detail_pages_fetched: int = 0
    detail_pages_skipped: int = 0
    total_mul_ids: int = 0
    failures: int = 0
