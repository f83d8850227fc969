"""HTTP client for the Master Unit List."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx

from mechdata.adapters.http_resilience import ResilientClient

from .schema import FailureKind

if TYPE_CHECKING:
    from mechdata.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

QUICKLIST_PATH: Final[str] = "/Unit/QuickList"
DETAIL_PATH: Final[str] = "/Unit/Details/{mul_id}"

# The server refuses oversized JSON, so each type is fetched in tonnage slices.
TONNAGE_PARTITIONS: Final[tuple[tuple[int, int], ...]] = (
    (0, 25),
    (26, 35),
    (36, 45),
    (46, 55),
    (56, 65),
    (66, 75),
    (76, 85),
    (86, 100),
    (101, 200),
    (201, 999999),
)

class MulAPIError(RuntimeError):
    """Raised when a request still fails after the transport gave up retrying."""

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        transient: bool,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.transient = transient

    @property
    def kind(self) -> FailureKind:
        return FailureKind.TRANSIENT if self.transient else FailureKind.PERMANENT


def default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class MulClient:
    client: ResilientClient

    async def fetch_quicklist(self, unit_type: int, min_tons: int, max_tons: int) -> str:
        params = {"Types": unit_type, "MinTons": min_tons, "MaxTons": max_tons}
        return await self._get_text(QUICKLIST_PATH, params=params)

    async def fetch_detail(self, mul_id: int) -> str:
        return await self._get_text(DETAIL_PATH.format(mul_id=mul_id))

    async def _get_text(self, path: str, *, params: dict[str, int] | None = None) -> str:
        try:
            response = await self.client.get(path, params=params)
        except httpx.TransportError as exc:
            raise MulAPIError(
                f"Request to {path} failed: {exc}", url=path, transient=True
            ) from exc

        url = str(response.request.url)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = response.status_code
            transient = self.client.is_transient(status)
            log.warning(
                "MUL request %s failed with HTTP %s (%s)",
                url,
                status,
                "transient" if transient else "permanent",
            )
            raise MulAPIError(
                f"HTTP {status} for {url}", url=url, status_code=status, transient=transient
            ) from exc
        return response.text
