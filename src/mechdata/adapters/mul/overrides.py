"""Manual MUL id -> unit slug overrides kept in a JSON file."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

if TYPE_CHECKING:
    from pathlib import Path

_OVERRIDES = TypeAdapter(dict[int, str])


class OverridesFileError(ValueError):
    """Raised when the overrides file is not a JSON object of id -> slug."""


def load_overrides(path: Path) -> dict[int, str]:
    """Read ``{"142": "atlas-as7-d-dc"}``; keys are coerced to integers."""

    try:
        overrides = _OVERRIDES.validate_json(path.read_bytes())
    except OSError as exc:
        raise OverridesFileError(f"Cannot read overrides file {path}: {exc}") from exc
    except ValidationError as exc:
        raise OverridesFileError(f"Invalid overrides file {path}: {exc}") from exc
    return {mul_id: slug.strip() for mul_id, slug in overrides.items() if slug.strip()}
