"""Name helpers for matching external catalog names against unit names."""

from __future__ import annotations


def _split_parenthetical(name: str) -> tuple[str, str, str] | None:
    trimmed = name.strip()
    open_index = trimmed.find("(")
    if open_index < 0:
        return None
    close_index = trimmed.find(")", open_index)
    if close_index < 0:
        return None
    return (
        trimmed[:open_index].strip(),
        trimmed[open_index + 1 : close_index].strip(),
        trimmed[close_index + 1 :].strip(),
    )


def normalize_name(name: str) -> str:
    """Drop a trailing parenthetical (``"Awesome AWS-8Q (Smith)"``) and collapse whitespace."""

    trimmed = name.strip()
    cut = trimmed.rfind("(")
    if cut >= 0:
        trimmed = trimmed[:cut]
    return " ".join(trimmed.split())


def extract_clan_name(name: str) -> str | None:
    """Return the alternate name of a dual-named unit.

    ``"Dasher (Fire Moth) A"`` gives ``"Fire Moth A"``. A parenthetical with nothing
    after it is a pilot or character name, not a second name, and gives ``None``.
    """

    parts = _split_parenthetical(name)
    if parts is None:
        return None
    _, inside, after = parts
    if not inside or not after:
        return None
    return f"{inside} {after}"


def dual_name_alternatives(name: str) -> list[str]:
    """``"Dasher (Fire Moth) A"`` -> ``["Dasher A", "Fire Moth A"]``."""

    parts = _split_parenthetical(name)
    if parts is None:
        return []
    before, inside, after = parts
    if not before or not inside:
        return []
    if not after:
        return [before, inside]
    return [f"{before} {after}", f"{inside} {after}"]
