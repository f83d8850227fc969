"""Parse faction/era availability out of a MUL unit detail page."""

from __future__ import annotations

from logging import getLogger

from bs4 import BeautifulSoup

from mechdata.domain.model import AvailabilityNote

log = getLogger(__name__)


def _era_name(raw: str) -> str:
    # "Star League (2571 - 2780)" -> "Star League"
    name = raw.strip()
    return name.split("(", 1)[0].strip()


def parse_availability(html: str) -> list[AvailabilityNote]:
    """Return one note per faction row of every era panel, in page order.

    Each ``.panel.panel-default`` is one era; the era name is the heading link and
    each table row of the panel body names one faction in its first link.
    """

    soup = BeautifulSoup(html, "html.parser")
    notes: list[AvailabilityNote] = []
    for panel in soup.select(".panel.panel-default"):
        heading = panel.select_one(".panel-heading .media-body a")
        if heading is None:
            continue
        era = _era_name(heading.get_text())
        body = panel.select_one(".panel-body")
        if not era or body is None:
            continue
        for row in body.select("tbody tr"):
            link = row.find("a")
            if link is None:
                continue
            faction = link.get_text().strip()
            if faction:
                notes.append(AvailabilityNote(faction=faction, era=era))

    if not notes and soup.find("h2") is not None:
        log.warning("Parsed a detail page but found no availability records")
    return notes
