"""MUL display names for eras and factions mapped to catalog slugs."""

from __future__ import annotations

from typing import Final

from mechdata.domain.model import FactionType

ERA_SLUGS: Final[dict[str, str]] = {
    "Age of War": "age-of-war",
    "Star League": "star-league",
    "Early Succession War": "early-succession-wars",
    "Early Succession Wars": "early-succession-wars",
    "Late Succession War - LosTech": "late-succession-wars",
    "Late Succession War - Renaissance": "renaissance",
    "Clan Invasion": "clan-invasion",
    "Civil War": "civil-war",
    "Jihad": "jihad",
    "Dark Age": "dark-age",
    "Early Republic": "dark-age",
    "Late Republic": "dark-age",
    "ilClan": "ilclan",
}

FACTION_SLUGS: Final[dict[str, str]] = {
    # Great Houses
    "Lyran Commonwealth": "steiner",
    "Lyran Alliance": "steiner",
    "Federated Suns": "davion",
    "Federated Commonwealth": "davion",
    "Draconis Combine": "kurita",
    "Free Worlds League": "marik",
    "Capellan Confederation": "liao",
    "Star League Regular": "star-league",
    "Star League Royal": "star-league",
    "Star League": "star-league",
    "ComStar": "comstar",
    "Word of Blake": "word-of-blake",
    "Republic of the Sphere": "republic",
    # Clans
    "Clan Wolf": "clan-wolf",
    "Clan Wolf (in Exile)": "clan-wolf",
    "Clan Jade Falcon": "clan-jade-falcon",
    "Clan Ghost Bear": "clan-ghost-bear",
    "Rasalhague Dominion": "clan-ghost-bear",
    "Clan Smoke Jaguar": "clan-smoke-jaguar",
    "Clan Nova Cat": "clan-nova-cat",
    "Clan Steel Viper": "clan-steel-viper",
    "Clan Diamond Shark": "clan-diamond-shark",
    "Clan Sea Fox": "clan-diamond-shark",
    "Clan Goliath Scorpion": "clan-goliath-scorpion",
    "Clan Ice Hellion": "clan-ice-hellion",
    "Clan Star Adder": "clan-star-adder",
    "Clan Hell's Horses": "clan-hell-horses",
    "Clan Blood Spirit": "clan-blood-spirit",
    "Clan Coyote": "clan-coyote",
    "Clan Fire Mandrill": "clan-fire-mandrill",
    "Clan Mongoose": "clan-mongoose",
    "Clan Widowmaker": "clan-widowmaker",
    "Clan Wolverine": "clan-wolverine",
    # Periphery
    "Taurian Concordat": "taurian-concordat",
    "Magistracy of Canopus": "magistracy-canopus",
    "Outworlds Alliance": "outworlds-alliance",
    "Marian Hegemony": "marian-hegemony",
    # General
    "Inner Sphere General": "general",
    "Clan General": "general",
    "Mercenary": "mercenary",
}

_PERIPHERY_MARKERS: Final[tuple[str, ...]] = (
    "Periphery",
    "Concordat",
    "Canopus",
    "Alliance",
    "Hegemony",
    "Magistracy",
)


def is_clan_faction(name: str) -> bool:
    return name.startswith("Clan ")


def infer_faction_type(name: str) -> FactionType:
    """Guess the type of a faction that is not in the seeded catalog."""

    if is_clan_faction(name):
        return FactionType.CLAN
    if any(marker in name for marker in _PERIPHERY_MARKERS):
        return FactionType.PERIPHERY
    if "mercenary" in name.lower():
        return FactionType.MERCENARY
    return FactionType.OTHER
