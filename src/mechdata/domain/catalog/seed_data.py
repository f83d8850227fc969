"""Curated reference data: canonical component types with their aliases, eras and factions.

Aliases list every spelling observed in MegaMek files for a type, including the
``(IS)``, ``(Inner Sphere)`` and ``(Clan)`` suffix variants. Bump ``CATALOG_VERSION``
whenever an entry or alias changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from mechdata.domain.model import ComponentCategory, FactionType, RulesLevel, TechBase

CATALOG_VERSION: Final[str] = "2025.2"

IS = TechBase.INNER_SPHERE
CLAN = TechBase.CLAN
INTRO = RulesLevel.INTRODUCTORY
STD = RulesLevel.STANDARD
ADV = RulesLevel.ADVANCED
EXP = RulesLevel.EXPERIMENTAL


@dataclass(frozen=True, slots=True, kw_only=True)
class ComponentSeed:
    slug: str
    name: str
    tech_base: TechBase
    rules_level: RulesLevel
    intro_year: int | None
    properties: dict[str, float | int] = field(default_factory=dict)
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class EraSeed:
    slug: str
    name: str
    start_year: int
    end_year: int | None


@dataclass(frozen=True, slots=True)
class FactionSeed:
    slug: str
    name: str
    short_name: str
    faction_type: FactionType
    is_clan: bool = False


def _engine(  # noqa: PLR0913
    slug: str,
    name: str,
    tech_base: TechBase,
    rules_level: RulesLevel,
    intro_year: int | None,
    weight_multiplier: float,
    ct_crits: int,
    st_crits: int,
    aliases: tuple[str, ...],
) -> ComponentSeed:
    return ComponentSeed(
        slug=slug,
        name=name,
        tech_base=tech_base,
        rules_level=rules_level,
        intro_year=intro_year,
        properties={
            "weight_multiplier": weight_multiplier,
            "ct_crits": ct_crits,
            "st_crits": st_crits,
        },
        aliases=aliases,
    )


def _with_is_suffix(*labels: str) -> tuple[str, ...]:
    """MegaMek appends ``(IS)`` to engine labels of Inner Sphere and mixed-tech units."""

    return tuple(label for base in labels for label in (base, f"{base}(IS)"))


ENGINE_TYPES: tuple[ComponentSeed, ...] = (
    _engine(
        "standard-fusion",
        "Fusion Engine",
        IS,
        INTRO,
        2021,
        1.0,
        6,
        0,
        (
            "Fusion Engine",
            "Fusion",
            "Fusion Engine(IS)",
            "Fusion (Clan) Engine",
            "Fusion (Clan) Engine(IS)",
            "Fusion Engine (Clan)",
        ),
    ),
    _engine(
        "xl-is",
        "XL Engine (Inner Sphere)",
        IS,
        STD,
        2579,
        0.5,
        6,
        3,
        ("XL Engine", "XL Fusion Engine", "XL Engine(IS)"),
    ),
    _engine(
        "xl-clan",
        "XL Engine (Clan)",
        CLAN,
        STD,
        2827,
        0.5,
        6,
        2,
        ("XL (Clan) Engine", "Clan XL Engine", "XL (Clan) Engine(IS)", "Clan XL Engine(IS)"),
    ),
    _engine(
        "light",
        "Light Engine",
        IS,
        STD,
        3062,
        0.75,
        6,
        2,
        _with_is_suffix("Light Engine", "Light Fusion Engine"),
    ),
    _engine(
        "compact",
        "Compact Engine",
        IS,
        STD,
        3068,
        1.5,
        3,
        0,
        _with_is_suffix("Compact Engine", "Compact Fusion Engine"),
    ),
    _engine(
        "xxl-is",
        "XXL Engine (Inner Sphere)",
        IS,
        EXP,
        3058,
        0.333,
        6,
        6,
        _with_is_suffix("XXL Engine", "XXL Fusion Engine"),
    ),
    _engine(
        "xxl-clan",
        "XXL Engine (Clan)",
        CLAN,
        EXP,
        3055,
        0.333,
        6,
        4,
        ("XXL (Clan) Engine", "XXL (Clan) Engine(IS)", "Clan XXL Engine", "Clan XXL Engine(IS)"),
    ),
    _engine(
        "ice",
        "Internal Combustion Engine",
        IS,
        INTRO,
        1950,
        2.0,
        6,
        0,
        ("ICE", "I.C.E.", "ICE Engine", "ICE Engine(IS)", "I.C.E. Engine", "I.C.E. Engine(IS)"),
    ),
    _engine(
        "fuel-cell",
        "Fuel Cell Engine",
        IS,
        STD,
        2300,
        1.2,
        6,
        0,
        ("Fuel Cell", *_with_is_suffix("Fuel Cell Engine", "Fuel-Cell Engine")),
    ),
    _engine(
        "primitive-fusion",
        "Primitive Fusion Engine",
        IS,
        ADV,
        2300,
        1.2,
        6,
        0,
        _with_is_suffix("Primitive Fusion Engine", "Primitive Engine"),
    ),
    _engine(
        "fission",
        "Fission Engine",
        IS,
        EXP,
        None,
        1.75,
        6,
        0,
        ("Fission Engine", "Fission Engine(IS)"),
    ),
)


def _armor(  # noqa: PLR0913
    slug: str,
    name: str,
    tech_base: TechBase,
    rules_level: RulesLevel,
    intro_year: int | None,
    points_per_ton: float,
    crits: int,
    aliases: tuple[str, ...],
) -> ComponentSeed:
    return ComponentSeed(
        slug=slug,
        name=name,
        tech_base=tech_base,
        rules_level=rules_level,
        intro_year=intro_year,
        properties={"points_per_ton": points_per_ton, "crits": crits},
        aliases=aliases,
    )


ARMOR_TYPES: tuple[ComponentSeed, ...] = (
    _armor(
        "standard",
        "Standard Armor",
        IS,
        INTRO,
        2439,
        16.0,
        0,
        (
            "Standard",
            "Standard Armor",
            "Standard(Inner Sphere)",
            "Standard(Clan)",
            "Standard(IS/Clan)",
            "Standard Armor(Inner Sphere)",
        ),
    ),
    _armor(
        "ferro-fibrous-is",
        "Ferro-Fibrous (Inner Sphere)",
        IS,
        STD,
        2571,
        17.92,
        14,
        ("Ferro-Fibrous", "Ferro-Fibrous (Inner Sphere)", "Ferro-Fibrous(Inner Sphere)"),
    ),
    _armor(
        "ferro-fibrous-clan",
        "Ferro-Fibrous (Clan)",
        CLAN,
        STD,
        2820,
        19.2,
        7,
        ("Ferro-Fibrous (Clan)", "Clan Ferro-Fibrous", "Ferro-Fibrous(Clan)"),
    ),
    _armor(
        "light-ferro",
        "Light Ferro-Fibrous",
        IS,
        STD,
        3067,
        16.96,
        7,
        (
            "Light Ferro-Fibrous",
            "Light Ferro-Fibrous(Inner Sphere)",
            "Light Ferro-Fibrous (Inner Sphere)",
            "Light Ferro-Fibrous(Clan)",
            "Light Ferro-Fibrous (Clan)",
        ),
    ),
    _armor(
        "heavy-ferro",
        "Heavy Ferro-Fibrous",
        IS,
        STD,
        3069,
        19.84,
        21,
        ("Heavy Ferro-Fibrous", "Heavy Ferro-Fibrous(Inner Sphere)"),
    ),
    _armor(
        "stealth",
        "Stealth Armor",
        IS,
        ADV,
        3063,
        16.0,
        12,
        ("Stealth", "Stealth Armor", "Stealth(Inner Sphere)", "Stealth Armor(Inner Sphere)"),
    ),
    _armor(
        "reactive",
        "Reactive Armor",
        IS,
        ADV,
        3063,
        16.0,
        14,
        (
            "Reactive",
            "Reactive Armor",
            "Reactive(Inner Sphere)",
            "Reactive(Clan)",
            "Reactive Armor(Inner Sphere)",
        ),
    ),
    _armor(
        "hardened",
        "Hardened Armor",
        IS,
        ADV,
        3047,
        8.0,
        0,
        (
            "Hardened",
            "Hardened Armor",
            "Hardened(Inner Sphere)",
            "Hardened(Clan)",
            "Hardened Armor(Inner Sphere)",
        ),
    ),
    _armor(
        "primitive",
        "Primitive Armor",
        IS,
        ADV,
        2300,
        10.72,
        0,
        (
            "Primitive",
            "Primitive Armor",
            "Primitive(Inner Sphere)",
            "Primitive Armor(Inner Sphere)",
        ),
    ),
    _armor(
        "industrial",
        "Industrial Armor",
        IS,
        INTRO,
        2439,
        16.0,
        0,
        ("Industrial(Inner Sphere)", "Industrial (Inner Sphere)", "Industrial Armor(Inner Sphere)"),
    ),
    _armor(
        "heavy-industrial",
        "Heavy Industrial Armor",
        IS,
        STD,
        2460,
        8.0,
        0,
        ("Heavy Industrial(Inner Sphere)", "Heavy Industrial(Clan)", "Heavy Industrial Armor"),
    ),
    _armor(
        "commercial",
        "Commercial Armor",
        IS,
        INTRO,
        2400,
        8.0,
        0,
        ("Commercial(Inner Sphere)", "Commercial Armor", "Commercial Armor(Inner Sphere)"),
    ),
    _armor(
        "reflective-is",
        "Laser-Reflective Armor (Inner Sphere)",
        IS,
        EXP,
        3058,
        16.0,
        10,
        (
            "Reflective(Inner Sphere)",
            "Reflective Armor(Inner Sphere)",
            "Laser-Reflective(Inner Sphere)",
        ),
    ),
    _armor(
        "reflective-clan",
        "Laser-Reflective Armor (Clan)",
        CLAN,
        EXP,
        3061,
        16.0,
        5,
        ("Reflective(Clan)", "Laser-Reflective(Clan)"),
    ),
    _armor(
        "ferro-lamellor",
        "Ferro-Lamellor Armor",
        CLAN,
        EXP,
        3070,
        17.92,
        12,
        ("Ferro-Lamellor(Clan)", "Ferro-Lamellor Armor"),
    ),
)


def _structure(  # noqa: PLR0913
    slug: str,
    name: str,
    tech_base: TechBase,
    rules_level: RulesLevel,
    intro_year: int | None,
    weight_fraction: float,
    crits: int,
    aliases: tuple[str, ...],
) -> ComponentSeed:
    return ComponentSeed(
        slug=slug,
        name=name,
        tech_base=tech_base,
        rules_level=rules_level,
        intro_year=intro_year,
        properties={"weight_fraction": weight_fraction, "crits": crits},
        aliases=aliases,
    )


STRUCTURE_TYPES: tuple[ComponentSeed, ...] = (
    _structure(
        "standard",
        "Standard Structure",
        IS,
        INTRO,
        2439,
        0.10,
        0,
        ("Standard", "Standard Structure", "IS Standard", "Clan Standard"),
    ),
    _structure(
        "endo-steel-is",
        "Endo Steel (Inner Sphere)",
        IS,
        STD,
        2487,
        0.05,
        14,
        (
            "Endo Steel",
            "Endo Steel (Inner Sphere)",
            "IS Endo Steel",
            "Endo-Steel",
            "IS Endo-Steel",
            "IS Endo-Steel Prototype",
            "Endo Steel Prototype",
        ),
    ),
    _structure(
        "endo-steel-clan",
        "Endo Steel (Clan)",
        CLAN,
        STD,
        2827,
        0.05,
        7,
        ("Endo Steel (Clan)", "Clan Endo Steel", "Clan Endo-Steel"),
    ),
    _structure(
        "composite",
        "Composite Structure",
        IS,
        EXP,
        3061,
        0.05,
        0,
        ("Composite", "Composite Structure", "IS Composite"),
    ),
    _structure(
        "reinforced",
        "Reinforced Structure",
        IS,
        EXP,
        3057,
        0.20,
        0,
        ("Reinforced", "Reinforced Structure", "IS Reinforced"),
    ),
    _structure(
        "endo-composite-is",
        "Endo-Composite (Inner Sphere)",
        IS,
        ADV,
        3067,
        0.075,
        7,
        ("Endo-Composite", "IS Endo-Composite"),
    ),
    _structure(
        "industrial",
        "Industrial Structure",
        IS,
        INTRO,
        2350,
        0.10,
        0,
        ("Industrial", "IS Industrial", "Clan Industrial", "Industrial Structure"),
    ),
    _structure(
        "reinforced-clan",
        "Reinforced Structure (Clan)",
        CLAN,
        ADV,
        3065,
        0.20,
        0,
        ("Clan Reinforced",),
    ),
    _structure(
        "endo-composite-clan",
        "Endo-Composite (Clan)",
        CLAN,
        ADV,
        3073,
        0.075,
        4,
        ("Clan Endo-Composite", "Clan Endo Composite"),
    ),
)

HEAT_SINK_TYPES: tuple[ComponentSeed, ...] = tuple(
    ComponentSeed(
        slug=slug,
        name=name,
        tech_base=tech_base,
        rules_level=rules_level,
        intro_year=intro_year,
        properties={"dissipation": dissipation, "crits": crits, "weight": weight},
        aliases=aliases,
    )
    for slug, name, tech_base, rules_level, intro_year, dissipation, crits, weight, aliases in (
        ("single", "Single Heat Sink", IS, INTRO, 2022, 1, 1, 1.0, ("Single", "Single Heat Sink")),
        (
            "double-is",
            "Double Heat Sink (Inner Sphere)",
            IS,
            STD,
            2567,
            2,
            3,
            1.0,
            ("Double", "Double Heat Sink", "IS Double Heat Sink", "Double (Inner Sphere)", "IS Double"),
        ),
        (
            "double-clan",
            "Double Heat Sink (Clan)",
            CLAN,
            STD,
            2567,
            2,
            2,
            1.0,
            ("Clan Double Heat Sink", "Double (Clan)", "Clan Double"),
        ),
        ("compact", "Compact Heat Sink", IS, EXP, 3058, 1, 1, 1.5, ("Compact", "Compact Heat Sink")),
        ("laser", "Laser Heat Sink", CLAN, EXP, 3075, 2, 2, 1.0, ("Laser", "Laser Heat Sink")),
    )
)

GYRO_TYPES: tuple[ComponentSeed, ...] = tuple(
    ComponentSeed(
        slug=slug,
        name=name,
        tech_base=IS,
        rules_level=rules_level,
        intro_year=intro_year,
        properties={"weight_multiplier": weight_multiplier, "crits": crits},
        aliases=aliases,
    )
    for slug, name, rules_level, intro_year, weight_multiplier, crits, aliases in (
        ("standard", "Standard Gyro", INTRO, 2300, 1.0, 4, ("Standard Gyro", "Standard")),
        ("xl", "XL Gyro", STD, 3067, 0.5, 6, ("XL Gyro",)),
        ("compact", "Compact Gyro", STD, 3068, 1.5, 2, ("Compact Gyro",)),
        ("heavy-duty", "Heavy Duty Gyro", STD, 3067, 2.0, 4, ("Heavy Duty Gyro", "Heavy-Duty Gyro")),
        ("superheavy", "Superheavy Gyro", EXP, 3120, 2.0, 4, ("Superheavy Gyro",)),
    )
)

COCKPIT_TYPES: tuple[ComponentSeed, ...] = tuple(
    ComponentSeed(
        slug=slug,
        name=name,
        tech_base=IS,
        rules_level=rules_level,
        intro_year=intro_year,
        properties={"weight": weight, "crits": crits},
        aliases=aliases,
    )
    for slug, name, rules_level, intro_year, weight, crits, aliases in (
        ("standard", "Standard Cockpit", INTRO, 2300, 3.0, 1, ("Standard Cockpit", "Standard")),
        ("small", "Small Cockpit", STD, 3067, 2.0, 1, ("Small Cockpit", "Small")),
        ("command-console", "Command Console", ADV, 2625, 3.0, 1, ("Command Console",)),
        (
            "torso-mounted",
            "Torso-Mounted Cockpit",
            ADV,
            3053,
            4.0,
            1,
            ("Torso Cockpit", "Torso-Mounted Cockpit"),
        ),
        ("industrial", "Industrial Cockpit", INTRO, 2350, 3.0, 1, ("Industrial Cockpit", "Industrial")),
        ("primitive", "Primitive Cockpit", ADV, 2300, 5.0, 1, ("Primitive Cockpit", "Primitive")),
    )
)

MYOMER_TYPES: tuple[ComponentSeed, ...] = tuple(
    ComponentSeed(
        slug=slug,
        name=name,
        tech_base=IS,
        rules_level=rules_level,
        intro_year=intro_year,
        properties={"crits": crits},
        aliases=aliases,
    )
    for slug, name, rules_level, intro_year, crits, aliases in (
        ("standard", "Standard Myomer", INTRO, 2020, 0, ("Standard", "Standard Myomer")),
        ("masc", "MASC", STD, 2740, 0, ("MASC", "ISMASC", "CLMASC", "IS MASC", "Clan MASC")),
        (
            "tsm",
            "Triple Strength Myomer",
            STD,
            3050,
            6,
            (
                "Triple Strength Myomer",
                "Triple-Strength Myomer",
                "TSM",
                "Triple-Strength",
                "Industrial Triple-Strength",
            ),
        ),
        ("industrial", "Industrial Myomer", INTRO, 2300, 0, ("Industrial", "Industrial Myomer")),
    )
)

COMPONENT_SEEDS: dict[ComponentCategory, tuple[ComponentSeed, ...]] = {
    ComponentCategory.ENGINE: ENGINE_TYPES,
    ComponentCategory.ARMOR: ARMOR_TYPES,
    ComponentCategory.STRUCTURE: STRUCTURE_TYPES,
    ComponentCategory.HEAT_SINK: HEAT_SINK_TYPES,
    ComponentCategory.GYRO: GYRO_TYPES,
    ComponentCategory.COCKPIT: COCKPIT_TYPES,
    ComponentCategory.MYOMER: MYOMER_TYPES,
}

# Labels used when a file leaves these categories out, meaning "standard".
DEFAULT_COMPONENT_LABELS: dict[ComponentCategory, str] = {
    ComponentCategory.GYRO: "Standard Gyro",
    ComponentCategory.COCKPIT: "Standard Cockpit",
    ComponentCategory.MYOMER: "Standard",
}

ERAS: tuple[EraSeed, ...] = (
    EraSeed("age-of-war", "Age of War", 2398, 2570),
    EraSeed("star-league", "Star League", 2571, 2780),
    EraSeed("early-succession-wars", "Early Succession Wars", 2781, 2900),
    EraSeed("late-succession-wars", "Late Succession Wars (LosTech)", 2901, 3019),
    EraSeed("renaissance", "Renaissance", 3020, 3049),
    EraSeed("clan-invasion", "Clan Invasion", 3050, 3061),
    EraSeed("civil-war", "Civil War", 3062, 3067),
    EraSeed("jihad", "Jihad", 3068, 3080),
    EraSeed("dark-age", "Dark Age", 3081, 3150),
    EraSeed("ilclan", "ilClan", 3151, None),
)

_CLANS: tuple[tuple[str, str, str], ...] = (
    ("clan-wolf", "Clan Wolf", "CW"),
    ("clan-jade-falcon", "Clan Jade Falcon", "CJF"),
    ("clan-ghost-bear", "Clan Ghost Bear", "CGB"),
    ("clan-smoke-jaguar", "Clan Smoke Jaguar", "CSJ"),
    ("clan-nova-cat", "Clan Nova Cat", "CNC"),
    ("clan-steel-viper", "Clan Steel Viper", "CSV"),
    ("clan-diamond-shark", "Clan Diamond Shark", "CDS"),
    ("clan-goliath-scorpion", "Clan Goliath Scorpion", "CGS"),
    ("clan-ice-hellion", "Clan Ice Hellion", "CIH"),
    ("clan-star-adder", "Clan Star Adder", "CSA"),
    ("clan-hell-horses", "Clan Hell's Horses", "CHH"),
    ("clan-blood-spirit", "Clan Blood Spirit", "CBS"),
    ("clan-coyote", "Clan Coyote", "CCY"),
    ("clan-fire-mandrill", "Clan Fire Mandrill", "CFM"),
    ("clan-mongoose", "Clan Mongoose", "CMG"),
    ("clan-widowmaker", "Clan Widowmaker", "CWM"),
    ("clan-wolverine", "Clan Wolverine", "CWOV"),
)

FACTIONS: tuple[FactionSeed, ...] = (
    FactionSeed("steiner", "Lyran Commonwealth", "LC", FactionType.GREAT_HOUSE),
    FactionSeed("davion", "Federated Suns", "FS", FactionType.GREAT_HOUSE),
    FactionSeed("kurita", "Draconis Combine", "DC", FactionType.GREAT_HOUSE),
    FactionSeed("marik", "Free Worlds League", "FWL", FactionType.GREAT_HOUSE),
    FactionSeed("liao", "Capellan Confederation", "CC", FactionType.GREAT_HOUSE),
    FactionSeed("star-league", "Star League", "SL", FactionType.STAR_LEAGUE),
    FactionSeed("comstar", "ComStar", "CS", FactionType.INDEPENDENT),
    FactionSeed("word-of-blake", "Word of Blake", "WoB", FactionType.INDEPENDENT),
    FactionSeed("republic", "Republic of the Sphere", "RS", FactionType.INNER_SPHERE),
    *(FactionSeed(slug, name, short, FactionType.CLAN, is_clan=True) for slug, name, short in _CLANS),
    FactionSeed("periphery-general", "Periphery (General)", "PER", FactionType.PERIPHERY),
    FactionSeed("taurian-concordat", "Taurian Concordat", "TC", FactionType.PERIPHERY),
    FactionSeed("magistracy-canopus", "Magistracy of Canopus", "MOC", FactionType.PERIPHERY),
    FactionSeed("outworlds-alliance", "Outworlds Alliance", "OA", FactionType.PERIPHERY),
    FactionSeed("marian-hegemony", "Marian Hegemony", "MH", FactionType.PERIPHERY),
    FactionSeed("mercenary", "Mercenary", "MER", FactionType.MERCENARY),
    FactionSeed("general", "General (All)", "GEN", FactionType.GENERAL),
)
