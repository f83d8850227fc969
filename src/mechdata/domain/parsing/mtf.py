"""Reader for MegaMek ``.mtf`` files (line oriented ``key:value`` mech definitions).

An ``.mtf`` file mixes three kinds of lines:

- ``key:value`` properties (``Chassis:Atlas``, ``LA armor:34``, ``Weapons:4``)
- location headers, a key with an empty value (``Left Arm:``), opening a block of
  critical-slot lines, one equipment label per slot
- weapon lines following ``Weapons:N`` (``2 Medium Laser, Left Arm``)

Weapons listed in the ``Weapons`` block are taken from there; their critical slots are
not counted again. Every other critical slot adds one to the quantity of its label at
that location.
"""

from __future__ import annotations

from mechdata.domain.model import Location, RulesLevel, TechBase, UnitType
from mechdata.domain.slugs import equipment_slug, to_slug

from .common import (
    read_float,
    read_int,
    rules_level_from_number,
    split_leading_int,
    strip_quotes,
    tech_base_from_text,
)
from .records import (
    ParsedLoadoutEntry,
    ParsedLocation,
    ParsedMechData,
    ParsedUnit,
    merge_loadout,
)

_LOCATION_NAMES: dict[str, Location] = {
    "left arm": Location.LEFT_ARM,
    "right arm": Location.RIGHT_ARM,
    "left torso": Location.LEFT_TORSO,
    "right torso": Location.RIGHT_TORSO,
    "center torso": Location.CENTER_TORSO,
    "head": Location.HEAD,
    "left leg": Location.LEFT_LEG,
    "right leg": Location.RIGHT_LEG,
    # quads
    "front left leg": Location.LEFT_ARM,
    "front right leg": Location.RIGHT_ARM,
    "rear left leg": Location.LEFT_LEG,
    "rear right leg": Location.RIGHT_LEG,
}

_LOCATION_CODES: dict[str, Location] = {
    "la": Location.LEFT_ARM,
    "ra": Location.RIGHT_ARM,
    "lt": Location.LEFT_TORSO,
    "rt": Location.RIGHT_TORSO,
    "ct": Location.CENTER_TORSO,
    "hd": Location.HEAD,
    "ll": Location.LEFT_LEG,
    "rl": Location.RIGHT_LEG,
    "fll": Location.LEFT_ARM,
    "frl": Location.RIGHT_ARM,
    "rll": Location.LEFT_LEG,
    "rrl": Location.RIGHT_LEG,
}

_REAR_ARMOR_CODES: dict[str, Location] = {
    "rtl": Location.LEFT_TORSO,
    "rtr": Location.RIGHT_TORSO,
    "rtc": Location.CENTER_TORSO,
}

MECH_LOCATION_ORDER: tuple[Location, ...] = (
    Location.LEFT_ARM,
    Location.RIGHT_ARM,
    Location.LEFT_TORSO,
    Location.RIGHT_TORSO,
    Location.CENTER_TORSO,
    Location.HEAD,
    Location.LEFT_LEG,
    Location.RIGHT_LEG,
)

_STRUCTURAL_SLOTS = frozenset(
    {
        "Shoulder",
        "Upper Arm Actuator",
        "Lower Arm Actuator",
        "Hand Actuator",
        "Hip",
        "Upper Leg Actuator",
        "Lower Leg Actuator",
        "Foot Actuator",
        "Life Support",
        "Sensors",
        "Cockpit",
        "Gyro",
        "Compact Gyro",
        "Heavy Duty Gyro",
        "XL Gyro",
        "Fusion Engine",
        "XL Engine",
        "Light Engine",
        "Compact Engine",
        "Primitive Fusion Engine",
        "ICE Engine",
        "-Empty-",
    }
)
_STRUCTURAL_FRAGMENTS = (
    "Engine",
    "Endo Steel",
    "Endo-Steel",
    "Ferro-Fibrous",
    "Reactive Armor",
    "Stealth Armor",
    "CASE",
)
_SLOT_ANNOTATIONS = ("(omnipod)", "(armored)")

# Mechanical attribute keys mapped onto ParsedMechData label fields.
_COMPONENT_KEYS = {
    "structure": "structure_label",
    "myomer": "myomer_label",
    "armor": "armor_label",
    "gyro": "gyro_label",
    "cockpit": "cockpit_label",
}


def is_structural_slot(label: str) -> bool:
    """Critical slots that belong to the chassis rather than to mounted equipment."""

    return label in _STRUCTURAL_SLOTS or any(part in label for part in _STRUCTURAL_FRAGMENTS)


def parse_mtf(text: str) -> ParsedUnit | None:
    """Parse one ``.mtf`` file; ``None`` when chassis or mass are missing or the chassis
    name has nothing to build a slug from."""

    reader = _MtfReader()
    for raw_line in text.splitlines():
        reader.feed(raw_line.strip())
    return reader.build()


class _MtfReader:
    def __init__(self) -> None:
        self.chassis = ""
        self.model = ""
        self.mul_id: int | None = None
        self.tech_base = TechBase.INNER_SPHERE
        self.rules_level = RulesLevel.STANDARD
        self.intro_year: int | None = None
        self.source: str | None = None
        self.mass: float | None = None
        self.description: str | None = None
        self.quirks: list[str] = []
        self.mech = ParsedMechData()
        self.front_armor: dict[Location, int | None] = {}
        self.rear_armor: dict[Location, int | None] = {}
        self.weapons: list[ParsedLoadoutEntry] = []
        self.slots: list[ParsedLoadoutEntry] = []
        self._section: Location | None = None
        self._in_section = False
        self._in_weapons = False

    def feed(self, line: str) -> None:
        if not line or line.startswith("#"):
            return

        if self._in_weapons:
            if "," in line:
                self._read_weapon(line)
                return
            self._in_weapons = False

        if ":" not in line:
            if self._in_section:
                self._read_slot(line)
            return

        key, _, value = line.partition(":")
        key = key.strip().lower()
        value = value.strip()

        if not value:
            self._section = _LOCATION_NAMES.get(key)
            self._in_section = True
            return

        self._in_section = False
        self._section = None
        self._read_property(key, value)

    def _read_property(self, key: str, value: str) -> None:  # noqa: C901, PLR0912
        if key == "chassis":
            self.chassis = value
        elif key == "model":
            self.model = value
        elif key == "mul id":
            self.mul_id = read_int(value)
        elif key == "config":
            self.mech.config = value
            self.mech.is_omnimech = "omnimech" in value.lower()
        elif key in {"techbase", "tech base"}:
            self.tech_base = tech_base_from_text(value)
        elif key == "era":
            self.intro_year = read_int(value)
        elif key == "source":
            self.source = value
        elif key == "rules level":
            self.rules_level = rules_level_from_number(value)
        elif key == "mass":
            self.mass = read_float(value)
        elif key == "quirk":
            slug = to_slug(value)
            if slug and slug not in self.quirks:
                self.quirks.append(slug)
        elif key == "overview":
            self.description = strip_quotes(value)
        elif key == "engine":
            rating, label = split_leading_int(value)
            self.mech.engine_rating = rating
            self.mech.engine_label = label or None
        elif key == "heat sinks":
            count, label = split_leading_int(value)
            self.mech.heat_sink_count = count
            self.mech.heat_sink_label = label or None
        elif key == "walk mp":
            self.mech.walk_mp = read_int(value)
        elif key == "jump mp":
            self.mech.jump_mp = read_int(value)
        elif key in _COMPONENT_KEYS:
            setattr(self.mech, _COMPONENT_KEYS[key], value)
        elif key == "weapons":
            self._in_weapons = True
        elif key.endswith(" armor"):
            self._read_armor(key.removesuffix(" armor").strip(), value)

    def _read_armor(self, code: str, value: str) -> None:
        points = read_int(value)
        if code in _REAR_ARMOR_CODES:
            self.rear_armor[_REAR_ARMOR_CODES[code]] = points
        elif code in _LOCATION_CODES:
            self.front_armor[_LOCATION_CODES[code]] = points

    def _read_slot(self, line: str) -> None:
        if self._section is None:
            return
        label, is_rear = _strip_rear_marker(line)
        for annotation in _SLOT_ANNOTATIONS:
            if label.lower().endswith(annotation):
                label = label[: -len(annotation)].strip()
        if not label or is_structural_slot(label):
            return
        self.slots.append(
            ParsedLoadoutEntry(label=label, location=self._section, is_rear_facing=is_rear)
        )

    def _read_weapon(self, line: str) -> None:
        # "[qty] Name, Location[(R)][, Ammo:N]"
        parts = [part.strip() for part in line.split(",", 2)]
        if len(parts) < 2:  # noqa: PLR2004
            return
        quantity, label = split_leading_int(parts[0])
        if quantity is None or not label:
            quantity, label = 1, parts[0]
        if not label or label == "-Empty-" or quantity < 1:
            return
        location_text, is_rear = _strip_rear_marker(parts[1])
        location = _LOCATION_NAMES.get(location_text.lower()) or _LOCATION_CODES.get(
            location_text.lower()
        )
        self.weapons.append(
            ParsedLoadoutEntry(
                label=label,
                location=location,
                quantity=quantity,
                is_rear_facing=is_rear,
            )
        )

    def _locations(self) -> list[ParsedLocation]:
        return [
            ParsedLocation(
                location=location,
                armor=self.front_armor.get(location),
                rear_armor=self.rear_armor.get(location),
            )
            for location in MECH_LOCATION_ORDER
            if location in self.front_armor or location in self.rear_armor
        ]

    def _loadout(self) -> list[ParsedLoadoutEntry]:
        weapon_slugs = {equipment_slug(entry.label) for entry in self.weapons}
        other_slots = [
            entry for entry in self.slots if equipment_slug(entry.label) not in weapon_slugs
        ]
        return merge_loadout([*self.weapons, *other_slots])

    def build(self) -> ParsedUnit | None:
        if not to_slug(self.chassis) or self.mass is None:
            return None
        return ParsedUnit(
            chassis=self.chassis,
            model=self.model,
            unit_type=UnitType.MECH,
            tonnage=self.mass,
            tech_base=self.tech_base,
            rules_level=self.rules_level,
            mul_id=self.mul_id,
            intro_year=self.intro_year,
            source_book=self.source,
            description=self.description,
            locations=self._locations(),
            loadout=self._loadout(),
            quirks=self.quirks,
            mech_data=self.mech,
        )


def _strip_rear_marker(text: str) -> tuple[str, bool]:
    stripped = text.strip()
    if stripped.endswith("(R)"):
        return stripped.removesuffix("(R)").strip(), True
    return stripped, False
