"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class UnitType(StrEnum):
    MECH = "mech"
    VEHICLE = "vehicle"
    FIGHTER = "fighter"
    OTHER = "other"


class TechBase(StrEnum):
    INNER_SPHERE = "inner_sphere"
    CLAN = "clan"
    MIXED = "mixed"
    PRIMITIVE = "primitive"


class RulesLevel(StrEnum):
    INTRODUCTORY = "introductory"
    STANDARD = "standard"
    ADVANCED = "advanced"
    EXPERIMENTAL = "experimental"
    UNOFFICIAL = "unofficial"


class Location(StrEnum):
    """Body locations for mechs plus the facing locations used by vehicles and fighters."""

    HEAD = "head"
    CENTER_TORSO = "center_torso"
    LEFT_TORSO = "left_torso"
    RIGHT_TORSO = "right_torso"
    LEFT_ARM = "left_arm"
    RIGHT_ARM = "right_arm"
    LEFT_LEG = "left_leg"
    RIGHT_LEG = "right_leg"
    FRONT = "front"
    REAR = "rear"
    LEFT_SIDE = "left_side"
    RIGHT_SIDE = "right_side"
    TURRET = "turret"
    BODY = "body"


class EquipmentCategory(StrEnum):
    ENERGY_WEAPON = "energy_weapon"
    BALLISTIC_WEAPON = "ballistic_weapon"
    MISSILE_WEAPON = "missile_weapon"
    PHYSICAL_WEAPON = "physical_weapon"
    AMMUNITION = "ammunition"
    EQUIPMENT = "equipment"
    ARMOR = "armor"
    STRUCTURE = "structure"
    ENGINE = "engine"
    GYRO = "gyro"
    COCKPIT = "cockpit"
    ACTUATOR = "actuator"
    HEAT_SINK = "heat_sink"
    JUMP_JET = "jump_jet"
    TARGETING_COMPUTER = "targeting_computer"


class ComponentCategory(StrEnum):
    """The seven closed construction categories of a mech."""

    ENGINE = "engine"
    ARMOR = "armor"
    STRUCTURE = "structure"
    HEAT_SINK = "heat_sink"
    GYRO = "gyro"
    COCKPIT = "cockpit"
    MYOMER = "myomer"


class DataSource(StrEnum):
    MEGAMEK = "megamek"
    SEED = "seed"
    MUL = "mul"
    MANUAL = "manual"


class FactionType(StrEnum):
    GREAT_HOUSE = "great_house"
    STAR_LEAGUE = "star_league"
    INDEPENDENT = "independent"
    INNER_SPHERE = "inner_sphere"
    CLAN = "clan"
    PERIPHERY = "periphery"
    MERCENARY = "mercenary"
    GENERAL = "general"
    OTHER = "other"
