"""
Identity of the top-level collections a project is made of.
"""

from enum import Enum
from typing import Any, List, Type

from .. import data
from ..data import nil_padded
from ..rpg import (
    Actor,
    Animation,
    Armor,
    Class,
    CommonEvent,
    Enemy,
    Item,
    MapInfo,
    Record,
    Script,
    Skill,
    State,
    System,
    Tileset,
    Troop,
    Weapon,
)

RXDATA_EXT = ".rxdata"


class Layout(Enum):
    """How a collection is laid out inside its file."""
    NIL_PADDED = "nil_padded"
    MAP_INFOS = "map_infos"
    RECORD = "record"
    SCRIPTS = "scripts"


class Collection(Enum):
    """One member per top-level collection, in load and save order.

    Each member knows its file stem, record type, human label (used in
    error messages) and on-disk layout.
    """

    ACTORS = ("Actors", Actor, "actor data", Layout.NIL_PADDED)
    ANIMATIONS = ("Animations", Animation, "animation data", Layout.NIL_PADDED)
    ARMORS = ("Armors", Armor, "armor data", Layout.NIL_PADDED)
    CLASSES = ("Classes", Class, "class data", Layout.NIL_PADDED)
    COMMON_EVENTS = ("CommonEvents", CommonEvent, "common event data", Layout.NIL_PADDED)
    ENEMIES = ("Enemies", Enemy, "enemy data", Layout.NIL_PADDED)
    ITEMS = ("Items", Item, "item data", Layout.NIL_PADDED)
    SKILLS = ("Skills", Skill, "skill data", Layout.NIL_PADDED)
    STATES = ("States", State, "state data", Layout.NIL_PADDED)
    TILESETS = ("Tilesets", Tileset, "tileset data", Layout.NIL_PADDED)
    TROOPS = ("Troops", Troop, "troop data", Layout.NIL_PADDED)
    WEAPONS = ("Weapons", Weapon, "weapon data", Layout.NIL_PADDED)
    MAP_INFOS = ("MapInfos", MapInfo, "map infos", Layout.MAP_INFOS)
    SYSTEM = ("System", System, "system", Layout.RECORD)
    SCRIPTS = ("Scripts", Script, "scripts", Layout.SCRIPTS)

    def __init__(self, stem: str, record_type: Type[Any], label: str, layout: Layout):
        self.stem = stem
        self.record_type = record_type
        self.label = label
        self.layout = layout

    @classmethod
    def nil_padded(cls) -> List["Collection"]:
        return [c for c in cls if c.layout is Layout.NIL_PADDED]

    @property
    def filename(self) -> str:
        """Default file name. The scripts bundle name is resolved per project."""
        return f"{self.stem}{RXDATA_EXT}"

    def decode(self, payload: bytes) -> Any:
        if self.layout is Layout.NIL_PADDED:
            return nil_padded.deserialize(payload, self.record_type)
        if self.layout is Layout.MAP_INFOS:
            return data.decode_map_infos(payload)
        if self.layout is Layout.SCRIPTS:
            return data.decode_scripts(payload)
        return data.load_record(payload, self.record_type)

    def encode(self, value: Any) -> bytes:
        if self.layout is Layout.NIL_PADDED:
            return nil_padded.serialize(value)
        if self.layout is Layout.SCRIPTS:
            return data.encode_scripts(value)
        return data.dump_record(value)

    def new_record(self) -> Record:
        """A single default record, as appended by "change maximum"."""
        return self.record_type()

    def default_value(self) -> Any:
        """Contents of this collection in a brand-new project."""
        if self.layout is Layout.NIL_PADDED:
            record = self.new_record()
            record.id = 1
            return [record]
        if self.layout is Layout.MAP_INFOS:
            return {1: MapInfo()}
        if self.layout is Layout.SCRIPTS:
            return []
        return self.new_record()


def map_filename(map_id: int) -> str:
    return f"Map{map_id:03d}{RXDATA_EXT}"


def scripts_filename(scripts_path: str) -> str:
    return f"{scripts_path}{RXDATA_EXT}"
