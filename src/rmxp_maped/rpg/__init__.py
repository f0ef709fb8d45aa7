"""
Typed RGSS (RPG Maker XP) records.

Importing this package registers every record class with the Ruby class
name it decodes from, so `from_ruby` can build typed records out of raw
Marshal object graphs.
"""

from .base import (
    RECORD_TYPES,
    USERDEF_TYPES,
    Record,
    UserDefRecord,
    from_ruby,
    register,
    to_ruby,
)
from .primitives import AudioFile, Color, Table, Tone, sound_effect
from .events import (
    CommonEvent,
    Event,
    EventCommand,
    EventPage,
    EventPageCondition,
    EventPageGraphic,
    MoveCommand,
    MoveRoute,
)
from .database import (
    Actor,
    Animation,
    AnimationFrame,
    AnimationTiming,
    Armor,
    Class,
    Enemy,
    EnemyAction,
    Item,
    Learning,
    Skill,
    State,
    Tileset,
    Troop,
    TroopMember,
    TroopPage,
    TroopPageCondition,
    Weapon,
)
from .map import Map, MapInfo
from .system import System, TestBattler, Words
from .script import Script, scripts_from_ruby, scripts_to_ruby

__all__ = [
    # Conversion
    "RECORD_TYPES",
    "USERDEF_TYPES",
    "Record",
    "UserDefRecord",
    "from_ruby",
    "register",
    "to_ruby",
    # Primitives
    "AudioFile",
    "Color",
    "Table",
    "Tone",
    "sound_effect",
    # Events
    "CommonEvent",
    "Event",
    "EventCommand",
    "EventPage",
    "EventPageCondition",
    "EventPageGraphic",
    "MoveCommand",
    "MoveRoute",
    # Database
    "Actor",
    "Animation",
    "AnimationFrame",
    "AnimationTiming",
    "Armor",
    "Class",
    "Enemy",
    "EnemyAction",
    "Item",
    "Learning",
    "Skill",
    "State",
    "Tileset",
    "Troop",
    "TroopMember",
    "TroopPage",
    "TroopPageCondition",
    "Weapon",
    # Maps
    "Map",
    "MapInfo",
    # System
    "System",
    "TestBattler",
    "Words",
    # Scripts
    "Script",
    "scripts_from_ruby",
    "scripts_to_ruby",
]
