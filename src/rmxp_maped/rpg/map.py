"""
Map records: per-map data (`MapNNN.rxdata`) and the map tree metadata
(`MapInfos.rxdata`).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .base import Record, register
from .events import Event
from .primitives import AudioFile, Table, sound_effect

# Table layers: ground, two decoration layers
MAP_LAYERS = 3


@register("RPG::MapInfo")
@dataclass
class MapInfo(Record):
    name: str = ""
    parent_id: int = 0
    order: int = 0
    expanded: bool = False
    scroll_x: int = 0
    scroll_y: int = 0


@register("RPG::Map")
@dataclass
class Map(Record):
    tileset_id: int = 1
    width: int = 20
    height: int = 15
    autoplay_bgm: bool = False
    bgm: AudioFile = field(default_factory=AudioFile)
    autoplay_bgs: bool = False
    bgs: AudioFile = field(default_factory=sound_effect)
    encounter_list: List[Any] = field(default_factory=list)
    encounter_step: int = 30
    data: Table = field(default_factory=lambda: Table.new(20, 15, MAP_LAYERS))
    events: Dict[int, Event] = field(default_factory=dict)

    def resize(self, width: int, height: int) -> None:
        """Change the map size, keeping tiles that still fit."""
        self.data.resize(width, height, MAP_LAYERS)
        self.width = width
        self.height = height
