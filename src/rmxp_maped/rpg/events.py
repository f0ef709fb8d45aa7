"""
Event records: commands, move routes, map events and common events.
"""

from dataclasses import dataclass, field
from typing import Any, List

from .base import Record, register


@register("RPG::EventCommand")
@dataclass
class EventCommand(Record):
    code: int = 0
    indent: int = 0
    parameters: List[Any] = field(default_factory=list)


@register("RPG::MoveCommand")
@dataclass
class MoveCommand(Record):
    code: int = 0
    parameters: List[Any] = field(default_factory=list)


@register("RPG::MoveRoute")
@dataclass
class MoveRoute(Record):
    repeat: bool = True
    skippable: bool = False
    list: List[MoveCommand] = field(default_factory=lambda: [MoveCommand()])


@register("RPG::Event::Page::Condition")
@dataclass
class EventPageCondition(Record):
    switch1_valid: bool = False
    switch2_valid: bool = False
    variable_valid: bool = False
    self_switch_valid: bool = False
    switch1_id: int = 1
    switch2_id: int = 1
    variable_id: int = 1
    variable_value: int = 0
    self_switch_ch: str = "A"


@register("RPG::Event::Page::Graphic")
@dataclass
class EventPageGraphic(Record):
    tile_id: int = 0
    character_name: str = ""
    character_hue: int = 0
    direction: int = 2
    pattern: int = 0
    opacity: int = 255
    blend_type: int = 0


@register("RPG::Event::Page")
@dataclass
class EventPage(Record):
    condition: EventPageCondition = field(default_factory=EventPageCondition)
    graphic: EventPageGraphic = field(default_factory=EventPageGraphic)
    move_type: int = 0
    move_speed: int = 3
    move_frequency: int = 3
    move_route: MoveRoute = field(default_factory=MoveRoute)
    walk_anime: bool = True
    step_anime: bool = False
    direction_fix: bool = False
    through: bool = False
    always_on_top: bool = False
    trigger: int = 0
    list: List[EventCommand] = field(default_factory=lambda: [EventCommand()])


@register("RPG::Event")
@dataclass
class Event(Record):
    id: int = 0
    name: str = ""
    x: int = 0
    y: int = 0
    pages: List[EventPage] = field(default_factory=lambda: [EventPage()])


@register("RPG::CommonEvent")
@dataclass
class CommonEvent(Record):
    id: int = 0
    name: str = ""
    trigger: int = 0
    switch_id: int = 1
    list: List[EventCommand] = field(default_factory=lambda: [EventCommand()])


__all__ = [
    "CommonEvent",
    "Event",
    "EventCommand",
    "EventPage",
    "EventPageCondition",
    "EventPageGraphic",
    "MoveCommand",
    "MoveRoute",
]
