"""
Database records: the twelve nil-padded collections edited in the
Database windows (actors, classes, skills, items, weapons, armors, enemies,
troops, states, animations, tilesets; common events live in events.py).

Field defaults follow the values RGSS assigns in each class's `initialize`.
"""

from dataclasses import dataclass, field
from typing import List

from .base import Record, register, ruby_field
from .events import EventCommand
from .primitives import AudioFile, Color, Table, sound_effect


def _actor_parameters() -> Table:
    """Parameter curve RGSS generates for a fresh actor (6 stats x 100 levels)."""
    table = Table.new(6, 100)
    for level in range(1, 100):
        table.set(500 + level * 50, 0, level)
        table.set(500 + level * 50, 1, level)
        for stat in range(2, 6):
            table.set(50 + level * 5, stat, level)
    return table


@register("RPG::Actor")
@dataclass
class Actor(Record):
    id: int = 0
    name: str = ""
    class_id: int = 1
    initial_level: int = 1
    final_level: int = 99
    exp_basis: int = 30
    exp_inflation: int = 30
    character_name: str = ""
    character_hue: int = 0
    battler_name: str = ""
    battler_hue: int = 0
    parameters: Table = field(default_factory=_actor_parameters)
    weapon_id: int = 0
    armor1_id: int = 0
    armor2_id: int = 0
    armor3_id: int = 0
    armor4_id: int = 0
    weapon_fix: bool = False
    armor1_fix: bool = False
    armor2_fix: bool = False
    armor3_fix: bool = False
    armor4_fix: bool = False


@register("RPG::Class::Learning")
@dataclass
class Learning(Record):
    level: int = 1
    skill_id: int = 1


@register("RPG::Class")
@dataclass
class Class(Record):
    id: int = 0
    name: str = ""
    position: int = 0
    weapon_set: List[int] = field(default_factory=list)
    armor_set: List[int] = field(default_factory=list)
    element_ranks: Table = field(default_factory=lambda: Table.new(1))
    state_ranks: Table = field(default_factory=lambda: Table.new(1))
    learnings: List[Learning] = field(default_factory=list)


@register("RPG::Skill")
@dataclass
class Skill(Record):
    id: int = 0
    name: str = ""
    icon_name: str = ""
    description: str = ""
    scope: int = 0
    occasion: int = 1
    animation1_id: int = 0
    animation2_id: int = 0
    menu_se: AudioFile = field(default_factory=sound_effect)
    common_event_id: int = 0
    sp_cost: int = 0
    power: int = 0
    atk_f: int = 0
    eva_f: int = 0
    str_f: int = 0
    dex_f: int = 0
    agi_f: int = 0
    int_f: int = 100
    hit: int = 100
    pdef_f: int = 0
    mdef_f: int = 100
    variance: int = 15
    element_set: List[int] = field(default_factory=list)
    plus_state_set: List[int] = field(default_factory=list)
    minus_state_set: List[int] = field(default_factory=list)


@register("RPG::Item")
@dataclass
class Item(Record):
    id: int = 0
    name: str = ""
    icon_name: str = ""
    description: str = ""
    scope: int = 0
    occasion: int = 0
    animation1_id: int = 0
    animation2_id: int = 0
    menu_se: AudioFile = field(default_factory=sound_effect)
    common_event_id: int = 0
    price: int = 0
    consumable: bool = True
    parameter_type: int = 0
    parameter_points: int = 0
    recover_hp_rate: int = 0
    recover_hp: int = 0
    recover_sp_rate: int = 0
    recover_sp: int = 0
    hit: int = 100
    pdef_f: int = 0
    mdef_f: int = 0
    variance: int = 0
    element_set: List[int] = field(default_factory=list)
    plus_state_set: List[int] = field(default_factory=list)
    minus_state_set: List[int] = field(default_factory=list)


@register("RPG::Weapon")
@dataclass
class Weapon(Record):
    id: int = 0
    name: str = ""
    icon_name: str = ""
    description: str = ""
    animation1_id: int = 0
    animation2_id: int = 0
    price: int = 0
    atk: int = 0
    pdef: int = 0
    mdef: int = 0
    str_plus: int = 0
    dex_plus: int = 0
    agi_plus: int = 0
    int_plus: int = 0
    element_set: List[int] = field(default_factory=list)
    plus_state_set: List[int] = field(default_factory=list)
    minus_state_set: List[int] = field(default_factory=list)


@register("RPG::Armor")
@dataclass
class Armor(Record):
    id: int = 0
    name: str = ""
    icon_name: str = ""
    description: str = ""
    kind: int = 0
    auto_state_id: int = 0
    price: int = 0
    pdef: int = 0
    mdef: int = 0
    eva: int = 0
    str_plus: int = 0
    dex_plus: int = 0
    agi_plus: int = 0
    int_plus: int = 0
    guard_element_set: List[int] = field(default_factory=list)
    guard_state_set: List[int] = field(default_factory=list)


@register("RPG::Enemy::Action")
@dataclass
class EnemyAction(Record):
    kind: int = 0
    basic: int = 0
    skill_id: int = 1
    condition_turn_a: int = 0
    condition_turn_b: int = 1
    condition_hp: int = 100
    condition_level: int = 1
    condition_switch_id: int = 0
    rating: int = 5


@register("RPG::Enemy")
@dataclass
class Enemy(Record):
    id: int = 0
    name: str = ""
    battler_name: str = ""
    battler_hue: int = 0
    maxhp: int = 500
    maxsp: int = 500
    strength: int = ruby_field("str", 50)
    dexterity: int = ruby_field("dex", 50)
    agility: int = ruby_field("agi", 50)
    intelligence: int = ruby_field("int", 50)
    atk: int = 100
    pdef: int = 100
    mdef: int = 100
    eva: int = 0
    animation1_id: int = 0
    animation2_id: int = 0
    element_ranks: Table = field(default_factory=lambda: Table.new(1))
    state_ranks: Table = field(default_factory=lambda: Table.new(1))
    actions: List[EnemyAction] = field(default_factory=lambda: [EnemyAction()])
    exp: int = 0
    gold: int = 0
    item_id: int = 0
    weapon_id: int = 0
    armor_id: int = 0
    treasure_prob: int = 100


@register("RPG::Troop::Member")
@dataclass
class TroopMember(Record):
    enemy_id: int = 1
    x: int = 0
    y: int = 0
    hidden: bool = False
    immortal: bool = False


@register("RPG::Troop::Page::Condition")
@dataclass
class TroopPageCondition(Record):
    turn_valid: bool = False
    enemy_valid: bool = False
    actor_valid: bool = False
    switch_valid: bool = False
    turn_a: int = 0
    turn_b: int = 0
    enemy_index: int = 0
    enemy_hp: int = 50
    actor_id: int = 1
    actor_hp: int = 50
    switch_id: int = 1


@register("RPG::Troop::Page")
@dataclass
class TroopPage(Record):
    condition: TroopPageCondition = field(default_factory=TroopPageCondition)
    span: int = 0
    list: List[EventCommand] = field(default_factory=lambda: [EventCommand()])


@register("RPG::Troop")
@dataclass
class Troop(Record):
    id: int = 0
    name: str = ""
    members: List[TroopMember] = field(default_factory=list)
    pages: List[TroopPage] = field(default_factory=lambda: [TroopPage()])


@register("RPG::State")
@dataclass
class State(Record):
    id: int = 0
    name: str = ""
    animation_id: int = 0
    restriction: int = 0
    nonresistance: bool = False
    zero_hp: bool = False
    cant_get_exp: bool = False
    cant_evade: bool = False
    slip_damage: bool = False
    rating: int = 5
    hit_rate: int = 100
    maxhp_rate: int = 100
    maxsp_rate: int = 100
    str_rate: int = 100
    dex_rate: int = 100
    agi_rate: int = 100
    int_rate: int = 100
    atk_rate: int = 100
    pdef_rate: int = 100
    mdef_rate: int = 100
    eva: int = 0
    battle_only: bool = True
    hold_turn: int = 0
    auto_release_prob: int = 0
    shock_release_prob: int = 0
    guard_element_set: List[int] = field(default_factory=list)
    plus_state_set: List[int] = field(default_factory=list)
    minus_state_set: List[int] = field(default_factory=list)


@register("RPG::Animation::Frame")
@dataclass
class AnimationFrame(Record):
    cell_max: int = 0
    cell_data: Table = field(default_factory=lambda: Table.new(0, 0))


@register("RPG::Animation::Timing")
@dataclass
class AnimationTiming(Record):
    frame: int = 0
    se: AudioFile = field(default_factory=sound_effect)
    flash_scope: int = 0
    flash_color: Color = field(default_factory=lambda: Color(255.0, 255.0, 255.0, 255.0))
    flash_duration: int = 5
    condition: int = 0


@register("RPG::Animation")
@dataclass
class Animation(Record):
    id: int = 0
    name: str = ""
    animation_name: str = ""
    animation_hue: int = 0
    position: int = 1
    frame_max: int = 1
    frames: List[AnimationFrame] = field(default_factory=lambda: [AnimationFrame()])
    timings: List[AnimationTiming] = field(default_factory=list)


def _tileset_priorities() -> Table:
    table = Table.new(384)
    table.set(5, 0)
    return table


@register("RPG::Tileset")
@dataclass
class Tileset(Record):
    id: int = 0
    name: str = ""
    tileset_name: str = ""
    autotile_names: List[str] = field(default_factory=lambda: [""] * 7)
    panorama_name: str = ""
    panorama_hue: int = 0
    fog_name: str = ""
    fog_hue: int = 0
    fog_opacity: int = 64
    fog_blend_type: int = 0
    fog_zoom: int = 200
    fog_sx: int = 0
    fog_sy: int = 0
    battleback_name: str = ""
    passages: Table = field(default_factory=lambda: Table.new(384))
    priorities: Table = field(default_factory=_tileset_priorities)
    terrain_tags: Table = field(default_factory=lambda: Table.new(384))
