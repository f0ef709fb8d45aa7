"""
System record (`System.rxdata`): global game settings.

The magic number is rewritten by the editor on every load and save; the
game uses it to notice that the data files changed under it.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .base import Record, register, ruby_field
from .primitives import AudioFile, sound_effect


@register("RPG::System::Words")
@dataclass
class Words(Record):
    gold: str = ""
    hp: str = ""
    sp: str = ""
    strength: str = ruby_field("str", "")
    dexterity: str = ruby_field("dex", "")
    agility: str = ruby_field("agi", "")
    intelligence: str = ruby_field("int", "")
    atk: str = ""
    pdef: str = ""
    mdef: str = ""
    weapon: str = ""
    armor1: str = ""
    armor2: str = ""
    armor3: str = ""
    armor4: str = ""
    attack: str = ""
    skill: str = ""
    guard: str = ""
    item: str = ""
    equip: str = ""


@register("RPG::System::TestBattler")
@dataclass
class TestBattler(Record):
    actor_id: int = 1
    level: int = 1
    weapon_id: int = 0
    armor1_id: int = 0
    armor2_id: int = 0
    armor3_id: int = 0
    armor4_id: int = 0


def _nil_padded_names() -> List[Optional[str]]:
    return [None, ""]


@register("RPG::System")
@dataclass
class System(Record):
    magic_number: int = 0
    party_members: List[int] = field(default_factory=lambda: [1])
    elements: List[Optional[str]] = field(default_factory=_nil_padded_names)
    switches: List[Optional[str]] = field(default_factory=_nil_padded_names)
    variables: List[Optional[str]] = field(default_factory=_nil_padded_names)
    windowskin_name: str = ""
    title_name: str = ""
    gameover_name: str = ""
    battle_transition: str = ""
    title_bgm: AudioFile = field(default_factory=AudioFile)
    battle_bgm: AudioFile = field(default_factory=AudioFile)
    battle_end_me: AudioFile = field(default_factory=AudioFile)
    gameover_me: AudioFile = field(default_factory=AudioFile)
    cursor_se: AudioFile = field(default_factory=sound_effect)
    decision_se: AudioFile = field(default_factory=sound_effect)
    cancel_se: AudioFile = field(default_factory=sound_effect)
    buzzer_se: AudioFile = field(default_factory=sound_effect)
    equip_se: AudioFile = field(default_factory=sound_effect)
    shop_se: AudioFile = field(default_factory=sound_effect)
    save_se: AudioFile = field(default_factory=sound_effect)
    load_se: AudioFile = field(default_factory=sound_effect)
    battle_start_se: AudioFile = field(default_factory=sound_effect)
    escape_se: AudioFile = field(default_factory=sound_effect)
    actor_collapse_se: AudioFile = field(default_factory=sound_effect)
    enemy_collapse_se: AudioFile = field(default_factory=sound_effect)
    words: Words = field(default_factory=Words)
    test_battlers: List[TestBattler] = field(default_factory=list)
    test_troop_id: int = 1
    start_map_id: int = 1
    start_x: int = 0
    start_y: int = 0
    battleback_name: str = ""
    battler_name: str = ""
    battler_hue: int = 0
    edit_map_id: int = 1
