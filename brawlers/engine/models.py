# brawlers/engine/models.py
from __future__ import annotations

import random
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

from .errors import BattleStateError
from ..content.balance import DEFAULTS


class EffectType(str, Enum):
    DAMAGE_REDUCTION = "damage_reduction"
    DAMAGE_OVER_TIME = "damage_over_time"
    DODGE_INCREASE = "dodge_increase"
    ACCURACY_INCREASE = "accuracy_increase"
    STAT_BUFF = "stat_buff"
    STAT_DEBUFF = "stat_debuff"
    STUN = "stun"
    HEAL_OVER_TIME = "heal_over_time"
    ABSORB_SHIELD = "absorb_shield"
    MANA_REGEN = "mana_regen"


class SkillEffect(str, Enum):
    DAMAGE = "damage"
    HEAL = "heal"
    BUFF_SELF = "buff_self"
    BUFF_TARGET = "buff_target"
    DEBUFF_TARGET = "debuff_target"
    SPECIAL_ATTACK = "special_attack"
    SHIELD_SELF = "shield_self"
    UTILITY = "utility"


class SkillTarget(str, Enum):
    SELF = "self"
    ENEMY = "enemy"
    NONE = "none"


OFFENSIVE_EFFECTS = (SkillEffect.DAMAGE, SkillEffect.SPECIAL_ATTACK, SkillEffect.DEBUFF_TARGET)
SELF_BUFF_EFFECTS = (SkillEffect.BUFF_SELF, SkillEffect.SHIELD_SELF)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Stats:
    strength: int
    health: int
    max_health: int
    armor: int
    agility: int
    intelligence: int
    mana: int
    max_mana: int
    luck: int
    accuracy: int


@dataclass
class CombatStatus:
    defending: bool = False
    dodging: bool = False
    stunned: bool = False


@dataclass
class Skill:
    id: str
    name: str
    description: str
    mana_cost: int
    cooldown: int
    effect_type: SkillEffect
    target: SkillTarget
    effect_value: Optional[int] = None
    status_key: Optional[str] = None
    status_duration: Optional[int] = None
    status_value: Optional[float] = None
    status_chance: float = 1.0
    current_cooldown: int = 0

    def is_usable_by(self, brawler: "Brawler") -> bool:
        return self.current_cooldown == 0 and brawler.current_mana >= self.mana_cost


@dataclass(frozen=True)
class StatusEffectDefinition:
    key: str
    name: str
    description: str
    type: EffectType
    value: float
    is_percentage: bool
    duration: int
    stat: Optional[str] = None
    icon: str = ""


@dataclass
class ShieldDetails:
    current_value: int
    max_value: int


@dataclass
class StatusEffectInstance:
    id: str
    key: str
    name: str
    type: EffectType
    value: float
    is_percentage: bool
    duration: int                           # turns remaining
    applied_turn: int = 0
    source_skill_id: Optional[str] = None
    stat: Optional[str] = None
    shield: Optional[ShieldDetails] = None  # absorb_shield only


@dataclass
class Brawler:
    id: str
    name: str
    class_id: str
    stats: Stats
    current_health: int
    current_mana: int
    skills: List[Skill] = field(default_factory=list)
    effects: List[StatusEffectInstance] = field(default_factory=list)
    status: CombatStatus = field(default_factory=CombatStatus)
    level: int = 1
    xp: int = 0
    xp_to_next_level: int = 100
    arena_points: int = DEFAULTS["arena_points"]
    arena_tier: str = "Rusted Circuit"
    lore: str = ""

    # All health/mana writes go through these two so the bounds always hold.
    def change_health(self, delta: int) -> int:
        before = self.current_health
        self.current_health = max(0, min(self.stats.max_health, before + int(delta)))
        return self.current_health - before

    def change_mana(self, delta: int) -> int:
        before = self.current_mana
        self.current_mana = max(0, min(self.stats.max_mana, before + int(delta)))
        return self.current_mana - before

    @property
    def is_defeated(self) -> bool:
        return self.current_health == 0

    @property
    def health_fraction(self) -> float:
        if self.stats.max_health <= 0:
            return 0.0
        return self.current_health / self.stats.max_health

    def skill(self, skill_id: str) -> Optional[Skill]:
        for skill in self.skills:
            if skill.id == skill_id:
                return skill
        return None

    def usable_skills(self) -> List[Skill]:
        return [skill for skill in self.skills if skill.is_usable_by(self)]


class ActionKind(str, Enum):
    ATTACK = "attack"
    SKILL = "skill"
    DEFEND = "defend"
    DODGE = "dodge"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    skill: Optional[Skill] = None

    @classmethod
    def attack(cls) -> "Action":
        return cls(ActionKind.ATTACK)

    @classmethod
    def use(cls, skill: Skill) -> "Action":
        return cls(ActionKind.SKILL, skill)

    @property
    def label(self) -> str:
        if self.kind is ActionKind.SKILL and self.skill is not None:
            return self.skill.id
        return self.kind.value


@dataclass
class LogEntry:
    text: str
    kind: str = "combat"                    # combat | skill | status | system | reward | error
    id: str = field(default_factory=new_id)
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "kind": self.kind, "timestamp": self.timestamp}


@dataclass
class VisualHint:
    type: str                               # damage | heal | status | text_indicator | critical_indicator
    value: Any
    target_id: str
    critical: bool = False


@dataclass
class BattleOutcome:
    winner_id: str
    loser_id: str
    final_turn: int
    reason: str = "knockout"                # knockout | turn_limit
    entries: List[LogEntry] = field(default_factory=list)


@dataclass
class TurnResult:
    turn: int
    actor_id: str
    action: Optional[str]                   # None when stunned or knocked out by a tick
    stunned: bool = False
    entries: List[LogEntry] = field(default_factory=list)
    hints: List[VisualHint] = field(default_factory=list)


@dataclass
class BattleSession:
    player: Brawler
    opponent: Brawler
    attacker_id: str
    rng: random.Random
    narrator: Any
    id: str = field(default_factory=new_id)
    turn: int = 0
    auto_battle: bool = True
    max_turns: int = DEFAULTS["max_turns"]
    log: Deque[LogEntry] = field(default_factory=lambda: deque(maxlen=DEFAULTS["log_cap"]))
    outcome: Optional[BattleOutcome] = None
    cancelled: bool = False

    def combatant(self, brawler_id: str) -> Brawler:
        if brawler_id == self.player.id:
            return self.player
        if brawler_id == self.opponent.id:
            return self.opponent
        raise BattleStateError(f"combatant {brawler_id!r} is not part of battle {self.id}")

    def other(self, brawler_id: str) -> Brawler:
        if brawler_id == self.player.id:
            return self.opponent
        if brawler_id == self.opponent.id:
            return self.player
        raise BattleStateError(f"combatant {brawler_id!r} is not part of battle {self.id}")

    @property
    def attacker(self) -> Brawler:
        return self.combatant(self.attacker_id)

    @property
    def defender(self) -> Brawler:
        return self.other(self.attacker_id)

    @property
    def is_over(self) -> bool:
        return self.outcome is not None


@dataclass
class BattleSummary:
    opponent_name: str
    opponent_class: str
    result: str                             # win | loss
    xp_gained: int
    tokens_gained: int
    arena_points_change: int
    id: str = field(default_factory=new_id)
    timestamp: float = field(default_factory=time.time)


@dataclass
class PlayerProfile:
    brawler: Brawler
    tokens: int = DEFAULTS["brawl_tokens"]
    history: Deque[BattleSummary] = field(default_factory=lambda: deque(maxlen=DEFAULTS["history_cap"]))
    battle: Optional[BattleSession] = None
