# brawlers/engine/rules.py
"""Hit, crit and damage math. Pure functions over Brawler state."""
import math
from dataclasses import dataclass, field
from typing import List, Optional

from .models import Brawler, EffectType, Skill, StatusEffectInstance
from ..content.balance import CAPS, COMBAT


def clamp(x, lo, hi):
    return max(lo, min(hi, x))


def _modified(value: float, effect: StatusEffectInstance, sign: int = 1) -> float:
    if effect.is_percentage:
        return value * (1 + sign * effect.value / 100)
    return value + sign * effect.value


def effective_armor(defender: Brawler) -> float:
    armor = float(defender.stats.armor)
    for effect in defender.effects:
        if effect.type is EffectType.STAT_DEBUFF and effect.stat == "armor":
            armor = _modified(armor, effect, sign=-1)
    return max(0.0, armor)


def effective_accuracy(attacker: Brawler) -> float:
    accuracy = float(attacker.stats.accuracy)
    for effect in attacker.effects:
        if effect.type is EffectType.ACCURACY_INCREASE:
            accuracy = _modified(accuracy, effect)
    return accuracy


def hit_chance(attacker: Brawler, defender: Brawler, basic: bool = False) -> float:
    weight = COMBAT["basic_accuracy_weight"] if basic else COMBAT["skill_accuracy_weight"]
    accuracy_rating = effective_accuracy(attacker) * weight + attacker.stats.luck * COMBAT["luck_hit_weight"]
    evasion = float(defender.stats.agility)
    if defender.status.dodging:
        evasion *= COMBAT["dodge_evasion_mult"]
    return clamp(COMBAT["base_hit"] + accuracy_rating - evasion, CAPS["hit_min"], CAPS["hit_max"])


def critical_chance(attacker: Brawler, special: bool = False) -> float:
    chance = COMBAT["base_crit"] + attacker.stats.luck * COMBAT["luck_crit_weight"]
    if special:
        chance += COMBAT["special_attack_crit_bonus"]
    return chance


def basic_attack_damage(attacker: Brawler) -> float:
    return attacker.stats.strength * COMBAT["basic_strength_weight"] + attacker.stats.agility * COMBAT["basic_agility_weight"]


def skill_base_damage(skill: Skill, attacker: Brawler) -> float:
    if skill.effect_value:
        return float(skill.effect_value)
    return float(attacker.stats.strength)


def heal_amount(skill: Skill, actor: Brawler) -> int:
    if skill.effect_value:
        return int(skill.effect_value)
    return int(math.floor(actor.stats.intelligence * COMBAT["heal_intelligence_weight"]))


@dataclass
class DamageResult:
    final_damage: int
    critical: bool = False
    critical_bonus: int = 0
    details: List[str] = field(default_factory=list)


def _outgoing_modifier(damage: float, effect: StatusEffectInstance, details: List[str]) -> float:
    """Attacker-side effect on outgoing damage. Every effect type is listed."""
    kind = effect.type
    if kind is EffectType.STAT_BUFF:
        if effect.stat in ("strength", "intelligence"):
            details.append(effect.name)
            return _modified(damage, effect)
        return damage
    if kind in (
        EffectType.DAMAGE_REDUCTION,
        EffectType.DAMAGE_OVER_TIME,
        EffectType.DODGE_INCREASE,
        EffectType.ACCURACY_INCREASE,
        EffectType.STAT_DEBUFF,
        EffectType.STUN,
        EffectType.HEAL_OVER_TIME,
        EffectType.ABSORB_SHIELD,
        EffectType.MANA_REGEN,
    ):
        return damage
    raise ValueError(f"unhandled effect type {kind!r}")


def _incoming_modifier(damage: float, effect: StatusEffectInstance, details: List[str]) -> float:
    """Defender-side effect on incoming damage, applied after armor."""
    kind = effect.type
    if kind is EffectType.DAMAGE_REDUCTION:
        details.append(effect.name)
        if effect.is_percentage:
            return math.floor(damage * (1 - effect.value / 100))
        return max(CAPS["damage_min"], damage - effect.value)
    if kind in (
        EffectType.DAMAGE_OVER_TIME,
        EffectType.DODGE_INCREASE,
        EffectType.ACCURACY_INCREASE,
        EffectType.STAT_BUFF,
        EffectType.STAT_DEBUFF,      # armor debuffs are folded into effective_armor
        EffectType.STUN,
        EffectType.HEAL_OVER_TIME,
        EffectType.ABSORB_SHIELD,    # drained by the caller after resolve_damage
        EffectType.MANA_REGEN,
    ):
        return damage
    raise ValueError(f"unhandled effect type {kind!r}")


def resolve_damage(base_damage: float, attacker: Brawler, defender: Brawler, critical: bool = False) -> DamageResult:
    """
    Fixed order: attacker buffs, crit, armor, damage reduction, defend.
    A landed hit always deals at least CAPS["damage_min"].
    """
    details: List[str] = []
    damage = float(base_damage)

    for effect in attacker.effects:
        damage = _outgoing_modifier(damage, effect, details)

    critical_bonus = 0
    if critical:
        critical_bonus = int(math.floor(damage * (COMBAT["crit_multiplier"] - 1)))
        damage = math.floor(damage * COMBAT["crit_multiplier"])
        details.insert(0, "CRITICAL HIT!")

    damage = max(CAPS["damage_min"], math.floor(damage - effective_armor(defender) * COMBAT["armor_factor"]))

    for effect in defender.effects:
        damage = _incoming_modifier(damage, effect, details)

    if defender.status.defending:
        damage = max(CAPS["damage_min"], math.floor(damage * COMBAT["defend_multiplier"]))
        details.append("Defended")

    final = max(CAPS["damage_min"], int(math.floor(damage)))
    return DamageResult(final_damage=final, critical=critical, critical_bonus=critical_bonus, details=details)


def initiative(brawler: Brawler, r) -> float:
    return brawler.stats.agility + r.random() * COMBAT["initiative_jitter"]


def details_text(result: Optional[DamageResult]) -> str:
    if not result or not result.details:
        return ""
    return " ".join(f"({d})" if d != "CRITICAL HIT!" else d for d in result.details)
