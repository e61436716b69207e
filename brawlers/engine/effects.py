# brawlers/engine/effects.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .errors import UnknownStatusEffect
from .models import (
    Brawler,
    EffectType,
    LogEntry,
    ShieldDetails,
    StatusEffectDefinition,
    StatusEffectInstance,
    VisualHint,
    new_id,
)
from ..content.status_effects import STATUS_EFFECTS

logger = logging.getLogger(__name__)


def _build_catalog() -> Dict[str, StatusEffectDefinition]:
    catalog: Dict[str, StatusEffectDefinition] = {}
    for key, data in STATUS_EFFECTS.items():
        catalog[key] = StatusEffectDefinition(
            key=key,
            name=data["name"],
            description=data.get("description", ""),
            type=EffectType(data["type"]),
            value=data["value"],
            is_percentage=bool(data.get("is_percentage", False)),
            duration=int(data["duration"]),
            stat=data.get("stat"),
            icon=data.get("icon", ""),
        )
    return catalog


CATALOG: Dict[str, StatusEffectDefinition] = _build_catalog()


def lookup(key: str) -> StatusEffectDefinition:
    try:
        return CATALOG[key]
    except KeyError:
        raise UnknownStatusEffect(key) from None


def build_instance(
    key: str,
    applied_turn: int = 0,
    source_skill_id: Optional[str] = None,
    duration: Optional[int] = None,
    value: Optional[float] = None,
    shield_value: Optional[int] = None,
) -> StatusEffectInstance:
    definition = lookup(key)
    magnitude = definition.value if value is None else value
    shield = None
    if definition.type is EffectType.ABSORB_SHIELD:
        pool = int(shield_value if shield_value is not None else magnitude)
        shield = ShieldDetails(current_value=pool, max_value=pool)
    return StatusEffectInstance(
        id=new_id(),
        key=key,
        name=definition.name,
        type=definition.type,
        value=magnitude,
        is_percentage=definition.is_percentage,
        duration=definition.duration if duration is None else int(duration),
        applied_turn=applied_turn,
        source_skill_id=source_skill_id,
        stat=definition.stat,
        shield=shield,
    )


def get_effect(target: Brawler, key: str) -> Optional[StatusEffectInstance]:
    for effect in target.effects:
        if effect.key == key:
            return effect
    return None


def has_effect(target: Brawler, key: str) -> bool:
    return get_effect(target, key) is not None


def remove_effect(target: Brawler, effect_id: str) -> None:
    target.effects = [effect for effect in target.effects if effect.id != effect_id]


def apply_status_effect(
    target: Brawler,
    key: str,
    log: Optional[List[LogEntry]] = None,
    applied_turn: int = 0,
    source_skill_id: Optional[str] = None,
    duration: Optional[int] = None,
    value: Optional[float] = None,
    shield_value: Optional[int] = None,
) -> StatusEffectInstance:
    """
    Attach a status effect to `target`.

    Same key already active: non-shield effects are refreshed in place (identity kept,
    duration/value replaced); shields pool their absorption and keep the longer duration.
    """
    fresh = build_instance(key, applied_turn, source_skill_id, duration, value, shield_value)
    existing = get_effect(target, key)

    if existing is not None and fresh.type is EffectType.ABSORB_SHIELD:
        current = existing.shield.current_value if existing.shield else 0
        pooled = current + fresh.shield.current_value
        max_value = max(existing.shield.max_value if existing.shield else 0, pooled)
        existing.shield = ShieldDetails(current_value=pooled, max_value=max_value)
        existing.duration = max(existing.duration, fresh.duration)
        result = existing
        text = f"{target.name}'s {fresh.name} was reinforced."
    elif existing is not None:
        existing.value = fresh.value
        existing.duration = fresh.duration
        existing.applied_turn = fresh.applied_turn
        existing.source_skill_id = fresh.source_skill_id
        result = existing
        text = f"{target.name}'s {fresh.name} was refreshed."
    else:
        target.effects.append(fresh)
        result = fresh
        text = f"{target.name} is affected by {fresh.name}!"

    if fresh.type is EffectType.STUN:
        target.status.stunned = True
    elif fresh.type is EffectType.DODGE_INCREASE:
        target.status.dodging = True

    logger.debug("status %s on %s (duration=%s)", key, target.id, result.duration)
    if log is not None:
        log.append(LogEntry(text, "status"))
    return result


def absorb_damage(defender: Brawler, damage: int) -> Tuple[int, int, Optional[str]]:
    """
    Drain the first active shield before health.
    Returns (remaining_damage, absorbed, shield_name). A drained shield is removed.
    """
    for effect in defender.effects:
        if effect.type is not EffectType.ABSORB_SHIELD or not effect.shield:
            continue
        if effect.shield.current_value <= 0:
            continue
        absorbed = min(effect.shield.current_value, damage)
        effect.shield.current_value -= absorbed
        if effect.shield.current_value <= 0:
            remove_effect(defender, effect.id)
        return damage - absorbed, absorbed, effect.name
    return damage, 0, None


def _tick_one(
    actor: Brawler,
    effect: StatusEffectInstance,
    log: List[LogEntry],
    hints: List[VisualHint],
) -> bool:
    """Per-turn behavior of one effect. Returns False if it prevents acting."""
    kind = effect.type
    amount = int(effect.value)
    if kind is EffectType.DAMAGE_OVER_TIME:
        lost = -actor.change_health(-amount)
        log.append(LogEntry(f"{actor.name} takes {lost} damage from {effect.name}.", "status"))
        hints.append(VisualHint("damage", lost, actor.id))
    elif kind is EffectType.HEAL_OVER_TIME:
        gained = actor.change_health(amount)
        log.append(LogEntry(f"{actor.name} recovers {gained} HP from {effect.name}.", "status"))
        hints.append(VisualHint("heal", gained, actor.id))
    elif kind is EffectType.MANA_REGEN:
        gained = actor.change_mana(amount)
        log.append(LogEntry(f"{actor.name} recovers {gained} MP from {effect.name}.", "status"))
    elif kind is EffectType.STUN:
        log.append(LogEntry(f"{actor.name} is stunned and cannot act!", "status"))
        hints.append(VisualHint("text_indicator", "STUNNED", actor.id))
        return False
    elif kind in (
        EffectType.DAMAGE_REDUCTION,
        EffectType.DODGE_INCREASE,
        EffectType.ACCURACY_INCREASE,
        EffectType.STAT_BUFF,
        EffectType.STAT_DEBUFF,
        EffectType.ABSORB_SHIELD,
    ):
        pass
    else:
        raise ValueError(f"unhandled effect type {kind!r}")
    return True


def tick_status_effects(
    actor: Brawler,
    log: Optional[List[LogEntry]] = None,
    hints: Optional[List[VisualHint]] = None,
) -> bool:
    """
    Start-of-turn pass over the acting brawler's effects, in list order.
    Applies per-turn behavior, decrements durations, drops expired effects.
    Returns whether the brawler may act this turn.
    """
    log = log if log is not None else []
    hints = hints if hints is not None else []
    can_act = True
    for effect in list(actor.effects):
        if not _tick_one(actor, effect, log, hints):
            can_act = False
        effect.duration -= 1
        if effect.duration <= 0:
            remove_effect(actor, effect.id)
            log.append(LogEntry(f"{actor.name}'s {effect.name} wears off.", "status"))

    if actor.status.stunned and not any(
        e.type is EffectType.STUN and e.duration > 0 for e in actor.effects
    ):
        actor.status.stunned = False
    return can_act
