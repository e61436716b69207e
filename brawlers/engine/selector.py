# brawlers/engine/selector.py
"""
Auto-battle action policy. Ordered rules, first match wins:

  1. heal when below the heal threshold
  2. finish a low opponent with an offensive skill
  3. maybe raise a self buff/shield that is not already up
  4. maybe use an offensive skill
  5. maybe use any usable skill
  6. basic attack
"""
import random
from typing import List, Optional

from .models import (
    OFFENSIVE_EFFECTS,
    SELF_BUFF_EFFECTS,
    Action,
    Brawler,
    Skill,
    SkillEffect,
    SkillTarget,
)
from .effects import has_effect
from ..content.balance import AI

HEAL_THRESHOLD = AI["heal_threshold"]
FINISHER_THRESHOLD = AI["finisher_threshold"]
BUFF_CHANCE = AI["buff_chance"]
OFFENSE_CHANCE = AI["offense_chance"]
RANDOM_SKILL_CHANCE = AI["random_skill_chance"]


def _first(skills: List[Skill], predicate) -> Optional[Skill]:
    for skill in skills:
        if predicate(skill):
            return skill
    return None


def _is_self_heal(skill: Skill) -> bool:
    return skill.effect_type is SkillEffect.HEAL and skill.target is SkillTarget.SELF


def _is_offensive(skill: Skill) -> bool:
    return skill.effect_type in OFFENSIVE_EFFECTS and skill.target is SkillTarget.ENEMY


def _is_self_buff(skill: Skill) -> bool:
    return skill.effect_type in SELF_BUFF_EFFECTS and skill.target is SkillTarget.SELF


def choose_action(actor: Brawler, opponent: Brawler, rng: random.Random) -> Action:
    usable = actor.usable_skills()
    if not usable:
        return Action.attack()

    heal = _first(usable, _is_self_heal)
    if heal and actor.current_health < actor.stats.max_health * HEAL_THRESHOLD:
        return Action.use(heal)

    offensive = _first(usable, _is_offensive)
    if offensive and opponent.current_health < opponent.stats.max_health * FINISHER_THRESHOLD:
        return Action.use(offensive)

    buff = _first(usable, _is_self_buff)
    # no roll when the buff is already up
    if buff and not (buff.status_key and has_effect(actor, buff.status_key)):
        if rng.random() < BUFF_CHANCE:
            return Action.use(buff)

    if offensive and rng.random() < OFFENSE_CHANCE:
        return Action.use(offensive)

    if rng.random() < RANDOM_SKILL_CHANCE:
        return Action.use(rng.choice(usable))

    return Action.attack()
