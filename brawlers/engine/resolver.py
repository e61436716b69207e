# brawlers/engine/resolver.py
import logging
import random
from typing import List, Optional, Tuple, Union

from .dice import percent_roll, rng_for
from .effects import absorb_damage, apply_status_effect, tick_status_effects
from .errors import BattleStateError, InvalidAction
from .models import (
    Action,
    ActionKind,
    BattleOutcome,
    BattleSession,
    Brawler,
    CombatStatus,
    LogEntry,
    Skill,
    SkillEffect,
    SkillTarget,
    TurnResult,
    VisualHint,
)
from .narrator import Narrator
from .rules import (
    basic_attack_damage,
    critical_chance,
    details_text,
    heal_amount,
    hit_chance,
    initiative,
    resolve_damage,
    skill_base_damage,
)
from .selector import choose_action

logger = logging.getLogger(__name__)

_STATUS_SKILLS = (
    SkillEffect.BUFF_SELF,
    SkillEffect.SHIELD_SELF,
    SkillEffect.BUFF_TARGET,
    SkillEffect.DEBUFF_TARGET,
    SkillEffect.UTILITY,
)


def prepare_for_battle(brawler: Brawler) -> None:
    """Full health/mana, no effects, no flags, skills ready."""
    brawler.current_health = brawler.stats.max_health
    brawler.current_mana = brawler.stats.max_mana
    brawler.effects = []
    brawler.status = CombatStatus()
    for skill in brawler.skills:
        skill.current_cooldown = 0


def start_battle(
    player: Brawler,
    opponent: Brawler,
    rng: Optional[random.Random] = None,
    narrator: Optional[Narrator] = None,
    max_turns: Optional[int] = None,
) -> BattleSession:
    if player.id == opponent.id:
        raise BattleStateError("a brawler cannot fight itself")
    rng = rng or rng_for()
    narrator = narrator or Narrator()
    prepare_for_battle(player)
    prepare_for_battle(opponent)

    # higher initiative opens; ties go to the opponent
    first = player if initiative(player, rng) > initiative(opponent, rng) else opponent
    session = BattleSession(player=player, opponent=opponent, attacker_id=first.id, rng=rng, narrator=narrator)
    if max_turns is not None:
        session.max_turns = int(max_turns)
    session.log.append(LogEntry(f"{player.name} vs {opponent.name}. FIGHT!", "system"))
    session.log.append(LogEntry(narrator.describe("initiative", attacker=first.name), "system"))
    logger.info("battle %s started: %s vs %s, %s opens", session.id, player.id, opponent.id, first.id)
    return session


def cancel_battle(session: BattleSession) -> None:
    session.cancelled = True
    session.auto_battle = False
    session.log.append(LogEntry("Battle cancelled.", "system"))
    logger.info("battle %s cancelled at turn %s", session.id, session.turn)


def action_from_id(brawler: Brawler, action_id: str) -> Action:
    """Map a client action id ("attack", "defend", "dodge" or a skill id) to an Action."""
    action_id = (action_id or "").strip()
    if action_id in ("", ActionKind.ATTACK.value):
        return Action.attack()
    if action_id == ActionKind.DEFEND.value:
        return Action(ActionKind.DEFEND)
    if action_id == ActionKind.DODGE.value:
        return Action(ActionKind.DODGE)
    skill = brawler.skill(action_id)
    if skill is None:
        raise InvalidAction(f"Unknown action '{action_id}'.")
    return Action.use(skill)


def _validate_manual(session: BattleSession, actor: Brawler, action: Action) -> None:
    if actor is not session.player:
        raise InvalidAction("It is not your turn.")
    if action.kind is not ActionKind.SKILL:
        return
    skill = action.skill
    if skill is None or actor.skill(skill.id) is not skill:
        raise InvalidAction("That skill does not belong to you.")
    # cooldowns tick once before the action resolves
    if skill.current_cooldown > 1:
        raise InvalidAction(f"{skill.name} is on cooldown ({skill.current_cooldown} turns).")
    if actor.current_mana < skill.mana_cost:
        raise InvalidAction(f"Not enough mana for {skill.name}.")


def apply_damage(defender: Brawler, damage: int) -> Tuple[int, int, Optional[str]]:
    """Shield first, then health. Returns (health_lost, absorbed, shield_name)."""
    remaining, absorbed, shield_name = absorb_damage(defender, damage)
    lost = -defender.change_health(-remaining) if remaining > 0 else 0
    return lost, absorbed, shield_name


def _strike(
    session: BattleSession,
    actor: Brawler,
    defender: Brawler,
    base_damage: float,
    entries: List[LogEntry],
    hints: List[VisualHint],
    skill: Optional[Skill] = None,
) -> Optional[int]:
    """Hit roll, dodge, crit, damage. Returns health lost, or None on miss/dodge."""
    narrator = session.narrator
    prefix = "skill" if skill else "attack"
    kind = "skill" if skill else "combat"
    ctx = {"attacker": actor.name, "defender": defender.name, "skill": skill.name if skill else ""}

    if not percent_roll(hit_chance(actor, defender, basic=skill is None), session.rng):
        entries.append(LogEntry(narrator.describe(f"{prefix}_miss", **ctx), kind))
        hints.append(VisualHint("text_indicator", "MISS!", defender.id))
        return None

    if defender.status.dodging:
        defender.status.dodging = False
        entries.append(LogEntry(narrator.describe(f"{prefix}_dodged", **ctx), kind))
        hints.append(VisualHint("text_indicator", "DODGED!", defender.id))
        return None

    special = skill is not None and skill.effect_type is SkillEffect.SPECIAL_ATTACK
    critical = percent_roll(critical_chance(actor, special), session.rng)
    result = resolve_damage(base_damage, actor, defender, critical)
    lost, absorbed, shield_name = apply_damage(defender, result.final_damage)

    text = narrator.describe(f"{prefix}_crit" if critical else f"{prefix}_hit", damage=lost, **ctx)
    if absorbed:
        text = f"{text} {defender.name}'s {shield_name} absorbs {absorbed} damage!"
    details = details_text(result)
    if details:
        text = f"{text} {details}"
    entries.append(LogEntry(text, kind))
    hints.append(VisualHint("critical_indicator" if critical else "damage", lost, defender.id, critical))
    return lost


def _use_skill(
    session: BattleSession,
    actor: Brawler,
    defender: Brawler,
    skill: Skill,
    entries: List[LogEntry],
    hints: List[VisualHint],
) -> None:
    narrator = session.narrator
    actor.change_mana(-skill.mana_cost)
    skill.current_cooldown = skill.cooldown
    effect = skill.effect_type

    if effect in (SkillEffect.DAMAGE, SkillEffect.SPECIAL_ATTACK):
        landed = _strike(session, actor, defender, skill_base_damage(skill, actor), entries, hints, skill)
        if landed is not None and skill.status_key and not defender.is_defeated:
            if skill.status_chance >= 1 or session.rng.random() < skill.status_chance:
                apply_status_effect(
                    defender, skill.status_key, entries, session.turn, skill.id,
                    skill.status_duration, skill.status_value,
                )
    elif effect is SkillEffect.HEAL:
        gained = actor.change_health(heal_amount(skill, actor))
        entries.append(LogEntry(narrator.describe("skill_heal", attacker=actor.name, skill=skill.name, amount=gained), "skill"))
        hints.append(VisualHint("heal", gained, actor.id))
    elif effect in _STATUS_SKILLS:
        target = defender if skill.target is SkillTarget.ENEMY else actor
        entries.append(LogEntry(narrator.describe("skill_used", attacker=actor.name, skill=skill.name), "skill"))
        if skill.status_key:
            shield_value = skill.effect_value if effect is SkillEffect.SHIELD_SELF else None
            apply_status_effect(
                target, skill.status_key, entries, session.turn, skill.id,
                skill.status_duration, skill.status_value, shield_value,
            )
        else:
            entries.append(LogEntry(f"A strange energy surrounds {target.name}.", "skill"))
        hints.append(VisualHint("status", skill.name, target.id))
    else:
        raise ValueError(f"unhandled skill effect {effect!r}")


def _resolve_action(
    session: BattleSession,
    actor: Brawler,
    defender: Brawler,
    action: Action,
    entries: List[LogEntry],
    hints: List[VisualHint],
) -> None:
    kind = action.kind
    if kind is ActionKind.ATTACK:
        _strike(session, actor, defender, basic_attack_damage(actor), entries, hints)
    elif kind is ActionKind.SKILL:
        _use_skill(session, actor, defender, action.skill, entries, hints)
    elif kind is ActionKind.DEFEND:
        actor.status.defending = True
        entries.append(LogEntry(session.narrator.describe("defend", attacker=actor.name), "combat"))
        hints.append(VisualHint("text_indicator", "DEFEND", actor.id))
    elif kind is ActionKind.DODGE:
        actor.status.dodging = True
        entries.append(LogEntry(session.narrator.describe("dodge", attacker=actor.name), "combat"))
        hints.append(VisualHint("text_indicator", "DODGE", actor.id))
    else:
        raise ValueError(f"unhandled action {kind!r}")


def _finish(session: BattleSession, winner: Brawler, loser: Brawler, reason: str, entries: List[LogEntry]) -> BattleOutcome:
    if reason == "turn_limit":
        entries.append(LogEntry(f"Turn limit reached. {winner.name} wins on remaining health.", "system"))
    entries.append(LogEntry(session.narrator.describe("victory", winner=winner.name, loser=loser.name), "reward"))
    outcome = BattleOutcome(
        winner_id=winner.id,
        loser_id=loser.id,
        final_turn=session.turn,
        reason=reason,
        entries=list(entries),
    )
    session.outcome = outcome
    session.auto_battle = False
    logger.info("battle %s over at turn %s: %s beat %s (%s)", session.id, session.turn, winner.id, loser.id, reason)
    return outcome


def _check_knockout(session: BattleSession, actor: Brawler, defender: Brawler, entries: List[LogEntry]) -> Optional[BattleOutcome]:
    if defender.is_defeated:
        return _finish(session, actor, defender, "knockout", entries)
    if actor.is_defeated:
        return _finish(session, defender, actor, "knockout", entries)
    return None


def _check_turn_limit(session: BattleSession, entries: List[LogEntry]) -> Optional[BattleOutcome]:
    if session.turn < session.max_turns:
        return None
    player, opponent = session.player, session.opponent
    if player.health_fraction > opponent.health_fraction:
        return _finish(session, player, opponent, "turn_limit", entries)
    return _finish(session, opponent, player, "turn_limit", entries)


def advance_turn(session: BattleSession, action: Optional[Action] = None) -> Union[TurnResult, BattleOutcome]:
    """
    Resolve exactly one turn for the active attacker.

    `action` is an optional manual choice for the player's own turn; without it the
    selector picks. Returns a TurnResult, or the BattleOutcome once the battle is over.
    A finished battle returns its stored outcome without processing anything.
    """
    if session.cancelled:
        raise BattleStateError(f"battle {session.id} was cancelled")
    if session.outcome is not None:
        return session.outcome

    actor = session.attacker
    defender = session.defender
    if action is not None:
        _validate_manual(session, actor, action)

    entries: List[LogEntry] = [LogEntry(f"Turn {session.turn + 1}: {actor.name}", "system")]
    hints: List[VisualHint] = []

    can_act = tick_status_effects(actor, entries, hints)
    for skill in actor.skills:
        if skill.current_cooldown > 0:
            skill.current_cooldown -= 1

    label = None
    stunned = False
    if actor.is_defeated:
        entries.append(LogEntry(f"{actor.name} collapses before acting.", "status"))
    elif not can_act or actor.status.stunned:
        stunned = True
    else:
        actor.status.defending = False
        chosen = action or choose_action(actor, defender, session.rng)
        _resolve_action(session, actor, defender, chosen, entries, hints)
        label = chosen.label

    logger.debug("battle %s turn %s: %s -> %s", session.id, session.turn, actor.id, label)

    outcome = _check_knockout(session, actor, defender, entries)
    if outcome is None:
        session.attacker_id = defender.id
        session.turn += 1
        outcome = _check_turn_limit(session, entries)

    session.log.extend(entries)
    if outcome is not None:
        return outcome
    return TurnResult(
        turn=session.turn - 1,
        actor_id=actor.id,
        action=label,
        stunned=stunned,
        entries=entries,
        hints=hints,
    )


def run_to_completion(session: BattleSession) -> BattleOutcome:
    """Advance until an outcome exists. The turn limit bounds the loop."""
    result = advance_turn(session)
    while not isinstance(result, BattleOutcome):
        result = advance_turn(session)
    return result
