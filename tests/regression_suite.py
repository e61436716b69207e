"""Regression scenarios for the brawl engine.

Each scenario builds brawlers directly, drives the engine, and asserts on the
resulting state. Random sources are seeded or scripted so every run is identical.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional, Tuple

from brawlers.engine import effects, progression, resolver, roster, selector
from brawlers.engine.errors import BattleStateError, InvalidAction, UnknownClass, UnknownStatusEffect
from brawlers.engine.models import (
    Action,
    ActionKind,
    BattleOutcome,
    Brawler,
    PlayerProfile,
    Skill,
    SkillEffect,
    SkillTarget,
    Stats,
    TurnResult,
)
from brawlers.engine.narrator import Narrator
from brawlers.engine.rules import critical_chance, hit_chance, resolve_damage
from brawlers.content.classes import CLASSES


class ScriptedRandom(random.Random):
    """random() returns queued values first, then 0.5."""

    def __init__(self, values: Iterable[float] = ()):
        super().__init__(0)
        self.values: List[float] = list(values)

    def random(self) -> float:
        if self.values:
            return self.values.pop(0)
        return 0.5


def make_brawler(name: str, class_id: str = "crimson_brute", health: int = 100, mana: int = 50, **overrides) -> Brawler:
    base = {"strength": 10, "armor": 0, "agility": 5, "intelligence": 5, "luck": 5, "accuracy": 5}
    base.update(overrides)
    stats = Stats(health=health, max_health=health, mana=mana, max_mana=mana, **base)
    return Brawler(
        id=name.lower(),
        name=name,
        class_id=class_id,
        stats=stats,
        current_health=health,
        current_mana=mana,
        skills=roster.class_skills(class_id),
    )


def make_session(player=None, opponent=None, rng=None, player_first=True, **kwargs):
    player = player or make_brawler("Red", health=500)
    opponent = opponent or make_brawler("Blue", health=500)
    session = resolver.start_battle(player, opponent, rng=random.Random(1), **kwargs)
    if rng is not None:
        session.rng = rng
    session.attacker_id = player.id if player_first else opponent.id
    return session


def take_turn(session, action: Optional[Action] = None) -> TurnResult:
    prior_turn, prior_actor = session.turn, session.attacker_id
    result = resolver.advance_turn(session, action)
    assert isinstance(result, TurnResult), f"expected a turn, got {result!r}"
    assert session.turn == prior_turn + 1, "turn counter must advance by exactly one"
    assert session.attacker_id != prior_actor, "attacker must alternate"
    _assert_bounds(session)
    return result


def _assert_bounds(session) -> None:
    for brawler in (session.player, session.opponent):
        assert 0 <= brawler.current_health <= brawler.stats.max_health, f"health out of range for {brawler.id}"
        assert 0 <= brawler.current_mana <= brawler.stats.max_mana, f"mana out of range for {brawler.id}"
        for skill in brawler.skills:
            assert skill.current_cooldown >= 0, f"negative cooldown on {skill.id}"
        for fx in brawler.effects:
            assert fx.duration >= 0, f"negative duration on {fx.key}"


def scenario_basic_hit_reduces_health() -> bool:
    attacker = make_brawler("Red")
    defender = make_brawler("Blue", health=50, armor=0)
    result = resolve_damage(12, attacker, defender, critical=False)
    lost, absorbed, _ = resolver.apply_damage(defender, result.final_damage)
    assert result.final_damage == 12 and lost == 12 and absorbed == 0
    assert defender.current_health == 38
    return True


def scenario_damage_over_time_full_span() -> bool:
    actor = make_brawler("Red", health=50)
    effects.apply_status_effect(actor, "BURNING", duration=3, value=5)
    for _ in range(3):
        assert effects.tick_status_effects(actor) is True
    assert actor.current_health == 35, f"expected 15 total damage, health is {actor.current_health}"
    assert not effects.has_effect(actor, "BURNING"), "Burning should be gone after three ticks"
    effects.tick_status_effects(actor)
    assert actor.current_health == 35
    return True


def scenario_shield_absorbs_before_health() -> bool:
    defender = make_brawler("Blue", health=50)
    effects.apply_status_effect(defender, "MANA_SHIELD")
    assert effects.get_effect(defender, "MANA_SHIELD").shield.current_value == 25
    lost, absorbed, shield_name = resolver.apply_damage(defender, 40)
    assert absorbed == 25 and lost == 15 and shield_name == "Mana Shield"
    assert defender.current_health == 35
    assert not effects.has_effect(defender, "MANA_SHIELD"), "drained shield should be removed"
    return True


def scenario_battle_runs_to_single_outcome() -> bool:
    player = roster.create_brawler("Red", "crimson_brute", random.Random(3))
    opponent = roster.create_brawler("Blue", "void_channeler", random.Random(4))
    session = resolver.start_battle(player, opponent, rng=random.Random(7))

    result = resolver.advance_turn(session)
    steps = 1
    while not isinstance(result, BattleOutcome):
        _assert_bounds(session)
        result = resolver.advance_turn(session)
        steps += 1
        assert steps <= session.max_turns + 1, "battle never ended"

    assert {result.winner_id, result.loser_id} == {player.id, opponent.id}
    assert result.winner_id != result.loser_id
    if result.reason == "knockout":
        assert session.combatant(result.loser_id).current_health == 0
        assert session.combatant(result.winner_id).current_health > 0
    assert session.auto_battle is False

    turn, log_length = session.turn, len(session.log)
    again = resolver.advance_turn(session)
    assert again is result, "finished battle should return its stored outcome"
    assert session.turn == turn and len(session.log) == log_length, "no turn after the outcome"
    return True


def scenario_minimum_damage_is_one() -> bool:
    attacker = make_brawler("Red", strength=1)
    defender = make_brawler("Blue", armor=100)
    effects.apply_status_effect(defender, "IRON_SKIN")
    defender.status.defending = True
    assert resolve_damage(1, attacker, defender).final_damage == 1
    assert resolve_damage(0, attacker, defender).final_damage == 1
    return True


def scenario_damage_modifier_order() -> bool:
    attacker = make_brawler("Red")
    defender = make_brawler("Blue", armor=4)
    effects.apply_status_effect(attacker, "STRENGTH_BUFF")       # +5 flat
    effects.apply_status_effect(defender, "IRON_SKIN")           # -30%
    defender.status.defending = True
    # (20 + 5) * 1.75 = 43 -> 43 - 2 = 41 -> floor(41 * 0.7) = 28 -> 14
    result = resolve_damage(20, attacker, defender, critical=True)
    assert result.final_damage == 14, result
    assert result.critical_bonus == 18
    assert "Defended" in result.details

    effects.apply_status_effect(defender, "ARMOR_DEBUFF")        # armor 4 -> 3.4
    defender.status.defending = False
    effects.remove_effect(defender, effects.get_effect(defender, "IRON_SKIN").id)
    # 25 - 1.7 = 23.3 -> 23
    assert resolve_damage(20, attacker, defender).final_damage == 23
    return True


def scenario_refresh_keeps_single_instance() -> bool:
    target = make_brawler("Red")
    first = effects.apply_status_effect(target, "STRENGTH_BUFF")
    second = effects.apply_status_effect(target, "STRENGTH_BUFF", duration=5, value=8)
    matching = [fx for fx in target.effects if fx.key == "STRENGTH_BUFF"]
    assert len(matching) == 1, "refresh must not stack a second instance"
    assert second.id == first.id, "refresh keeps the original identity"
    assert matching[0].duration == 5 and matching[0].value == 8
    return True


def scenario_shield_stacking() -> bool:
    target = make_brawler("Blue")
    effects.apply_status_effect(target, "MANA_SHIELD")
    effects.apply_status_effect(target, "MANA_SHIELD", duration=1, shield_value=10)
    shields = [fx for fx in target.effects if fx.key == "MANA_SHIELD"]
    assert len(shields) == 1
    assert shields[0].shield.current_value == 35
    assert shields[0].shield.max_value == 35
    assert shields[0].duration == 3
    return True


def scenario_stun_skips_action() -> bool:
    session = make_session()
    player, opponent = session.player, session.opponent
    effects.apply_status_effect(player, "STUNNED")
    assert player.status.stunned
    mana_before, enemy_hp_before = player.current_mana, opponent.current_health

    result = take_turn(session, Action.attack())
    assert result.stunned and result.action is None
    assert opponent.current_health == enemy_hp_before and player.current_mana == mana_before
    assert not player.status.stunned, "stun flag clears once no stun remains"
    assert not effects.has_effect(player, "STUNNED")
    assert session.attacker_id == opponent.id
    return True


def scenario_stun_flag_survives_longer_stun() -> bool:
    target = make_brawler("Red")
    effects.apply_status_effect(target, "STUNNED", duration=2)
    assert effects.tick_status_effects(target) is False
    assert target.status.stunned, "one turn of stun left"
    assert effects.tick_status_effects(target) is False
    assert not target.status.stunned
    assert effects.tick_status_effects(target) is True
    return True


def scenario_cooldown_ticks_once_per_cycle() -> bool:
    session = make_session()
    player = session.player
    punch = player.skill("power_punch")

    take_turn(session, Action.use(punch))
    assert punch.current_cooldown == 2
    assert player.current_mana == 40
    take_turn(session)                       # opponent's turn leaves player cooldowns alone
    assert punch.current_cooldown == 2
    take_turn(session, Action.attack())
    assert punch.current_cooldown == 1
    take_turn(session)
    take_turn(session, Action.attack())
    assert punch.current_cooldown == 0
    take_turn(session)
    take_turn(session, Action.attack())
    assert punch.current_cooldown == 0
    return True


def scenario_turns_alternate_and_bounds_hold() -> bool:
    player = make_brawler("Red", "crimson_brute", health=1000)
    opponent = make_brawler("Blue", "void_channeler", health=1000)
    session = make_session(player, opponent, rng=random.Random(99))
    actors = []
    for expected_turn in range(30):
        assert session.turn == expected_turn
        actors.append(take_turn(session).actor_id)
    for prev, cur in zip(actors, actors[1:]):
        assert prev != cur
    return True


def scenario_selector_policy() -> bool:
    heal = Skill(
        id="patch_up", name="Patch Up", description="", mana_cost=5, cooldown=3,
        effect_type=SkillEffect.HEAL, target=SkillTarget.SELF,
    )
    actor = make_brawler("Red")
    opponent = make_brawler("Blue")

    actor.skills.append(heal)
    actor.current_health = 30
    choice = selector.choose_action(actor, opponent, ScriptedRandom())
    assert choice.skill is heal, "low health should heal first"
    actor.skills.remove(heal)
    actor.current_health = 100

    opponent.current_health = 20
    rng = ScriptedRandom([0.99])
    choice = selector.choose_action(actor, opponent, rng)
    assert choice.skill and choice.skill.id == "power_punch", "low opponent should draw a finisher"
    assert rng.values == [0.99], "finisher rule rolls nothing"
    opponent.current_health = 100

    choice = selector.choose_action(actor, opponent, ScriptedRandom([0.1]))
    assert choice.skill and choice.skill.id == "iron_skin"

    effects.apply_status_effect(actor, "IRON_SKIN")
    rng = ScriptedRandom([0.1])
    choice = selector.choose_action(actor, opponent, rng)
    assert choice.skill and choice.skill.id == "power_punch", "active buff is skipped without a roll"

    choice = selector.choose_action(actor, opponent, ScriptedRandom([0.9, 0.9, 0.9]))
    assert choice.kind is ActionKind.ATTACK

    actor.current_mana = 0
    assert selector.choose_action(actor, opponent, ScriptedRandom([0.0])).kind is ActionKind.ATTACK
    return True


def scenario_dodge_consumed_only_on_landed_roll() -> bool:
    session = make_session(rng=ScriptedRandom([0.999]))
    opponent = session.opponent
    opponent.status.dodging = True
    take_turn(session, Action.attack())
    assert opponent.status.dodging, "a missed roll leaves the dodge up"
    assert opponent.current_health == opponent.stats.max_health

    session.attacker_id = session.player.id
    session.rng = ScriptedRandom([0.0])
    result = take_turn(session, Action.attack())
    assert not opponent.status.dodging, "a landed roll is dodged and consumes the flag"
    assert opponent.current_health == opponent.stats.max_health
    assert any("dodges" in entry.text for entry in result.entries)

    # Smoke Bomb's catalog value is not a dodge percentage; it only raises the flag
    target = make_brawler("Blue", agility=20)
    archer = make_brawler("Ash", accuracy=10, luck=0)
    before = hit_chance(archer, target, basic=True)
    effects.apply_status_effect(target, "SMOKE_BOMB_DODGE")
    assert target.status.dodging
    assert hit_chance(archer, target, basic=True) == before - 20 * 0.2
    return True


def scenario_poison_dart_applies_poison() -> bool:
    player = make_brawler("Red", "shadow_prowler")
    session = make_session(player=player, rng=ScriptedRandom([0.0, 0.99]))
    take_turn(session, Action.use(player.skill("poison_dart")))
    poison = effects.get_effect(session.opponent, "BURNING")
    assert poison is not None, "landed dart should poison"
    assert poison.value == 4 and poison.duration == 3
    assert session.opponent.current_health == 500 - 5
    return True


def scenario_mana_shield_skill() -> bool:
    player = make_brawler("Red", "void_channeler")
    session = make_session(player=player)
    take_turn(session, Action.use(player.skill("mana_shield")))
    shield = effects.get_effect(player, "MANA_SHIELD")
    assert shield and shield.shield.current_value == 25 and shield.duration == 3
    assert player.current_mana == 30
    return True


def scenario_turn_limit_cutoff() -> bool:
    session = make_session(max_turns=4, rng=random.Random(5))
    outcome = resolver.run_to_completion(session)
    assert outcome.reason == "turn_limit"
    assert outcome.final_turn == 4 and session.turn == 4
    player, opponent = session.player, session.opponent
    expected = player.id if player.health_fraction > opponent.health_fraction else opponent.id
    assert outcome.winner_id == expected
    return True


def scenario_manual_action_validation() -> bool:
    session = make_session()
    player = session.player
    player.current_mana = 0
    turn, log_length = session.turn, len(session.log)
    try:
        resolver.advance_turn(session, Action.use(player.skill("power_punch")))
    except InvalidAction:
        pass
    else:
        raise AssertionError("unaffordable skill should be refused")
    assert session.turn == turn and len(session.log) == log_length

    try:
        resolver.action_from_id(player, "fireball")
    except InvalidAction:
        pass
    else:
        raise AssertionError("unknown action id should be refused")

    defend = resolver.action_from_id(player, "defend")
    take_turn(session, defend)
    assert player.status.defending
    take_turn(session)
    take_turn(session, Action.attack())
    assert not player.status.defending, "defend lasts until the next own action"
    return True


def scenario_engine_state_errors() -> bool:
    try:
        effects.lookup("NOPE")
    except UnknownStatusEffect:
        pass
    else:
        raise AssertionError("unknown status key should raise")

    session = make_session()
    resolver.cancel_battle(session)
    try:
        resolver.advance_turn(session)
    except BattleStateError:
        pass
    else:
        raise AssertionError("cancelled battle should refuse to advance")
    return True


def scenario_narrator_fallback() -> bool:
    def broken(event, context):
        raise RuntimeError("flavor service down")

    line = Narrator(broken).describe("attack_hit", attacker="Red", defender="Blue", damage=7)
    assert line == "Red hits Blue for 7 damage."
    assert Narrator(lambda e, c: "  ").describe("defend", attacker="Red") == "Red braces for the next blow."
    assert Narrator(lambda e, c: "Red swings wildly!").describe("defend", attacker="Red") == "Red swings wildly!"
    return True


def _finished(session, player_wins: bool):
    winner, loser = (session.player, session.opponent) if player_wins else (session.opponent, session.player)
    session.outcome = BattleOutcome(winner_id=winner.id, loser_id=loser.id, final_turn=session.turn)
    return session


def scenario_progression_rewards() -> bool:
    player = make_brawler("Red")
    player.arena_points = 1090
    player.arena_tier = progression.calculate_arena_tier(1090)
    profile = PlayerProfile(brawler=player)

    session = _finished(make_session(player=player), player_wins=True)
    summary = progression.settle_battle(profile, session)
    assert summary.result == "win" and summary.arena_points_change == 25
    assert 25 <= summary.xp_gained < 75
    assert 20 <= summary.tokens_gained < 30 and profile.tokens == 100 + summary.tokens_gained
    assert player.arena_points == 1115 and player.arena_tier == "Bronze League"
    assert any("promoted" in entry.text for entry in session.log)

    profile.tokens = 100
    session = _finished(make_session(player=player), player_wins=False)
    summary = progression.settle_battle(profile, session)
    assert summary.result == "loss" and summary.xp_gained == 0
    assert summary.tokens_gained == -10 and profile.tokens == 90
    assert player.arena_points == 1100 and player.arena_tier == "Bronze League"
    assert profile.history[0] is summary and len(profile.history) == 2

    for _ in range(12):
        progression.settle_battle(profile, _finished(make_session(player=player), player_wins=False))
    assert len(profile.history) == 10, "history keeps the newest ten"
    assert player.arena_points >= 0
    return True


def scenario_arena_tiers() -> bool:
    expected: List[Tuple[int, str]] = [
        (0, "Rusted Circuit"), (1099, "Rusted Circuit"), (1100, "Bronze League"),
        (1300, "Silver Datastream"), (1600, "Gold Protocol"), (2000, "Cybernetic Legend"),
        (2499, "Cybernetic Legend"), (2500, "Void Master"), (9000, "Void Master"),
    ]
    for points, tier in expected:
        assert progression.calculate_arena_tier(points) == tier, (points, tier)
    return True


def scenario_level_up() -> bool:
    brawler = make_brawler("Red", health=60, mana=20)
    brawler.current_health = 10
    brawler.skill("power_punch").current_cooldown = 2
    levels = progression.gain_xp(brawler, 100, random.Random(2))
    assert levels == 1 and brawler.level == 2 and brawler.xp == 0
    assert brawler.xp_to_next_level == 282
    assert brawler.stats.max_health == 65 and brawler.current_health == 65
    assert brawler.stats.max_mana == 20 + 2 + 2 and brawler.current_mana == brawler.stats.max_mana
    assert brawler.stats.strength >= 11
    assert brawler.skill("power_punch").current_cooldown == 0
    return True


def scenario_roster() -> bool:
    rng = random.Random(12)
    for class_id, data in CLASSES.items():
        brawler = roster.create_brawler("Test", class_id, rng)
        for stat, (lo, hi) in data["base_stats"].items():
            assert lo <= getattr(brawler.stats, stat) <= hi, (class_id, stat)
        assert brawler.stats.max_health == brawler.current_health
        assert brawler.stats.max_mana == brawler.current_mana
        assert [s.id for s in brawler.skills] == data["skills"]
        assert brawler.lore

    try:
        roster.create_brawler("Test", "paladin", rng)
    except UnknownClass:
        pass
    else:
        raise AssertionError("unknown class should raise")

    player = roster.create_brawler("Hero", "shadow_prowler", rng)
    for _ in range(20):
        bot = roster.create_opponent(player, rng)
        assert "Bot" in bot.name and bot.id != player.id
        gap = abs(progression.tier_index(bot.arena_tier) - progression.tier_index(player.arena_tier))
        assert gap <= 1
    return True


def scenario_regen_effects_are_capped() -> bool:
    actor = make_brawler("Red", health=50, mana=20)
    actor.current_health, actor.current_mana = 48, 18
    effects.apply_status_effect(actor, "REGENERATION")
    effects.apply_status_effect(actor, "MANA_REGEN")
    effects.tick_status_effects(actor)
    assert actor.current_health == 50 and actor.current_mana == 20, "regen never exceeds the maximum"

    archer = make_brawler("Ash", accuracy=10, luck=0)
    target = make_brawler("Blue", agility=20)
    before = hit_chance(archer, target)
    effects.apply_status_effect(archer, "FOCUSED")
    assert hit_chance(archer, target) == before + 7.5
    assert hit_chance(archer, target, basic=True) == 75 + 15 - 20
    return True


def scenario_actor_killed_by_own_tick_loses() -> bool:
    session = make_session()
    player, opponent = session.player, session.opponent
    effects.apply_status_effect(player, "BURNING")
    player.current_health = 3

    result = resolver.advance_turn(session, Action.attack())
    assert isinstance(result, BattleOutcome), f"expected an outcome, got {result!r}"
    assert result.winner_id == opponent.id and result.loser_id == player.id
    assert result.reason == "knockout" and result.final_turn == 0
    assert player.current_health == 0
    assert opponent.current_health == 500, "a defeated actor never swings"
    assert any("collapses" in entry.text for entry in result.entries)
    assert resolver.advance_turn(session) is result
    return True


def scenario_special_attack_crit_bonus() -> bool:
    brawler = make_brawler("Red", luck=4)
    assert critical_chance(brawler) == 5 + 4 * 1.5
    assert critical_chance(brawler, special=True) == 5 + 4 * 1.5 + 10
    return True


def _healer(effect_value: Optional[int]) -> Brawler:
    brawler = make_brawler("Red", intelligence=8)
    brawler.skills.append(Skill(
        id="mend",
        name="Mend",
        description="Knits wounds shut.",
        mana_cost=10,
        cooldown=2,
        effect_type=SkillEffect.HEAL,
        target=SkillTarget.SELF,
        effect_value=effect_value,
    ))
    return brawler


def scenario_heal_skill_restores_health() -> bool:
    session = make_session(player=_healer(None))
    player = session.player
    player.current_health = 60
    take_turn(session, Action.use(player.skill("mend")))
    assert player.current_health == 60 + 12, "without a value the heal is floor(intelligence * 1.5)"
    assert player.current_mana == 40 and player.skill("mend").current_cooldown == 2

    session = make_session(player=_healer(20))
    player = session.player
    player.current_health = player.stats.max_health - 5
    result = take_turn(session, Action.use(player.skill("mend")))
    assert player.current_health == player.stats.max_health, "healing stops at max health"
    assert [h.value for h in result.hints if h.type == "heal"] == [5]
    return True


SCENARIOS = [
    scenario_basic_hit_reduces_health,
    scenario_damage_over_time_full_span,
    scenario_shield_absorbs_before_health,
    scenario_battle_runs_to_single_outcome,
    scenario_minimum_damage_is_one,
    scenario_damage_modifier_order,
    scenario_refresh_keeps_single_instance,
    scenario_shield_stacking,
    scenario_stun_skips_action,
    scenario_stun_flag_survives_longer_stun,
    scenario_cooldown_ticks_once_per_cycle,
    scenario_turns_alternate_and_bounds_hold,
    scenario_selector_policy,
    scenario_dodge_consumed_only_on_landed_roll,
    scenario_poison_dart_applies_poison,
    scenario_mana_shield_skill,
    scenario_turn_limit_cutoff,
    scenario_manual_action_validation,
    scenario_engine_state_errors,
    scenario_narrator_fallback,
    scenario_progression_rewards,
    scenario_arena_tiers,
    scenario_level_up,
    scenario_roster,
    scenario_regen_effects_are_capped,
    scenario_actor_killed_by_own_tick_loses,
    scenario_special_attack_crit_bonus,
    scenario_heal_skill_restores_health,
]


def run_all() -> List[Tuple[str, bool, str]]:
    results: List[Tuple[str, bool, str]] = []
    for scenario in SCENARIOS:
        try:
            scenario()
            results.append((scenario.__name__, True, ""))
        except AssertionError as exc:
            results.append((scenario.__name__, False, str(exc)))
    return results
