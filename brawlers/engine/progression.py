# brawlers/engine/progression.py
import logging
import math
import random
from typing import List, Optional

from .errors import BattleStateError
from .models import BattleSession, BattleSummary, Brawler, LogEntry, PlayerProfile
from ..content.balance import PROGRESSION
from ..content.classes import CLASSES
from ..content.tiers import ARENA_TIERS

logger = logging.getLogger(__name__)

# stats a level-up may pick as its random secondary bump
_SECONDARY_POOL = ("strength", "armor", "agility", "intelligence", "luck", "accuracy")


def calculate_arena_tier(points: int) -> str:
    tier = ARENA_TIERS[0]["name"]
    for entry in ARENA_TIERS:
        if points >= entry["min_points"]:
            tier = entry["name"]
    return tier


def tier_index(tier_name: str) -> int:
    for i, entry in enumerate(ARENA_TIERS):
        if entry["name"] == tier_name:
            return i
    return 0


def xp_to_next_level(level: int) -> int:
    return int(math.floor(PROGRESSION["xp_per_level_base"] * (level ** PROGRESSION["xp_level_exponent"])))


def gain_xp(brawler: Brawler, amount: int, rng: Optional[random.Random] = None, log: Optional[List[LogEntry]] = None) -> int:
    """Add xp, processing any number of level-ups. Returns levels gained."""
    rng = rng or random.Random()
    brawler.xp += max(0, int(amount))
    class_data = CLASSES.get(brawler.class_id, {})
    primary = class_data.get("primary_stat")
    mana_cap = (class_data.get("base_stats", {}).get("mana") or [0, 0])[1]
    gained = 0

    while brawler.xp >= brawler.xp_to_next_level:
        brawler.xp -= brawler.xp_to_next_level
        brawler.level += 1
        gained += 1

        stats = brawler.stats
        if primary:
            setattr(stats, primary, getattr(stats, primary) + 1)
        secondary = rng.choice([s for s in _SECONDARY_POOL if s != primary])
        setattr(stats, secondary, getattr(stats, secondary) + 1)

        stats.max_health += PROGRESSION["level_up_max_health"]
        stats.health = stats.max_health
        if mana_cap:
            stats.max_mana += int(math.floor(mana_cap * PROGRESSION["level_up_mana_fraction"])) + PROGRESSION["level_up_mana_flat"]
        else:
            stats.max_mana += 5
        stats.mana = stats.max_mana
        brawler.current_health = stats.max_health
        brawler.current_mana = stats.max_mana
        brawler.xp_to_next_level = xp_to_next_level(brawler.level)

        if log is not None:
            log.append(LogEntry(f"{brawler.name} reached level {brawler.level}!", "reward"))
        logger.info("brawler %s leveled up to %s", brawler.id, brawler.level)

    if gained:
        for skill in brawler.skills:
            skill.current_cooldown = 0
    return gained


def change_arena_points(brawler: Brawler, delta: int, log: Optional[List[LogEntry]] = None) -> None:
    brawler.arena_points = max(0, brawler.arena_points + int(delta))
    tier = calculate_arena_tier(brawler.arena_points)
    if tier != brawler.arena_tier:
        promoted = tier_index(tier) > tier_index(brawler.arena_tier)
        if log is not None:
            verb = "promoted to" if promoted else "demoted to"
            log.append(LogEntry(f"{brawler.name} was {verb} {tier}!", "reward" if promoted else "system"))
        brawler.arena_tier = tier


def settle_battle(profile: PlayerProfile, session: BattleSession) -> BattleSummary:
    """Turn a finished battle into xp, tokens, arena points and a history entry."""
    outcome = session.outcome
    if outcome is None:
        raise BattleStateError(f"battle {session.id} has no outcome to settle")

    player, opponent = session.player, session.opponent
    rng = session.rng
    entries: List[LogEntry] = []
    class_name = CLASSES.get(opponent.class_id, {}).get("name", opponent.class_id)

    if outcome.winner_id == player.id:
        xp = rng.randrange(PROGRESSION["win_xp_random"]) + PROGRESSION["win_xp_per_level"] * opponent.level
        tokens = int(math.floor(rng.random() * opponent.level * PROGRESSION["win_tokens_per_level"])) + PROGRESSION["win_tokens_base"]
        points = PROGRESSION["points_per_win"]
        entries.append(LogEntry(f"{opponent.name} defeated! VICTORY! +{xp} XP, +{tokens} BRAWL.", "reward"))
        gain_xp(player, xp, rng, entries)
        result = "win"
    else:
        xp = 0
        tokens = -int(math.floor(profile.tokens * PROGRESSION["loss_token_fraction"]))
        points = -PROGRESSION["points_per_loss"]
        entries.append(LogEntry(f"You have been defeated... {tokens} BRAWL.", "error"))
        result = "loss"

    profile.tokens = max(0, profile.tokens + tokens)
    change_arena_points(player, points, entries)

    summary = BattleSummary(
        opponent_name=opponent.name,
        opponent_class=class_name,
        result=result,
        xp_gained=xp,
        tokens_gained=tokens,
        arena_points_change=points,
    )
    profile.history.appendleft(summary)
    session.log.extend(entries)
    outcome.entries.extend(entries)
    logger.info("battle %s settled: %s (%+d tokens, %+d points)", session.id, result, tokens, points)
    return summary
