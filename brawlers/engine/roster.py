# brawlers/engine/roster.py
import logging
import random
from typing import List, Optional

from .dice import stat_roll
from .errors import UnknownClass
from .models import Brawler, Skill, SkillEffect, SkillTarget, Stats, new_id
from .narrator import Narrator
from .progression import calculate_arena_tier, tier_index, xp_to_next_level
from ..content.abilities import SKILLS
from ..content.balance import DEFAULTS, PROGRESSION
from ..content.classes import CLASSES
from ..content.tiers import ARENA_TIERS

logger = logging.getLogger(__name__)


def class_data(class_id: str) -> dict:
    try:
        return CLASSES[class_id]
    except KeyError:
        raise UnknownClass(class_id) from None


def build_skill(skill_id: str) -> Skill:
    data = SKILLS[skill_id]
    status = data.get("status") or {}
    return Skill(
        id=skill_id,
        name=data["name"],
        description=data.get("description", ""),
        mana_cost=int(data.get("mana_cost", 0)),
        cooldown=int(data.get("cooldown", 0)),
        effect_type=SkillEffect(data["effect_type"]),
        target=SkillTarget(data.get("target", "none")),
        effect_value=data.get("effect_value"),
        status_key=status.get("key"),
        status_duration=status.get("duration"),
        status_value=status.get("value"),
        status_chance=float(status.get("chance", 1.0)),
    )


def class_skills(class_id: str) -> List[Skill]:
    return [build_skill(skill_id) for skill_id in class_data(class_id)["skills"]]


def create_brawler(
    name: str,
    class_id: str,
    rng: Optional[random.Random] = None,
    narrator: Optional[Narrator] = None,
) -> Brawler:
    """Roll a fresh level 1 brawler inside its class stat ranges."""
    data = class_data(class_id)
    rng = rng or random.Random()
    ranges = data["base_stats"]
    health = stat_roll(ranges["health"], rng)
    mana = stat_roll(ranges["mana"], rng)
    stats = Stats(
        strength=stat_roll(ranges["strength"], rng),
        health=health,
        max_health=health,
        armor=stat_roll(ranges["armor"], rng),
        agility=stat_roll(ranges["agility"], rng),
        intelligence=stat_roll(ranges["intelligence"], rng),
        mana=mana,
        max_mana=mana,
        luck=stat_roll(ranges["luck"], rng),
        accuracy=stat_roll(ranges["accuracy"], rng),
    )
    points = DEFAULTS["arena_points"]
    brawler = Brawler(
        id=new_id(),
        name=name,
        class_id=class_id,
        stats=stats,
        current_health=health,
        current_mana=mana,
        skills=class_skills(class_id),
        level=DEFAULTS["level"],
        xp=0,
        xp_to_next_level=xp_to_next_level(DEFAULTS["level"]),
        arena_points=points,
        arena_tier=calculate_arena_tier(points),
        lore=(narrator or Narrator()).lore(name, data["name"]),
    )
    logger.debug("created %s brawler %s", class_id, brawler.id)
    return brawler


def create_opponent(player: Brawler, rng: Optional[random.Random] = None) -> Brawler:
    """Bot opponent within one arena tier of the player."""
    rng = rng or random.Random()
    class_id = rng.choice(sorted(CLASSES))
    bot_name = CLASSES[class_id]["name"].replace(" ", "") + f"Bot{rng.randrange(1000)}"
    opponent = create_brawler(bot_name, class_id, rng)

    spread = PROGRESSION["opponent_tier_spread"]
    index = tier_index(player.arena_tier) + rng.randint(-spread, spread)
    index = max(0, min(len(ARENA_TIERS) - 1, index))
    opponent.arena_points = ARENA_TIERS[index]["min_points"] + rng.randrange(PROGRESSION["opponent_points_jitter"])
    opponent.arena_tier = calculate_arena_tier(opponent.arena_points)
    return opponent
