# brawlers/content/balance.py
DEFAULTS = {
    "brawl_tokens": 100,
    "arena_points": 1000,
    "level": 1,
    "auto_battle_delay": 1.8,  # seconds between auto-battle turns
    "log_cap": 100,
    "history_cap": 10,
    "max_turns": 200,
}

CAPS = {
    "hit_min": 10,
    "hit_max": 95,
    "damage_min": 1,
}

COMBAT = {
    "base_hit": 75,
    "skill_accuracy_weight": 1.5,
    "basic_accuracy_weight": 1.0,
    "luck_hit_weight": 0.5,
    "dodge_evasion_mult": 1.2,
    "base_crit": 5,
    "luck_crit_weight": 1.5,
    "special_attack_crit_bonus": 10,
    "crit_multiplier": 1.75,
    "armor_factor": 0.5,
    "defend_multiplier": 0.5,
    "basic_strength_weight": 0.8,
    "basic_agility_weight": 0.2,
    "heal_intelligence_weight": 1.5,
    "initiative_jitter": 10,
}

# Selector policy thresholds and roll probabilities.
AI = {
    "heal_threshold": 0.4,
    "finisher_threshold": 0.3,
    "buff_chance": 0.4,
    "offense_chance": 0.6,
    "random_skill_chance": 0.5,
}

PROGRESSION = {
    "xp_per_level_base": 100,
    "xp_level_exponent": 1.5,
    "points_per_win": 25,
    "points_per_loss": 15,
    "win_xp_random": 50,
    "win_xp_per_level": 25,
    "win_tokens_base": 20,
    "win_tokens_per_level": 10,
    "loss_token_fraction": 0.1,
    "level_up_max_health": 5,
    "level_up_mana_fraction": 0.1,
    "level_up_mana_flat": 2,
    "opponent_tier_spread": 1,
    "opponent_points_jitter": 100,
}
