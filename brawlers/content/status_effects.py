# brawlers/content/status_effects.py
STATUS_EFFECTS = {
    "IRON_SKIN": {
        "name": "Iron Skin",
        "description": "Reduces incoming damage by 30%.",
        "type": "damage_reduction",
        "value": 30,
        "is_percentage": True,
        "duration": 2,
        "icon": "shield",
    },
    "MANA_SHIELD": {
        "name": "Mana Shield",
        "description": "Absorbs 25 damage.",
        "type": "absorb_shield",
        "value": 25,
        "is_percentage": False,
        "duration": 3,
        "icon": "shield-check",
    },
    "SMOKE_BOMB_DODGE": {
        "name": "Evasive Cloud",
        "description": "Greatly increases dodge chance.",
        "type": "dodge_increase",
        "value": 50,            # display only: applying it sets the dodging flag
        "is_percentage": True,
        "duration": 1,
        "icon": "cloud",
    },
    "BURNING": {
        "name": "Burning",
        "description": "Takes 5 damage each turn.",
        "type": "damage_over_time",
        "value": 5,
        "is_percentage": False,
        "duration": 3,
        "icon": "flame",
    },
    "STRENGTH_BUFF": {
        "name": "Strengthened",
        "description": "Increases strength by 5.",
        "type": "stat_buff",
        "value": 5,
        "is_percentage": False,
        "stat": "strength",
        "duration": 3,
        "icon": "trending-up",
    },
    "ARMOR_DEBUFF": {
        "name": "Armor Shattered",
        "description": "Reduces armor by 15%.",
        "type": "stat_debuff",
        "value": 15,
        "is_percentage": True,
        "stat": "armor",
        "duration": 2,
        "icon": "shield-off",
    },
    "STUNNED": {
        "name": "Stunned",
        "description": "Cannot act.",
        "type": "stun",
        "value": 1,
        "is_percentage": False,
        "duration": 1,
        "icon": "zap-off",
    },
    "MANA_REGEN": {
        "name": "Mana Flow",
        "description": "Regenerates 5 mana each turn.",
        "type": "mana_regen",
        "value": 5,
        "is_percentage": False,
        "duration": 3,
        "icon": "droplets",
    },
    "REGENERATION": {
        "name": "Regeneration",
        "description": "Restores 4 health each turn.",
        "type": "heal_over_time",
        "value": 4,
        "is_percentage": False,
        "duration": 3,
        "icon": "heart-pulse",
    },
    "FOCUSED": {
        "name": "Focused",
        "description": "Increases accuracy by 5.",
        "type": "accuracy_increase",
        "value": 5,
        "is_percentage": False,
        "duration": 2,
        "icon": "crosshair",
    },
}
