# brawlers/content/abilities.py
SKILLS = {
    "power_punch": {
        "name": "Power Punch",
        "description": "A mighty blow dealing significant physical damage.",
        "mana_cost": 10,
        "cooldown": 2,
        "effect_type": "damage",
        "effect_value": 15,
        "target": "enemy",
    },
    "iron_skin": {
        "name": "Iron Skin",
        "description": "Temporarily hardens skin, reducing incoming damage.",
        "mana_cost": 15,
        "cooldown": 4,
        "effect_type": "buff_self",
        "target": "self",
        "status": {"key": "IRON_SKIN"},
    },
    "war_cry": {
        "name": "War Cry",
        "description": "Lets out a ferocious cry, boosting Strength for a short duration.",
        "mana_cost": 12,
        "cooldown": 5,
        "effect_type": "buff_self",
        "target": "self",
        "status": {"key": "STRENGTH_BUFF"},
    },
    "arcane_blast": {
        "name": "Arcane Blast",
        "description": "Unleashes a blast of raw arcane energy. High accuracy.",
        "mana_cost": 12,
        "cooldown": 1,
        "effect_type": "damage",
        "effect_value": 12,
        "target": "enemy",
    },
    "mana_shield": {
        "name": "Mana Shield",
        "description": "Converts Mana into a temporary shield that absorbs damage.",
        "mana_cost": 20,
        "cooldown": 3,
        "effect_type": "shield_self",
        "target": "self",
        "status": {"key": "MANA_SHIELD"},
    },
    "chain_lightning": {
        "name": "Chain Lightning",
        "description": "Electrocutes the target, with a chance to stun.",
        "mana_cost": 18,
        "cooldown": 4,
        "effect_type": "damage",
        "effect_value": 10,
        "target": "enemy",
        "status": {"key": "STUNNED", "chance": 0.25},
    },
    "precision_shot": {
        "name": "Precision Shot",
        "description": "A carefully aimed shot with increased critical hit chance.",
        "mana_cost": 8,
        "cooldown": 2,
        "effect_type": "special_attack",
        "effect_value": 10,
        "target": "enemy",
    },
    "smoke_bomb": {
        "name": "Smoke Bomb",
        "description": "Creates a cloud of smoke, increasing dodge chance.",
        "mana_cost": 10,
        "cooldown": 3,
        "effect_type": "buff_self",
        "target": "self",
        "status": {"key": "SMOKE_BOMB_DODGE"},
    },
    "poison_dart": {
        "name": "Poison Dart",
        "description": "Fires a dart coated in venom, dealing damage over time.",
        "mana_cost": 15,
        "cooldown": 3,
        "effect_type": "damage",
        "effect_value": 5,
        "target": "enemy",
        "status": {"key": "BURNING", "duration": 3, "value": 4},
    },
}
