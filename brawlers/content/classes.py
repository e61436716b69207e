# brawlers/content/classes.py
# Stat entries are inclusive [min, max] rolls used at brawler creation.
CLASSES = {
    "crimson_brute": {
        "name": "Crimson Brute",
        "description": "Muscular and tanky, clad in heavy cyber-armor. Favors overwhelming strength.",
        "primary_stat": "strength",
        "base_stats": {
            "strength": [10, 15], "health": [50, 60], "armor": [6, 8], "agility": [3, 5],
            "intelligence": [1, 3], "mana": [15, 25], "luck": [2, 4], "accuracy": [4, 6],
        },
        "skills": ["power_punch", "iron_skin", "war_cry"],
    },
    "void_channeler": {
        "name": "Void Channeler",
        "description": "Wields arcane energies, often with glowing runes or energy constructs.",
        "primary_stat": "intelligence",
        "base_stats": {
            "strength": [2, 4], "health": [30, 40], "armor": [2, 4], "agility": [4, 6],
            "intelligence": [10, 15], "mana": [50, 70], "luck": [5, 8], "accuracy": [5, 7],
        },
        "skills": ["arcane_blast", "mana_shield", "chain_lightning"],
    },
    "shadow_prowler": {
        "name": "Shadow Prowler",
        "description": "Agile and stealthy, often hooded, utilizing advanced tech for ranged attacks.",
        "primary_stat": "agility",
        "base_stats": {
            "strength": [5, 8], "health": [35, 45], "armor": [3, 5], "agility": [10, 15],
            "intelligence": [4, 6], "mana": [30, 40], "luck": [6, 9], "accuracy": [8, 12],
        },
        "skills": ["precision_shot", "smoke_bomb", "poison_dart"],
    },
}
