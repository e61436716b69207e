# brawlers/content/tiers.py
# Ordered lowest first; a brawler sits in the last tier whose floor it has reached.
ARENA_TIERS = [
    {"name": "Rusted Circuit", "min_points": 0},
    {"name": "Bronze League", "min_points": 1100},
    {"name": "Silver Datastream", "min_points": 1300},
    {"name": "Gold Protocol", "min_points": 1600},
    {"name": "Cybernetic Legend", "min_points": 2000},
    {"name": "Void Master", "min_points": 2500},
]
