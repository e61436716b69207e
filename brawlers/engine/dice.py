# brawlers/engine/dice.py
import random
import time
from typing import Optional, Sequence


def new_seed() -> int:
    return int(time.time() * 1000) & 0xFFFFFFFF


def rng_for(seed: Optional[int] = None) -> random.Random:
    # one Random per battle; seeded runs are reproducible
    return random.Random(new_seed() if seed is None else seed)


def percent_roll(chance: float, r: random.Random) -> bool:
    """True when a 0-100 roll lands under `chance`."""
    return r.random() * 100 < chance


def stat_roll(bounds: Sequence[int], r: random.Random) -> int:
    lo, hi = bounds
    return r.randint(int(lo), int(hi))
