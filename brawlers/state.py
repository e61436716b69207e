# brawlers/state.py
import threading
from typing import Dict, Optional, Set

from .engine.models import BattleSession, PlayerProfile

profiles: Dict[str, PlayerProfile] = {}
auto_loops: Set[str] = set()    # battle ids with a running auto-battle task
battle_locks: Dict[str, threading.Lock] = {}    # one turn or cancel at a time per battle


def get_profile(sid: str) -> Optional[PlayerProfile]:
    return profiles.get(sid)


def set_profile(sid: str, profile: PlayerProfile) -> None:
    profiles[sid] = profile


def get_battle(sid: str) -> Optional[BattleSession]:
    profile = profiles.get(sid)
    if not profile:
        return None
    return profile.battle


def battle_lock(battle_id: str) -> threading.Lock:
    return battle_locks.setdefault(battle_id, threading.Lock())


def end_battle(sid: str) -> None:
    profile = profiles.get(sid)
    if not profile or not profile.battle:
        return
    auto_loops.discard(profile.battle.id)
    battle_locks.pop(profile.battle.id, None)
    profile.battle = None


def cleanup(sid: str) -> None:
    end_battle(sid)
    profiles.pop(sid, None)
