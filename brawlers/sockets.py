# brawlers/sockets.py
import logging
from dataclasses import asdict

from flask import request
from flask_socketio import emit

from . import state
from .content.balance import DEFAULTS
from .content.classes import CLASSES
from .engine import progression, resolver, roster
from .engine.dice import new_seed, rng_for
from .engine.errors import BrawlError, InvalidAction, UnknownClass
from .engine.models import BattleOutcome, PlayerProfile
from .engine.narrator import Narrator

logger = logging.getLogger(__name__)


def pack_brawler(brawler):
    if brawler is None:
        return None
    data = asdict(brawler)
    data["class_name"] = CLASSES.get(brawler.class_id, {}).get("name", brawler.class_id)
    return data


def profile_for(profile):
    return {
        "brawler": pack_brawler(profile.brawler),
        "tokens": profile.tokens,
        "history": [asdict(entry) for entry in profile.history],
        "in_battle": profile.battle is not None,
    }


def snapshot_for(session):
    """UI-friendly view of a battle: both sides, whose turn, recent log."""
    return {
        "battle_id": session.id,
        "turn": session.turn,
        "attacker_id": session.attacker_id,
        "auto_battle": session.auto_battle,
        "you": pack_brawler(session.player),
        "enemy": pack_brawler(session.opponent),
        "log": [entry.to_dict() for entry in list(session.log)[-30:]],
        "log_length": len(session.log),
        "outcome": asdict(session.outcome) if session.outcome else None,
    }


def turn_payload(result):
    return {
        "turn": result.turn,
        "actor_id": result.actor_id,
        "action": result.action,
        "stunned": result.stunned,
        "log": [entry.to_dict() for entry in result.entries],
        "hints": [asdict(hint) for hint in result.hints],
    }


def register_brawl_socket_handlers(socketio, settings=None):
    settings = settings or {}
    delay = settings.get("auto_battle_delay", DEFAULTS["auto_battle_delay"])
    narrator = Narrator(settings.get("flavor"))

    def publish(sid, profile, session, result):
        if isinstance(result, BattleOutcome):
            summary = progression.settle_battle(profile, session)
            socketio.emit("brawl_snapshot", snapshot_for(session), to=sid)
            socketio.emit("brawl_outcome", {
                "outcome": asdict(result),
                "summary": asdict(summary),
            }, to=sid)
            state.end_battle(sid)
            socketio.emit("brawl_profile", profile_for(profile), to=sid)
            return
        socketio.emit("brawl_turn", turn_payload(result), to=sid)
        socketio.emit("brawl_snapshot", snapshot_for(session), to=sid)

    def play_turn(sid, profile, session, action_id=None, auto=False):
        """One turn plus its events. False when the battle ended or was cancelled first."""
        with state.battle_lock(session.id):
            if session.cancelled or session.is_over or profile.battle is not session:
                return False
            if auto and not session.auto_battle:
                return False
            action = None
            # the bot always picks its own moves
            if action_id and session.attacker_id == session.player.id:
                action = resolver.action_from_id(session.player, action_id)
            result = resolver.advance_turn(session, action)
            publish(sid, profile, session, result)
        return True

    def auto_loop(sid, battle_id):
        try:
            while True:
                socketio.sleep(delay)
                profile = state.get_profile(sid)
                session = profile.battle if profile else None
                if session is None or session.id != battle_id:
                    return
                if not play_turn(sid, profile, session, auto=True):
                    return
        finally:
            state.auto_loops.discard(battle_id)

    def ensure_auto_loop(sid, session):
        if session.id in state.auto_loops:
            return
        state.auto_loops.add(session.id)
        socketio.start_background_task(auto_loop, sid, session.id)

    @socketio.on("brawl_create")
    def brawl_create(payload):
        sid = request.sid
        if state.get_battle(sid):
            emit("brawl_system", "Finish your current battle first.")
            return
        payload = payload if isinstance(payload, dict) else {}
        name = str(payload.get("name", "")).strip()[:32]
        if not name:
            emit("brawl_system", "Your brawler needs a name.")
            return
        try:
            brawler = roster.create_brawler(name, str(payload.get("class_id", "")), narrator=narrator)
        except UnknownClass as exc:
            emit("brawl_system", f"Unknown class {exc.args[0]!r}.")
            return
        profile = PlayerProfile(brawler=brawler)
        state.set_profile(sid, profile)
        emit("brawl_system", f"{brawler.name} enters KaspaVerse.")
        emit("brawl_profile", profile_for(profile))

    @socketio.on("brawl_queue")
    def brawl_queue(payload=None):
        sid = request.sid
        profile = state.get_profile(sid)
        if not profile:
            emit("brawl_system", "Create a brawler first.")
            return
        if profile.battle:
            emit("brawl_system", "Already in a battle.")
            return
        payload = payload if isinstance(payload, dict) else {}
        emit("brawl_system", "Searching for an opponent...")

        rng = rng_for(payload.get("seed", new_seed()))
        try:
            opponent = roster.create_opponent(profile.brawler, rng)
            session = resolver.start_battle(profile.brawler, opponent, rng=rng, narrator=narrator)
        except BrawlError:
            logger.exception("matchmaking failed for %s", sid)
            emit("brawl_system", "Matchmaking failed. Returning to Hub.")
            return

        session.auto_battle = bool(payload.get("auto", True))
        profile.battle = session
        emit("brawl_system", f"Opponent found: {opponent.name} ({opponent.arena_tier}).")
        emit("brawl_snapshot", snapshot_for(session))
        if session.auto_battle:
            ensure_auto_loop(sid, session)

    @socketio.on("brawl_advance")
    def brawl_advance(payload=None):
        sid = request.sid
        profile = state.get_profile(sid)
        session = profile.battle if profile else None
        if not session:
            emit("brawl_system", "Not in a battle.")
            return
        if session.auto_battle:
            emit("brawl_system", "Auto-battle is on. Turn it off to act manually.")
            return

        payload = payload if isinstance(payload, dict) else {"action": payload}
        action_id = str(payload["action"]) if payload.get("action") else None
        try:
            played = play_turn(sid, profile, session, action_id)
        except InvalidAction as exc:
            emit("brawl_system", str(exc))
            return
        if not played:
            emit("brawl_system", "Not in a battle.")

    @socketio.on("brawl_auto")
    def brawl_auto(payload=None):
        sid = request.sid
        session = state.get_battle(sid)
        if not session:
            emit("brawl_system", "Not in a battle.")
            return
        enabled = payload.get("enabled") if isinstance(payload, dict) else payload
        session.auto_battle = bool(enabled)
        emit("brawl_system", "Auto-battle on." if session.auto_battle else "Auto-battle paused.")
        if session.auto_battle:
            ensure_auto_loop(sid, session)

    def stop_battle(sid, session):
        # waits for an in-flight turn, so cancellation lands between turns
        with state.battle_lock(session.id):
            if state.get_battle(sid) is not session or session.is_over:
                return False
            resolver.cancel_battle(session)
            state.end_battle(sid)
        return True

    @socketio.on("brawl_cancel")
    def brawl_cancel(payload=None):
        sid = request.sid
        session = state.get_battle(sid)
        if not session or not stop_battle(sid, session):
            emit("brawl_system", "Not in a battle.")
            return
        emit("brawl_system", "Battle cancelled. Returning to Hub.")

    @socketio.on("disconnect")
    def brawl_disconnect(*args):
        sid = request.sid
        session = state.get_battle(sid)
        if session:
            stop_battle(sid, session)
        state.cleanup(sid)
