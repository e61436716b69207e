# brawlers/routes.py
from flask import Blueprint, jsonify

from .content.abilities import SKILLS
from .content.classes import CLASSES
from .content.status_effects import STATUS_EFFECTS
from .content.tiers import ARENA_TIERS

brawl_bp = Blueprint("brawl", __name__, url_prefix="/brawl")


@brawl_bp.route("/classes")
def classes():
    payload = {}
    for class_id, data in CLASSES.items():
        entry = dict(data)
        entry["skills"] = [{"id": skill_id, **SKILLS[skill_id]} for skill_id in data["skills"]]
        payload[class_id] = entry
    return jsonify(payload)


@brawl_bp.route("/status-effects")
def status_effects():
    return jsonify(STATUS_EFFECTS)


@brawl_bp.route("/tiers")
def tiers():
    return jsonify(ARENA_TIERS)
