# brawlers/engine/narrator.py
import logging
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

# event -> deterministic line; formatted with the event context
TEMPLATES: Dict[str, str] = {
    "attack_hit": "{attacker} hits {defender} for {damage} damage.",
    "attack_crit": "{attacker} critically hits {defender} for {damage} damage!",
    "attack_miss": "{attacker} attacks {defender} but misses!",
    "attack_dodged": "{attacker} attacks, but {defender} dodges!",
    "skill_used": "{attacker} uses {skill}!",
    "skill_hit": "{attacker} uses {skill}! {defender} takes {damage} damage.",
    "skill_crit": "{attacker} uses {skill}! CRITICAL! {defender} takes {damage} damage.",
    "skill_miss": "{attacker} uses {skill}! But it misses {defender}.",
    "skill_dodged": "{attacker} uses {skill}! But {defender} dodges!",
    "skill_heal": "{attacker} uses {skill}! {attacker} recovers {amount} HP.",
    "defend": "{attacker} braces for the next blow.",
    "dodge": "{attacker} gets ready to dodge.",
    "initiative": "{attacker} takes the initiative!",
    "victory": "{winner} defeats {loser}! VICTORY!",
    "defeat": "{loser} has been defeated...",
    "lore": "Born in the digital shadows of KaspaVerse, {name} the {class_name} fights for a byte of glory.",
}

FlavorSource = Callable[[str, Dict[str, Any]], Optional[str]]


class Narrator:
    """
    Turns combat events into log lines.

    `flavor` is an optional external text source called as flavor(event, context).
    It is called synchronously; anything it raises, and any empty answer, falls back
    to the fixed template so a battle never depends on it.
    """

    def __init__(self, flavor: Optional[FlavorSource] = None):
        self.flavor = flavor

    def template(self, event: str, **context: Any) -> str:
        return TEMPLATES[event].format(**context)

    def describe(self, event: str, **context: Any) -> str:
        if self.flavor is not None:
            try:
                text = self.flavor(event, dict(context))
            except Exception:
                logger.warning("flavor source failed for %s; using template", event, exc_info=True)
            else:
                if isinstance(text, str) and text.strip():
                    return text.strip()
                logger.warning("flavor source returned nothing for %s; using template", event)
        return self.template(event, **context)

    def lore(self, name: str, class_name: str) -> str:
        return self.describe("lore", name=name, class_name=class_name)
