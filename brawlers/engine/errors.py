# brawlers/engine/errors.py


class BrawlError(Exception):
    """Base class for everything the brawl engine raises on purpose."""


class UnknownStatusEffect(BrawlError, KeyError):
    pass


class UnknownClass(BrawlError, KeyError):
    pass


class InvalidAction(BrawlError, ValueError):
    """A manual action that cannot be performed right now (no mana, cooling down, not your turn)."""


class BattleStateError(BrawlError, RuntimeError):
    """Engine misuse: unknown combatant, advancing a cancelled battle, settling an unfinished one."""
