"""Centralized combat enums and constants.

This module contains all core enums that are used across the combat engine,
eliminating duplication and providing a single source of truth.
"""

from enum import Enum, auto

from ..errors import InvalidConfigurationError


class CombatType(Enum):
    """The three approaches to conflict (heart > body > mind > heart)."""
    HEART = "heart"
    BODY = "body"
    MIND = "mind"

    @classmethod
    def parse(cls, value: "str | CombatType") -> "CombatType":
        """Convert a raw value into a CombatType, rejecting unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidConfigurationError(f"Unknown combat type: {value!r}") from None


class ActionChoice(Enum):
    """Actions a combatant can take in a round."""
    ATTACK = "attack"
    DEFEND = "defend"

    @classmethod
    def parse(cls, value: "str | ActionChoice") -> "ActionChoice":
        """Convert a raw value into an ActionChoice, rejecting unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidConfigurationError(f"Unknown action: {value!r}") from None


class Advantage(Enum):
    """Relation of one side's type against the opposing type."""
    ADVANTAGE = "advantage"
    NEUTRAL = "neutral"
    DISADVANTAGE = "disadvantage"


class CombatPhase(Enum):
    """Phases of a single combat encounter."""
    CHOOSING_TYPE = auto()
    CHOOSING_ACTION = auto()
    RESOLVING = auto()
    ENDED = auto()


class CombatOutcome(Enum):
    """Terminal outcome of a combat."""
    PLAYER_VICTORY = "player_victory"
    ENEMY_VICTORY = "enemy_victory"
    PEACEFUL_RESOLUTION = "peaceful_resolution"


class Side(Enum):
    """The two sides of a combat."""
    PLAYER = 0
    ENEMY = 1

    @property
    def opponent(self) -> "Side":
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


class EnemyTier(Enum):
    """Difficulty tiers for enemies."""
    NORMAL = "normal"
    ELITE = "elite"
    BOSS = "boss"


# Convenience mappings for display
COMBAT_TYPE_NAMES = {
    CombatType.HEART: "Heart",
    CombatType.BODY: "Body",
    CombatType.MIND: "Mind",
}

ACTION_NAMES = {
    ActionChoice.ATTACK: "Attack",
    ActionChoice.DEFEND: "Defend",
}

ADVANTAGE_NAMES = {
    Advantage.ADVANTAGE: "Advantage",
    Advantage.NEUTRAL: "Neutral",
    Advantage.DISADVANTAGE: "Disadvantage",
}

OUTCOME_NAMES = {
    CombatOutcome.PLAYER_VICTORY: "Victory",
    CombatOutcome.ENEMY_VICTORY: "Defeat",
    CombatOutcome.PEACEFUL_RESOLUTION: "Bond Formed",
}
