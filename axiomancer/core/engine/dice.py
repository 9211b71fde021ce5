"""Dice rolling under advantage, neutral and disadvantage rules.

All randomness in the engine flows through a :class:`DiceRoller` built
around an injected ``random.Random``. Tests pass a seeded instance or a
mock whose ``randint`` returns scripted faces.
"""

import random
from typing import Optional

from ..data.game_enums import Advantage
from ..errors import InvalidConfigurationError
from .combat_state import RollDetail


class DiceRoller:
    """Rolls a single die type (d20 by default) with advantage rules."""

    def __init__(self, rng: Optional[random.Random] = None, sides: int = 20):
        """Initialize the roller.

        Args:
            rng: Randomness source; a fresh unseeded ``random.Random`` if omitted
            sides: Number of faces on the die
        """
        if sides < 1:
            raise InvalidConfigurationError(f"Dice must have at least one side, got {sides}")
        self.rng = rng if rng is not None else random.Random()
        self.sides = sides

    @classmethod
    def seeded(cls, seed: int, sides: int = 20) -> "DiceRoller":
        """Create a deterministic roller for replays and tests."""
        return cls(random.Random(seed), sides)

    def _die(self) -> int:
        return self.rng.randint(1, self.sides)

    def roll_dice(self, advantage: Advantage) -> tuple[int, ...]:
        """Roll the raw faces needed for the given advantage."""
        if advantage is Advantage.NEUTRAL:
            return (self._die(),)
        if advantage in (Advantage.ADVANTAGE, Advantage.DISADVANTAGE):
            return (self._die(), self._die())
        raise InvalidConfigurationError(f"Unknown advantage: {advantage!r}")

    def roll(self, advantage: Advantage) -> int:
        """Roll and return the kept face.

        Neutral keeps a single die; advantage keeps the higher of two and
        disadvantage the lower of two.
        """
        return self.roll_detailed(advantage).kept

    def roll_detailed(self, advantage: Advantage, modifier: int = 0) -> RollDetail:
        """Roll and return the full structured result, including the modifier."""
        dice = self.roll_dice(advantage)
        if advantage is Advantage.ADVANTAGE:
            kept = max(dice)
        elif advantage is Advantage.DISADVANTAGE:
            kept = min(dice)
        else:
            kept = dice[0]
        return RollDetail(
            advantage=advantage,
            dice=dice,
            kept=kept,
            modifier=modifier,
            sides=self.sides,
        )
