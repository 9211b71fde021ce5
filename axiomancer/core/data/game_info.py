"""Static game information and combat rule constants.

This module is the single source of truth for every numeric value that
controls combat. ``CombatRules`` can be overridden from YAML through
:class:`~axiomancer.core.rules_loader.RulesLoader`; ``DEFAULT_RULES`` holds
the shipped values.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from .game_enums import Advantage, CombatType, EnemyTier


def _default_defense_multipliers() -> Dict[Advantage, float]:
    # Defending with the right counter-type triples defense
    return {
        Advantage.ADVANTAGE: 3.0,
        Advantage.NEUTRAL: 2.0,
        Advantage.DISADVANTAGE: 1.5,
    }


@dataclass(frozen=True)
class CombatRules:
    """Tunable combat constants."""
    dice_sides: int = 20
    defense_multipliers: Dict[Advantage, float] = field(default_factory=_default_defense_multipliers)
    passive_defense_multiplier: float = 1.0
    friendship_max: int = 3
    critical_multiplier: float = 2.0
    health_per_stat: int = 10

    def defense_multiplier_for(self, advantage: Advantage) -> float:
        """Get the active-defense multiplier for the defender's advantage."""
        return self.defense_multipliers[advantage]

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view used by the presentation layer and log files."""
        return {
            "dice_sides": self.dice_sides,
            "defense_multipliers": {adv.value: mult for adv, mult in self.defense_multipliers.items()},
            "passive_defense_multiplier": self.passive_defense_multiplier,
            "friendship_max": self.friendship_max,
            "critical_multiplier": self.critical_multiplier,
            "health_per_stat": self.health_per_stat,
        }


DEFAULT_RULES = CombatRules()


# Enemy stat names keyed by the combat type they back
ENEMY_STAT_PREFIXES = {
    CombatType.BODY: "physical",
    CombatType.MIND: "mental",
    CombatType.HEART: "emotional",
}

# Default decision policy identifier per enemy tier
TIER_POLICIES = {
    EnemyTier.NORMAL: "random",
    EnemyTier.ELITE: "aggressive",
    EnemyTier.BOSS: "aggressive",
}
