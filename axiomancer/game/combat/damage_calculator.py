"""
Damage calculation for attack rolls against defense stats.

This module turns a roll total and a defense value into final damage, and
provides forecast ranges so the UI can show predictions without affecting
combat state.
"""
import math
from typing import Optional

from ...core.data.data_structures import TypeStats
from ...core.data.game_enums import Advantage, CombatType
from ...core.data.game_info import DEFAULT_RULES, CombatRules
from ...core.engine.combat_state import DamageBreakdown
from .type_advantage import resolve_advantage


class DamageCalculator:
    """Calculates clamped damage from roll totals and defense multipliers."""

    def __init__(self, rules: Optional[CombatRules] = None):
        self.rules = rules or DEFAULT_RULES

    def final_damage(self, raw_roll: int, effective_defense: float, is_critical: bool = False) -> int:
        """Floor ``raw_roll - effective_defense`` and clamp at zero.

        The critical multiplier, when flagged, scales the difference before
        clamping so a miss never turns into healing.
        """
        damage = raw_roll - effective_defense
        if is_critical:
            damage *= self.rules.critical_multiplier
        return max(0, math.floor(damage))

    def defense_multiplier(self, defending: bool, defender_advantage: Optional[Advantage] = None) -> float:
        """Multiplier for the defender's stat.

        Args:
            defending: Whether the defender chose the defend action
            defender_advantage: The defender's advantage against the attacker's
                type, only consulted when defending

        Returns:
            The passive multiplier when not defending, otherwise the active
            multiplier for the defender's advantage
        """
        if not defending:
            return self.rules.passive_defense_multiplier
        if defender_advantage is None:
            raise ValueError("defender_advantage is required when defending")
        return self.rules.defense_multiplier_for(defender_advantage)

    def calculate(
        self,
        attack_total: int,
        base_defense: int,
        defending: bool,
        defender_advantage: Optional[Advantage] = None,
        is_critical: bool = False,
    ) -> DamageBreakdown:
        """Run the full damage pipeline and keep every operand."""
        multiplier = self.defense_multiplier(defending, defender_advantage)
        effective_defense = base_defense * multiplier
        return DamageBreakdown(
            attack_total=attack_total,
            base_defense=base_defense,
            defense_multiplier=multiplier,
            is_critical=is_critical,
            final_damage=self.final_damage(attack_total, effective_defense, is_critical),
        )

    def damage_range(
        self,
        modifier: int,
        base_defense: int,
        defending: bool,
        defender_advantage: Optional[Advantage] = None,
    ) -> tuple[int, int]:
        """Calculate min and max damage for forecast display."""
        multiplier = self.defense_multiplier(defending, defender_advantage)
        effective_defense = base_defense * multiplier
        min_damage = self.final_damage(1 + modifier, effective_defense)
        max_damage = self.final_damage(self.rules.dice_sides + modifier, effective_defense)
        return min_damage, max_damage

    def attack_forecast(self, modifier: int, defenses: TypeStats, attack_type: CombatType) -> tuple[int, int]:
        """Damage range for a landed attack whatever type and action the defender picks."""
        ranges = []
        for defend_type in CombatType:
            base_defense = defenses[defend_type]
            ranges.append(self.damage_range(modifier, base_defense, defending=False))
            ranges.append(self.damage_range(
                modifier, base_defense, defending=True,
                defender_advantage=resolve_advantage(defend_type, attack_type),
            ))
        return min(low for low, _ in ranges), max(high for _, high in ranges)
