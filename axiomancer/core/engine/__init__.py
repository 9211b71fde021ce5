"""Engine primitives: combat state values and the dice roller."""

from .combat_state import BattleLogEntry, CombatState, DamageBreakdown, RollDetail
from .dice import DiceRoller

__all__ = [
    "BattleLogEntry",
    "CombatState",
    "DamageBreakdown",
    "RollDetail",
    "DiceRoller",
]
