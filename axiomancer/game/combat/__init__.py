"""Combat system components.

This package contains the core combat logic with clear separation of concerns:
- type_advantage.py: Cyclic type advantage between two choices
- damage_calculator.py: Damage formula, defense multipliers and forecasts
- round_resolver.py: Resolution of one round from two decisions
- combat_manager.py: Round and phase state machine plus event publishing
"""

from .combat_manager import (
    CombatManager,
    conclude_combat,
    determine_outcome,
    is_ongoing,
    resolve_round,
    start_combat,
    submit_decisions,
    submit_enemy_decision,
    submit_player_action,
    submit_player_decision,
    submit_player_type,
)
from .damage_calculator import DamageCalculator
from .round_resolver import RoundCase, RoundResolver, RoundResult
from .type_advantage import BEATS, resolve_advantage, resolve_matchup

__all__ = [
    "CombatManager",
    "conclude_combat",
    "determine_outcome",
    "is_ongoing",
    "resolve_round",
    "start_combat",
    "submit_decisions",
    "submit_enemy_decision",
    "submit_player_action",
    "submit_player_decision",
    "submit_player_type",
    "DamageCalculator",
    "RoundCase",
    "RoundResolver",
    "RoundResult",
    "BEATS",
    "resolve_advantage",
    "resolve_matchup",
]
