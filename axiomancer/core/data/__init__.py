"""Core data structures and definitions.

This package contains fundamental data types and game definitions:
- data_structures.py: Combatant snapshots, decisions and host-side records
- game_enums.py: Centralized enums for combat types, actions, phases, outcomes
- game_info.py: Combat rule constants and static lookup tables
"""

from .data_structures import (
    TypeStats,
    Combatant,
    Decision,
    NoDecision,
    TypeChosen,
    CompleteDecision,
    PendingDecision,
    NO_DECISION,
    is_complete,
    pending_to_dict,
    CharacterRecord,
    EnemyRecord,
    CombatConclusion,
)
from .game_enums import (
    CombatType,
    ActionChoice,
    Advantage,
    CombatPhase,
    CombatOutcome,
    Side,
    EnemyTier,
    COMBAT_TYPE_NAMES,
    ACTION_NAMES,
    ADVANTAGE_NAMES,
    OUTCOME_NAMES,
)
from .game_info import CombatRules, DEFAULT_RULES, ENEMY_STAT_PREFIXES, TIER_POLICIES

__all__ = [
    "TypeStats",
    "Combatant",
    "Decision",
    "NoDecision",
    "TypeChosen",
    "CompleteDecision",
    "PendingDecision",
    "NO_DECISION",
    "is_complete",
    "pending_to_dict",
    "CharacterRecord",
    "EnemyRecord",
    "CombatConclusion",
    "CombatType",
    "ActionChoice",
    "Advantage",
    "CombatPhase",
    "CombatOutcome",
    "Side",
    "EnemyTier",
    "COMBAT_TYPE_NAMES",
    "ACTION_NAMES",
    "ADVANTAGE_NAMES",
    "OUTCOME_NAMES",
    "CombatRules",
    "DEFAULT_RULES",
    "ENEMY_STAT_PREFIXES",
    "TIER_POLICIES",
]
