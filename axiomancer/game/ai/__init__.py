"""AI system components.

This package contains enemy decision logic:
- ai_behaviors.py: Policy strategies (random, weighted, scripted)
- ai_controller.py: Policy registry and per-round enemy decisions
"""

from .ai_controller import DEFAULT_POLICY_ID, EnemyDecisionGenerator
from .ai_behaviors import (
    AIType,
    DecisionPolicy,
    RandomPolicy,
    ScriptedPolicy,
    WeightedPolicy,
    create_policy,
)

__all__ = [
    "DEFAULT_POLICY_ID",
    "EnemyDecisionGenerator",
    "AIType",
    "DecisionPolicy",
    "RandomPolicy",
    "ScriptedPolicy",
    "WeightedPolicy",
    "create_policy",
]
