"""
Enemy decision generation.

Maps policy identifiers (as carried on enemy combatant snapshots) to
:class:`DecisionPolicy` instances and asks them for the enemy's decision
each round.
"""

import random
from typing import TYPE_CHECKING, Callable, Optional, Union

from ...core.data.data_structures import Decision
from ...core.errors import InvalidConfigurationError
from ...core.events.events import LogMessage
from .ai_behaviors import AIType, DecisionPolicy, create_policy

if TYPE_CHECKING:
    from ...core.engine.combat_state import CombatState
    from ...core.events.event_manager import EventManager

PolicyFactory = Callable[[random.Random], DecisionPolicy]

DEFAULT_POLICY_ID = "random"


class EnemyDecisionGenerator:
    """Registry of enemy policies keyed by identifier."""

    def __init__(self, rng: Optional[random.Random] = None, event_manager: Optional["EventManager"] = None):
        self.rng = rng if rng is not None else random.Random()
        self.event_manager = event_manager
        self._factories: dict[str, PolicyFactory] = {}
        self._policies: dict[str, DecisionPolicy] = {}

        for ai_type in AIType:
            self.register(ai_type.name.lower(), lambda rng, ai_type=ai_type: create_policy(ai_type, rng))

    def _emit_log(self, message: str, round_number: int = 0) -> None:
        if self.event_manager is None:
            return
        self.event_manager.publish(
            LogMessage(
                round=round_number,
                message=message,
                category="AI",
                level="DEBUG",
                source="EnemyDecisionGenerator"
            ),
            source="EnemyDecisionGenerator"
        )

    def register(self, policy_id: str, factory: PolicyFactory) -> None:
        """Register (or replace) the factory behind a policy identifier."""
        key = policy_id.lower()
        self._factories[key] = factory
        self._policies.pop(key, None)

    @property
    def policy_ids(self) -> list[str]:
        return sorted(self._factories)

    def get_policy(self, policy_id: Optional[str]) -> DecisionPolicy:
        """Get the shared policy instance for an identifier.

        Raises:
            InvalidConfigurationError: If the identifier is not registered
        """
        key = (policy_id or DEFAULT_POLICY_ID).lower()
        if key not in self._policies:
            factory = self._factories.get(key)
            if factory is None:
                raise InvalidConfigurationError(f"Unknown enemy policy: {policy_id!r}")
            self._policies[key] = factory(self.rng)
        return self._policies[key]

    def decide(
        self,
        policy: Union[DecisionPolicy, str, None],
        state: Optional["CombatState"] = None,
    ) -> Decision:
        """Produce a decision from a policy object or a registered identifier."""
        if not isinstance(policy, DecisionPolicy):
            policy = self.get_policy(policy)
        decision = policy.decide(state)
        self._emit_log(
            f"{policy.get_policy_name()} policy chose {decision.action.value} with {decision.combat_type.value}",
            state.round if state is not None else 0
        )
        return decision

    def decide_for(self, state: "CombatState") -> Decision:
        """Use the policy named on the enemy snapshot."""
        return self.decide(state.enemy.policy_id, state)
