"""AI Behavior Strategy Classes

This module implements the Strategy design pattern for enemy decisions.
Each policy represents a different way of picking a type and an action for
the round; the round resolver never knows which one produced a decision.
"""

import itertools
import random
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterable, Mapping, Optional, Sequence

from ...core.data.data_structures import Decision
from ...core.data.game_enums import ActionChoice, CombatType
from ...core.errors import InvalidConfigurationError, PreconditionViolation

if TYPE_CHECKING:
    from ...core.engine.combat_state import CombatState


class AIType(Enum):
    """Available enemy policy types."""
    RANDOM = auto()
    AGGRESSIVE = auto()
    DEFENSIVE = auto()


class DecisionPolicy(ABC):
    """Abstract base class for enemy decision policies."""

    @abstractmethod
    def decide(self, state: Optional["CombatState"] = None) -> Decision:
        """Choose the enemy's decision for the current round.

        Args:
            state: The combat state before the round is resolved; policies
                that ignore context accept None

        Returns:
            A complete Decision
        """
        pass

    @abstractmethod
    def get_policy_name(self) -> str:
        """Get the name of this policy."""
        pass


class RandomPolicy(DecisionPolicy):
    """Uniform type and uniform action, drawn independently."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def decide(self, state: Optional["CombatState"] = None) -> Decision:
        combat_type = self.rng.choice(list(CombatType))
        action = self.rng.choice(list(ActionChoice))
        return Decision(combat_type, action)

    def get_policy_name(self) -> str:
        return "Random"


class WeightedPolicy(DecisionPolicy):
    """Independent weighted draws for type and action."""

    def __init__(
        self,
        type_weights: Optional[Mapping[CombatType, float]] = None,
        action_weights: Optional[Mapping[ActionChoice, float]] = None,
        rng: Optional[random.Random] = None,
        name: str = "Weighted",
    ):
        self.type_weights = self._validate(type_weights, CombatType, "type")
        self.action_weights = self._validate(action_weights, ActionChoice, "action")
        self.rng = rng if rng is not None else random.Random()
        self.name = name

    @staticmethod
    def _validate(weights, enum_cls, label: str) -> dict:
        if weights is None:
            return {member: 1.0 for member in enum_cls}
        resolved = {}
        for key, value in weights.items():
            member = enum_cls.parse(key)
            if value < 0:
                raise InvalidConfigurationError(f"Negative {label} weight for {member.value}: {value}")
            resolved[member] = float(value)
        for member in enum_cls:
            resolved.setdefault(member, 0.0)
        if sum(resolved.values()) <= 0:
            raise InvalidConfigurationError(f"At least one {label} weight must be positive")
        return resolved

    def decide(self, state: Optional["CombatState"] = None) -> Decision:
        types = list(self.type_weights)
        actions = list(self.action_weights)
        combat_type = self.rng.choices(types, weights=[self.type_weights[t] for t in types])[0]
        action = self.rng.choices(actions, weights=[self.action_weights[a] for a in actions])[0]
        return Decision(combat_type, action)

    def get_policy_name(self) -> str:
        return self.name


class ScriptedPolicy(DecisionPolicy):
    """Plays back a fixed sequence of decisions."""

    def __init__(self, decisions: Iterable[Decision], loop: bool = False):
        script: Sequence[Decision] = tuple(decisions)
        if not script:
            raise InvalidConfigurationError("A scripted policy needs at least one decision")
        self.script = script
        self.loop = loop
        self._iterator = itertools.cycle(script) if loop else iter(script)

    def decide(self, state: Optional["CombatState"] = None) -> Decision:
        try:
            return next(self._iterator)
        except StopIteration:
            raise PreconditionViolation("Scripted policy has no decisions left") from None

    def get_policy_name(self) -> str:
        return "Scripted"


def create_policy(ai_type: AIType, rng: Optional[random.Random] = None) -> DecisionPolicy:
    """Factory function to create policy instances.

    Args:
        ai_type: Type of policy to create
        rng: Randomness source shared with the rest of the combat

    Returns:
        DecisionPolicy instance

    Raises:
        InvalidConfigurationError: If ai_type is not supported
    """
    if ai_type == AIType.RANDOM:
        return RandomPolicy(rng)
    elif ai_type == AIType.AGGRESSIVE:
        return WeightedPolicy(
            action_weights={ActionChoice.ATTACK: 3.0, ActionChoice.DEFEND: 1.0},
            rng=rng,
            name="Aggressive"
        )
    elif ai_type == AIType.DEFENSIVE:
        return WeightedPolicy(
            action_weights={ActionChoice.ATTACK: 1.0, ActionChoice.DEFEND: 3.0},
            rng=rng,
            name="Defensive"
        )
    else:
        raise InvalidConfigurationError(f"Unsupported AI type: {ai_type}")
