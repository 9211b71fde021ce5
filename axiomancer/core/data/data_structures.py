"""Unified data structures and conversion utilities.

This module provides clear definitions for the different data
representations used by the combat engine.

Data Flow:
1. CharacterRecord / EnemyRecord (host game) -> Combatant (combat snapshot)
2. PendingDecision (staged input) -> Decision (complete round input)

Every structure here is an immutable value. Copies are made by constructing
new records, never by mutating shared ones.
"""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from ..errors import InvalidConfigurationError, PreconditionViolation
from .game_enums import ActionChoice, CombatOutcome, CombatType, EnemyTier

if TYPE_CHECKING:
    from .game_info import CombatRules


@dataclass(frozen=True)
class TypeStats:
    """One integer value per combat type."""
    heart: int = 0
    body: int = 0
    mind: int = 0

    def __getitem__(self, combat_type: CombatType) -> int:
        """Enable lookups like ``stats[CombatType.BODY]``."""
        if not isinstance(combat_type, CombatType):
            raise InvalidConfigurationError(f"Unknown combat type: {combat_type!r}")
        return getattr(self, combat_type.value)

    def as_dict(self) -> dict[str, int]:
        return {"heart": self.heart, "body": self.body, "mind": self.mind}

    @classmethod
    def uniform(cls, value: int) -> "TypeStats":
        return cls(heart=value, body=value, mind=value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TypeStats":
        """Build from a mapping keyed by combat type name."""
        values = {}
        for key, value in data.items():
            combat_type = CombatType.parse(key)
            values[combat_type.value] = int(value)
        return cls(**values)


@dataclass(frozen=True)
class Combatant:
    """Snapshot of one side of a combat.

    Health is clamped to ``[0, max_health]`` on construction so a snapshot
    can never hold an out-of-range value.
    """
    name: str
    health: int
    max_health: int
    offense: TypeStats
    defense: TypeStats
    policy_id: Optional[str] = None
    tier: Optional[EnemyTier] = None

    def __post_init__(self):
        if self.max_health <= 0:
            raise InvalidConfigurationError(f"{self.name}: max_health must be positive")
        # Set clamped health since dataclass frozen=True prevents normal assignment
        clamped = max(0, min(self.max_health, int(self.health)))
        object.__setattr__(self, "health", clamped)

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

    def with_health(self, health: int) -> "Combatant":
        """Return a copy with new (clamped) health."""
        return replace(self, health=health)

    def take_damage(self, amount: int) -> "Combatant":
        """Return a copy with ``amount`` damage applied (negative is ignored)."""
        return self.with_health(self.health - max(0, amount))

    def snapshot(self) -> "Combatant":
        """Explicit value copy used when combat starts."""
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "health": self.health,
            "max_health": self.max_health,
            "offense": self.offense.as_dict(),
            "defense": self.defense.as_dict(),
            "policy_id": self.policy_id,
            "tier": self.tier.value if self.tier else None,
        }


@dataclass(frozen=True)
class Decision:
    """A complete choice for one round: type plus action."""
    combat_type: CombatType
    action: ActionChoice

    def __post_init__(self):
        # Reject raw strings or foreign values early, never guess a fallback
        if not isinstance(self.combat_type, CombatType):
            raise InvalidConfigurationError(f"Unknown combat type: {self.combat_type!r}")
        if not isinstance(self.action, ActionChoice):
            raise InvalidConfigurationError(f"Unknown action: {self.action!r}")

    @classmethod
    def parse(cls, combat_type: Union[str, CombatType], action: Union[str, ActionChoice]) -> "Decision":
        return cls(CombatType.parse(combat_type), ActionChoice.parse(action))

    def to_dict(self) -> dict[str, str]:
        return {"type": self.combat_type.value, "action": self.action.value}


# Staged decision collection: NoDecision -> TypeChosen -> CompleteDecision

@dataclass(frozen=True)
class NoDecision:
    """Nothing chosen yet this round."""

    def choose_type(self, combat_type: CombatType) -> "TypeChosen":
        return TypeChosen(CombatType.parse(combat_type))

    def choose_action(self, action: ActionChoice) -> "CompleteDecision":
        raise PreconditionViolation("A combat type must be chosen before an action")


@dataclass(frozen=True)
class TypeChosen:
    """Type chosen, action still pending."""
    combat_type: CombatType

    def choose_type(self, combat_type: CombatType) -> "TypeChosen":
        return TypeChosen(CombatType.parse(combat_type))

    def choose_action(self, action: ActionChoice) -> "CompleteDecision":
        return CompleteDecision(Decision(self.combat_type, ActionChoice.parse(action)))


@dataclass(frozen=True)
class CompleteDecision:
    """Both type and action chosen; immutable for the rest of the round."""
    decision: Decision

    def choose_type(self, combat_type: CombatType) -> "TypeChosen":
        raise PreconditionViolation("Decision already submitted for this round")

    def choose_action(self, action: ActionChoice) -> "CompleteDecision":
        raise PreconditionViolation("Decision already submitted for this round")


PendingDecision = Union[NoDecision, TypeChosen, CompleteDecision]

NO_DECISION = NoDecision()


def is_complete(pending: PendingDecision) -> bool:
    """Check whether a pending decision holds a full Decision."""
    return isinstance(pending, CompleteDecision)


def pending_to_dict(pending: PendingDecision) -> dict[str, Optional[str]]:
    if isinstance(pending, CompleteDecision):
        return pending.decision.to_dict()
    if isinstance(pending, TypeChosen):
        return {"type": pending.combat_type.value, "action": None}
    return {"type": None, "action": None}


# Host-side records (stat derivation boundary)

@dataclass
class CharacterRecord:
    """Pre-combat player character owned by the host game."""
    name: str
    level: int
    base_stats: TypeStats
    health: Optional[int] = None

    def max_health(self, rules: "CombatRules") -> int:
        """Max health = level x average(base stats) x health_per_stat."""
        stats = self.base_stats
        average = (stats.heart + stats.body + stats.mind) / 3
        return max(1, int(self.level * average * rules.health_per_stat))

    def to_combatant(self, rules: "CombatRules") -> Combatant:
        """Derive the combat snapshot; base stats back both offense and defense."""
        max_health = self.max_health(rules)
        health = max_health if self.health is None else self.health
        return Combatant(
            name=self.name,
            health=health,
            max_health=max_health,
            offense=self.base_stats,
            defense=self.base_stats,
        )


@dataclass
class EnemyRecord:
    """Pre-combat enemy owned by the host game's bestiary."""
    enemy_id: str
    name: str
    level: int
    health: int
    max_health: int
    skill: TypeStats
    defense: TypeStats
    tier: EnemyTier = EnemyTier.NORMAL
    policy_id: Optional[str] = None
    description: str = ""

    @classmethod
    def from_stat_block(cls, enemy_id: str, name: str, level: int,
                        stat_block: Mapping[str, int], **kwargs: Any) -> "EnemyRecord":
        """Build from a stat block keyed like ``physicalSkill``/``mentalDefense``.

        Body maps to physical, mind to mental and heart to emotional.
        """
        from .game_info import ENEMY_STAT_PREFIXES

        skill = {}
        defense = {}
        for combat_type, prefix in ENEMY_STAT_PREFIXES.items():
            try:
                skill[combat_type.value] = int(stat_block[f"{prefix}Skill"])
                defense[combat_type.value] = int(stat_block[f"{prefix}Defense"])
            except KeyError as e:
                raise InvalidConfigurationError(f"{name}: missing enemy stat {e}") from None

        max_health = int(stat_block.get("maxHealth", kwargs.pop("max_health", 1)))
        health = int(kwargs.pop("health", max_health))
        return cls(
            enemy_id=enemy_id,
            name=name,
            level=level,
            health=health,
            max_health=max_health,
            skill=TypeStats(**skill),
            defense=TypeStats(**defense),
            **kwargs,
        )

    def to_combatant(self, rules: Optional["CombatRules"] = None) -> Combatant:
        from .game_info import TIER_POLICIES

        return Combatant(
            name=self.name,
            health=self.health,
            max_health=self.max_health,
            offense=self.skill,
            defense=self.defense,
            policy_id=self.policy_id or TIER_POLICIES[self.tier],
            tier=self.tier,
        )


@dataclass(frozen=True)
class CombatConclusion:
    """Final values the persistence layer writes back after combat ends."""
    outcome: CombatOutcome
    rounds: int
    player_health: int
    enemy_health: int
    friendship: int = 0
