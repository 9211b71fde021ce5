"""Combat state values with structured round records.

This module defines the aggregate :class:`CombatState` along with the
records that describe one resolved round. Every value is immutable: state
transitions build new instances, and the battle log is an append-only tuple.
All intermediate quantities (rolls, multipliers, damage operands) are kept
as plain data so any presentation layer can render them without
re-deriving anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from ..data.data_structures import (
    NO_DECISION,
    Combatant,
    CompleteDecision,
    Decision,
    PendingDecision,
    pending_to_dict,
)
from ..data.game_enums import Advantage, CombatOutcome, CombatPhase, Side

_DICE_LABELS = {
    Advantage.ADVANTAGE: "keep higher",
    Advantage.NEUTRAL: "",
    Advantage.DISADVANTAGE: "keep lower",
}


@dataclass(frozen=True)
class RollDetail:
    """One dice roll plus the stat modifier added to it."""

    advantage: Advantage
    dice: tuple[int, ...]
    kept: int
    modifier: int = 0
    sides: int = 20

    @property
    def total(self) -> int:
        return self.kept + self.modifier

    def dice_notation(self) -> str:
        if len(self.dice) == 1:
            return f"1d{self.sides}"
        return f"{len(self.dice)}d{self.sides} {_DICE_LABELS[self.advantage]}"

    def describe(self, stat_label: str = "stat") -> str:
        """Format like ``15 = 10 [2d20 keep higher: 10, 4] + 5 heart``."""
        faces = ", ".join(str(d) for d in self.dice)
        return f"{self.total} = {self.kept} [{self.dice_notation()}: {faces}] + {self.modifier} {stat_label}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "advantage": self.advantage.value,
            "dice": list(self.dice),
            "kept": self.kept,
            "modifier": self.modifier,
            "total": self.total,
        }


@dataclass(frozen=True)
class DamageBreakdown:
    """Operands of a single damage calculation."""

    attack_total: int
    base_defense: int
    defense_multiplier: float
    is_critical: bool
    final_damage: int

    @property
    def effective_defense(self) -> float:
        return self.base_defense * self.defense_multiplier

    def describe(self) -> str:
        """Format like ``( 17 - ( 4 x 1.5 ) ) = 11``."""
        multiplier = f"{self.defense_multiplier:g}"
        text = f"( {self.attack_total} - ( {self.base_defense} x {multiplier} ) ) = {self.final_damage}"
        if self.is_critical:
            text += " (critical)"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "attack_total": self.attack_total,
            "base_defense": self.base_defense,
            "defense_multiplier": self.defense_multiplier,
            "effective_defense": self.effective_defense,
            "is_critical": self.is_critical,
            "final_damage": self.final_damage,
        }


@dataclass(frozen=True)
class BattleLogEntry:
    """Immutable record of one resolved round."""

    round: int
    player_decision: Decision
    enemy_decision: Decision
    player_advantage: Advantage
    enemy_advantage: Advantage
    player_roll: Optional[RollDetail]
    enemy_roll: Optional[RollDetail]
    player_roll_details: str
    enemy_roll_details: str
    damage_roll: Optional[RollDetail]
    damage: Optional[DamageBreakdown]
    damage_to_player: int
    damage_to_enemy: int
    player_health_after: int
    enemy_health_after: int
    summary: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "round": self.round,
            "player_decision": self.player_decision.to_dict(),
            "enemy_decision": self.enemy_decision.to_dict(),
            "player_advantage": self.player_advantage.value,
            "enemy_advantage": self.enemy_advantage.value,
            "player_roll": self.player_roll.to_dict() if self.player_roll else None,
            "enemy_roll": self.enemy_roll.to_dict() if self.enemy_roll else None,
            "player_roll_details": self.player_roll_details,
            "enemy_roll_details": self.enemy_roll_details,
            "damage_roll": self.damage_roll.to_dict() if self.damage_roll else None,
            "damage": self.damage.to_dict() if self.damage else None,
            "damage_to_player": self.damage_to_player,
            "damage_to_enemy": self.damage_to_enemy,
            "player_health_after": self.player_health_after,
            "enemy_health_after": self.enemy_health_after,
            "summary": self.summary,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class CombatState:
    """Aggregate state of one combat between the player and a single enemy."""

    player: Combatant
    enemy: Combatant
    active: bool = True
    phase: CombatPhase = CombatPhase.CHOOSING_TYPE
    round: int = 1
    friendship_counter: int = 0
    player_choice: PendingDecision = NO_DECISION
    enemy_choice: PendingDecision = NO_DECISION
    log: tuple[BattleLogEntry, ...] = ()
    outcome: Optional[CombatOutcome] = None

    @property
    def rounds_resolved(self) -> int:
        return len(self.log)

    def combatant(self, side: Side) -> Combatant:
        return self.player if side is Side.PLAYER else self.enemy

    def choice(self, side: Side) -> PendingDecision:
        return self.player_choice if side is Side.PLAYER else self.enemy_choice

    def decisions(self) -> Optional[tuple[Decision, Decision]]:
        """Both decisions when complete, otherwise None."""
        if isinstance(self.player_choice, CompleteDecision) and isinstance(self.enemy_choice, CompleteDecision):
            return self.player_choice.decision, self.enemy_choice.decision
        return None

    def with_choice(self, side: Side, pending: PendingDecision) -> CombatState:
        if side is Side.PLAYER:
            return replace(self, player_choice=pending)
        return replace(self, enemy_choice=pending)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for persistence and UI layers."""
        return {
            "active": self.active,
            "phase": self.phase.name.lower(),
            "round": self.round,
            "friendship_counter": self.friendship_counter,
            "player": self.player.to_dict(),
            "enemy": self.enemy.to_dict(),
            "player_choice": pending_to_dict(self.player_choice),
            "enemy_choice": pending_to_dict(self.enemy_choice),
            "log": [entry.to_dict() for entry in self.log],
            "outcome": self.outcome.value if self.outcome else None,
        }
