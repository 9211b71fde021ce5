"""
Round resolution for a pair of combat decisions.

This module turns both sides' decisions for a round into damage, rolls and
a friendship flag. It never touches combat state: the state machine in
:mod:`combat_manager` applies the returned :class:`RoundResult`.

Four cases are dispatched on the action pair:
- attack vs attack: contest roll, the strict winner rolls again for damage
  against the loser's passive defense; a tie deals nothing
- attack vs defend (either way round): the attack auto-connects against the
  defender's advantage-scaled defense
- defend vs defend: no damage, friendship grows
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from ...core.data.data_structures import Combatant, Decision
from ...core.data.game_enums import ActionChoice, Advantage, COMBAT_TYPE_NAMES, Side
from ...core.engine.combat_state import DamageBreakdown, RollDetail
from ...core.engine.dice import DiceRoller
from ...core.errors import PreconditionViolation
from .damage_calculator import DamageCalculator
from .type_advantage import resolve_matchup

CriticalCheck = Callable[[RollDetail], bool]


class RoundCase(Enum):
    """Which of the action pairs a round resolved."""
    ATTACK_VS_ATTACK = auto()
    PLAYER_ATTACKS_DEFENDER = auto()
    ENEMY_ATTACKS_DEFENDER = auto()
    BOTH_DEFEND = auto()


@dataclass(frozen=True)
class RoundResult:
    """Everything one round produced, as plain data."""
    case: RoundCase
    player_decision: Decision
    enemy_decision: Decision
    player_advantage: Advantage
    enemy_advantage: Advantage
    player_roll: Optional[RollDetail]
    enemy_roll: Optional[RollDetail]
    damage_roll: Optional[RollDetail]
    damage: Optional[DamageBreakdown]
    damage_to_player: int
    damage_to_enemy: int
    striker: Optional[Side]
    friendship_increment: bool
    summary: str

    @property
    def is_tie(self) -> bool:
        return self.case is RoundCase.ATTACK_VS_ATTACK and self.striker is None


class RoundResolver:
    """Resolves one round from two complete decisions."""

    def __init__(
        self,
        dice: Optional[DiceRoller] = None,
        calculator: Optional[DamageCalculator] = None,
        critical_check: Optional[CriticalCheck] = None,
    ):
        """
        Args:
            dice: Source of all rolls in the round
            calculator: Damage pipeline and its rule constants
            critical_check: Optional hook deciding whether a damage roll is
                critical; without it no round is ever critical
        """
        self.calculator = calculator or DamageCalculator()
        self.dice = dice or DiceRoller(sides=self.calculator.rules.dice_sides)
        self.critical_check = critical_check

    def resolve(
        self,
        player: Combatant,
        enemy: Combatant,
        player_decision: Decision,
        enemy_decision: Decision,
    ) -> RoundResult:
        """Resolve a round and return its result without mutating anything."""
        if not isinstance(player_decision, Decision) or not isinstance(enemy_decision, Decision):
            raise PreconditionViolation("Both sides need a complete decision to resolve a round")

        player_advantage, enemy_advantage = resolve_matchup(
            player_decision.combat_type, enemy_decision.combat_type
        )
        sides = _RoundSides(
            player=player,
            enemy=enemy,
            player_decision=player_decision,
            enemy_decision=enemy_decision,
            player_advantage=player_advantage,
            enemy_advantage=enemy_advantage,
        )

        player_attacks = player_decision.action is ActionChoice.ATTACK
        enemy_attacks = enemy_decision.action is ActionChoice.ATTACK

        if player_attacks and enemy_attacks:
            return self._resolve_attack_vs_attack(sides)
        if player_attacks:
            return self._resolve_attack_vs_defend(sides, Side.PLAYER)
        if enemy_attacks:
            return self._resolve_attack_vs_defend(sides, Side.ENEMY)
        return self._resolve_both_defend(sides)

    def _is_critical(self, roll: RollDetail) -> bool:
        return bool(self.critical_check and self.critical_check(roll))

    def _attack_roll(self, sides: "_RoundSides", side: Side) -> RollDetail:
        combatant = sides.combatant(side)
        decision = sides.decision(side)
        return self.dice.roll_detailed(sides.advantage(side), combatant.offense[decision.combat_type])

    def _resolve_attack_vs_attack(self, sides: "_RoundSides") -> RoundResult:
        player_roll = self._attack_roll(sides, Side.PLAYER)
        enemy_roll = self._attack_roll(sides, Side.ENEMY)

        if player_roll.total == enemy_roll.total:
            return sides.result(
                RoundCase.ATTACK_VS_ATTACK,
                player_roll=player_roll,
                enemy_roll=enemy_roll,
                summary=f"Tie ({player_roll.total} vs {enemy_roll.total}): wits clash, both attacks miss",
            )

        winner = Side.PLAYER if player_roll.total > enemy_roll.total else Side.ENEMY
        loser = winner.opponent

        # The winner's damage is a second, independent roll
        damage_roll = self._attack_roll(sides, winner)
        damage = self.calculator.calculate(
            attack_total=damage_roll.total,
            base_defense=sides.combatant(loser).defense[sides.decision(loser).combat_type],
            defending=False,
            is_critical=self._is_critical(damage_roll),
        )
        winner_total = player_roll.total if winner is Side.PLAYER else enemy_roll.total
        loser_total = enemy_roll.total if winner is Side.PLAYER else player_roll.total
        return sides.result(
            RoundCase.ATTACK_VS_ATTACK,
            player_roll=player_roll,
            enemy_roll=enemy_roll,
            damage_roll=damage_roll,
            damage=damage,
            striker=winner,
            summary=(
                f"{sides.combatant(winner).name} wins the contest ({winner_total} vs {loser_total}) "
                f"and deals {damage.final_damage} damage to {sides.combatant(loser).name}"
            ),
        )

    def _resolve_attack_vs_defend(self, sides: "_RoundSides", attacker: Side) -> RoundResult:
        defender = attacker.opponent
        attack_roll = self._attack_roll(sides, attacker)
        damage = self.calculator.calculate(
            attack_total=attack_roll.total,
            base_defense=sides.combatant(defender).defense[sides.decision(defender).combat_type],
            defending=True,
            defender_advantage=sides.advantage(defender),
            is_critical=self._is_critical(attack_roll),
        )
        case = RoundCase.PLAYER_ATTACKS_DEFENDER if attacker is Side.PLAYER else RoundCase.ENEMY_ATTACKS_DEFENDER
        return sides.result(
            case,
            player_roll=attack_roll if attacker is Side.PLAYER else None,
            enemy_roll=attack_roll if attacker is Side.ENEMY else None,
            damage=damage,
            striker=attacker,
            summary=(
                f"{sides.combatant(attacker).name} dealt {damage.final_damage} damage "
                f"while {sides.combatant(defender).name} defended"
            ),
        )

    def _resolve_both_defend(self, sides: "_RoundSides") -> RoundResult:
        return sides.result(
            RoundCase.BOTH_DEFEND,
            friendship_increment=True,
            summary="Both defended: a moment of stillness passes and friendship grows",
        )


@dataclass(frozen=True)
class _RoundSides:
    """Per-side lookups for a single round."""
    player: Combatant
    enemy: Combatant
    player_decision: Decision
    enemy_decision: Decision
    player_advantage: Advantage
    enemy_advantage: Advantage

    def combatant(self, side: Side) -> Combatant:
        return self.player if side is Side.PLAYER else self.enemy

    def decision(self, side: Side) -> Decision:
        return self.player_decision if side is Side.PLAYER else self.enemy_decision

    def advantage(self, side: Side) -> Advantage:
        return self.player_advantage if side is Side.PLAYER else self.enemy_advantage

    def result(
        self,
        case: RoundCase,
        player_roll: Optional[RollDetail] = None,
        enemy_roll: Optional[RollDetail] = None,
        damage_roll: Optional[RollDetail] = None,
        damage: Optional[DamageBreakdown] = None,
        striker: Optional[Side] = None,
        friendship_increment: bool = False,
        summary: str = "",
    ) -> RoundResult:
        dealt = damage.final_damage if damage else 0
        return RoundResult(
            case=case,
            player_decision=self.player_decision,
            enemy_decision=self.enemy_decision,
            player_advantage=self.player_advantage,
            enemy_advantage=self.enemy_advantage,
            player_roll=player_roll,
            enemy_roll=enemy_roll,
            damage_roll=damage_roll,
            damage=damage,
            damage_to_player=dealt if striker is Side.ENEMY else 0,
            damage_to_enemy=dealt if striker is Side.PLAYER else 0,
            striker=striker,
            friendship_increment=friendship_increment,
            summary=summary,
        )


def roll_description(roll: Optional[RollDetail], decision: Decision, defending_label: str = "Defending") -> str:
    """Human-readable roll description for battle log entries."""
    if roll is None:
        if decision.action is ActionChoice.DEFEND:
            return f"{defending_label} with {COMBAT_TYPE_NAMES[decision.combat_type]}"
        return "No roll"
    return roll.describe(decision.combat_type.value)
