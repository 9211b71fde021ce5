"""
Combat state machine and its event-publishing wrapper.

The module-level functions are the engine: each takes a :class:`CombatState`
and returns a new one, never mutating its input. :class:`CombatManager`
wraps them for a host loop, publishing combat and log events through the
:class:`EventManager`.

Phases move ``CHOOSING_TYPE -> CHOOSING_ACTION -> RESOLVING`` while the
decisions are collected, then back to ``CHOOSING_TYPE`` or on to ``ENDED``
once a round is resolved.
"""
from dataclasses import replace
from typing import TYPE_CHECKING, Optional, Union

from ...core.data.data_structures import (
    NO_DECISION,
    CharacterRecord,
    CombatConclusion,
    Combatant,
    CompleteDecision,
    Decision,
    EnemyRecord,
    TypeChosen,
)
from ...core.data.game_enums import (
    ActionChoice,
    CombatOutcome,
    CombatPhase,
    CombatType,
    OUTCOME_NAMES,
    Side,
)
from ...core.data.game_info import DEFAULT_RULES, CombatRules
from ...core.engine.combat_state import BattleLogEntry, CombatState
from ...core.errors import PreconditionViolation
from ...core.events import (
    CombatEnded,
    CombatStarted,
    DecisionSubmitted,
    FriendshipIncreased,
    LogMessage,
    RoundResolved,
)
from .round_resolver import RoundResolver, roll_description

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager


def start_combat(player: Combatant, enemy: Combatant) -> CombatState:
    """Create the state for a new combat from snapshots of both sides."""
    return CombatState(player=player.snapshot(), enemy=enemy.snapshot())


def is_ongoing(state: CombatState) -> bool:
    return state.active and state.phase is not CombatPhase.ENDED


def _require_ongoing(state: CombatState) -> None:
    if not is_ongoing(state):
        raise PreconditionViolation("Combat has already ended")


def _collecting_phase(state: CombatState) -> CombatState:
    """Derive the collection phase from the two pending decisions."""
    if state.decisions() is not None:
        phase = CombatPhase.RESOLVING
    elif isinstance(state.player_choice, (TypeChosen, CompleteDecision)):
        phase = CombatPhase.CHOOSING_ACTION
    else:
        phase = CombatPhase.CHOOSING_TYPE
    return replace(state, phase=phase)


def submit_player_type(state: CombatState, combat_type: Union[str, CombatType]) -> CombatState:
    """Stage the player's type choice for the current round."""
    _require_ongoing(state)
    pending = state.player_choice.choose_type(combat_type)
    return _collecting_phase(state.with_choice(Side.PLAYER, pending))


def submit_player_action(state: CombatState, action: Union[str, ActionChoice]) -> CombatState:
    """Complete the player's decision; a type must already be staged."""
    _require_ongoing(state)
    pending = state.player_choice.choose_action(action)
    return _collecting_phase(state.with_choice(Side.PLAYER, pending))


def _submit_decision(state: CombatState, side: Side, decision: Decision) -> CombatState:
    _require_ongoing(state)
    if not isinstance(decision, Decision):
        raise PreconditionViolation(f"Expected a Decision, got {decision!r}")
    pending = state.choice(side).choose_type(decision.combat_type).choose_action(decision.action)
    return _collecting_phase(state.with_choice(side, pending))


def submit_player_decision(state: CombatState, decision: Decision) -> CombatState:
    return _submit_decision(state, Side.PLAYER, decision)


def submit_enemy_decision(state: CombatState, decision: Decision) -> CombatState:
    return _submit_decision(state, Side.ENEMY, decision)


def submit_decisions(state: CombatState, player_decision: Decision, enemy_decision: Decision) -> CombatState:
    """Submit both decisions at once, as the synchronous CLI flow does."""
    return submit_enemy_decision(submit_player_decision(state, player_decision), enemy_decision)


def determine_outcome(state: CombatState, rules: Optional[CombatRules] = None) -> Optional[CombatOutcome]:
    """Evaluate end conditions in precedence order, or None if combat goes on."""
    friendship_max = (rules or DEFAULT_RULES).friendship_max
    if state.enemy.health <= 0:
        return CombatOutcome.PLAYER_VICTORY
    if state.player.health <= 0:
        return CombatOutcome.ENEMY_VICTORY
    if state.friendship_counter >= friendship_max:
        return CombatOutcome.PEACEFUL_RESOLUTION
    return None


def resolve_round(
    state: CombatState,
    resolver: Optional[RoundResolver] = None,
    rules: Optional[CombatRules] = None,
) -> CombatState:
    """Resolve the current round and return the next state.

    Raises:
        PreconditionViolation: If combat has ended or either decision is
            still incomplete
    """
    _require_ongoing(state)
    decisions = state.decisions()
    if decisions is None:
        raise PreconditionViolation("Both decisions must be submitted before resolving a round")
    player_decision, enemy_decision = decisions

    resolver = resolver or RoundResolver()
    rules = rules or resolver.calculator.rules

    result = resolver.resolve(state.player, state.enemy, player_decision, enemy_decision)

    player = state.player.take_damage(result.damage_to_player)
    enemy = state.enemy.take_damage(result.damage_to_enemy)

    friendship = state.friendship_counter
    if result.friendship_increment:
        friendship = min(rules.friendship_max, friendship + 1)

    entry = BattleLogEntry(
        round=state.round,
        player_decision=player_decision,
        enemy_decision=enemy_decision,
        player_advantage=result.player_advantage,
        enemy_advantage=result.enemy_advantage,
        player_roll=result.player_roll,
        enemy_roll=result.enemy_roll,
        player_roll_details=roll_description(result.player_roll, player_decision),
        enemy_roll_details=roll_description(result.enemy_roll, enemy_decision),
        damage_roll=result.damage_roll,
        damage=result.damage,
        damage_to_player=result.damage_to_player,
        damage_to_enemy=result.damage_to_enemy,
        player_health_after=player.health,
        enemy_health_after=enemy.health,
        summary=result.summary,
    )

    next_state = replace(
        state,
        player=player,
        enemy=enemy,
        friendship_counter=friendship,
        round=state.round + 1,
        player_choice=NO_DECISION,
        enemy_choice=NO_DECISION,
        log=state.log + (entry,),
    )

    outcome = determine_outcome(next_state, rules)
    if outcome is None:
        return replace(next_state, phase=CombatPhase.CHOOSING_TYPE)
    return replace(next_state, phase=CombatPhase.ENDED, active=False, outcome=outcome)


def conclude_combat(
    state: CombatState,
    player_record: Optional[CharacterRecord] = None,
    enemy_record: Optional[EnemyRecord] = None,
) -> CombatConclusion:
    """Summarize an ended combat and write final health back to the records."""
    if is_ongoing(state) or state.outcome is None:
        raise PreconditionViolation("Cannot conclude a combat that has not ended")

    if player_record is not None:
        player_record.health = state.player.health
    if enemy_record is not None:
        enemy_record.health = state.enemy.health

    return CombatConclusion(
        outcome=state.outcome,
        rounds=state.rounds_resolved,
        player_health=state.player.health,
        enemy_health=state.enemy.health,
        friendship=state.friendship_counter,
    )


class CombatManager:
    """Drives the combat state machine and reports progress as events."""

    def __init__(
        self,
        event_manager: "EventManager",
        resolver: Optional[RoundResolver] = None,
        rules: Optional[CombatRules] = None,
    ):
        self.event_manager = event_manager
        self.resolver = resolver or RoundResolver()
        self.rules = rules or self.resolver.calculator.rules

    def _emit_log(self, state: CombatState, message: str, category: str = "BATTLE", level: str = "INFO") -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                round=state.round,
                message=message,
                category=category,
                level=level,
                source="CombatManager"
            ),
            source="CombatManager"
        )

    def start(self, player: Combatant, enemy: Combatant) -> CombatState:
        state = start_combat(player, enemy)
        self.event_manager.publish(
            CombatStarted(round=state.round, player=state.player, enemy=state.enemy),
            source="CombatManager"
        )
        self._emit_log(state, f"{state.player.name} encounters {state.enemy.name}")
        return state

    def submit(self, state: CombatState, player_decision: Decision, enemy_decision: Decision) -> CombatState:
        """Submit both sides' decisions and announce each one."""
        new_state = submit_decisions(state, player_decision, enemy_decision)
        for side, decision in ((Side.PLAYER, player_decision), (Side.ENEMY, enemy_decision)):
            self.event_manager.publish(
                DecisionSubmitted(round=state.round, side=side, decision=decision),
                source="CombatManager"
            )
        self._emit_log(
            state,
            f"{state.enemy.name} chose {enemy_decision.action.value} with {enemy_decision.combat_type.value}",
            category="AI",
            level="DEBUG"
        )
        return new_state

    def resolve(self, state: CombatState) -> CombatState:
        """Resolve the pending round and publish what happened."""
        new_state = resolve_round(state, self.resolver, self.rules)
        entry = new_state.log[-1]

        self.event_manager.publish(RoundResolved(round=entry.round, entry=entry), source="CombatManager")
        self._emit_log(state, f"Round {entry.round}: {entry.summary}")

        if new_state.friendship_counter != state.friendship_counter:
            self.event_manager.publish(
                FriendshipIncreased(
                    round=entry.round,
                    old_value=state.friendship_counter,
                    new_value=new_state.friendship_counter,
                    maximum=self.rules.friendship_max
                ),
                source="CombatManager"
            )

        if new_state.outcome is not None:
            self.event_manager.publish(
                CombatEnded(
                    round=entry.round,
                    outcome=new_state.outcome,
                    player_health=new_state.player.health,
                    enemy_health=new_state.enemy.health
                ),
                source="CombatManager"
            )
            self._emit_log(new_state, f"Combat ended: {OUTCOME_NAMES[new_state.outcome]}")

        return new_state

    def play_round(self, state: CombatState, player_decision: Decision, enemy_decision: Decision) -> CombatState:
        return self.resolve(self.submit(state, player_decision, enemy_decision))

    def conclude(
        self,
        state: CombatState,
        player_record: Optional[CharacterRecord] = None,
        enemy_record: Optional[EnemyRecord] = None,
    ) -> CombatConclusion:
        conclusion = conclude_combat(state, player_record, enemy_record)
        self._emit_log(
            state,
            f"Final health: {state.player.name} {conclusion.player_health}, "
            f"{state.enemy.name} {conclusion.enemy_health}",
            category="SYSTEM"
        )
        return conclusion
