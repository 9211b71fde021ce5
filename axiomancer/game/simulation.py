"""
Automated combat simulation.

Plays many combats between the same two combatants with a policy on each
side and aggregates the results with numpy, for balancing rules and enemy
stat blocks without an interactive session.
"""
import random
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

from ..core.data.data_structures import Combatant
from ..core.data.game_enums import CombatOutcome
from ..core.data.game_info import DEFAULT_RULES, CombatRules
from ..core.engine.combat_state import CombatState
from ..core.engine.dice import DiceRoller
from ..core.errors import InvalidConfigurationError
from .ai.ai_behaviors import DecisionPolicy
from .ai.ai_controller import EnemyDecisionGenerator
from .combat.combat_manager import is_ongoing, resolve_round, start_combat, submit_decisions
from .combat.damage_calculator import DamageCalculator
from .combat.round_resolver import RoundResolver

PolicyRef = Union[DecisionPolicy, str, None]


@dataclass
class SimulationReport:
    """Aggregated results of a batch of simulated combats."""
    combats: int
    outcomes: dict[CombatOutcome, int]
    rounds: np.ndarray
    player_health: np.ndarray
    enemy_health: np.ndarray
    unfinished: int = 0
    friendship: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=int))

    def win_rate(self, outcome: CombatOutcome) -> float:
        if self.combats == 0:
            return 0.0
        return self.outcomes.get(outcome, 0) / self.combats

    @property
    def mean_rounds(self) -> float:
        return float(np.mean(self.rounds)) if self.rounds.size else 0.0

    @property
    def mean_player_health(self) -> float:
        return float(np.mean(self.player_health)) if self.player_health.size else 0.0

    @property
    def mean_enemy_health(self) -> float:
        return float(np.mean(self.enemy_health)) if self.enemy_health.size else 0.0

    @property
    def mean_friendship(self) -> float:
        return float(np.mean(self.friendship)) if self.friendship.size else 0.0

    def summary(self) -> dict:
        """Plain-data view for printing or saving."""
        return {
            "combats": self.combats,
            "unfinished": self.unfinished,
            "outcomes": {outcome.value: self.outcomes.get(outcome, 0) for outcome in CombatOutcome},
            "win_rates": {outcome.value: round(self.win_rate(outcome), 4) for outcome in CombatOutcome},
            "rounds": {
                "mean": round(self.mean_rounds, 2),
                "median": float(np.median(self.rounds)) if self.rounds.size else 0.0,
                "max": int(np.max(self.rounds)) if self.rounds.size else 0,
            },
            "mean_player_health": round(self.mean_player_health, 2),
            "mean_enemy_health": round(self.mean_enemy_health, 2),
            "mean_friendship": round(self.mean_friendship, 2),
        }


class CombatSimulator:
    """Runs automated combats with a policy on each side."""

    def __init__(
        self,
        player_policy: PolicyRef = "random",
        enemy_policy: PolicyRef = None,
        seed: Optional[int] = None,
        rules: Optional[CombatRules] = None,
        max_rounds: int = 100,
    ):
        """
        Args:
            player_policy: Policy (or registered id) choosing the player's moves
            enemy_policy: Policy or id for the enemy; None uses the id on the
                enemy snapshot
            seed: Seed for the single randomness source shared by dice and policies
            rules: Combat rules, defaults to the shipped values
            max_rounds: Combats still running after this many rounds are
                counted as unfinished
        """
        if max_rounds < 1:
            raise InvalidConfigurationError("max_rounds must be at least 1")
        self.rules = rules or DEFAULT_RULES
        self.rng = random.Random(seed)
        self.decisions = EnemyDecisionGenerator(rng=self.rng)
        self.resolver = RoundResolver(
            dice=DiceRoller(self.rng, self.rules.dice_sides),
            calculator=DamageCalculator(self.rules),
        )
        self.player_policy = player_policy
        self.enemy_policy = enemy_policy
        self.max_rounds = max_rounds

    def run_one(self, player: Combatant, enemy: Combatant) -> CombatState:
        """Play a single combat to its end or to the round limit."""
        state = start_combat(player, enemy)
        enemy_policy = self.enemy_policy if self.enemy_policy is not None else state.enemy.policy_id
        while is_ongoing(state) and state.rounds_resolved < self.max_rounds:
            player_decision = self.decisions.decide(self.player_policy, state)
            enemy_decision = self.decisions.decide(enemy_policy, state)
            state = submit_decisions(state, player_decision, enemy_decision)
            state = resolve_round(state, self.resolver, self.rules)
        return state

    def run(self, player: Combatant, enemy: Combatant, combats: int = 1000) -> SimulationReport:
        """Play ``combats`` independent combats and aggregate the results."""
        if combats < 0:
            raise InvalidConfigurationError("combats must not be negative")

        rounds = np.zeros(combats, dtype=int)
        player_health = np.zeros(combats, dtype=int)
        enemy_health = np.zeros(combats, dtype=int)
        friendship = np.zeros(combats, dtype=int)
        outcomes = {outcome: 0 for outcome in CombatOutcome}
        unfinished = 0

        for i in range(combats):
            state = self.run_one(player, enemy)
            rounds[i] = state.rounds_resolved
            player_health[i] = state.player.health
            enemy_health[i] = state.enemy.health
            friendship[i] = state.friendship_counter
            if state.outcome is None:
                unfinished += 1
            else:
                outcomes[state.outcome] += 1

        return SimulationReport(
            combats=combats,
            outcomes=outcomes,
            rounds=rounds,
            player_health=player_health,
            enemy_health=enemy_health,
            unfinished=unfinished,
            friendship=friendship,
        )
