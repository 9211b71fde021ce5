"""
Plain-text rendering of combat state for a terminal.

Every method returns a string built from engine data; nothing here makes
a game decision or re-derives a value the engine already computed.
"""
from typing import Optional

from ..core.data.data_structures import Combatant
from ..core.data.game_enums import (
    ACTION_NAMES,
    ADVANTAGE_NAMES,
    COMBAT_TYPE_NAMES,
    OUTCOME_NAMES,
    Advantage,
    CombatOutcome,
    CombatType,
)
from ..core.engine.combat_state import BattleLogEntry, CombatState

RESET = "\033[0m"


class TextRenderer:
    """Formats combat status, rounds and endings as text."""

    def __init__(self, use_color: bool = True, bar_width: int = 20, friendship_max: int = 3):
        self.use_color = use_color
        self.bar_width = bar_width
        self.friendship_max = friendship_max

        # ANSI colors per advantage label
        self.advantage_colors = {
            Advantage.ADVANTAGE: "\033[92m",    # green
            Advantage.NEUTRAL: "\033[93m",      # yellow
            Advantage.DISADVANTAGE: "\033[91m", # red
        }

        self.outcome_colors = {
            CombatOutcome.PLAYER_VICTORY: "\033[92m",
            CombatOutcome.ENEMY_VICTORY: "\033[91m",
            CombatOutcome.PEACEFUL_RESOLUTION: "\033[95m",
        }

        self.symbols = {
            "health_full": "█",
            "health_empty": "░",
            "heart_full": "♥",
            "heart_empty": "♡",
        }

    def _color(self, text: str, color: Optional[str]) -> str:
        if not self.use_color or not color:
            return text
        return f"{color}{text}{RESET}"

    def render_health_bar(self, combatant: Combatant) -> str:
        filled = round(self.bar_width * combatant.health / combatant.max_health)
        bar = self.symbols["health_full"] * filled + self.symbols["health_empty"] * (self.bar_width - filled)
        return f"{combatant.name:<12} [{bar}] {combatant.health}/{combatant.max_health}"

    def render_friendship(self, counter: int) -> str:
        shown = min(counter, self.friendship_max)
        hearts = self.symbols["heart_full"] * shown + self.symbols["heart_empty"] * (self.friendship_max - shown)
        return f"Friendship {hearts}"

    def render_status(self, state: CombatState) -> str:
        lines = [
            f"=== Round {state.round} ===",
            self.render_health_bar(state.player),
            self.render_health_bar(state.enemy),
            self.render_friendship(state.friendship_counter),
        ]
        return "\n".join(lines)

    def _advantage_label(self, advantage: Advantage) -> str:
        return self._color(ADVANTAGE_NAMES[advantage], self.advantage_colors[advantage])

    def render_forecast(self, combat_type: CombatType, low: int, high: int, enemy_name: str = "Enemy") -> str:
        return f"Attacking with {COMBAT_TYPE_NAMES[combat_type]}: {low}-{high} damage to {enemy_name} if it lands"

    def render_matchup(self, entry: BattleLogEntry, player_name: str = "You", enemy_name: str = "Enemy") -> str:
        player = entry.player_decision
        enemy = entry.enemy_decision
        return (
            f"{player_name}: {ACTION_NAMES[player.action]} with {COMBAT_TYPE_NAMES[player.combat_type]} "
            f"({self._advantage_label(entry.player_advantage)})  vs  "
            f"{enemy_name}: {ACTION_NAMES[enemy.action]} with {COMBAT_TYPE_NAMES[enemy.combat_type]} "
            f"({self._advantage_label(entry.enemy_advantage)})"
        )

    def render_round(self, entry: BattleLogEntry, player_name: str = "You", enemy_name: str = "Enemy") -> str:
        """Full description of one resolved round."""
        lines = [
            self.render_matchup(entry, player_name, enemy_name),
            f"  {player_name} roll: {entry.player_roll_details}",
            f"  {enemy_name} roll: {entry.enemy_roll_details}",
        ]
        if entry.damage_roll is not None:
            lines.append(f"  Damage roll: {entry.damage_roll.total}")
        if entry.damage is not None:
            lines.append(f"  Damage: {entry.damage.describe()}")
        lines.append(entry.summary)
        return "\n".join(lines)

    def render_end(self, state: CombatState) -> str:
        if state.outcome is None:
            return "The combat is still going."
        title = OUTCOME_NAMES[state.outcome].upper()
        banner = "*" * (len(title) + 8)
        details = {
            CombatOutcome.PLAYER_VICTORY: f"{state.enemy.name} has been overcome.",
            CombatOutcome.ENEMY_VICTORY: f"{state.player.name} has fallen.",
            CombatOutcome.PEACEFUL_RESOLUTION: f"{state.player.name} and {state.enemy.name} part as friends.",
        }
        color = self.outcome_colors[state.outcome]
        return "\n".join([
            self._color(banner, color),
            self._color(f"*** {title} ***", color),
            self._color(banner, color),
            details[state.outcome],
            f"Rounds fought: {state.rounds_resolved}",
        ])

    def render_log(self, messages: list[str], count: int = 5) -> str:
        return "\n".join(messages[-count:])
