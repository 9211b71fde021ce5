"""Cyclic type advantage: heart beats body, body beats mind, mind beats heart."""

from ...core.data.game_enums import Advantage, CombatType
from ...core.errors import InvalidConfigurationError

# Each type maps to the type it beats
BEATS = {
    CombatType.HEART: CombatType.BODY,
    CombatType.BODY: CombatType.MIND,
    CombatType.MIND: CombatType.HEART,
}


def resolve_advantage(attacker_type: CombatType, defender_type: CombatType) -> Advantage:
    """Determine the advantage of ``attacker_type`` against ``defender_type``."""
    for value in (attacker_type, defender_type):
        if not isinstance(value, CombatType):
            raise InvalidConfigurationError(f"Unknown combat type: {value!r}")

    if attacker_type is defender_type:
        return Advantage.NEUTRAL
    if BEATS[attacker_type] is defender_type:
        return Advantage.ADVANTAGE
    return Advantage.DISADVANTAGE


def resolve_matchup(player_type: CombatType, enemy_type: CombatType) -> tuple[Advantage, Advantage]:
    """Resolve each side's advantage independently: (player, enemy)."""
    return resolve_advantage(player_type, enemy_type), resolve_advantage(enemy_type, player_type)
