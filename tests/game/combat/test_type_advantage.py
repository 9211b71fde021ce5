"""
Unit tests for the cyclic type advantage resolver.
"""

import itertools

import pytest

from axiomancer.core.data.game_enums import Advantage, CombatType
from axiomancer.core.errors import InvalidConfigurationError
from axiomancer.game.combat.type_advantage import resolve_advantage, resolve_matchup


class TestResolveAdvantage:
    """Test the heart > body > mind > heart cycle."""

    @pytest.mark.parametrize("winner,loser", [
        (CombatType.HEART, CombatType.BODY),
        (CombatType.BODY, CombatType.MIND),
        (CombatType.MIND, CombatType.HEART),
    ])
    def test_cycle(self, winner, loser):
        assert resolve_advantage(winner, loser) is Advantage.ADVANTAGE
        assert resolve_advantage(loser, winner) is Advantage.DISADVANTAGE

    @pytest.mark.parametrize("combat_type", list(CombatType))
    def test_same_type_is_neutral(self, combat_type):
        assert resolve_advantage(combat_type, combat_type) is Advantage.NEUTRAL

    def test_distinct_pairs_are_complementary(self):
        for a, b in itertools.permutations(CombatType, 2):
            assert {resolve_advantage(a, b), resolve_advantage(b, a)} == {
                Advantage.ADVANTAGE, Advantage.DISADVANTAGE
            }

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            resolve_advantage("heart", CombatType.BODY)


class TestResolveMatchup:
    def test_each_side_gets_its_own_advantage(self):
        assert resolve_matchup(CombatType.HEART, CombatType.BODY) == (
            Advantage.ADVANTAGE, Advantage.DISADVANTAGE
        )
        assert resolve_matchup(CombatType.MIND, CombatType.MIND) == (
            Advantage.NEUTRAL, Advantage.NEUTRAL
        )
