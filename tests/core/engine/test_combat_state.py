"""
Unit tests for combat state values and round records.
"""

import dataclasses

import pytest

from axiomancer.core.data.data_structures import CompleteDecision, Decision, TypeChosen
from axiomancer.core.data.game_enums import (
    ActionChoice,
    Advantage,
    CombatPhase,
    CombatType,
    Side,
)
from axiomancer.core.engine.combat_state import CombatState, DamageBreakdown, RollDetail


class TestRollDetail:
    """Test roll formatting and totals."""

    def test_advantage_description(self):
        roll = RollDetail(Advantage.ADVANTAGE, (10, 4), kept=10, modifier=5)

        assert roll.total == 15
        assert roll.describe("heart") == "15 = 10 [2d20 keep higher: 10, 4] + 5 heart"

    def test_neutral_description(self):
        roll = RollDetail(Advantage.NEUTRAL, (7,), kept=7, modifier=2)

        assert roll.dice_notation() == "1d20"
        assert roll.describe("mind") == "9 = 7 [1d20: 7] + 2 mind"

    def test_to_dict_is_plain_data(self):
        roll = RollDetail(Advantage.DISADVANTAGE, (8, 12), kept=8, modifier=3)

        assert roll.to_dict() == {
            "advantage": "disadvantage",
            "dice": [8, 12],
            "kept": 8,
            "modifier": 3,
            "total": 11,
        }


class TestDamageBreakdown:
    def test_describe(self):
        damage = DamageBreakdown(attack_total=15, base_defense=4, defense_multiplier=1.5,
                                 is_critical=False, final_damage=9)

        assert damage.effective_defense == 6.0
        assert damage.describe() == "( 15 - ( 4 x 1.5 ) ) = 9"


class TestCombatState:
    """Test the aggregate state helpers."""

    def test_initial_values(self, player, enemy):
        state = CombatState(player=player, enemy=enemy)

        assert state.active
        assert state.phase is CombatPhase.CHOOSING_TYPE
        assert state.round == 1
        assert state.friendship_counter == 0
        assert state.log == ()
        assert state.outcome is None
        assert state.decisions() is None

    def test_with_choice_returns_new_state(self, player, enemy):
        state = CombatState(player=player, enemy=enemy)
        updated = state.with_choice(Side.ENEMY, TypeChosen(CombatType.MIND))

        assert updated.enemy_choice == TypeChosen(CombatType.MIND)
        assert state.enemy_choice != updated.enemy_choice

    def test_decisions_when_both_complete(self, player, enemy):
        attack = Decision(CombatType.HEART, ActionChoice.ATTACK)
        defend = Decision(CombatType.BODY, ActionChoice.DEFEND)
        state = CombatState(
            player=player,
            enemy=enemy,
            player_choice=CompleteDecision(attack),
            enemy_choice=CompleteDecision(defend),
        )

        assert state.decisions() == (attack, defend)

    def test_to_dict(self, player, enemy):
        data = CombatState(player=player, enemy=enemy).to_dict()

        assert data["phase"] == "choosing_type"
        assert data["player"]["name"] == "Hero"
        assert data["enemy_choice"] == {"type": None, "action": None}
        assert data["log"] == []

    def test_frozen(self, player, enemy):
        state = CombatState(player=player, enemy=enemy)

        with pytest.raises(dataclasses.FrozenInstanceError):
            state.round = 2
