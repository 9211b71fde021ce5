"""
Unit tests for the combat state machine.

Covers staged submissions, round application, friendship, end conditions
and the event-publishing CombatManager wrapper.
"""

from dataclasses import replace

import pytest

from axiomancer.core.data.data_structures import CharacterRecord, EnemyRecord, TypeChosen, TypeStats
from axiomancer.core.data.game_enums import CombatOutcome, CombatPhase, CombatType
from axiomancer.core.data.game_info import DEFAULT_RULES
from axiomancer.core.errors import InvalidConfigurationError, PreconditionViolation
from axiomancer.core.events.events import EventType
from axiomancer.game.combat.combat_manager import (
    CombatManager,
    conclude_combat,
    determine_outcome,
    is_ongoing,
    resolve_round,
    start_combat,
    submit_decisions,
    submit_enemy_decision,
    submit_player_action,
    submit_player_decision,
    submit_player_type,
)
from axiomancer.game.combat.round_resolver import RoundResolver
from tests.test_utils import CombatantBuilder, decision, scripted_dice


def resolver_with(*faces: int) -> RoundResolver:
    return RoundResolver(dice=scripted_dice(*faces))


def mutual_defend(state, resolver=None):
    state = submit_decisions(state, decision("heart", "defend"), decision("body", "defend"))
    return resolve_round(state, resolver or resolver_with())


class TestStartCombat:
    def test_initial_state(self, player, enemy):
        state = start_combat(player, enemy)

        assert is_ongoing(state)
        assert state.round == 1
        assert state.friendship_counter == 0
        assert state.phase is CombatPhase.CHOOSING_TYPE
        assert state.player == player
        assert state.log == ()


class TestDecisionSubmission:
    """Test staged and combined decision collection."""

    def test_staged_player_decision(self, player, enemy):
        state = start_combat(player, enemy)

        state = submit_player_type(state, "heart")
        assert state.phase is CombatPhase.CHOOSING_ACTION
        assert state.player_choice == TypeChosen(CombatType.HEART)

        state = submit_player_action(state, "attack")
        assert state.phase is CombatPhase.CHOOSING_ACTION
        assert state.decisions() is None

        state = submit_enemy_decision(state, decision("mind", "defend"))
        assert state.phase is CombatPhase.RESOLVING
        assert state.decisions() == (decision("heart", "attack"), decision("mind", "defend"))

    def test_action_before_type_rejected(self, player, enemy):
        with pytest.raises(PreconditionViolation):
            submit_player_action(start_combat(player, enemy), "attack")

    def test_decision_is_immutable_once_submitted(self, player, enemy):
        state = submit_player_decision(start_combat(player, enemy), decision("heart", "attack"))

        with pytest.raises(PreconditionViolation):
            submit_player_decision(state, decision("body", "defend"))
        with pytest.raises(PreconditionViolation):
            submit_player_type(state, "mind")

    def test_unknown_type_rejected(self, player, enemy):
        with pytest.raises(InvalidConfigurationError):
            submit_player_type(start_combat(player, enemy), "spirit")

    def test_non_decision_rejected(self, player, enemy):
        with pytest.raises(PreconditionViolation):
            submit_enemy_decision(start_combat(player, enemy), ("heart", "attack"))

    def test_submission_does_not_mutate_input(self, player, enemy):
        state = start_combat(player, enemy)
        submit_decisions(state, decision("heart", "attack"), decision("body", "attack"))

        assert state.decisions() is None
        assert state.phase is CombatPhase.CHOOSING_TYPE


class TestResolveRound:
    """Test applying a round to the state."""

    def test_applies_damage_and_logs(self, player, enemy):
        state = submit_decisions(start_combat(player, enemy), decision("heart", "attack"), decision("body", "attack"))

        new_state = resolve_round(state, resolver_with(10, 3, 8, 12, 12, 7))

        assert new_state.enemy.health == 5
        assert new_state.player.health == 30
        assert new_state.round == 2
        assert new_state.phase is CombatPhase.CHOOSING_TYPE
        assert new_state.decisions() is None
        assert len(new_state.log) == 1

        entry = new_state.log[0]
        assert entry.round == 1
        assert entry.damage_to_enemy == 15
        assert entry.enemy_health_after == 5
        assert entry.player_roll_details == "15 = 10 [2d20 keep higher: 10, 3] + 5 heart"
        assert entry.enemy_roll_details == "11 = 8 [2d20 keep lower: 8, 12] + 3 body"

    def test_input_state_untouched(self, player, enemy):
        state = submit_decisions(start_combat(player, enemy), decision("heart", "attack"), decision("body", "attack"))

        resolve_round(state, resolver_with(10, 3, 8, 12, 12, 7))

        assert state.enemy.health == 20
        assert state.round == 1
        assert state.log == ()

    def test_tie_still_advances_round(self, player, enemy):
        state = submit_decisions(start_combat(player, enemy), decision("mind", "attack"), decision("mind", "attack"))

        new_state = resolve_round(state, resolver_with(9, 9))

        assert new_state.round == 2
        assert new_state.player.health == 30
        assert new_state.enemy.health == 20
        assert len(new_state.log) == 1

    def test_missing_decision_rejected(self, player, enemy):
        state = submit_player_decision(start_combat(player, enemy), decision("heart", "attack"))

        with pytest.raises(PreconditionViolation):
            resolve_round(state, resolver_with())

    def test_ended_combat_rejected(self, player, enemy):
        state = replace(start_combat(player, enemy), active=False)

        with pytest.raises(PreconditionViolation):
            resolve_round(state, resolver_with())
        with pytest.raises(PreconditionViolation):
            submit_player_type(state, "heart")

    def test_log_length_tracks_rounds(self, player, enemy):
        state = start_combat(player, enemy)
        for _ in range(2):
            state = mutual_defend(state)

        assert state.rounds_resolved == 2
        assert [entry.round for entry in state.log] == [1, 2]


class TestFriendship:
    """Mutual-defend rounds lead to a peaceful resolution."""

    def test_increment_only_on_mutual_defend(self, player, enemy):
        state = start_combat(player, enemy)
        state = mutual_defend(state)
        assert state.friendship_counter == 1

        state = submit_decisions(state, decision("mind", "attack"), decision("mind", "defend"))
        state = resolve_round(state, resolver_with(5))
        assert state.friendship_counter == 1

    def test_reaching_maximum_ends_peacefully(self, player, enemy):
        state = replace(start_combat(player, enemy), friendship_counter=2)

        state = mutual_defend(state)

        assert state.friendship_counter == 3
        assert state.phase is CombatPhase.ENDED
        assert not state.active
        assert state.outcome is CombatOutcome.PEACEFUL_RESOLUTION
        assert state.player.health == 30
        assert state.enemy.health == 20

    def test_counter_saturates(self, player, enemy):
        state = replace(start_combat(player, enemy), friendship_counter=2)

        state = mutual_defend(state)

        assert state.friendship_counter == DEFAULT_RULES.friendship_max


class TestEndConditions:
    """Test defeat detection and precedence."""

    def test_enemy_defeated_at_exactly_zero(self, player):
        enemy = CombatantBuilder("Sapling").with_health(15).with_defense(body=2).build()
        state = submit_decisions(start_combat(player, enemy), decision("heart", "attack"), decision("body", "attack"))

        state = resolve_round(state, resolver_with(10, 3, 8, 12, 12, 7))

        assert state.enemy.health == 0
        assert state.outcome is CombatOutcome.PLAYER_VICTORY
        assert state.phase is CombatPhase.ENDED

    def test_player_defeated(self, enemy):
        player = CombatantBuilder("Hero").with_health(5).with_defense(heart=1, body=1, mind=1).build()
        state = submit_decisions(start_combat(player, enemy), decision("body", "defend"), decision("body", "attack"))

        # 19 + 3 against 1 x 2
        state = resolve_round(state, resolver_with(19))

        assert state.player.health == 0
        assert state.outcome is CombatOutcome.ENEMY_VICTORY

    def test_enemy_defeat_checked_first(self, player, enemy):
        state = replace(start_combat(player, enemy), player=player.with_health(0), enemy=enemy.with_health(0))

        assert determine_outcome(state) is CombatOutcome.PLAYER_VICTORY

    def test_defeat_beats_friendship(self, player, enemy):
        state = replace(start_combat(player, enemy), player=player.with_health(0), friendship_counter=3)

        assert determine_outcome(state) is CombatOutcome.ENEMY_VICTORY

    def test_ongoing(self, player, enemy):
        assert determine_outcome(start_combat(player, enemy)) is None


class TestConcludeCombat:
    """Test writing final values back to host records."""

    def test_writes_back_health(self):
        character = CharacterRecord("Player", level=1, base_stats=TypeStats(heart=4, body=3, mind=1))
        enemy_record = EnemyRecord("e1", "Disatree", 1, health=10, max_health=10,
                                   skill=TypeStats.uniform(1), defense=TypeStats.uniform(1))
        state = start_combat(character.to_combatant(DEFAULT_RULES), enemy_record.to_combatant())
        state = submit_decisions(state, decision("heart", "attack"), decision("body", "attack"))
        # 19 + 4 against 14 + 1, then 20 + 4 - 1
        state = resolve_round(state, resolver_with(19, 2, 14, 20, 20, 1))

        conclusion = conclude_combat(state, character, enemy_record)

        assert conclusion.outcome is CombatOutcome.PLAYER_VICTORY
        assert conclusion.rounds == 1
        assert enemy_record.health == 0
        assert character.health == 26

    def test_requires_ended_combat(self, player, enemy):
        with pytest.raises(PreconditionViolation):
            conclude_combat(start_combat(player, enemy))


class TestCombatManager:
    """Test the event-publishing wrapper."""

    def test_publishes_lifecycle_events(self, event_manager, player, enemy):
        received = []
        event_manager.subscribe_all(received.append)
        manager = CombatManager(event_manager, resolver_with())

        state = manager.start(player, enemy)
        state = replace(state, friendship_counter=2)
        state = manager.play_round(state, decision("heart", "defend"), decision("mind", "defend"))
        event_manager.process_events()

        types = [event.event_type for event in received]
        assert types.count(EventType.COMBAT_STARTED) == 1
        assert types.count(EventType.DECISION_SUBMITTED) == 2
        assert types.count(EventType.ROUND_RESOLVED) == 1
        assert types.count(EventType.FRIENDSHIP_INCREASED) == 1
        assert types.count(EventType.COMBAT_ENDED) == 1
        assert EventType.LOG_MESSAGE in types

        ended = next(event for event in received if event.event_type is EventType.COMBAT_ENDED)
        assert ended.outcome is CombatOutcome.PEACEFUL_RESOLUTION
        assert state.outcome is CombatOutcome.PEACEFUL_RESOLUTION

    def test_no_friendship_event_without_mutual_defend(self, event_manager, player, enemy):
        received = []
        event_manager.subscribe(EventType.FRIENDSHIP_INCREASED, received.append)
        manager = CombatManager(event_manager, resolver_with(9, 9))

        state = manager.start(player, enemy)
        manager.play_round(state, decision("mind", "attack"), decision("mind", "attack"))
        event_manager.process_events()

        assert received == []

    def test_conclude_logs_final_health(self, event_manager, player, enemy):
        messages = []
        event_manager.subscribe(EventType.LOG_MESSAGE, lambda event: messages.append(event.message))
        manager = CombatManager(event_manager, resolver_with())
        state = replace(manager.start(player, enemy), friendship_counter=2)
        state = manager.play_round(state, decision("heart", "defend"), decision("mind", "defend"))

        conclusion = manager.conclude(state)
        event_manager.process_events()

        assert conclusion.friendship == 3
        assert any(message.startswith("Final health") for message in messages)
