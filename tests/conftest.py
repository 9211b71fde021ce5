"""
Basic test fixtures for the axiomancer test suite.

Provides combatants, scripted dice and event infrastructure for testing
the combat engine.
"""

import os
import sys

import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from axiomancer.core.data.game_info import DEFAULT_RULES
from axiomancer.core.events.event_manager import EventManager
from axiomancer.game.combat.damage_calculator import DamageCalculator
from tests.test_utils import CombatantBuilder, scripted_dice


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def rules():
    return DEFAULT_RULES


@pytest.fixture
def calculator(rules):
    return DamageCalculator(rules)


@pytest.fixture
def player():
    """A player with distinct stats per type."""
    return (CombatantBuilder("Hero")
            .with_health(30)
            .with_offense(heart=5, body=3, mind=1)
            .with_defense(heart=2, body=2, mind=2)
            .build())


@pytest.fixture
def enemy():
    """An enemy with modest stats and the random policy."""
    return (CombatantBuilder("Disatree")
            .with_health(20)
            .with_offense(heart=1, body=3, mind=1)
            .with_defense(heart=4, body=2, mind=4)
            .with_policy("random")
            .build())


@pytest.fixture
def dice_factory():
    """Build a DiceRoller that returns the given faces in order."""
    return scripted_dice
