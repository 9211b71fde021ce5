"""Combat events and logging events.

This module defines all events that managers can subscribe to.

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- All events carry the combat round they were emitted in
- Events use proper enums instead of magic strings
- Keep event types focused and avoid over-granular events
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from ..data.game_enums import CombatOutcome, Side

if TYPE_CHECKING:
    from ..data.data_structures import Combatant, Decision
    from ..engine.combat_state import BattleLogEntry


class EventType(Enum):
    """Types of events that managers can subscribe to."""
    # Combat lifecycle
    COMBAT_STARTED = auto()
    DECISION_SUBMITTED = auto()
    ROUND_RESOLVED = auto()
    FRIENDSHIP_INCREASED = auto()
    COMBAT_ENDED = auto()

    # Logging Events
    LOG_MESSAGE = auto()
    LOG_SAVE_REQUESTED = auto()


@dataclass(frozen=True)
class CombatEvent(ABC):
    """Base class for all combat events."""
    round: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class CombatStarted(CombatEvent):
    """Event emitted when a combat is initialized."""
    player: "Combatant"
    enemy: "Combatant"

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.COMBAT_STARTED)


@dataclass(frozen=True)
class DecisionSubmitted(CombatEvent):
    """Event emitted when one side completes its decision for the round."""
    side: Side
    decision: "Decision"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DECISION_SUBMITTED)


@dataclass(frozen=True)
class RoundResolved(CombatEvent):
    """Event emitted after a round has been applied to the state."""
    entry: "BattleLogEntry"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROUND_RESOLVED)


@dataclass(frozen=True)
class FriendshipIncreased(CombatEvent):
    """Event emitted when both sides defend in the same round."""
    old_value: int
    new_value: int
    maximum: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.FRIENDSHIP_INCREASED)


@dataclass(frozen=True)
class CombatEnded(CombatEvent):
    """Event emitted when an end condition is met."""
    outcome: CombatOutcome
    player_health: int
    enemy_health: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBAT_ENDED)


@dataclass(frozen=True)
class LogMessage(CombatEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: str
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class LogSaveRequested(CombatEvent):
    """Event emitted when the user requests to save the log to file."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)
