"""
Log management system for combat messages and debugging.

This module provides centralized logging with categorization, filtering,
and bounded storage for display by the text renderer. Engine components
never write here directly: they publish ``LogMessage`` events and this
manager collects them.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ...core.events import EventType, LogMessage, LogSaveRequested

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # System messages (initialization, loading, etc.)
    BATTLE = auto()     # Round results and combat lifecycle
    AI = auto()         # Enemy decision messages
    DEBUG = auto()      # Debug messages
    WARNING = auto()    # Warning messages
    ERROR = auto()      # Error messages
    CONFIG = auto()     # Rules loading messages


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.AI: "AI",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
    LogCategory.CONFIG: "CFG",
}


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class LogEntry:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    level: LogLevel = LogLevel.INFO
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        parts.append(self.text)
        return " ".join(parts)


class LogManager:
    """Manages combat logging with categorization and filtering."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
        log_dir: str = "logs"
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager for event-driven logging (required)
            max_messages: Maximum number of messages to store in the buffer
            default_level: Default log level for filtering
            log_dir: Directory for saved log files
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)  # All categories enabled by default
        self.event_manager = event_manager
        self.log_dir = log_dir
        self.last_saved_path: Optional[str] = None

        # Category-specific minimum levels; others default to INFO
        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.AI: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        """Set up event subscriptions for centralized logging."""
        self.event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message"
        )
        self.event_manager.subscribe(
            EventType.LOG_SAVE_REQUESTED,
            self._handle_log_save_request,
            subscriber_name="LogManager.log_save_request"
        )

    def _handle_log_message_event(self, event) -> None:
        """Handle log message events from the event system."""
        if isinstance(event, LogMessage):
            try:
                category = LogCategory[event.category.upper()]
            except (KeyError, AttributeError):
                category = LogCategory.SYSTEM
            try:
                level = LogLevel[event.level.upper()]
            except (KeyError, AttributeError):
                level = LogLevel.INFO
            self.log(event.message, category, level)

    def _handle_log_save_request(self, event) -> None:
        """Handle log save request events from the event system."""
        if isinstance(event, LogSaveRequested):
            if self.save_log_to_file():
                self.system("Log file saved successfully")

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM, level: LogLevel = LogLevel.INFO) -> None:
        """Add a message to the log.

        Args:
            text: The message text
            category: The category of the message
            level: Severity reported by the source
        """
        # Always store messages in the buffer for potential display/save later
        self.messages.append(LogEntry(text=text, category=category, level=level))

    # Convenience methods for common categories
    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str) -> None:
        self.log(text, LogCategory.BATTLE)

    def ai(self, text: str) -> None:
        self.log(text, LogCategory.AI, LogLevel.DEBUG)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG, LogLevel.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING, LogLevel.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR, LogLevel.ERROR)

    def config(self, text: str) -> None:
        self.log(text, LogCategory.CONFIG)

    def _effective_level(self, entry: LogEntry) -> LogLevel:
        category_level = self.category_levels.get(entry.category, LogLevel.INFO)
        return max(category_level, entry.level, key=lambda level: level.value)

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None,
                     min_level: Optional[LogLevel] = None) -> list[LogEntry]:
        """Get recent messages, optionally filtered by category.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Set of categories to include (None for all enabled)
            min_level: Minimum level to include (None for the current log level)

        Returns:
            List of recent messages
        """
        threshold = (min_level or self.log_level).value
        filtered = [msg for msg in self.messages
                    if msg.category in self.enabled_categories
                    and (not categories or msg.category in categories)
                    and self._effective_level(msg).value >= threshold]

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    @property
    def log_data(self) -> dict:
        """Formatted snapshot for the presentation layer."""
        return {
            'messages': [msg.format() for msg in self.get_messages()],
            'debug_enabled': self.is_debug_enabled(),
            'total_messages': len(self.messages)
        }

    def clear(self) -> None:
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        """Check if debug messages are currently enabled."""
        return (LogCategory.DEBUG in self.enabled_categories and
                self.log_level == LogLevel.DEBUG)

    def toggle_debug(self) -> None:
        """Toggle debug message visibility."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self) -> bool:
        """Save all messages to a timestamped log file.

        Returns:
            True if save was successful, False otherwise
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = os.path.join(self.log_dir, f"combat_{timestamp}.log")

        try:
            os.makedirs(self.log_dir, exist_ok=True)
            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Axiomancer - Combat Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                else:
                    # Save every buffered message, ignoring current filters
                    for msg in self.messages:
                        timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                        f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return False

        self.last_saved_path = filepath
        self.system(f"Combat log saved to {filepath}")
        return True
