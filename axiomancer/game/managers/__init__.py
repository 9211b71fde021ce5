"""Game managers that react to engine events."""

from .log_manager import LogCategory, LogEntry, LogLevel, LogManager

__all__ = [
    "LogCategory",
    "LogEntry",
    "LogLevel",
    "LogManager",
]
