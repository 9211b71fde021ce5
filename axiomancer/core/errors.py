"""Exception types raised by the combat engine."""


class CombatError(Exception):
    """Base class for all combat engine errors."""


class PreconditionViolation(CombatError):
    """Raised when an operation is called on a state that does not allow it.

    Examples are resolving a round before both decisions are complete, or
    submitting a decision to a combat that has already ended.
    """


class InvalidConfigurationError(CombatError):
    """Raised for unrecognized types, actions, policies or rules values."""
