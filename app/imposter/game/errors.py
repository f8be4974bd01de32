"""
Exceptions raised by the game core.

The manager converts these into ``(success, response)`` tuples; nothing
here is fatal, every error is either rejected input or a retryable fetch.
"""


class GameRuleError(ValueError):
    """Base class for a rejected command. State is left unchanged."""

    code = "invalid"


class ValidationError(GameRuleError):
    """User input failed validation (blank field, too few players...)."""

    code = "validation"


class PhaseError(GameRuleError):
    """The command is not available in the current phase or step."""

    code = "phase"


class BusyError(GameRuleError):
    """A request of the same kind is still in flight."""

    code = "busy"


class GenerationError(GameRuleError):
    """Round materials could not be produced; the user may retry."""

    code = "generation"
