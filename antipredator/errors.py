"""
Exception types raised by the simulation engine.
"""


class AntiPredatorError(Exception):
    """Base class for all engine errors."""


class ConfigError(AntiPredatorError, ValueError):
    """
    Raised when a configuration is rejected.

    Attributes:
        errors: List of validation messages
    """

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("Invalid configuration: " + "; ".join(self.errors))


class EpisodeTerminatedError(AntiPredatorError, RuntimeError):
    """Raised when stepping an episode that ended and was not reset."""
