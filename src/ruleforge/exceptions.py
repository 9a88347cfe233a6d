"""Exceptions raised by RuleForge.

Only configuration mistakes raise. A value that fails its rules is reported
through the ErrorBag and the boolean result, never as an exception.
"""


class RuleForgeError(Exception):
    """Base class for all RuleForge errors."""
    pass


class ConfigurationError(RuleForgeError):
    """Setup-time programmer error (registration, dictionaries)."""
    pass


class DuplicateValidatorError(ConfigurationError):
    """A validator with this name is already registered globally."""

    def __init__(self, name: str):
        super().__init__(
            f"Validator '{name}' is already registered. "
            "Global validator names cannot be overwritten; use an instance extend to shadow it."
        )
        self.name = name


class InvalidValidatorError(ConfigurationError):
    """A validator definition lacks a callable validate or a message strategy."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Invalid definition for validator '{name}': {reason}")
        self.name = name
        self.reason = reason


class DictionaryError(ConfigurationError):
    """A locale dictionary file could not be read or has the wrong shape."""
    pass
