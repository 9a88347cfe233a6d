"""Validator registry for RuleForge.

Provides two tiers of lookup:
- ValidatorRegistry: process-wide catalog (built-ins + globally extended)
- ValidatorOverlay: per-engine registrations that shadow the global catalog

Definitions can be registered in two shapes, normalized here into a single
ValidatorDefinition:

    # Predicate form: default message "The {field} value is not valid."
    ValidatorRegistry.register("neg", lambda value, params: float(value) < 0)

    # Object form: validate plus get_message and/or localized messages
    ValidatorRegistry.register("truthy", {
        "validate": lambda value, params: bool(value),
        "get_message": lambda field, params: f"The {field} value is not truthy.",
    })
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from ruleforge.exceptions import DuplicateValidatorError, InvalidValidatorError
from ruleforge.messages import MessageDictionary, as_message_fn
from ruleforge.types import DefinitionKind, ValidatorDefinition

logger = logging.getLogger(__name__)


def _member(definition: Any, key: str) -> Any:
    if isinstance(definition, Mapping):
        return definition.get(key)
    return getattr(definition, key, None)


def _is_object_form(definition: Any) -> bool:
    if isinstance(definition, Mapping):
        return True
    return hasattr(definition, "validate")


def normalize_definition(name: str, definition: Any) -> ValidatorDefinition:
    """Check a definition's shape and normalize it.

    Args:
        name: Name the definition will be registered under
        definition: A bare predicate, a mapping or object exposing
            `validate` and `get_message` and/or `messages`, or an
            already-normalized ValidatorDefinition

    Returns:
        The normalized definition, named `name`

    Raises:
        InvalidValidatorError: If a required capability is missing
    """
    if isinstance(definition, ValidatorDefinition):
        if definition.name == name:
            return definition
        return replace(definition, name=name)

    if _is_object_form(definition):
        validate = _member(definition, "validate")
        get_message = _member(definition, "get_message")
        messages = _member(definition, "messages")

        if not callable(validate):
            raise InvalidValidatorError(name, "a callable 'validate' is required")
        if get_message is not None and not callable(get_message):
            raise InvalidValidatorError(name, "'get_message' must be callable")
        if messages is not None and not isinstance(messages, Mapping):
            raise InvalidValidatorError(name, "'messages' must map locales to messages")
        if get_message is None and not messages:
            raise InvalidValidatorError(
                name, "either 'get_message' or 'messages' must be provided"
            )

        return ValidatorDefinition(
            name=name,
            validate=validate,
            kind=DefinitionKind.OBJECT,
            get_message=get_message,
            messages={
                locale: as_message_fn(message)
                for locale, message in (messages or {}).items()
            },
        )

    if callable(definition):
        return ValidatorDefinition(
            name=name,
            validate=definition,
            kind=DefinitionKind.PREDICATE,
        )

    raise InvalidValidatorError(
        name, f"expected a callable or a definition object, got {type(definition).__name__}"
    )


class ValidatorRegistry:
    """Process-wide validator catalog.

    Names are unique: registering an existing name is a hard error, whether
    or not the new definition is well-formed. The catalog is seeded with the
    built-in validators at import; `reset()` restores that state.

    Example:
        ValidatorRegistry.register("even", lambda value, params: int(value) % 2 == 0)
        ValidatorRegistry.get("even")
    """

    _validators: dict[str, ValidatorDefinition] = {}

    @classmethod
    def register(cls, name: str, definition: Any) -> ValidatorDefinition:
        """Register a validator globally.

        Localized messages of the definition are merged into the shared
        MessageDictionary, so they can later be overridden leaf by leaf.

        Raises:
            DuplicateValidatorError: If the name is already registered
            InvalidValidatorError: If the definition is malformed
        """
        if name in cls._validators:
            raise DuplicateValidatorError(name)

        normalized = normalize_definition(name, definition)
        if normalized.messages:
            MessageDictionary.update(
                {locale: {name: fn} for locale, fn in normalized.messages.items()}
            )
        normalized = replace(normalized, messages={}, shared=True)

        cls._validators[name] = normalized
        logger.debug("Registered %s validator '%s'", normalized.kind.value, name)
        return normalized

    @classmethod
    def get(cls, name: str) -> ValidatorDefinition | None:
        return cls._validators.get(name)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._validators

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._validators.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations, built-ins included. Primarily for testing."""
        cls._validators = {}

    @classmethod
    def reset(cls) -> None:
        """Restore the seeded state: only the built-in validators."""
        from ruleforge.validators import BUILTIN_VALIDATORS

        cls.clear()
        for name, definition in BUILTIN_VALIDATORS.items():
            cls._validators[name] = definition


class ValidatorOverlay:
    """Per-engine validator registrations.

    Lookups check the overlay first, then the global registry. Registering
    here never touches the global catalog or the shared dictionary, and
    silently shadows a global validator of the same name.
    """

    def __init__(self) -> None:
        self._validators: dict[str, ValidatorDefinition] = {}

    def register(self, name: str, definition: Any) -> ValidatorDefinition:
        """Register (or replace) an instance-scoped validator.

        Raises:
            InvalidValidatorError: If the definition is malformed
        """
        normalized = replace(normalize_definition(name, definition), shared=False)
        self._validators[name] = normalized
        logger.debug("Registered instance validator '%s'", name)
        return normalized

    def resolve(self, name: str) -> ValidatorDefinition | None:
        if name in self._validators:
            return self._validators[name]
        return ValidatorRegistry.get(name)

    def names(self) -> list[str]:
        return sorted(self._validators.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._validators


ValidatorRegistry.reset()
