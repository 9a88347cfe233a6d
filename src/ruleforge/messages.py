"""Locale dictionary and message resolution for RuleForge.

The dictionary is process-wide: locale -> validator name -> message function.
It is seeded from the bundled `locales/en.yaml`, and English is always
present. Messages can be supplied as callables `(field, params) -> str` or
as templates:

    "The {field} must be at least {0} characters."

`{field}` is the field (or its display attribute), `{0}`, `{1}`... are the
rule parameters.
"""

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from ruleforge.exceptions import DictionaryError
from ruleforge.types import (
    DEFAULT_LOCALE,
    DEFAULT_MESSAGE,
    MessageFn,
    ValidatorDefinition,
)

logger = logging.getLogger(__name__)

_LOCALES_DIR = Path(__file__).parent / "locales"

# {field} or {0}, {1}, ...
PLACEHOLDER = re.compile(r"\{(?P<key>field|\d+)\}")


# =============================================================================
# Templates
# =============================================================================


def render_template(template: str, field: str, params: Sequence[Any] = ()) -> str:
    """Substitute `{field}` and positional `{n}` placeholders.

    Positional placeholders without a matching parameter render empty.
    """

    def replace(match: re.Match) -> str:
        key = match.group("key")
        if key == "field":
            return field
        index = int(key)
        if index < len(params):
            return str(params[index])
        return ""

    return PLACEHOLDER.sub(replace, template)


def template_message(template: str) -> MessageFn:
    """Compile a template string into a message function."""

    def message(field: str, params: Sequence[Any] = ()) -> str:
        return render_template(template, field, params)

    message.template = template  # type: ignore[attr-defined]
    return message


def as_message_fn(message: MessageFn | str) -> MessageFn:
    """Accept either a message function or a template string."""
    if isinstance(message, str):
        return template_message(message)
    if callable(message):
        return message
    raise DictionaryError(
        f"Messages must be callables or template strings, got {type(message).__name__}"
    )


# =============================================================================
# Dictionary
# =============================================================================


class MessageDictionary:
    """Process-wide locale dictionary.

    Merges happen at (locale, validator name) granularity: updating one leaf
    leaves every other locale and validator untouched. Entries are never
    removed except by `reset()`, which restores the bundled English set.

    Example:
        MessageDictionary.update({
            "ar": {"alpha": "{field} يجب ان يحتوي على حروف فقط."},
            "en": {"alpha": lambda field, params: f"{field} is alphabetic."},
        })
    """

    _messages: dict[str, dict[str, MessageFn]] = {}

    @classmethod
    def update(cls, partial: Mapping[str, Mapping[str, MessageFn | str]]) -> None:
        """Deep-merge a partial dictionary into the global one."""
        for locale, entries in partial.items():
            if not isinstance(entries, Mapping):
                raise DictionaryError(
                    f"Locale '{locale}' must map validator names to messages"
                )
            bucket = cls._messages.setdefault(locale, {})
            for name, message in entries.items():
                bucket[name] = as_message_fn(message)
            logger.debug("Merged %d message(s) into locale '%s'", len(entries), locale)

    @classmethod
    def set_message(cls, locale: str, name: str, message: MessageFn | str) -> None:
        """Set a single (locale, name) leaf."""
        cls.update({locale: {name: message}})

    @classmethod
    def get(cls, locale: str, name: str) -> MessageFn | None:
        return cls._messages.get(locale, {}).get(name)

    @classmethod
    def has_locale(cls, locale: str) -> bool:
        return locale in cls._messages

    @classmethod
    def locales(cls) -> list[str]:
        return sorted(cls._messages.keys())

    @classmethod
    def load_file(cls, path: Path) -> None:
        """Merge a YAML locale file.

        Two shapes are accepted:
        - `{locale: {name: template}}`
        - `{name: template}`, where the file stem is the locale (`ar.yaml`)
        """
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as e:
            raise DictionaryError(f"Cannot read locale file {path}: {e}") from e

        if not isinstance(data, dict):
            raise DictionaryError(f"Locale file {path} must contain a mapping")

        if all(isinstance(v, dict) for v in data.values()):
            cls.update(data)
        else:
            cls.update({path.stem: data})
        logger.debug("Loaded locale file %s", path)

    @classmethod
    def load_directory(cls, directory: Path) -> list[Path]:
        """Load every YAML file in a directory, in name order."""
        directory = Path(directory)
        if not directory.is_dir():
            raise DictionaryError(f"Locale directory not found: {directory}")

        loaded = sorted(
            p for p in directory.iterdir() if p.suffix in (".yaml", ".yml")
        )
        for path in loaded:
            cls.load_file(path)
        return loaded

    @classmethod
    def clear(cls) -> None:
        """Drop all messages, keeping an empty English locale."""
        cls._messages = {DEFAULT_LOCALE: {}}

    @classmethod
    def reset(cls) -> None:
        """Restore the bundled dictionary. Primarily for testing."""
        cls.clear()
        cls.load_file(_LOCALES_DIR / f"{DEFAULT_LOCALE}.yaml")


# =============================================================================
# Resolution
# =============================================================================


def _call(message_fn: Callable[..., str], field: str, params: Sequence[Any]) -> str | None:
    try:
        return str(message_fn(field, params))
    except Exception:
        logger.warning("Message function for '%s' raised", field, exc_info=True)
        return None


def resolve_message(
    definition: ValidatorDefinition,
    field: str,
    params: Sequence[Any],
    locale: str = DEFAULT_LOCALE,
) -> str:
    """Produce the failure message for a validator.

    Resolution order:
    1. The requested locale: the definition's own messages, then, for a
       globally registered definition, the dictionary entry for its name.
    2. The same for English, when a different locale was requested.
    3. The definition's locale-agnostic `get_message`.
    4. The default "The {field} value is not valid." template.

    Args:
        definition: The failing validator's definition
        field: Field name (or display name) to put in the message
        params: The merged parameters the rule was invoked with
        locale: Active locale of the engine

    Returns:
        The resolved message
    """
    candidates = [locale]
    if locale != DEFAULT_LOCALE:
        candidates.append(DEFAULT_LOCALE)

    for candidate in candidates:
        message_fn = definition.messages.get(candidate)
        if message_fn is None and definition.shared:
            message_fn = MessageDictionary.get(candidate, definition.name)
        if message_fn is not None:
            message = _call(message_fn, field, params)
            if message is not None:
                return message

    if definition.get_message is not None:
        message = _call(definition.get_message, field, params)
        if message is not None:
            return message

    return render_template(DEFAULT_MESSAGE, field)


MessageDictionary.reset()
