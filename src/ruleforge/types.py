"""Core types for the RuleForge validation engine.

This module defines the data shared by the parser, registry, dispatcher and
error bag:
- RuleSpec: one parsed `name:param,param` token
- ValidatorDefinition: a registered predicate plus its message strategy
- ErrorEntry: one recorded failure
- Settled / Pending: the outcome of invoking a single rule
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# (value, params) -> bool | Awaitable[bool]
PredicateFn = Callable[[Any, Sequence[Any]], Any]

# (field, params) -> message
MessageFn = Callable[[str, Sequence[Any]], str]

DEFAULT_LOCALE = "en"
DEFAULT_MESSAGE = "The {field} value is not valid."


class DefinitionKind(Enum):
    """How a validator definition was supplied at registration."""

    PREDICATE = "predicate"  # bare callable, default message
    OBJECT = "object"  # validate + get_message and/or messages
    BUILTIN = "builtin"  # shipped validator, messages live in the dictionary


@dataclass(frozen=True)
class RuleSpec:
    """A single rule parsed from an expression.

    Attributes:
        name: Validator name as written in the expression
        params: Raw string parameters in source order
    """

    name: str
    params: tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.params:
            return self.name
        return f"{self.name}:{','.join(self.params)}"


@dataclass(frozen=True)
class ValidatorDefinition:
    """A normalized validator definition.

    Both registration shapes (bare predicate and definition object) end up
    here, so the dispatcher and message resolver only deal with one type.

    Attributes:
        name: Name the definition is registered under
        validate: Predicate called with (value, params)
        kind: Which registration shape produced this definition
        get_message: Locale-agnostic message function, if any
        messages: Locale -> message function, if any
        shared: Whether the definition is globally registered, so its
            messages are looked up in the process-wide dictionary
    """

    name: str
    validate: PredicateFn
    kind: DefinitionKind = DefinitionKind.OBJECT
    get_message: MessageFn | None = None
    messages: Mapping[str, MessageFn] = field(default_factory=dict)
    shared: bool = False


@dataclass(frozen=True)
class ErrorEntry:
    """A single failure message tagged with its field.

    Attributes:
        field: Field name the failure belongs to
        message: Resolved, human-readable message
        rule: Name of the failing rule, when known
    """

    field: str
    message: str
    rule: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "rule": self.rule,
        }


@dataclass(frozen=True)
class Settled:
    """A rule outcome that is already known."""

    passed: bool


@dataclass(frozen=True)
class Pending:
    """A rule outcome still waiting on an awaitable."""

    awaitable: Awaitable[Any]


Outcome = Settled | Pending
