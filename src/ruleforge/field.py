"""Per-field rule dispatch.

A FieldValidator owns one field's parsed rules. Dispatching a value invokes
every rule in declared order, with no short-circuit, and captures each
outcome without waiting on anything:
- a plain return value becomes Settled(bool(value))
- an awaitable becomes Pending(awaitable)
- a raised exception or an unknown rule becomes Settled(False)

`settle` then joins all pending outcomes at once (all-settled), so a slow
asynchronous rule never serializes the others.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ruleforge.parser import parse_rules, serialize_rules
from ruleforge.types import (
    Outcome,
    Pending,
    RuleSpec,
    Settled,
    ValidatorDefinition,
)

logger = logging.getLogger(__name__)

Resolver = Callable[[str], ValidatorDefinition | None]


@dataclass(frozen=True)
class RuleCall:
    """One rule invocation for one value.

    Attributes:
        rule: The rule as parsed from the expression
        definition: The resolved validator, or None if the name is unknown
        params: Rule parameters followed by any extra parameters
        outcome: Settled or Pending result of the invocation
    """

    rule: RuleSpec
    definition: ValidatorDefinition | None
    params: tuple[Any, ...]
    outcome: Outcome


def invoke(definition: ValidatorDefinition, value: Any, params: Sequence[Any]) -> Outcome:
    """Call a validator and classify what it returned."""
    try:
        result = definition.validate(value, params)
    except Exception:
        logger.warning("Validator '%s' raised; counting as a failure", definition.name, exc_info=True)
        return Settled(False)

    if inspect.isawaitable(result):
        return Pending(result)
    return Settled(bool(result))


def has_pending(calls: Sequence[RuleCall]) -> bool:
    return any(isinstance(call.outcome, Pending) for call in calls)


def settled_results(calls: Sequence[RuleCall]) -> list[bool]:
    """Results of calls that are all Settled."""
    return [call.outcome.passed for call in calls]  # type: ignore[union-attr]


async def settle(calls: Sequence[RuleCall]) -> list[bool]:
    """Wait for every pending outcome and return one boolean per call.

    A rejected awaitable counts as False, like a synchronous failure.
    """
    pending = [call.outcome.awaitable for call in calls if isinstance(call.outcome, Pending)]
    results = iter(await asyncio.gather(*pending, return_exceptions=True))

    passed: list[bool] = []
    for call in calls:
        if isinstance(call.outcome, Settled):
            passed.append(call.outcome.passed)
            continue

        result = next(results)
        if isinstance(result, BaseException):
            logger.warning(
                "Validator '%s' rejected; counting as a failure",
                call.rule.name,
                exc_info=result,
            )
            passed.append(False)
        else:
            passed.append(bool(result))
    return passed


class FieldValidator:
    """Holds and runs the ordered rules of a single field."""

    def __init__(self, name: str, rules: Sequence[RuleSpec] = ()):
        self.name = name
        self.rules: tuple[RuleSpec, ...] = tuple(rules)

    @classmethod
    def from_expression(cls, name: str, expression: str | None) -> "FieldValidator":
        return cls(name, parse_rules(expression))

    @property
    def expression(self) -> str:
        return serialize_rules(self.rules)

    def dispatch(
        self,
        value: Any,
        resolve: Resolver,
        extra_params: Sequence[Any] = (),
    ) -> list[RuleCall]:
        """Invoke every rule against a value.

        Args:
            value: The value to judge
            resolve: Name -> definition lookup (instance overlay, then global)
            extra_params: Caller-supplied parameters appended to each rule's own

        Returns:
            One RuleCall per rule, in declared order
        """
        calls: list[RuleCall] = []
        for rule in self.rules:
            params = rule.params + tuple(extra_params)
            definition = resolve(rule.name)
            if definition is None:
                logger.warning("Field '%s' uses unknown rule '%s'", self.name, rule.name)
                outcome: Outcome = Settled(False)
            else:
                outcome = invoke(definition, value, params)
            calls.append(RuleCall(rule=rule, definition=definition, params=params, outcome=outcome))
        return calls

    def __repr__(self) -> str:
        return f"FieldValidator({self.name!r}, {self.expression!r})"
