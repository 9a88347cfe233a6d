"""The RuleForge validation engine.

A ValidationEngine holds the rules of a set of fields, validates values
against them and keeps the resulting messages in an ErrorBag.

Usage:
    engine = ValidationEngine({
        "email": "required|email",
        "name": "required|min:3",
    })

    engine.validate_all({"email": "foo@bar.c", "name": ""})   # False
    engine.error_bag.all()
    # ["The email must be a valid email.",
    #  "The name is required.",
    #  "The name must be at least 3 characters."]

Results are plain booleans while every rule involved is synchronous. As soon
as one rule returns an awaitable, `validate` and `validate_all` return an
awaitable instead, which must be awaited for the errors to be recorded:

    passed = await engine.validate("avatar", files, [150, 100])
"""

import asyncio
import inspect
import logging
import types
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from ruleforge.config import EngineConfig
from ruleforge.error_bag import ErrorBag
from ruleforge.field import (
    FieldValidator,
    RuleCall,
    has_pending,
    settle,
    settled_results,
)
from ruleforge.messages import MessageDictionary, resolve_message
from ruleforge.registry import ValidatorOverlay, ValidatorRegistry
from ruleforge.types import MessageFn, RuleSpec, ValidatorDefinition

logger = logging.getLogger(__name__)

UNKNOWN_RULE_MESSAGE = "The {field} field uses an unknown rule '{rule}'."


class ScopedMethod:
    """Method with one implementation on the class and another on instances.

    Accessed on the class, the class-level function is bound to the class;
    accessed on an instance, the instance-level function is bound to it.

    Example:
        class Catalog:
            @ScopedMethod
            def add(cls, name): ...      # Catalog.add(name)

            @add.instance
            def add(self, name): ...     # Catalog().add(name)
    """

    def __init__(self, class_func: Callable[..., Any]):
        self.class_func = class_func
        self.instance_func: Callable[..., Any] | None = None
        self.__doc__ = class_func.__doc__

    def instance(self, func: Callable[..., Any]) -> "ScopedMethod":
        self.instance_func = func
        return self

    def __get__(self, obj: Any, objtype: type | None = None) -> Callable[..., Any]:
        if obj is None or self.instance_func is None:
            return types.MethodType(self.class_func, objtype if obj is None else type(obj))
        return types.MethodType(self.instance_func, obj)


class ValidationEngine:
    """Validates field values against pipe-delimited rule expressions.

    Attributes:
        fields: Field name -> FieldValidator, in declaration order
        error_bag: Current failures of every field
        locale: Active locale for messages
        attributes: Optional display names used in place of field names
        overlay: Validators registered on this engine only
    """

    def __init__(
        self,
        rules: Mapping[str, str] | None = None,
        *,
        locale: str | None = None,
        attributes: Mapping[str, str] | None = None,
    ):
        self.fields: dict[str, FieldValidator] = {}
        self.error_bag = ErrorBag()
        self.locale = locale or EngineConfig.from_env().locale
        self.attributes: dict[str, str] = dict(attributes or {})
        self.overlay = ValidatorOverlay()
        self._generations: dict[str, int] = {}

        for field, expression in (rules or {}).items():
            self.attach(field, expression)

    @classmethod
    def create(cls) -> "ValidationEngine":
        """Create an engine with no rules."""
        return cls()

    # =========================================================================
    # Rules
    # =========================================================================

    def attach(self, field: str, expression: str) -> FieldValidator:
        """Set a field's rules, replacing any previous ones and their errors."""
        validator = FieldValidator.from_expression(field, expression)
        self.fields[field] = validator
        self.error_bag.remove(field)
        self._supersede(field)
        logger.debug("Attached rules '%s' to field '%s'", validator.expression, field)
        return validator

    def detach(self, field: str) -> bool:
        """Remove a field and its errors. Returns whether the field existed."""
        self._supersede(field)
        self.error_bag.remove(field)
        return self.fields.pop(field, None) is not None

    def has_field(self, field: str) -> bool:
        return field in self.fields

    def rules_for(self, field: str) -> list[RuleSpec]:
        validator = self.fields.get(field)
        return list(validator.rules) if validator else []

    # =========================================================================
    # Registration
    # =========================================================================

    @ScopedMethod
    def extend(cls, name: str, definition: Any) -> ValidatorDefinition:
        """Register a validator.

        On the class, registers globally (duplicate names raise
        DuplicateValidatorError). On an instance, registers for that engine
        only, shadowing any global validator of the same name.
        """
        return ValidatorRegistry.register(name, definition)

    @extend.instance
    def extend(self, name: str, definition: Any) -> ValidatorDefinition:
        return self.overlay.register(name, definition)

    @classmethod
    def update_dictionary(cls, partial: Mapping[str, Mapping[str, MessageFn | str]]) -> None:
        """Merge messages into the process-wide locale dictionary."""
        MessageDictionary.update(partial)

    def set_locale(self, locale: str) -> None:
        """Switch the locale used for future messages. Existing errors stay as they are."""
        self.locale = locale

    def get_errors(self) -> ErrorBag:
        return self.error_bag

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(
        self,
        field: str,
        value: Any,
        extra_params: Sequence[Any] | None = None,
    ) -> bool | Awaitable[bool]:
        """Validate one value against a field's rules.

        Every rule runs; each failure adds one message to the error bag, in
        rule order. Previous errors of the field are cleared first. A field
        without rules passes. When an earlier asynchronous call for the same
        field settles after this one started, its failures are discarded.

        Args:
            field: Field name
            value: Value to judge
            extra_params: Parameters appended to every rule's own parameters

        Returns:
            True if no rule failed, or an awaitable of that if any rule is
            asynchronous.
        """
        self.error_bag.remove(field)
        generation = self._supersede(field)

        validator = self.fields.get(field)
        if validator is None:
            return True

        calls = validator.dispatch(value, self.overlay.resolve, extra_params or ())
        if has_pending(calls):
            return self._settle_field(field, calls, generation)
        return self._record(field, calls, settled_results(calls))

    def validate_all(self, values: Mapping[str, Any] | None = None) -> bool | Awaitable[bool]:
        """Validate every declared field.

        Fields missing from `values` are validated as None, so `required`
        still fires. The error bag ends up ordered by field declaration.

        Returns:
            True if every field passed, or an awaitable of that if any field
            has asynchronous rules.
        """
        values = values or {}
        results = [self.validate(field, values.get(field)) for field in list(self.fields)]

        if any(inspect.isawaitable(r) for r in results):
            return self._settle_all(results)

        self.error_bag.sort_by_fields(self.fields)
        return all(results)

    def _supersede(self, field: str) -> int:
        """Start a new generation for a field, invalidating pending results."""
        generation = self._generations.get(field, 0) + 1
        self._generations[field] = generation
        return generation

    async def _settle_field(self, field: str, calls: list[RuleCall], generation: int) -> bool:
        passed = await settle(calls)
        if self._generations.get(field) != generation:
            logger.debug("Discarding superseded results for field '%s'", field)
            return all(passed)
        self.error_bag.remove(field)
        return self._record(field, calls, passed)

    async def _settle_all(self, results: list[Any]) -> bool:
        pending = [r for r in results if inspect.isawaitable(r)]
        settled = iter(await asyncio.gather(*pending))
        passed = [next(settled) if inspect.isawaitable(r) else r for r in results]
        self.error_bag.sort_by_fields(self.fields)
        return all(passed)

    def _record(self, field: str, calls: list[RuleCall], passed: list[bool]) -> bool:
        display_name = self.attributes.get(field, field)
        for call, ok in zip(calls, passed):
            if not ok:
                self.error_bag.add(field, self._message(display_name, call), rule=call.rule.name)
        return all(passed)

    def _message(self, display_name: str, call: RuleCall) -> str:
        if call.definition is None:
            return UNKNOWN_RULE_MESSAGE.format(field=display_name, rule=call.rule.name)
        return resolve_message(call.definition, display_name, call.params, self.locale)

    def __contains__(self, field: str) -> bool:
        return field in self.fields

    def __repr__(self) -> str:
        rules = {name: v.expression for name, v in self.fields.items()}
        return f"ValidationEngine({rules!r}, locale={self.locale!r})"
