"""RuleForge: field validation with compact rule expressions.

Fields declare their rules as pipe-delimited expressions; the engine parses
them, dispatches values to named validators (sync or async), and collects
localized error messages.

Usage:
    from ruleforge import ValidationEngine

    engine = ValidationEngine({"email": "required|email", "name": "required|min:3"})
    if not engine.validate_all({"email": "foo@bar.com", "name": "Jo"}):
        print(engine.error_bag.all())

    # Global validator, available to every engine
    ValidationEngine.extend("even", lambda value, params: int(value) % 2 == 0)

    # Instance validator, visible to this engine only
    engine.extend("odd", lambda value, params: int(value) % 2 == 1)
"""

from ruleforge.config import EngineConfig
from ruleforge.engine import ValidationEngine
from ruleforge.error_bag import ErrorBag
from ruleforge.exceptions import (
    ConfigurationError,
    DictionaryError,
    DuplicateValidatorError,
    InvalidValidatorError,
    RuleForgeError,
)
from ruleforge.field import FieldValidator
from ruleforge.instances import InstanceRegistry, register, unregister
from ruleforge.messages import MessageDictionary, resolve_message
from ruleforge.parser import parse_rules, serialize_rules
from ruleforge.registry import ValidatorOverlay, ValidatorRegistry, normalize_definition
from ruleforge.types import (
    DefinitionKind,
    ErrorEntry,
    Pending,
    RuleSpec,
    Settled,
    ValidatorDefinition,
)
from ruleforge.validators import UploadedFile, set_image_probe

__all__ = [
    # Engine
    "ValidationEngine",
    "FieldValidator",
    "ErrorBag",
    "EngineConfig",
    # Types
    "DefinitionKind",
    "ErrorEntry",
    "Pending",
    "RuleSpec",
    "Settled",
    "ValidatorDefinition",
    # Parsing
    "parse_rules",
    "serialize_rules",
    # Registry
    "ValidatorOverlay",
    "ValidatorRegistry",
    "normalize_definition",
    # Messages
    "MessageDictionary",
    "resolve_message",
    # Instances
    "InstanceRegistry",
    "register",
    "unregister",
    # Files
    "UploadedFile",
    "set_image_probe",
    # Errors
    "ConfigurationError",
    "DictionaryError",
    "DuplicateValidatorError",
    "InvalidValidatorError",
    "RuleForgeError",
]
