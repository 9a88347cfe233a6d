"""Built-in validators.

Each validator is a predicate `(value, params) -> bool`. Parameters arrive as
raw strings from the rule expression (plus any extra parameters passed at
validation time); converting them is the validator's job. Messages for these
validators live in the bundled English dictionary, keyed by the same names.
"""

import ipaddress
import re
from collections.abc import Sequence
from typing import Any

# Email: Basic RFC 5322 compliant pattern
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

# URL: Basic URL pattern
URL_PATTERN = re.compile(
    r"^https?://[^\s/$.?#].[^\s]*$",
    re.IGNORECASE
)

NUMERIC_PATTERN = re.compile(r"^[0-9]*$")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _length(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value)
    return len(str(value))


def _number(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


# =============================================================================
# Presence and size
# =============================================================================


def required(value: Any, params: Sequence[Any]) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) > 0
    return True


def min_length(value: Any, params: Sequence[Any]) -> bool:
    """min:length"""
    return _length(value) >= int(params[0])


def max_length(value: Any, params: Sequence[Any]) -> bool:
    """max:length"""
    return _length(value) <= int(params[0])


def between(value: Any, params: Sequence[Any]) -> bool:
    """between:min,max (numeric, inclusive)"""
    number = _number(value)
    if number is None:
        return False
    return float(params[0]) <= number <= float(params[1])


def digits(value: Any, params: Sequence[Any]) -> bool:
    """digits:length"""
    text = _text(value)
    return bool(NUMERIC_PATTERN.match(text)) and len(text) == int(params[0])


# =============================================================================
# Membership
# =============================================================================


def in_list(value: Any, params: Sequence[Any]) -> bool:
    """in:a,b,c (compared as strings, so `in:1,2` accepts the integer 1)"""
    return _text(value) in [str(p) for p in params]


def not_in_list(value: Any, params: Sequence[Any]) -> bool:
    return not in_list(value, params)


# =============================================================================
# Character classes and formats
# =============================================================================


def alpha(value: Any, params: Sequence[Any]) -> bool:
    return all(ch.isalpha() or ch.isspace() for ch in _text(value))


def alpha_num(value: Any, params: Sequence[Any]) -> bool:
    return all(ch.isalnum() for ch in _text(value))


def alpha_dash(value: Any, params: Sequence[Any]) -> bool:
    return all(ch.isalnum() or ch in "-_" for ch in _text(value))


def numeric(value: Any, params: Sequence[Any]) -> bool:
    return bool(NUMERIC_PATTERN.match(_text(value)))


def email(value: Any, params: Sequence[Any]) -> bool:
    return bool(EMAIL_PATTERN.match(_text(value)))


def url(value: Any, params: Sequence[Any]) -> bool:
    return bool(URL_PATTERN.match(_text(value)))


def ip(value: Any, params: Sequence[Any]) -> bool:
    try:
        ipaddress.ip_address(_text(value))
    except ValueError:
        return False
    return True


def regex(value: Any, params: Sequence[Any]) -> bool:
    """regex:pattern

    Commas split parameters, so they are joined back to rebuild the pattern.
    """
    pattern = ",".join(str(p) for p in params)
    return re.search(pattern, _text(value)) is not None
