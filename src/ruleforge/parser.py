"""Parser for rule expressions.

A rule expression is a pipe-delimited list of validator names, each with
optional comma-separated parameters:

    required|min:3|in:draft,published

Grammar:
    expression := rule ('|' rule)*
    rule       := name [':' param (',' param)*]

There is no escaping: a parameter can never contain `|` or `,`, and only the
first `:` of a rule separates the name from its parameters. Rule names are
not checked here; unknown names fail at dispatch time, so expressions may be
written before their validators are registered.
"""

from collections.abc import Iterable

from ruleforge.types import RuleSpec

RULE_SEPARATOR = "|"
PARAM_MARKER = ":"
PARAM_SEPARATOR = ","


def parse_rule(token: str) -> RuleSpec:
    """Parse a single `name[:params]` token."""
    token = token.strip()
    name, marker, raw_params = token.partition(PARAM_MARKER)
    if not marker:
        return RuleSpec(name=name.strip())

    params = tuple(p.strip() for p in raw_params.split(PARAM_SEPARATOR))
    return RuleSpec(name=name.strip(), params=params)


def parse_rules(expression: str | None) -> list[RuleSpec]:
    """Parse a rule expression into its ordered rule list.

    Args:
        expression: The expression, e.g. "required|min:3|max:255"

    Returns:
        RuleSpecs in source order. Empty or blank expressions give [].
    """
    if not expression:
        return []

    rules: list[RuleSpec] = []
    for token in expression.strip().split(RULE_SEPARATOR):
        if not token.strip():
            continue
        rules.append(parse_rule(token))
    return rules


def serialize_rules(rules: Iterable[RuleSpec]) -> str:
    """Render rules back into expression form.

    For any expression `e` without embedded delimiters,
    `parse_rules(serialize_rules(parse_rules(e))) == parse_rules(e)`.
    """
    return RULE_SEPARATOR.join(str(rule) for rule in rules)
