"""Shorthand aliases — rewrite ``@tokens`` into six-field expressions.

Resolution is a pure string-to-string rewrite; nothing is retained.

Supported forms::

    @every_second  @every_minute  @hourly  @daily  @weekly
    @monthly  @yearly  @annually
    @every_<n>_<unit>     unit: seconds|minutes|hours|dayOfMonth|months|dayOfWeek
    @at_<hour>:<minute>
    @on_<day>             day: sunday .. saturday
    @between_<hour>_<hour>
"""

from __future__ import annotations

import re

from cronbake.core.errors import MalformedExpression

# second minute hour day-of-month month day-of-week
FIXED_ALIASES: dict[str, str] = {
    "@every_second": "* * * * * *",
    "@every_minute": "0 * * * * *",
    "@hourly": "0 0 * * * *",
    "@daily": "0 0 0 * * *",
    "@weekly": "0 0 0 * * 0",
    "@monthly": "0 0 0 1 * *",
    "@yearly": "0 0 0 1 1 *",
    "@annually": "0 0 0 1 1 *",
}

# Smaller fields pinned to their minimum, larger ones wildcarded.
_EVERY_TEMPLATES: dict[str, str] = {
    "seconds": "*/{n} * * * * *",
    "minutes": "0 */{n} * * * *",
    "hours": "0 0 */{n} * * *",
    "dayOfMonth": "0 0 0 */{n} * *",
    "months": "0 0 0 1 */{n} *",
    "dayOfWeek": "0 0 0 * * */{n}",
}

DAYS: dict[str, int] = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}

_NUMBER = re.compile(r"[0-9]+")


def _number(token: str, alias: str) -> str:
    if not _NUMBER.fullmatch(token):
        msg = f"Alias parameter must be a non-negative integer, got '{token}': '{alias}'"
        raise MalformedExpression(msg, expression=alias)
    return str(int(token))


def _resolve_every(alias: str) -> str:
    parts = alias.split("_")
    if len(parts) != 3:
        msg = f"Expected '@every_<n>_<unit>', got '{alias}'"
        raise MalformedExpression(msg, expression=alias)
    _, value, unit = parts
    template = _EVERY_TEMPLATES.get(unit)
    if template is None:
        msg = f"Unknown unit '{unit}' in '{alias}' (expected one of {', '.join(_EVERY_TEMPLATES)})"
        raise MalformedExpression(msg, expression=alias)
    return template.format(n=_number(value, alias))


def _resolve_at(alias: str) -> str:
    time_part = alias[len("@at_"):]
    hour, sep, minute = time_part.partition(":")
    if not sep:
        msg = f"Expected '@at_<hour>:<minute>', got '{alias}'"
        raise MalformedExpression(msg, expression=alias)
    return f"0 {_number(minute, alias)} {_number(hour, alias)} * * *"


def _resolve_on(alias: str) -> str:
    day = alias[len("@on_"):]
    if day not in DAYS:
        msg = f"Unknown day '{day}' in '{alias}'"
        raise MalformedExpression(msg, expression=alias)
    return f"0 0 0 * * {DAYS[day]}"


def _resolve_between(alias: str) -> str:
    parts = alias.split("_")
    if len(parts) != 3:
        msg = f"Expected '@between_<hour>_<hour>', got '{alias}'"
        raise MalformedExpression(msg, expression=alias)
    _, start, end = parts
    return f"0 0 {_number(start, alias)}-{_number(end, alias)} * * *"


_PARAMETRIZED = (
    ("@every_", _resolve_every),
    ("@at_", _resolve_at),
    ("@on_", _resolve_on),
    ("@between_", _resolve_between),
)


def is_alias(expression: str) -> bool:
    """Whether *expression* looks like an alias token (fixed or parametrized)."""
    token = expression.strip()
    return token in FIXED_ALIASES or any(token.startswith(p) for p, _ in _PARAMETRIZED)


def resolve_alias(expression: str) -> str:
    """Rewrite an alias into its six-field expression.

    Strings that are not aliases are returned unchanged (stripped), so the
    result can always be handed to the field parser.

    Raises:
        MalformedExpression: If an alias prefix matches but its parameters
            cannot be interpreted.
    """
    token = expression.strip()
    if token in FIXED_ALIASES:
        return FIXED_ALIASES[token]
    for prefix, resolver in _PARAMETRIZED:
        if token.startswith(prefix):
            return resolver(token)
    return token
