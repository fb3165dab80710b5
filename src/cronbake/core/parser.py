"""Six-field cron expression parser and occurrence search.

Field order is ``second minute hour day-of-month month day-of-week``::

    "*/5 * * * * *"   → every five seconds
    "0 30 9 * * 1-5"  → 09:30:00, Monday to Friday
    "0 0 0 1 1 *"     → midnight on January 1st

Aliases (``@daily``, ``@every_5_minutes`` …) are rewritten first, see
:mod:`cronbake.core.aliases`. Times are naive local wall-clock datetimes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import NamedTuple

from cronbake.config import Settings, get_settings
from cronbake.core.aliases import resolve_alias
from cronbake.core.errors import MalformedExpression, NoOccurrenceFound

logger = logging.getLogger(__name__)

_ONE_SECOND = timedelta(seconds=1)
_INTEGER = re.compile(r"[0-9]+")


class FieldSpec(NamedTuple):
    name: str
    min: int
    max: int


FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("second", 0, 59),
    FieldSpec("minute", 0, 59),
    FieldSpec("hour", 0, 23),
    FieldSpec("day_of_month", 1, 31),
    FieldSpec("month", 1, 12),
    FieldSpec("day_of_week", 0, 6),
)


# ---------------------------------------------------------------------------
# Field set
# ---------------------------------------------------------------------------


def weekday(moment: datetime) -> int:
    """Cron day-of-week of *moment* (0 = Sunday … 6 = Saturday)."""
    return moment.isoweekday() % 7


@dataclass(frozen=True)
class CronFieldSet:
    """Parsed expression: the allowed values of each of the six fields."""

    second: frozenset[int]
    minute: frozenset[int]
    hour: frozenset[int]
    day_of_month: frozenset[int]
    month: frozenset[int]
    day_of_week: frozenset[int]

    def matches_day(self, moment: datetime) -> bool:
        """Whether the calendar day of *moment* is allowed."""
        return (
            moment.month in self.month
            and moment.day in self.day_of_month
            and weekday(moment) in self.day_of_week
        )

    def matches(self, moment: datetime) -> bool:
        """Whether *moment* (at second granularity) is an occurrence."""
        return (
            self.matches_day(moment)
            and moment.hour in self.hour
            and moment.minute in self.minute
            and moment.second in self.second
        )


# ---------------------------------------------------------------------------
# Field parsing
# ---------------------------------------------------------------------------


def _to_int(token: str, field_def: FieldSpec, expression: str) -> int:
    if not _INTEGER.fullmatch(token):
        msg = f"Invalid {field_def.name} value '{token}' in '{expression}'"
        raise MalformedExpression(msg, expression=expression, field=field_def.name)
    return int(token)


def _to_step(token: str, field_def: FieldSpec, expression: str) -> int:
    step = _to_int(token, field_def, expression)
    if step == 0:
        msg = f"Step must be positive in {field_def.name} field of '{expression}'"
        raise MalformedExpression(msg, expression=expression, field=field_def.name)
    return step


def parse_field(value: str, field_def: FieldSpec, expression: str = "") -> frozenset[int]:
    """Expand a single field string into the set of integers it allows.

    Raises:
        MalformedExpression: On unparseable syntax, a zero step, a value
            outside ``[field_def.min, field_def.max]``, or an empty result.
    """
    expression = expression or value
    if value == "*":
        values = set(range(field_def.min, field_def.max + 1))
    elif "-" in value:
        bounds, slash, step = value.partition("/")
        start, _, end = bounds.partition("-")
        values = set(
            range(
                _to_int(start, field_def, expression),
                _to_int(end, field_def, expression) + 1,
                _to_step(step, field_def, expression) if slash else 1,
            )
        )
    elif "/" in value:
        base, _, step = value.partition("/")
        start = field_def.min if base == "*" else _to_int(base, field_def, expression)
        values = set(range(start, field_def.max + 1, _to_step(step, field_def, expression)))
    elif "," in value:
        values = {_to_int(item, field_def, expression) for item in value.split(",")}
    else:
        values = {_to_int(value, field_def, expression)}

    if not values:
        msg = f"{field_def.name} field '{value}' matches nothing in '{expression}'"
        raise MalformedExpression(msg, expression=expression, field=field_def.name)
    out_of_range = sorted(v for v in values if not field_def.min <= v <= field_def.max)
    if out_of_range:
        msg = (
            f"{field_def.name} value {out_of_range[0]} outside {field_def.min}-{field_def.max} "
            f"in '{expression}'"
        )
        raise MalformedExpression(msg, expression=expression, field=field_def.name)
    return frozenset(values)


def parse(expression: str) -> CronFieldSet:
    """Resolve aliases and parse *expression* into a :class:`CronFieldSet`.

    Raises:
        MalformedExpression: If the expression (or alias) cannot be parsed.
    """
    return parse_resolved(resolve_alias(expression), expression)


def parse_resolved(resolved: str, expression: str = "") -> CronFieldSet:
    """Parse an already alias-resolved six-field expression.

    *expression* is the text reported in errors; defaults to *resolved*.
    """
    expression = expression or resolved
    parts = resolved.split()
    if len(parts) != len(FIELDS):
        msg = f"Cron expression must have {len(FIELDS)} fields, got {len(parts)}: '{expression}'"
        raise MalformedExpression(msg, expression=expression)
    return CronFieldSet(
        *(parse_field(part, field_def, expression) for part, field_def in zip(parts, FIELDS))
    )


def is_valid(expression: str) -> bool:
    """True if *expression* parses; never raises for bad input."""
    try:
        parse(expression)
    except MalformedExpression:
        return False
    return True


is_cron = is_valid


# ---------------------------------------------------------------------------
# Occurrence search
# ---------------------------------------------------------------------------


def _start_of_next_month(moment: datetime) -> datetime:
    if moment.month == 12:
        return moment.replace(year=moment.year + 1, month=1, day=1, hour=0, minute=0, second=0)
    return moment.replace(month=moment.month + 1, day=1, hour=0, minute=0, second=0)


def _seek_forward(fields: CronFieldSet, start: datetime, limit: datetime) -> datetime | None:
    candidate = start
    while candidate <= limit:
        if candidate.month not in fields.month:
            candidate = _start_of_next_month(candidate)
        elif not fields.matches_day(candidate):
            candidate = candidate.replace(hour=0, minute=0, second=0) + timedelta(days=1)
        elif candidate.hour not in fields.hour:
            candidate = candidate.replace(minute=0, second=0) + timedelta(hours=1)
        elif candidate.minute not in fields.minute:
            candidate = candidate.replace(second=0) + timedelta(minutes=1)
        elif candidate.second not in fields.second:
            candidate += _ONE_SECOND
        else:
            return candidate
    return None


def _seek_backward(fields: CronFieldSet, start: datetime, limit: datetime) -> datetime | None:
    candidate = start
    while candidate >= limit:
        if candidate.month not in fields.month:
            candidate = candidate.replace(day=1, hour=0, minute=0, second=0) - _ONE_SECOND
        elif not fields.matches_day(candidate):
            candidate = candidate.replace(hour=0, minute=0, second=0) - _ONE_SECOND
        elif candidate.hour not in fields.hour:
            candidate = candidate.replace(minute=0, second=0) - _ONE_SECOND
        elif candidate.minute not in fields.minute:
            candidate = candidate.replace(second=0) - _ONE_SECOND
        elif candidate.second not in fields.second:
            candidate -= _ONE_SECOND
        else:
            return candidate
    return None


class CronParser:
    """A parsed expression that can answer "when next" and "when last".

    The expression is parsed once at construction; ``get_next`` and
    ``get_previous`` evaluate against the current local time unless a
    ``now`` is supplied.

    Attributes:
        expression: The expression as given (possibly an alias).
        resolved: The six-field expression after alias resolution.
        fields: The parsed :class:`CronFieldSet`.
    """

    def __init__(self, expression: str, settings: Settings | None = None) -> None:
        self.expression = expression
        self.resolved = resolve_alias(expression)
        self.fields = parse_resolved(self.resolved, expression)
        self._horizon = (settings or get_settings()).search_horizon

    def __repr__(self) -> str:
        return f"CronParser({self.expression!r})"

    def parse(self) -> CronFieldSet:
        return self.fields

    def get_next(self, now: datetime | None = None) -> datetime:
        """First occurrence strictly after *now* (truncated to the second).

        Raises:
            NoOccurrenceFound: If nothing matches within the search horizon.
        """
        origin = (now or datetime.now()).replace(microsecond=0)
        found = _seek_forward(self.fields, origin + _ONE_SECOND, origin + self._horizon)
        if found is None:
            msg = f"No occurrence of '{self.expression}' within {self._horizon.days} days after {origin}"
            raise NoOccurrenceFound(msg, expression=self.expression, direction="next")
        logger.debug("Next occurrence of '%s' after %s: %s", self.expression, origin, found)
        return found

    def get_previous(self, now: datetime | None = None) -> datetime:
        """Latest occurrence strictly before *now* (truncated to the second).

        Raises:
            NoOccurrenceFound: If nothing matches within the search horizon.
        """
        origin = (now or datetime.now()).replace(microsecond=0)
        found = _seek_backward(self.fields, origin - _ONE_SECOND, origin - self._horizon)
        if found is None:
            msg = f"No occurrence of '{self.expression}' within {self._horizon.days} days before {origin}"
            raise NoOccurrenceFound(msg, expression=self.expression, direction="previous")
        logger.debug("Previous occurrence of '%s' before %s: %s", self.expression, origin, found)
        return found


def get_next(expression: str, now: datetime | None = None) -> datetime:
    """Next occurrence of *expression* after *now* (default: current time)."""
    return CronParser(expression).get_next(now)


def get_previous(expression: str, now: datetime | None = None) -> datetime:
    """Previous occurrence of *expression* before *now* (default: current time)."""
    return CronParser(expression).get_previous(now)
