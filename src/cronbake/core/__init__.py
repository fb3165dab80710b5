"""Core package — alias resolution, field parsing, and occurrence search."""

from cronbake.core.aliases import FIXED_ALIASES, is_alias, resolve_alias
from cronbake.core.errors import CronbakeError, MalformedExpression, NoOccurrenceFound
from cronbake.core.parser import (
    FIELDS,
    CronFieldSet,
    CronParser,
    get_next,
    get_previous,
    is_cron,
    is_valid,
    parse,
)

__all__ = [
    "FIELDS",
    "FIXED_ALIASES",
    "CronFieldSet",
    "CronParser",
    "CronbakeError",
    "MalformedExpression",
    "NoOccurrenceFound",
    "get_next",
    "get_previous",
    "is_alias",
    "is_cron",
    "is_valid",
    "parse",
    "resolve_alias",
]
