"""cronbake — cron expressions with seconds, aliases, and a named job registry.

Usage::

    from cronbake import Baker

    baker = Baker()
    baker.add("tick", "@every_5_seconds", lambda: print("tick"), auto_start=True)
"""

from cronbake.config import Settings, get_settings
from cronbake.core import (
    CronbakeError,
    CronFieldSet,
    CronParser,
    MalformedExpression,
    NoOccurrenceFound,
    get_next,
    get_previous,
    is_cron,
    is_valid,
    parse,
    resolve_alias,
)
from cronbake.scheduler import Baker, CronJob, Status

__all__ = [
    "Baker",
    "CronFieldSet",
    "CronJob",
    "CronParser",
    "CronbakeError",
    "MalformedExpression",
    "NoOccurrenceFound",
    "Settings",
    "Status",
    "get_next",
    "get_previous",
    "get_settings",
    "is_cron",
    "is_valid",
    "parse",
    "resolve_alias",
]
