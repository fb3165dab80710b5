"""Exception hierarchy for expression parsing and occurrence search."""

from __future__ import annotations


class CronbakeError(Exception):
    """Base class for every error raised by cronbake."""


class MalformedExpression(CronbakeError, ValueError):
    """An expression, one of its fields, or an alias parameter is unparseable."""

    def __init__(self, message: str, expression: str = "", field: str | None = None) -> None:
        self.expression = expression
        self.field = field
        super().__init__(message)


class NoOccurrenceFound(CronbakeError, LookupError):
    """The occurrence search ran past its horizon without a match."""

    def __init__(self, message: str, expression: str = "", direction: str = "next") -> None:
        self.expression = expression
        self.direction = direction
        super().__init__(message)
