"""Plain-English descriptions of cron expressions.

The describer works on the raw text of each field and only tells four
shapes apart: ``*``, lists, steps and anything else. It never validates
values, so expressions the evaluator rejects can still be described.

Example:
    >>> describe_frequency("*/15 9 * * 1,3")
    'Every 15 minute(s) at 9:00 every day of every month on Monday, Wednesday'
    >>> describe_frequency("* * *")
    'Unable to describe frequency'
"""

from __future__ import annotations

import logging

from cronsight.scheduling.cron import WEEKDAY_NAMES

logger = logging.getLogger(__name__)

UNDESCRIBABLE_MESSAGE = "Unable to describe frequency"


class UndescribableExpression(ValueError):
    """The expression does not have a shape the describer understands."""

    def __init__(self, expression: str, field_count: int) -> None:
        self.expression = expression
        self.field_count = field_count
        super().__init__(
            f"Cannot describe expression with {field_count} fields: {expression!r}"
        )


class FrequencyDescriber:
    """Renders a cron expression as a sentence, one clause per field."""

    def clauses(self, expression: str) -> list[str]:
        """Build the clause list for an expression.

        The seconds field of a 6-field expression is ignored. The
        day-of-week clause is left out when that field is ``*``.

        Raises:
            UndescribableExpression: If the expression has neither 5 nor
                6 fields.
        """
        parts = expression.split()
        if len(parts) not in (5, 6):
            raise UndescribableExpression(expression, len(parts))

        minute, hour, day_of_month, month, day_of_week = parts[-5:]

        clauses = [
            self._minute_clause(minute),
            self._hour_clause(hour),
            self._day_of_month_clause(day_of_month),
            self._month_clause(month),
        ]
        if day_of_week != "*":
            clauses.append(self._day_of_week_clause(day_of_week))
        return clauses

    def describe(self, expression: str) -> str:
        """Describe an expression, falling back to a fixed message."""
        try:
            return " ".join(self.clauses(expression))
        except UndescribableExpression as e:
            logger.debug("Falling back to generic description: %s", e)
            return UNDESCRIBABLE_MESSAGE

    @staticmethod
    def _step(raw: str) -> str:
        return raw.split("/")[1]

    def _minute_clause(self, raw: str) -> str:
        if raw == "*":
            return "Every minute"
        if "," in raw:
            return f"At minute(s) {raw}"
        if "/" in raw:
            return f"Every {self._step(raw)} minute(s)"
        return f"At minute {raw}"

    def _hour_clause(self, raw: str) -> str:
        if raw == "*":
            return "of every hour"
        if "," in raw:
            return f"at {raw}:00"
        if "/" in raw:
            return f"every {self._step(raw)} hour(s)"
        return f"at {raw}:00"

    def _day_of_month_clause(self, raw: str) -> str:
        if raw == "*":
            return "every day"
        if "," in raw:
            return f"on days {raw}"
        return f"on day {raw}"

    def _month_clause(self, raw: str) -> str:
        if raw == "*":
            return "of every month"
        if "," in raw:
            return f"in months {raw}"
        return f"in month {raw}"

    def _day_of_week_clause(self, raw: str) -> str:
        return "on " + ", ".join(weekday_name(token) for token in raw.split(","))


def weekday_name(token: str) -> str:
    """Map ``0``-``6`` to a weekday name; return anything else unchanged."""
    if token.isdigit() and token.isascii():
        number = int(token)
        if number < len(WEEKDAY_NAMES):
            return WEEKDAY_NAMES[number]
    return token


_default_describer = FrequencyDescriber()


def describe_frequency(expression: str) -> str:
    """Describe an expression with the default describer."""
    return _default_describer.describe(expression)
