"""Scheduling module for cronsight.

This module interprets cron expressions: it validates them, finds their
next occurrence and describes them in plain English.

Features:
    - Standard 5-field cron (minute, hour, day, month, weekday)
    - Extended 6-field cron with a leading seconds field
    - Lists, ranges and steps in every field
    - Bounded next-occurrence search
    - Plain-English frequency descriptions

Syntax Reference:
    Field         Values    Special Characters
    ───────────────────────────────────────────
    Second        0-59      * / , -
    Minute        0-59      * / , -
    Hour          0-23      * / , -
    Day of Month  1-31      * / , -
    Month         1-12      * / , -
    Day of Week   0-6       * / , -     (0 = Sunday)

When both day-of-month and day-of-week are restricted, a day matches if
either of them does.

Usage:
    >>> from cronsight.scheduling import CronExpression, describe_frequency
    >>>
    >>> expr = CronExpression.parse("0 0 1 * *")
    >>> expr.next(datetime(2024, 1, 15, 10, 0))
    datetime.datetime(2024, 2, 1, 0, 0)
    >>> describe_frequency("0 0 * * *")
    'At minute 0 at 0:00 every day of every month'
"""

from cronsight.scheduling.cron import (
    # Core
    CronExpression,
    CronFieldType,
    ConstraintKind,
    FieldConstraint,
    FieldDomain,
    FIELD_DOMAINS,
    DEFAULT_HORIZON,
    WEEKDAY_NAMES,
    # Parser
    CronParser,
    # Errors
    CronError,
    CronParseError,
    MalformedExpression,
    InvalidFieldValue,
    NoOccurrenceFound,
    # Iterator
    CronIterator,
    # Validation
    validate_expression,
    is_valid_expression,
)

from cronsight.scheduling.describe import (
    FrequencyDescriber,
    UndescribableExpression,
    UNDESCRIBABLE_MESSAGE,
    describe_frequency,
)

from cronsight.scheduling.presets import (
    EVERY_MINUTE,
    HOURLY,
    DAILY,
    MIDNIGHT,
    FIRST_OF_MONTH,
    WEEKLY,
    YEARLY,
    PRESETS,
    Preset,
    get_preset,
    list_presets,
)

__all__ = [
    # Core
    "CronExpression",
    "CronFieldType",
    "ConstraintKind",
    "FieldConstraint",
    "FieldDomain",
    "FIELD_DOMAINS",
    "DEFAULT_HORIZON",
    "WEEKDAY_NAMES",
    # Parser
    "CronParser",
    # Errors
    "CronError",
    "CronParseError",
    "MalformedExpression",
    "InvalidFieldValue",
    "NoOccurrenceFound",
    # Iterator
    "CronIterator",
    # Validation
    "validate_expression",
    "is_valid_expression",
    # Describer
    "FrequencyDescriber",
    "UndescribableExpression",
    "UNDESCRIBABLE_MESSAGE",
    "describe_frequency",
    # Presets
    "EVERY_MINUTE",
    "HOURLY",
    "DAILY",
    "MIDNIGHT",
    "FIRST_OF_MONTH",
    "WEEKLY",
    "YEARLY",
    "PRESETS",
    "Preset",
    "get_preset",
    "list_presets",
]
