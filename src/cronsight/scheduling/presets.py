"""Commonly used cron expressions.

These are ordinary expressions, not ``@`` macros: they are parsed by the
same parser as user input and can be passed anywhere an expression is
accepted.

Usage:
    >>> from cronsight.scheduling.presets import DAILY, get_preset
    >>>
    >>> DAILY.next(datetime(2024, 1, 15, 10, 0))
    datetime.datetime(2024, 1, 16, 0, 0)
    >>> get_preset("first-of-month").expression.expression
    '0 0 1 * *'
"""

from __future__ import annotations

from dataclasses import dataclass

from cronsight.scheduling.cron import CronExpression


# =============================================================================
# Standard Intervals
# =============================================================================

# Every minute
EVERY_MINUTE = CronExpression.parse("* * * * *")

# Every hour at minute 0
HOURLY = CronExpression.parse("0 * * * *")

# Every day at midnight
DAILY = CronExpression.parse("0 0 * * *")
MIDNIGHT = DAILY

# First day of every month at midnight
FIRST_OF_MONTH = CronExpression.parse("0 0 1 * *")

# Every Sunday at midnight
WEEKLY = CronExpression.parse("0 0 * * 0")

# Every year on January 1st at midnight
YEARLY = CronExpression.parse("0 0 1 1 *")


# =============================================================================
# Common Schedules
# =============================================================================

EVERY_15_MIN = CronExpression.parse("*/15 * * * *")

EVERY_2_HOURS = CronExpression.parse("0 */2 * * *")

# Weekdays (Monday-Friday) at 9 AM
WEEKDAYS_9AM = CronExpression.parse("0 9 * * 1-5")

TWICE_DAILY = CronExpression.parse("0 0,12 * * *")

# First day of each quarter
QUARTERLY = CronExpression.parse("0 0 1 1,4,7,10 *")


# =============================================================================
# Preset Registry
# =============================================================================


@dataclass(frozen=True)
class Preset:
    """A named expression with a short label."""

    name: str
    expression: CronExpression
    label: str


PRESETS: dict[str, Preset] = {
    preset.name: preset
    for preset in (
        Preset("every_minute", EVERY_MINUTE, "Every minute"),
        Preset("hourly", HOURLY, "Every hour"),
        Preset("daily", DAILY, "Every day at midnight"),
        Preset("first_of_month", FIRST_OF_MONTH, "First day of every month"),
        Preset("weekly", WEEKLY, "Every Sunday at midnight"),
        Preset("yearly", YEARLY, "Every January 1st at midnight"),
        Preset("every_15_min", EVERY_15_MIN, "Every 15 minutes"),
        Preset("every_2_hours", EVERY_2_HOURS, "Every 2 hours"),
        Preset("weekdays_9am", WEEKDAYS_9AM, "Weekdays at 9 AM"),
        Preset("twice_daily", TWICE_DAILY, "Midnight and noon"),
        Preset("quarterly", QUARTERLY, "First day of each quarter"),
    )
}


def get_preset(name: str) -> Preset | None:
    """Get a preset by name.

    Args:
        name: Preset name (case-insensitive, ``-`` and ``_`` are equivalent).

    Returns:
        Preset or None if not found.
    """
    return PRESETS.get(name.lower().replace("-", "_"))


def list_presets() -> list[str]:
    """List all available preset names."""
    return list(PRESETS.keys())
