"""Expression-to-result conversion.

This is the boundary between callers (CLI, other applications) and the
scheduling core. One call takes raw user text and produces either a full
result or a single user-facing error, never a mix of both.

Flow:
    raw text
       |
       +---> trim, reject empty
       |
       v
    CronExpression.parse / next      (failures -> InvalidExpressionError)
       |
       v
    format_occurrence + describe_frequency
       |
       v
    ConversionResult
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Any

from cronsight.formatting import format_occurrence, resolve_timezone, timezone_label
from cronsight.infrastructure.config import CronsightConfig, get_config
from cronsight.scheduling.cron import CronError, CronExpression
from cronsight.scheduling.describe import FrequencyDescriber

logger = logging.getLogger(__name__)

INVALID_EXPRESSION_MESSAGE = "Invalid cron expression"
EMPTY_EXPRESSION_MESSAGE = "Please enter a cron expression"


# =============================================================================
# Exceptions
# =============================================================================


class ConversionError(Exception):
    """Base exception for conversion failures.

    Attributes:
        message: User-facing message.
        kind: Name of the underlying failure, if any.
        expression: The (trimmed) input.
    """

    def __init__(self, message: str, *, kind: str | None = None, expression: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.expression = expression


class EmptyExpressionError(ConversionError):
    """The input was empty or whitespace only."""

    def __init__(self) -> None:
        super().__init__(EMPTY_EXPRESSION_MESSAGE)


class InvalidExpressionError(ConversionError):
    """The expression could not be evaluated.

    Parse errors and an exhausted search horizon all end up here with the
    same message; ``kind`` and ``__cause__`` keep the detail.
    """

    def __init__(self, expression: str, kind: str) -> None:
        super().__init__(INVALID_EXPRESSION_MESSAGE, kind=kind, expression=expression)


# =============================================================================
# Result
# =============================================================================


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a successful conversion."""

    expression: str
    next_run: datetime
    next_run_display: str
    frequency: str
    timezone: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "expression": self.expression,
            "next_run": self.next_run.isoformat(),
            "next_run_display": self.next_run_display,
            "frequency": self.frequency,
            "timezone": self.timezone,
        }


# =============================================================================
# Converter
# =============================================================================


class CronConverter:
    """Converts raw cron text into a next run and a description.

    Example:
        >>> converter = CronConverter()
        >>> result = converter.convert(
        ...     "0 0 1 * *",
        ...     now=datetime(2024, 1, 15, 10, 0),
        ...     tz="UTC",
        ... )
        >>> result.next_run_display
        'Thursday, February 1, 2024 at 12:00:00 AM UTC'
    """

    def __init__(
        self,
        config: CronsightConfig | None = None,
        *,
        describer: FrequencyDescriber | None = None,
    ) -> None:
        self._config = config or get_config()
        self._describer = describer or FrequencyDescriber()

    @property
    def config(self) -> CronsightConfig:
        return self._config

    @property
    def horizon(self) -> timedelta:
        return self._config.search_horizon

    def convert(
        self,
        expression: str,
        *,
        now: datetime | None = None,
        tz: str | tzinfo | None = None,
    ) -> ConversionResult:
        """Find the next run of ``expression`` and describe it.

        Args:
            expression: Raw cron text; surrounding whitespace is ignored.
            now: Reference instant (default: current time). Naive values
                are wall-clock time in the display zone.
            tz: Display zone, as a name or tzinfo (default: configured
                zone, then system local).

        Raises:
            EmptyExpressionError: If the input is blank.
            InvalidExpressionError: If the expression is malformed, has an
                invalid field or never fires within the horizon.
            TimezoneError: If ``tz`` names an unknown zone.
        """
        trimmed = self._trim(expression)
        zone = self.resolve_zone(tz)
        reference = self._reference_time(now, zone)

        cron = self._parse(trimmed)
        try:
            next_run = cron.next(reference, horizon=self.horizon)
        except CronError as e:
            raise self._reject(trimmed, e) from e

        result = ConversionResult(
            expression=trimmed,
            next_run=next_run,
            next_run_display=format_occurrence(next_run, zone),
            frequency=self._describer.describe(trimmed),
            timezone=timezone_label(zone),
        )
        logger.debug("Converted %r: next run %s", trimmed, next_run.isoformat())
        return result

    def upcoming(
        self,
        expression: str,
        count: int,
        *,
        now: datetime | None = None,
        tz: str | tzinfo | None = None,
    ) -> list[datetime]:
        """List the next ``count`` runs of ``expression``.

        The list is shorter than ``count`` only if later runs fall beyond
        the horizon; an expression with no run at all is an error.

        Raises:
            EmptyExpressionError: If the input is blank.
            InvalidExpressionError: If the expression is invalid or never
                fires within the horizon.
            ValueError: If ``count`` is less than 1.
        """
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")

        trimmed = self._trim(expression)
        zone = self.resolve_zone(tz)
        reference = self._reference_time(now, zone)

        cron = self._parse(trimmed)
        try:
            first = cron.next(reference, horizon=self.horizon)
        except CronError as e:
            raise self._reject(trimmed, e) from e

        return [first] + cron.next_n(count - 1, first, horizon=self.horizon)

    def resolve_zone(self, tz: str | tzinfo | None) -> tzinfo:
        """Pick the display zone: explicit, then configured, then local."""
        if isinstance(tz, tzinfo):
            return tz
        return resolve_timezone(tz if tz is not None else self._config.timezone)

    def _parse(self, expression: str) -> CronExpression:
        try:
            return CronExpression.parse(expression)
        except CronError as e:
            raise self._reject(expression, e) from e

    @staticmethod
    def _trim(expression: str) -> str:
        trimmed = expression.strip()
        if not trimmed:
            raise EmptyExpressionError()
        return trimmed

    @staticmethod
    def _reference_time(now: datetime | None, zone: tzinfo) -> datetime:
        if now is None:
            return datetime.now(zone)
        if now.tzinfo is None:
            return now.replace(tzinfo=zone)
        return now.astimezone(zone)

    @staticmethod
    def _reject(expression: str, error: CronError) -> InvalidExpressionError:
        logger.info("Rejected cron expression %r (%s): %s", expression, error.kind, error)
        return InvalidExpressionError(expression, error.kind)


# =============================================================================
# Convenience Functions
# =============================================================================


def convert(
    expression: str,
    *,
    now: datetime | None = None,
    tz: str | tzinfo | None = None,
    config: CronsightConfig | None = None,
) -> ConversionResult:
    """Convert an expression with a one-off converter.

    See ``CronConverter.convert`` for arguments and errors.
    """
    return CronConverter(config).convert(expression, now=now, tz=tz)
