"""Cron expression parser and next-occurrence search.

This module compiles 5- and 6-field cron expressions into per-field
constraints and walks forward in time to find the next matching instant.

Design Principles:
    1. Immutable expressions: parse once, evaluate many times
    2. Explicit inputs: the reference instant is always passed in
    3. Bounded search: every lookup terminates within a fixed horizon
    4. Strict validation: anything outside a field's domain is rejected
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo as TzInfo
from enum import Enum
from typing import FrozenSet, Iterable, Iterator


# Four years including leap days, so yearly schedules such as Feb 29
# are always reachable.
DEFAULT_HORIZON = timedelta(days=366 * 4)

# Cron numbering: 0 = Sunday.
WEEKDAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_INTEGER = re.compile(r"[0-9]+")


# =============================================================================
# Exceptions
# =============================================================================


class CronError(ValueError):
    """Base class for every evaluator-side cron failure."""

    def __init__(self, message: str, expression: str = "") -> None:
        self.expression = expression
        super().__init__(message)

    @property
    def kind(self) -> str:
        """Short name of the failure, suitable for logs."""
        return type(self).__name__


class CronParseError(CronError):
    """Raised when cron expression parsing fails."""


class MalformedExpression(CronParseError):
    """The expression does not have 5 or 6 fields."""

    def __init__(self, expression: str, field_count: int) -> None:
        self.field_count = field_count
        super().__init__(
            f"Invalid number of fields: {field_count}. Expected 5 or 6 fields.",
            expression,
        )


class InvalidFieldValue(CronParseError):
    """A field contains a token that is not valid for its domain."""

    def __init__(
        self,
        message: str,
        expression: str = "",
        field_type: "CronFieldType | None" = None,
        token: str = "",
    ) -> None:
        self.field_type = field_type
        self.token = token
        super().__init__(message, expression)


class NoOccurrenceFound(CronError):
    """No matching instant exists within the search horizon."""

    def __init__(self, expression: str, after: datetime, horizon: timedelta) -> None:
        self.after = after
        self.horizon = horizon
        super().__init__(
            f"No occurrence of {expression!r} within {horizon.days} days "
            f"after {after.isoformat()}",
            expression,
        )


# =============================================================================
# Field Types
# =============================================================================


class CronFieldType(Enum):
    """Types of cron fields."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY_OF_MONTH = "day-of-month"
    MONTH = "month"
    DAY_OF_WEEK = "day-of-week"


@dataclass(frozen=True)
class FieldDomain:
    """Inclusive range of values a field may take."""

    min_value: int
    max_value: int

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value

    def values(self) -> range:
        return range(self.min_value, self.max_value + 1)


FIELD_DOMAINS: dict[CronFieldType, FieldDomain] = {
    CronFieldType.SECOND: FieldDomain(0, 59),
    CronFieldType.MINUTE: FieldDomain(0, 59),
    CronFieldType.HOUR: FieldDomain(0, 23),
    CronFieldType.DAY_OF_MONTH: FieldDomain(1, 31),
    CronFieldType.MONTH: FieldDomain(1, 12),
    CronFieldType.DAY_OF_WEEK: FieldDomain(0, 6),
}


class ConstraintKind(Enum):
    """Shape of a compiled field."""

    ANY = "any"
    SET = "set"
    STEP = "step"


# =============================================================================
# Field Constraint
# =============================================================================


@dataclass(frozen=True)
class FieldConstraint:
    """Compiled predicate for one cron field.

    A constraint is one of three variants:

    - ``ANY``: ``*``, matches every value in the domain
    - ``SET``: an explicit set of values (single value, list or range)
    - ``STEP``: ``start..end`` every ``step`` values (``*/15``, ``5/10``,
      ``10-30/5``)

    Attributes:
        field_type: The field this constraint applies to.
        kind: Which variant this is.
        values: Allowed values for ``SET``.
        start: First value for ``STEP``.
        end: Last value (inclusive) for ``STEP``.
        step: Stride for ``STEP``.
        original: Raw field text.
    """

    field_type: CronFieldType
    kind: ConstraintKind
    values: FrozenSet[int] = frozenset()
    start: int = 0
    end: int = 0
    step: int = 1
    original: str = ""

    @classmethod
    def any_value(cls, field_type: CronFieldType) -> "FieldConstraint":
        return cls(field_type, ConstraintKind.ANY, original="*")

    @classmethod
    def of_values(
        cls,
        field_type: CronFieldType,
        values: Iterable[int],
        original: str = "",
    ) -> "FieldConstraint":
        return cls(field_type, ConstraintKind.SET, values=frozenset(values), original=original)

    @classmethod
    def stepped(
        cls,
        field_type: CronFieldType,
        start: int,
        end: int,
        step: int,
        original: str = "",
    ) -> "FieldConstraint":
        return cls(
            field_type,
            ConstraintKind.STEP,
            start=start,
            end=end,
            step=step,
            original=original,
        )

    @property
    def is_any(self) -> bool:
        return self.kind is ConstraintKind.ANY

    @property
    def is_restricted(self) -> bool:
        """True for anything other than ``*``."""
        return self.kind is not ConstraintKind.ANY

    def matches(self, value: int) -> bool:
        """Check if a value satisfies this constraint."""
        if self.kind is ConstraintKind.ANY:
            return True
        if self.kind is ConstraintKind.STEP:
            return self.start <= value <= self.end and (value - self.start) % self.step == 0
        return value in self.values

    def allowed_values(self) -> FrozenSet[int]:
        """Expand the constraint into the concrete values it allows."""
        if self.kind is ConstraintKind.ANY:
            return frozenset(FIELD_DOMAINS[self.field_type].values())
        if self.kind is ConstraintKind.STEP:
            return frozenset(range(self.start, self.end + 1, self.step))
        return self.values

    def __repr__(self) -> str:
        return f"FieldConstraint({self.field_type.name}, {self.kind.value}, {self.original!r})"


# =============================================================================
# Cron Parser
# =============================================================================


class CronParser:
    """Parser for cron expressions.

    Supports:
        - Standard 5-field cron (minute hour day month weekday)
        - Extended 6-field cron (second minute hour day month weekday)

    Only numeric values are accepted. ``*``, lists, ranges and steps may
    be used in every field.
    """

    FIELD_LAYOUTS: dict[int, tuple[CronFieldType, ...]] = {
        5: (
            CronFieldType.MINUTE,
            CronFieldType.HOUR,
            CronFieldType.DAY_OF_MONTH,
            CronFieldType.MONTH,
            CronFieldType.DAY_OF_WEEK,
        ),
        6: (
            CronFieldType.SECOND,
            CronFieldType.MINUTE,
            CronFieldType.HOUR,
            CronFieldType.DAY_OF_MONTH,
            CronFieldType.MONTH,
            CronFieldType.DAY_OF_WEEK,
        ),
    }

    def __init__(self, expression: str) -> None:
        """Initialize parser with expression.

        Args:
            expression: Cron expression string.
        """
        self._original = expression.strip()
        self._fields: list[FieldConstraint] = []

    def parse(self) -> list[FieldConstraint]:
        """Parse the cron expression.

        Returns:
            List of FieldConstraint objects, one per field.

        Raises:
            MalformedExpression: If the field count is not 5 or 6.
            InvalidFieldValue: If any field is invalid.
        """
        parts = self._original.split()
        layout = self.FIELD_LAYOUTS.get(len(parts))
        if layout is None:
            raise MalformedExpression(self._original, len(parts))

        self._fields = [
            self._parse_field(part, field_type)
            for part, field_type in zip(parts, layout)
        ]
        return self._fields

    def _parse_field(self, part: str, field_type: CronFieldType) -> FieldConstraint:
        """Parse a single cron field."""
        domain = FIELD_DOMAINS[field_type]

        if part == "*":
            return FieldConstraint.any_value(field_type)

        # Lists flatten into a set, whatever their items are
        if "," in part:
            values: set[int] = set()
            for segment in part.split(","):
                values.update(self._parse_segment(segment, field_type, domain))
            return FieldConstraint.of_values(field_type, values, original=part)

        if "/" in part:
            start, end, step = self._parse_step(part, field_type, domain)
            return FieldConstraint.stepped(field_type, start, end, step, original=part)

        return FieldConstraint.of_values(
            field_type,
            self._parse_segment(part, field_type, domain),
            original=part,
        )

    def _parse_segment(
        self,
        segment: str,
        field_type: CronFieldType,
        domain: FieldDomain,
    ) -> set[int]:
        """Parse one list item: a value, a range or a step."""
        if not segment:
            raise self._error(f"Empty value in {field_type.value} field", field_type, segment)

        if "/" in segment:
            start, end, step = self._parse_step(segment, field_type, domain)
            return set(range(start, end + 1, step))

        if "-" in segment:
            start, end = self._parse_bounds(segment, field_type, domain)
            return set(range(start, end + 1))

        return {self._resolve_value(segment, field_type, domain)}

    def _parse_step(
        self,
        segment: str,
        field_type: CronFieldType,
        domain: FieldDomain,
    ) -> tuple[int, int, int]:
        """Parse step expression (*/n, a/n or a-b/n)."""
        parts = segment.split("/")
        if len(parts) != 2:
            raise self._error(f"Invalid step: {segment}", field_type, segment)

        base, step_text = parts
        if not _INTEGER.fullmatch(step_text) or int(step_text) <= 0:
            raise self._error(
                f"Step must be a positive integer: {step_text!r}",
                field_type,
                segment,
            )
        step = int(step_text)

        if base == "*":
            start, end = domain.min_value, domain.max_value
        elif "-" in base:
            start, end = self._parse_bounds(base, field_type, domain)
        else:
            start = self._resolve_value(base, field_type, domain)
            end = domain.max_value

        return start, end, step

    def _parse_bounds(
        self,
        segment: str,
        field_type: CronFieldType,
        domain: FieldDomain,
    ) -> tuple[int, int]:
        """Parse range expression (a-b)."""
        parts = segment.split("-")
        if len(parts) != 2:
            raise self._error(f"Invalid range: {segment}", field_type, segment)

        start = self._resolve_value(parts[0], field_type, domain)
        end = self._resolve_value(parts[1], field_type, domain)
        if start > end:
            raise self._error(
                f"Range start {start} is greater than end {end} in {field_type.value} field",
                field_type,
                segment,
            )
        return start, end

    def _resolve_value(self, value: str, field_type: CronFieldType, domain: FieldDomain) -> int:
        """Resolve a numeric token, enforcing the field's domain."""
        if not _INTEGER.fullmatch(value):
            raise self._error(f"Invalid value {value!r} for {field_type.value} field", field_type, value)

        num = int(value)
        if not domain.contains(num):
            raise self._error(
                f"Value {num} out of range "
                f"[{domain.min_value}-{domain.max_value}] for {field_type.value} field",
                field_type,
                value,
            )
        return num

    def _error(self, message: str, field_type: CronFieldType, token: str) -> InvalidFieldValue:
        return InvalidFieldValue(message, self._original, field_type=field_type, token=token)


# =============================================================================
# Cron Expression
# =============================================================================


class CronExpression:
    """Parsed cron expression with next-occurrence search.

    CronExpression is immutable. It can be used to:
    - Check if a datetime matches the expression
    - Calculate the next matching datetime after a reference instant
    - Iterate over matching datetimes

    Example:
        >>> expr = CronExpression.parse("0 9 * * 1-5")
        >>> expr.matches(datetime(2024, 1, 15, 9, 0))  # True (Monday)
        >>> expr.next(datetime(2024, 1, 15, 9, 0))     # 2024-01-16 09:00
        >>> list(expr.iter(datetime(2024, 1, 1), limit=5))
    """

    __slots__ = (
        "_expression",
        "_fields",
        "_has_seconds",
        "_field_map",
    )

    _IMPLICIT_SECOND = FieldConstraint.of_values(CronFieldType.SECOND, (0,), original="0")

    def __init__(self, expression: str, fields: list[FieldConstraint]) -> None:
        """Initialize cron expression.

        Args:
            expression: Original expression string.
            fields: Parsed field constraints.
        """
        self._expression = expression
        self._fields = tuple(fields)
        self._has_seconds = len(fields) == 6
        self._field_map: dict[CronFieldType, FieldConstraint] = {
            f.field_type: f for f in fields
        }

    @classmethod
    def parse(cls, expression: str) -> "CronExpression":
        """Parse a cron expression.

        Args:
            expression: Cron expression string.

        Returns:
            Parsed CronExpression.

        Raises:
            CronParseError: If expression is invalid.
        """
        fields = CronParser(expression).parse()
        return cls(expression.strip(), fields)

    @property
    def expression(self) -> str:
        """Get original expression string."""
        return self._expression

    @property
    def fields(self) -> tuple[FieldConstraint, ...]:
        """Get parsed fields."""
        return self._fields

    @property
    def has_seconds(self) -> bool:
        """Check if expression includes seconds."""
        return self._has_seconds

    def get_field(self, field_type: CronFieldType) -> FieldConstraint | None:
        """Get a specific field by type."""
        return self._field_map.get(field_type)

    def _field(self, field_type: CronFieldType) -> FieldConstraint:
        if field_type is CronFieldType.SECOND and not self._has_seconds:
            return self._IMPLICIT_SECOND
        return self._field_map[field_type]

    def matches(self, dt: datetime) -> bool:
        """Check if a datetime matches this expression.

        A 5-field expression only matches on second 0.

        Args:
            dt: Datetime to check (its wall-clock components are used).

        Returns:
            True if datetime matches.
        """
        return (
            self._field(CronFieldType.SECOND).matches(dt.second)
            and self._field(CronFieldType.MINUTE).matches(dt.minute)
            and self._field(CronFieldType.HOUR).matches(dt.hour)
            and self._field(CronFieldType.MONTH).matches(dt.month)
            and self._matches_day(dt)
        )

    def _matches_day(self, dt: datetime) -> bool:
        """Combine day-of-month and day-of-week.

        When both fields are restricted a day matches if either one does;
        otherwise the unrestricted field is ignored.
        """
        dom = self._field(CronFieldType.DAY_OF_MONTH)
        dow = self._field(CronFieldType.DAY_OF_WEEK)

        # Python weekday: Monday=0, Sunday=6
        # Cron weekday: Sunday=0, Saturday=6
        cron_weekday = (dt.weekday() + 1) % 7

        if dom.is_restricted and dow.is_restricted:
            return dom.matches(dt.day) or dow.matches(cron_weekday)
        return dom.matches(dt.day) and dow.matches(cron_weekday)

    def next(self, after: datetime, *, horizon: timedelta = DEFAULT_HORIZON) -> datetime:
        """Get the first matching datetime strictly after ``after``.

        Aware datetimes are searched on their own wall clock and the result
        carries the same ``tzinfo``. Wall-clock times skipped by a DST
        transition never match. A time repeated at fall-back fires on its
        first pass, or on its second pass when ``after`` is already past
        the first.

        Args:
            after: Reference instant.
            horizon: How far past ``after`` to search.

        Returns:
            Next matching datetime.

        Raises:
            NoOccurrenceFound: If nothing matches within ``horizon``.
        """
        tzinfo = after.tzinfo
        wall = after.replace(tzinfo=None)

        # Start from next second/minute
        if self._has_seconds:
            current = wall.replace(microsecond=0) + timedelta(seconds=1)
        else:
            current = wall.replace(second=0, microsecond=0) + timedelta(minutes=1)

        end = current + horizon

        while current < end:
            if self.matches(current):
                found = _localize(current, tzinfo, after)
                if found is not None:
                    return found
            current = self._advance(current)

        raise NoOccurrenceFound(self._expression, after, horizon)

    def next_n(
        self,
        n: int,
        after: datetime,
        *,
        horizon: timedelta = DEFAULT_HORIZON,
    ) -> list[datetime]:
        """Get next n matching datetimes.

        Stops early if the horizon is exhausted.

        Args:
            n: Number of matches to find.
            after: Start searching after this datetime.
            horizon: Search horizon applied to each lookup.

        Returns:
            List of matching datetimes.
        """
        return list(self.iter(after, limit=n, horizon=horizon))

    def iter(
        self,
        after: datetime,
        limit: int | None = None,
        *,
        horizon: timedelta = DEFAULT_HORIZON,
    ) -> "CronIterator":
        """Create iterator over matching datetimes.

        Args:
            after: Start after this datetime.
            limit: Maximum number of matches.
            horizon: Search horizon applied to each lookup.

        Returns:
            CronIterator.
        """
        return CronIterator(self, after, limit, horizon=horizon)

    def _advance(self, current: datetime) -> datetime:
        """Advance to next candidate datetime.

        The first non-matching field, from month downwards, decides how far
        to jump; everything below it is reset to zero.
        """
        if not self._field(CronFieldType.MONTH).matches(current.month):
            first = current.replace(day=1, hour=0, minute=0, second=0)
            if first.month == 12:
                return first.replace(year=first.year + 1, month=1)
            return first.replace(month=first.month + 1)

        if not self._matches_day(current):
            return current.replace(hour=0, minute=0, second=0) + timedelta(days=1)

        if not self._field(CronFieldType.HOUR).matches(current.hour):
            return current.replace(minute=0, second=0) + timedelta(hours=1)

        if not self._field(CronFieldType.MINUTE).matches(current.minute):
            return current.replace(second=0) + timedelta(minutes=1)

        if self._has_seconds:
            return current + timedelta(seconds=1)
        return current + timedelta(minutes=1)

    def __repr__(self) -> str:
        return f"CronExpression({self._expression!r})"

    def __str__(self) -> str:
        return self._expression

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CronExpression):
            return self._expression == other._expression
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._expression)


def _localize(wall: datetime, tz: TzInfo | None, after: datetime) -> datetime | None:
    """Attach ``tz`` to a matching wall-clock time.

    Returns None when the time does not exist in ``tz`` or when neither
    of its folds is strictly after ``after``. Instants are compared in UTC
    because same-zone comparisons ignore ``fold``.
    """
    if tz is None:
        return wall

    reference = after.astimezone(timezone.utc)
    for fold in (0, 1):
        candidate = wall.replace(tzinfo=tz, fold=fold)
        instant = candidate.astimezone(timezone.utc)
        # Times inside a spring-forward gap do not survive the round trip
        if instant.astimezone(tz).replace(tzinfo=None) != wall:
            continue
        if instant > reference:
            return candidate
    return None


# =============================================================================
# Cron Iterator
# =============================================================================


class CronIterator(Iterator[datetime]):
    """Iterator over matching datetimes.

    Ends when ``limit`` is reached or a lookup exhausts the horizon.
    """

    def __init__(
        self,
        expression: CronExpression,
        after: datetime,
        limit: int | None = None,
        *,
        horizon: timedelta = DEFAULT_HORIZON,
    ) -> None:
        self._expression = expression
        self._current = after
        self._limit = limit
        self._horizon = horizon
        self._count = 0

    def __iter__(self) -> "CronIterator":
        return self

    def __next__(self) -> datetime:
        if self._limit is not None and self._count >= self._limit:
            raise StopIteration

        try:
            next_dt = self._expression.next(self._current, horizon=self._horizon)
        except NoOccurrenceFound:
            raise StopIteration

        self._current = next_dt
        self._count += 1

        return next_dt


# =============================================================================
# Validation Functions
# =============================================================================


def validate_expression(expression: str) -> list[str]:
    """Validate a cron expression.

    Only syntax and field domains are checked; an expression that can
    never fire still validates.

    Args:
        expression: Cron expression to validate.

    Returns:
        List of validation errors (empty if valid).
    """
    errors = []

    try:
        CronExpression.parse(expression)
    except CronParseError as e:
        errors.append(str(e))

    return errors


def is_valid_expression(expression: str) -> bool:
    """Check if a cron expression is valid.

    Args:
        expression: Cron expression to check.

    Returns:
        True if valid.
    """
    try:
        CronExpression.parse(expression)
        return True
    except CronParseError:
        return False
