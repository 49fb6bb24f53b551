"""Tests for the expression-to-result converter."""

import logging

import pytest
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from cronsight import (
    ConversionError,
    ConversionResult,
    CronConverter,
    EmptyExpressionError,
    InvalidExpressionError,
    TimezoneError,
    convert,
)
from cronsight.converter import EMPTY_EXPRESSION_MESSAGE, INVALID_EXPRESSION_MESSAGE
from cronsight.infrastructure.config import CronsightConfig, set_config
from cronsight.scheduling import NoOccurrenceFound, InvalidFieldValue, MalformedExpression


REFERENCE = datetime(2024, 1, 1, 0, 0)


# =============================================================================
# Successful Conversion
# =============================================================================


class TestConvert:
    """Tests for successful conversions."""

    def test_every_minute(self):
        result = convert("* * * * *", now=REFERENCE, tz="UTC")
        assert isinstance(result, ConversionResult)
        assert result.expression == "* * * * *"
        assert result.next_run == datetime(2024, 1, 1, 0, 1, tzinfo=ZoneInfo("UTC"))
        assert result.next_run_display == "Monday, January 1, 2024 at 12:01:00 AM UTC"
        assert result.frequency == "Every minute of every hour every day of every month"
        assert result.timezone == "UTC"

    def test_first_of_month(self):
        result = convert("0 0 1 * *", now=datetime(2024, 1, 15, 10, 0), tz="UTC")
        assert result.next_run_display == "Thursday, February 1, 2024 at 12:00:00 AM UTC"
        assert result.frequency == "At minute 0 at 0:00 on day 1 of every month"

    def test_input_is_trimmed(self):
        result = convert("   0 0 * * *  \n", now=REFERENCE, tz="UTC")
        assert result.expression == "0 0 * * *"

    def test_aware_reference_converted_to_zone(self):
        """The search runs on the display zone's wall clock."""
        now = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
        result = convert("0 0 * * *", now=now, tz="Asia/Tokyo")
        # 2024-01-01 00:00 UTC is 09:00 JST, so the next midnight is Jan 2
        assert result.next_run == datetime(2024, 1, 2, 0, 0, tzinfo=ZoneInfo("Asia/Tokyo"))
        assert result.next_run_display == "Tuesday, January 2, 2024 at 12:00:00 AM JST"
        assert result.timezone == "Asia/Tokyo"

    def test_naive_reference_is_zone_wall_clock(self):
        result = convert("0 9 * * *", now=datetime(2024, 1, 1, 8, 0), tz="America/New_York")
        assert result.next_run.hour == 9
        assert result.next_run.utcoffset() == timedelta(hours=-5)

    def test_tzinfo_instance(self):
        tz = timezone(timedelta(hours=5, minutes=30))
        result = convert("30 12 * * *", now=REFERENCE, tz=tz)
        assert result.next_run_display == "Monday, January 1, 2024 at 12:30:00 PM GMT+5:30"
        assert result.timezone == "UTC+05:30"

    def test_six_field_expression(self):
        result = convert("*/10 * * * * *", now=datetime(2024, 1, 1, 9, 0, 5), tz="UTC")
        assert result.next_run == datetime(2024, 1, 1, 9, 0, 10, tzinfo=ZoneInfo("UTC"))

    def test_configured_timezone(self):
        config = CronsightConfig(timezone="Europe/Berlin")
        result = convert("0 12 * * *", now=REFERENCE, config=config)
        assert result.timezone == "Europe/Berlin"
        assert result.next_run_display.endswith("CET")

    def test_explicit_zone_beats_config(self):
        converter = CronConverter(CronsightConfig(timezone="Europe/Berlin"))
        result = converter.convert("0 12 * * *", now=REFERENCE, tz="UTC")
        assert result.timezone == "UTC"

    def test_global_config_used_by_default(self):
        set_config(CronsightConfig(timezone="Asia/Tokyo"))
        assert CronConverter().resolve_zone(None) == ZoneInfo("Asia/Tokyo")

    def test_to_dict(self):
        result = convert("* * * * *", now=REFERENCE, tz="UTC")
        assert result.to_dict() == {
            "expression": "* * * * *",
            "next_run": "2024-01-01T00:01:00+00:00",
            "next_run_display": "Monday, January 1, 2024 at 12:01:00 AM UTC",
            "frequency": "Every minute of every hour every day of every month",
            "timezone": "UTC",
        }

    def test_same_input_same_output(self):
        first = convert("*/7 3 * * 2", now=REFERENCE, tz="UTC")
        second = convert("*/7 3 * * 2", now=REFERENCE, tz="UTC")
        assert first == second


# =============================================================================
# Failures
# =============================================================================


class TestConvertErrors:
    """Tests for the single user-facing error per failure."""

    @pytest.mark.parametrize("expression", ["", "   ", "\t\n"])
    def test_empty_input(self, expression):
        with pytest.raises(EmptyExpressionError) as exc:
            convert(expression, now=REFERENCE, tz="UTC")
        assert exc.value.message == EMPTY_EXPRESSION_MESSAGE
        assert exc.value.message == "Please enter a cron expression"
        assert exc.value.kind is None

    @pytest.mark.parametrize(
        "expression,kind,cause",
        [
            ("* * *", "MalformedExpression", MalformedExpression),
            ("60 * * * *", "InvalidFieldValue", InvalidFieldValue),
            ("0 9 * * MON", "InvalidFieldValue", InvalidFieldValue),
            ("0 0 31 2 *", "NoOccurrenceFound", NoOccurrenceFound),
        ],
    )
    def test_invalid_expression(self, expression, kind, cause):
        with pytest.raises(InvalidExpressionError) as exc:
            convert(expression, now=REFERENCE, tz="UTC")
        assert exc.value.message == INVALID_EXPRESSION_MESSAGE
        assert exc.value.message == "Invalid cron expression"
        assert exc.value.kind == kind
        assert exc.value.expression == expression
        assert isinstance(exc.value.__cause__, cause)

    def test_errors_share_base(self):
        assert issubclass(EmptyExpressionError, ConversionError)
        assert issubclass(InvalidExpressionError, ConversionError)

    def test_unknown_timezone(self):
        with pytest.raises(TimezoneError):
            convert("* * * * *", now=REFERENCE, tz="Nowhere/Special")

    def test_short_horizon(self):
        converter = CronConverter(CronsightConfig(search_horizon_days=30))
        assert converter.horizon == timedelta(days=30)
        with pytest.raises(InvalidExpressionError) as exc:
            converter.convert("0 0 1 1 *", now=datetime(2024, 6, 1), tz="UTC")
        assert exc.value.kind == "NoOccurrenceFound"

    def test_rejection_is_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="cronsight.converter")
        with pytest.raises(InvalidExpressionError):
            convert("61 * * * *", now=REFERENCE, tz="UTC")
        assert "Rejected cron expression '61 * * * *'" in caplog.text
        assert "InvalidFieldValue" in caplog.text


# =============================================================================
# Upcoming Runs
# =============================================================================


class TestUpcoming:
    """Tests for listing several runs."""

    def test_upcoming(self):
        runs = CronConverter().upcoming("0 */6 * * *", 4, now=REFERENCE, tz="UTC")
        assert [run.hour for run in runs] == [6, 12, 18, 0]
        assert runs[-1].day == 2

    def test_upcoming_single(self):
        converter = CronConverter()
        runs = converter.upcoming("0 0 * * *", 1, now=REFERENCE, tz="UTC")
        assert runs == [converter.convert("0 0 * * *", now=REFERENCE, tz="UTC").next_run]

    def test_upcoming_stops_at_horizon(self):
        converter = CronConverter(CronsightConfig(search_horizon_days=400))
        runs = converter.upcoming("0 0 29 2 *", 3, now=REFERENCE, tz="UTC")
        assert runs == [datetime(2024, 2, 29, tzinfo=ZoneInfo("UTC"))]

    def test_upcoming_invalid_count(self):
        with pytest.raises(ValueError):
            CronConverter().upcoming("* * * * *", 0, now=REFERENCE, tz="UTC")

    def test_upcoming_impossible(self):
        with pytest.raises(InvalidExpressionError):
            CronConverter().upcoming("0 0 30 2 *", 3, now=REFERENCE, tz="UTC")


# =============================================================================
# Daylight Saving Time
# =============================================================================


class TestDaylightSavingTime:
    """Tests for conversions around America/New_York DST transitions."""

    def test_fall_back_reference_in_utc(self):
        """A UTC reference in the repeated hour gets a strictly later run."""
        # 06:30 UTC is 01:30 EST, the second pass of 01:30
        now = datetime(2024, 11, 3, 6, 30, tzinfo=timezone.utc)
        result = convert("* * * * *", now=now, tz="America/New_York")
        assert result.next_run > now
        assert result.next_run.astimezone(timezone.utc) == datetime(
            2024, 11, 3, 6, 31, tzinfo=timezone.utc
        )
        assert result.next_run_display == "Sunday, November 3, 2024 at 1:31:00 AM EST"

    def test_upcoming_across_spring_forward(self):
        runs = CronConverter().upcoming(
            "*/30 * * * *", 5, now=datetime(2024, 3, 10, 1, 0), tz="America/New_York"
        )
        instants = [run.astimezone(timezone.utc) for run in runs]
        assert len(set(instants)) == 5
        assert instants == sorted(instants)
        assert [(run.hour, run.minute) for run in runs] == [
            (1, 30),
            (3, 0),
            (3, 30),
            (4, 0),
            (4, 30),
        ]
