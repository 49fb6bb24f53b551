"""cronsight - Next-run finder and plain-English describer for cron expressions."""

import logging

from cronsight.converter import (
    ConversionError,
    ConversionResult,
    CronConverter,
    EmptyExpressionError,
    InvalidExpressionError,
    convert,
)
from cronsight.formatting import TimezoneError, format_occurrence, resolve_timezone
from cronsight.scheduling import (
    CronError,
    CronExpression,
    CronParseError,
    FrequencyDescriber,
    InvalidFieldValue,
    MalformedExpression,
    NoOccurrenceFound,
    UndescribableExpression,
    describe_frequency,
    is_valid_expression,
    validate_expression,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Conversion
    "convert",
    "CronConverter",
    "ConversionResult",
    "ConversionError",
    "EmptyExpressionError",
    "InvalidExpressionError",
    # Scheduling
    "CronExpression",
    "CronError",
    "CronParseError",
    "MalformedExpression",
    "InvalidFieldValue",
    "NoOccurrenceFound",
    "validate_expression",
    "is_valid_expression",
    # Description
    "FrequencyDescriber",
    "UndescribableExpression",
    "describe_frequency",
    # Formatting
    "TimezoneError",
    "format_occurrence",
    "resolve_timezone",
]
