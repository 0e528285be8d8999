"""
Duration Codec
==============

Converts between ISO-8601 style time-of-day durations ("PT1H2M3S") and
integer millisecond counts.

- parse_duration: text -> milliseconds
- format_duration: milliseconds -> text

Formatting works on whole seconds, so sub-second precision is lost:
parse_duration(format_duration(1500)) == 1000.
"""

from decimal import Decimal, ROUND_HALF_UP
import re
import logging

from .errors import FormatError

logger = logging.getLogger(__name__)

MILLI_PER_SECOND = 1000
SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600

ZERO_DURATION = "PT0S"

# Both "." and "," are accepted as decimal separators, as ISO-8601 allows.
_NUMBER = r"(\d+(?:[.,]\d+)?)"
_DURATION_PATTERN = re.compile(
    rf"PT(?:{_NUMBER}H)?(?:{_NUMBER}M)?(?:{_NUMBER}S)?"
)


def _component(literal) -> Decimal:
    if literal is None:
        return Decimal(0)
    return Decimal(literal.replace(",", "."))


def parse_duration(text: str) -> int:
    """
    Parse a duration of the form PT[<h>H][<m>M][<s>S] into milliseconds.

    Components must appear in hour, minute, second order and each may be
    omitted. Fractional literals are honoured and the total is rounded to
    the nearest millisecond.

    Args:
        text: Duration text, e.g. "PT2M12S"

    Returns:
        Total milliseconds

    Raises:
        FormatError: If the text does not match the pattern
    """
    if not isinstance(text, str):
        raise FormatError(text)

    match = _DURATION_PATTERN.fullmatch(text.strip())
    if match is None:
        raise FormatError(text)

    hours, minutes, seconds = (_component(group) for group in match.groups())
    total_seconds = (
        hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE + seconds
    )
    millis = (total_seconds * MILLI_PER_SECOND).quantize(
        Decimal(1), rounding=ROUND_HALF_UP
    )
    return int(millis)


def format_duration(milliseconds) -> str:
    """
    Format a non-negative millisecond count as PT[<h>H][<m>M][<s>S].

    Zero-valued components are omitted; a duration shorter than one
    second formats as "PT0S".

    Args:
        milliseconds: Elapsed time in milliseconds

    Returns:
        Duration text

    Raises:
        ValueError: If milliseconds is negative
    """
    if milliseconds < 0:
        raise ValueError(f"Duration must be non-negative, got {milliseconds}")

    total_seconds = int(milliseconds) // MILLI_PER_SECOND
    if total_seconds == 0:
        return ZERO_DURATION

    hours = total_seconds // SECONDS_PER_HOUR
    minutes = (total_seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE
    seconds = total_seconds % SECONDS_PER_MINUTE

    result = "PT"
    if hours:
        result += f"{hours}H"
    if minutes:
        result += f"{minutes}M"
    if seconds:
        result += f"{seconds}S"
    return result


def elapsed_milliseconds(start, end) -> int:
    """Whole milliseconds between two datetimes."""
    delta = end - start
    return (delta.days * 86400 + delta.seconds) * MILLI_PER_SECOND + delta.microseconds // 1000
