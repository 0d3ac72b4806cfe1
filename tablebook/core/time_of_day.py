"""
Time-of-day helpers for "HH:MM" strings.

Opening hours and reservation start times are stored as zero-padded 24-hour
"HH:MM" strings, so lexicographic order matches chronological order within a
single day. Overnight ranges are not supported.
"""
import re

HHMM_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def is_valid_hhmm(value: str) -> bool:
    return bool(HHMM_PATTERN.match(value or ""))


def normalize_hhmm(value: str) -> str:
    """
    Validate an "H:MM" / "HH:MM" string and return it zero-padded.

    Raises:
        ValueError: If the value is not a 24-hour time

    Examples:
        >>> normalize_hhmm("9:30")
        '09:30'
        >>> normalize_hhmm("23:00")
        '23:00'
    """
    match = HHMM_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid time format: {value!r}. Expected HH:MM (00:00-23:59).")
    hours, minutes = int(match.group(1)), int(match.group(2))
    return f"{hours:02d}:{minutes:02d}"


def to_minutes(value: str) -> int:
    """
    Convert "HH:MM" to minutes since midnight.

    Examples:
        >>> to_minutes("00:00")
        0
        >>> to_minutes("19:30")
        1170
    """
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def from_minutes(total_minutes: int) -> str:
    """
    Convert minutes since midnight back to "HH:MM".

    Examples:
        >>> from_minutes(690)
        '11:30'
    """
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"

