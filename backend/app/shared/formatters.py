"""
Time formatting utilities.

Used by the ratio predictor, the API schemas and the CLI.
"""

import math
import re

# SS, MM:SS, H:MM or HH:MM:SS with 1-2 digit components
TIME_PATTERN = re.compile(r"^(\d{1,2}:)?(\d{1,2})(?::(\d{1,2}))?$")

ZERO_TIME = "00:00:00"


def parse_time(text: str | None) -> int:
    """
    Parse a colon-delimited time string to seconds.

    One part is seconds, two parts MM:SS, three parts HH:MM:SS.
    Empty or malformed input yields 0.

    Examples:
        "45"       → 45
        "52:05"    → 3125
        "1:02:40"  → 3760
    """
    if not text:
        return 0

    parts = text.strip().split(":")
    if not 1 <= len(parts) <= 3:
        return 0
    if not all(p.strip().isdecimal() for p in parts):
        return 0

    seconds = 0
    for part in parts:
        seconds = seconds * 60 + int(part)
    return seconds


def format_time(seconds: float | None) -> str:
    """
    Format seconds as zero-padded 'HH:MM:SS'.

    Fractions are floored. Negative, NaN or infinite input gives
    '00:00:00'. Hours are not wrapped (100+ hour ultras render as-is).

    Args:
        seconds: Time in seconds (e.g., 6545.45)

    Returns:
        Formatted string (e.g., '01:49:05')
    """
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return ZERO_TIME

    total = int(math.floor(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def is_valid_time(text: str | None) -> bool:
    """Check user-entered time against the accepted formats."""
    if not text:
        return False
    return TIME_PATTERN.match(text.strip()) is not None


def normalize_time(text: str) -> str:
    """Canonical 'HH:MM:SS' form of a user-entered time."""
    return format_time(parse_time(text))
