"""
Shared utilities (NOT business logic).

Usage:
    from app.shared import format_time, parse_time
    from app.shared.constants import DataSourceMode
"""
from .formatters import (
    TIME_PATTERN,
    ZERO_TIME,
    parse_time,
    format_time,
    is_valid_time,
    normalize_time,
)
from .constants import (
    DataSourceMode,
    Variant,
    UnavailableReason,
    MODE_VARIANTS,
    ALL_VARIANTS,
)

__all__ = [
    # formatters
    "TIME_PATTERN",
    "ZERO_TIME",
    "parse_time",
    "format_time",
    "is_valid_time",
    "normalize_time",
    # constants
    "DataSourceMode",
    "Variant",
    "UnavailableReason",
    "MODE_VARIANTS",
    "ALL_VARIANTS",
]
