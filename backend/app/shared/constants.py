"""
Unified constants for data sources and prediction variants.

This module provides a single source of truth for mode and variant naming
across the backend, the API schemas and the CLI.
"""

from enum import Enum


class DataSourceMode(str, Enum):
    """
    Which independently maintained ratio table backs a lookup.

    Used in:
    - Prediction requests
    - Race name listing
    - CLI --mode option
    """
    DEFAULT = "default"
    EU_WINNER = "euWinner"


class Variant(str, Enum):
    """Statistical basis of a ratio."""
    AVG = "avg"
    MEDIAN = "median"
    WINNER = "winner"


# Variants each mode can produce
MODE_VARIANTS: dict[DataSourceMode, tuple[Variant, ...]] = {
    DataSourceMode.DEFAULT: (Variant.AVG, Variant.MEDIAN, Variant.WINNER),
    DataSourceMode.EU_WINNER: (Variant.WINNER,),
}

ALL_VARIANTS: tuple[Variant, ...] = (Variant.AVG, Variant.MEDIAN, Variant.WINNER)


class UnavailableReason(str, Enum):
    """
    Why a variant has no predicted time.

    The value is the message shown to the user.
    """
    NO_DATA = "No data available"
    NO_COMMON_RUNNERS = "No runners in common"
    NO_MEDIAN = "No median data"
    NO_WINNER = "No winner data"
    NOT_IN_MODE = "Not available in EU winner mode"


# Reason used when a record exists but lacks the variant
MISSING_VARIANT_REASON: dict[Variant, UnavailableReason] = {
    Variant.AVG: UnavailableReason.NO_COMMON_RUNNERS,
    Variant.MEDIAN: UnavailableReason.NO_MEDIAN,
    Variant.WINNER: UnavailableReason.NO_WINNER,
}


# CSV column names
LEGACY_SOURCE_COLUMN = "source"
LEGACY_TARGET_COLUMN = "target"
LEGACY_RATIO_COLUMNS: dict[Variant, str] = {
    Variant.AVG: "ratio_avg",
    Variant.MEDIAN: "ratio_median",
    Variant.WINNER: "ratio_winner",
}

EU_EVENT_COLUMN = "event"
EU_DURATION_COLUMN = "duration"
