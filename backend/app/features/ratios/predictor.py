"""Single-observation prediction from ratio records."""

from __future__ import annotations

import logging

from app.shared.constants import (
    ALL_VARIANTS,
    DataSourceMode,
    MISSING_VARIANT_REASON,
    MODE_VARIANTS,
    UnavailableReason,
    Variant,
)
from app.shared.formatters import parse_time

from .models import (
    Predicted,
    PredictionResult,
    RatioRecord,
    RatioSnapshot,
    Unavailable,
    VariantOutcome,
)
from .resolver import resolve_ratio

logger = logging.getLogger(__name__)


def predict_time(
    snapshot: RatioSnapshot,
    time: str,
    source: str,
    target: str,
    mode: DataSourceMode = DataSourceMode.DEFAULT,
) -> PredictionResult:
    """Predict the finish time on `target` from a time on `source`.

    Steps:
        1. Same race → the input time for every variant the mode produces.
        2. No ratio record → "No data available" for every variant.
        3. Zero/garbage input time → zero for every variant the mode produces.
        4. Each variant the mode produces: seconds / ratio.

    Args:
        snapshot: Loaded ratio data
        time: Source finish time ("2:05:30", "45:10", ...)
        source: Race the time was achieved on
        target: Race to predict
        mode: Which ratio table to use
    """
    seconds = parse_time(time)

    if source == target:
        return _in_mode(Predicted(seconds), mode)

    record = resolve_ratio(snapshot, source, target, mode)
    if record is None:
        logger.debug(f"No {mode.value} ratio for {source!r} → {target!r}")
        return _uniform(Unavailable(UnavailableReason.NO_DATA))

    if seconds <= 0:
        return _in_mode(Predicted(0), mode)

    outcomes = {
        variant.value: _predict_variant(record, variant, seconds, mode)
        for variant in ALL_VARIANTS
    }
    return PredictionResult(**outcomes)


def _predict_variant(
    record: RatioRecord,
    variant: Variant,
    seconds: int,
    mode: DataSourceMode,
) -> VariantOutcome:
    if variant not in MODE_VARIANTS[mode]:
        return Unavailable(UnavailableReason.NOT_IN_MODE)

    ratio = record.get(variant)
    if ratio is None or ratio <= 0:
        return Unavailable(MISSING_VARIANT_REASON[variant])

    # ratio = source / target, so dividing recovers the target time
    return Predicted(int(seconds / ratio))


def _uniform(outcome: VariantOutcome) -> PredictionResult:
    return PredictionResult(avg=outcome, median=outcome, winner=outcome)


def _in_mode(outcome: Predicted, mode: DataSourceMode) -> PredictionResult:
    """Same outcome for the variants the mode produces, "not in mode" for the rest."""
    return PredictionResult(**{
        variant.value: (
            outcome if variant in MODE_VARIANTS[mode]
            else Unavailable(UnavailableReason.NOT_IN_MODE)
        )
        for variant in ALL_VARIANTS
    })
