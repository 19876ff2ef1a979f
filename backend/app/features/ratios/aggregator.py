"""Multi-observation aggregation.

Every observation is predicted independently towards the same target;
each variant is then reduced on its own to {mean, min, max} over the
observations where it produced a time. Observations are weighted equally.
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.shared.constants import ALL_VARIANTS, DataSourceMode, Variant
from app.shared.formatters import is_valid_time, normalize_time

from .models import (
    AggregatedOutcome,
    AggregatedPrediction,
    AggregatedVariant,
    Observation,
    Predicted,
    PredictionResult,
    RatioSnapshot,
    Unavailable,
)
from .predictor import predict_time

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Please fill all fields"
INVALID_TIME_MESSAGE = "Please enter valid times (HH:MM, MM:SS or HH:MM:SS)"


class InvalidObservationError(ValueError):
    """Structurally invalid prediction request (shown to the user as a warning)."""
    pass


def validate_observations(observations: Sequence[Observation], target: str) -> None:
    """
    Check a prediction request before any computation.

    Raises:
        InvalidObservationError: Missing race/time/target or bad time format
    """
    if not observations or not target or not target.strip():
        raise InvalidObservationError(MISSING_FIELDS_MESSAGE)
    if any(not o.race or not o.race.strip() or not o.time for o in observations):
        raise InvalidObservationError(MISSING_FIELDS_MESSAGE)
    if any(not is_valid_time(o.time) for o in observations):
        raise InvalidObservationError(INVALID_TIME_MESSAGE)


def aggregate_predictions(
    snapshot: RatioSnapshot,
    observations: Sequence[Observation],
    target: str,
    mode: DataSourceMode = DataSourceMode.DEFAULT,
) -> AggregatedPrediction | None:
    """
    Predict `target` from several observations and combine the results.

    Returns:
        AggregatedPrediction, or None when no variant has either a time
        or a message (caller reports a single "no prediction" notice).

    Raises:
        InvalidObservationError: See validate_observations
    """
    validate_observations(observations, target)

    results = [
        predict_time(snapshot, normalize_time(o.time), o.race.strip(), target.strip(), mode)
        for o in observations
    ]

    aggregated = AggregatedPrediction(
        target=target.strip(),
        mode=mode,
        total=len(results),
        excluded=sum(1 for r in results if not r.has_prediction),
    )
    for variant in ALL_VARIANTS:
        setattr(aggregated, variant.value, _reduce_variant(results, variant))

    if aggregated.is_empty:
        return None

    if 0 < aggregated.excluded < aggregated.total:
        aggregated.warnings.append(
            f"{aggregated.excluded} of {aggregated.total} prediction(s) could not be "
            f"calculated due to missing data"
        )
    logger.debug(
        f"Aggregated {aggregated.total} observations → {aggregated.target} "
        f"({mode.value}), excluded {aggregated.excluded}"
    )
    return aggregated


def _reduce_variant(
    results: Sequence[PredictionResult], variant: Variant
) -> AggregatedOutcome | None:
    """Reduce one variant to mean/min/max, or pass the first message through."""
    seconds: list[int] = []
    first_message: Unavailable | None = None

    for result in results:
        outcome = result.get(variant)
        if isinstance(outcome, Predicted):
            seconds.append(outcome.seconds)
        elif isinstance(outcome, Unavailable) and first_message is None:
            first_message = outcome

    if seconds:
        return AggregatedVariant(
            time_s=int(sum(seconds) / len(seconds)),
            min_s=min(seconds),
            max_s=max(seconds),
            used=len(seconds),
        )
    return first_message
