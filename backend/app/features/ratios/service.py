"""Ratio prediction service used by the API routes and the CLI."""

from __future__ import annotations

from typing import Sequence

from app.shared.constants import DataSourceMode

from .aggregator import aggregate_predictions, validate_observations
from .models import (
    AggregatedPrediction,
    EuRaceDetail,
    Observation,
    PredictionResult,
    RatioSnapshot,
)
from .predictor import predict_time


class RatioPredictionService:
    """Race listing and time prediction over one RatioSnapshot.

    The service never mutates the snapshot; build a new service after a
    data refresh.
    """

    def __init__(self, snapshot: RatioSnapshot):
        self.snapshot = snapshot

    def list_race_names(
        self,
        mode: DataSourceMode | None = None,
        country: str | None = None,
    ) -> list[str]:
        """Sorted race names.

        No mode → every race of both tables. EU winner mode lists the EU
        feed's events, optionally restricted to one country.
        """
        if mode is None:
            return list(self.snapshot.race_names)

        if mode is DataSourceMode.EU_WINNER:
            details = self.snapshot.eu_details.values()
            if country:
                details = [d for d in details if d.country == country]
            return sorted({d.event for d in details})

        return sorted(self.snapshot.table(mode).race_names())

    def list_countries(self) -> list[str]:
        """Sorted countries of the EU feed."""
        return sorted({
            d.country for d in self.snapshot.eu_details.values()
            if d.country and d.country.strip()
        })

    def get_race_detail(self, name: str) -> EuRaceDetail | None:
        return self.snapshot.eu_details.get(name)

    def predict_single(
        self,
        time: str,
        source: str,
        target: str,
        mode: DataSourceMode = DataSourceMode.DEFAULT,
    ) -> PredictionResult:
        """
        Predict one observation.

        Raises:
            InvalidObservationError: Missing field or bad time format
        """
        validate_observations([Observation(race=source, time=time)], target)
        return predict_time(self.snapshot, time, source.strip(), target.strip(), mode)

    def predict_aggregate(
        self,
        observations: Sequence[Observation],
        target: str,
        mode: DataSourceMode = DataSourceMode.DEFAULT,
    ) -> AggregatedPrediction | None:
        """
        Combine several observations into one estimate per variant.

        Raises:
            InvalidObservationError: Missing field or bad time format
        """
        return aggregate_predictions(self.snapshot, observations, target, mode)
