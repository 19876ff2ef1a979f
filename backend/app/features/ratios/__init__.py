"""Ratios feature module: feed ingestion, ratio lookup, predictions."""

from .models import (
    AggregatedPrediction,
    AggregatedVariant,
    EuRaceDetail,
    Observation,
    Predicted,
    PredictionResult,
    RatioRecord,
    RatioSnapshot,
    RatioTable,
    Unavailable,
)
from .parser import build_snapshot, parse_eu_winner_csv, parse_ratio_csv
from .resolver import resolve_ratio
from .predictor import predict_time
from .aggregator import (
    InvalidObservationError,
    aggregate_predictions,
    validate_observations,
)
from .loader import RatioDataError, RatioDataLoader, RatioStore, ratio_store
from .service import RatioPredictionService

__all__ = [
    "AggregatedPrediction",
    "AggregatedVariant",
    "EuRaceDetail",
    "Observation",
    "Predicted",
    "PredictionResult",
    "RatioRecord",
    "RatioSnapshot",
    "RatioTable",
    "Unavailable",
    "build_snapshot",
    "parse_eu_winner_csv",
    "parse_ratio_csv",
    "resolve_ratio",
    "predict_time",
    "InvalidObservationError",
    "aggregate_predictions",
    "validate_observations",
    "RatioDataError",
    "RatioDataLoader",
    "RatioStore",
    "ratio_store",
    "RatioPredictionService",
]
