"""
Ratio Prediction Schemas

Pydantic models for the HTTP API. Variant outcomes are turned into
display strings here and nowhere earlier.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from app.shared.constants import DataSourceMode
from app.shared.formatters import format_time

from .models import (
    AggregatedOutcome,
    AggregatedPrediction,
    AggregatedVariant,
    EuRaceDetail,
    Predicted,
    PredictionResult,
    VariantOutcome,
)


# === Request Models ===

class ObservationSchema(BaseModel):
    """One known finish time."""
    race: str
    time: str = Field(description="SS, MM:SS, H:MM or HH:MM:SS")


class SinglePredictRequest(BaseModel):
    """Request for a single-observation prediction."""
    time: str
    source: str
    target: str
    mode: DataSourceMode = DataSourceMode.DEFAULT


class AggregatePredictRequest(BaseModel):
    """Request for a multi-observation prediction."""
    observations: List[ObservationSchema] = Field(min_length=1)
    target: str
    mode: DataSourceMode = DataSourceMode.DEFAULT


# === Response Models ===

class VariantPredictionSchema(BaseModel):
    """Predicted time or the reason there is none."""
    available: bool
    time: Optional[str] = None
    seconds: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: Optional[VariantOutcome]) -> Optional["VariantPredictionSchema"]:
        if outcome is None:
            return None
        if isinstance(outcome, Predicted):
            return cls(available=True, time=format_time(outcome.seconds), seconds=outcome.seconds)
        return cls(available=False, message=outcome.message)


class SinglePredictResponse(BaseModel):
    source: str
    target: str
    mode: DataSourceMode
    avg: Optional[VariantPredictionSchema] = None
    median: Optional[VariantPredictionSchema] = None
    winner: Optional[VariantPredictionSchema] = None

    @classmethod
    def build(
        cls, result: PredictionResult, source: str, target: str, mode: DataSourceMode
    ) -> "SinglePredictResponse":
        return cls(
            source=source,
            target=target,
            mode=mode,
            avg=VariantPredictionSchema.from_outcome(result.avg),
            median=VariantPredictionSchema.from_outcome(result.median),
            winner=VariantPredictionSchema.from_outcome(result.winner),
        )


class AggregatedVariantSchema(BaseModel):
    """Mean/min/max over usable observations, or a passthrough message."""
    available: bool
    time: Optional[str] = None
    min: Optional[str] = None
    max: Optional[str] = None
    used: int = 0
    message: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: Optional[AggregatedOutcome]) -> Optional["AggregatedVariantSchema"]:
        if outcome is None:
            return None
        if isinstance(outcome, AggregatedVariant):
            return cls(
                available=True,
                time=format_time(outcome.time_s),
                min=format_time(outcome.min_s),
                max=format_time(outcome.max_s),
                used=outcome.used,
            )
        return cls(available=False, message=outcome.message)


class AggregatePredictResponse(BaseModel):
    target: str
    mode: DataSourceMode
    avg: Optional[AggregatedVariantSchema] = None
    median: Optional[AggregatedVariantSchema] = None
    winner: Optional[AggregatedVariantSchema] = None
    total: int
    excluded: int
    warnings: List[str] = []

    @classmethod
    def build(cls, result: AggregatedPrediction) -> "AggregatePredictResponse":
        return cls(
            target=result.target,
            mode=result.mode,
            avg=AggregatedVariantSchema.from_outcome(result.avg),
            median=AggregatedVariantSchema.from_outcome(result.median),
            winner=AggregatedVariantSchema.from_outcome(result.winner),
            total=result.total,
            excluded=result.excluded,
            warnings=list(result.warnings),
        )


class EuRaceDetailSchema(BaseModel):
    event: str
    name: Optional[str] = None
    country: Optional[str] = None
    distance_km: Optional[float] = None
    year: Optional[int] = None
    finishers: Optional[int] = None
    duration: Optional[str] = None
    winning_time: str

    @classmethod
    def from_detail(cls, detail: EuRaceDetail) -> "EuRaceDetailSchema":
        return cls(
            event=detail.event,
            name=detail.name,
            country=detail.country,
            distance_km=detail.distance_km,
            year=detail.year,
            finishers=detail.finishers,
            duration=detail.duration,
            winning_time=format_time(detail.duration_s),
        )


class DataStatusSchema(BaseModel):
    loaded: bool
    races: int = 0
    default_ratios: int = 0
    eu_ratios: int = 0
    eu_races: int = 0
    loaded_at: Optional[str] = None
