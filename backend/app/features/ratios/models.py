"""Data models for race ratios and predictions (dataclasses, no DB dependency)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from app.shared.constants import DataSourceMode, UnavailableReason, Variant


# =============================================================================
# Ratio data
# =============================================================================

@dataclass(frozen=True)
class RatioRecord:
    """Observed relationship between two races (ordered pair).

    A ratio is defined so that target_time ≈ source_time / ratio.
    """

    source: str
    target: str
    ratio_avg: float | None = None
    ratio_median: float | None = None
    ratio_winner: float | None = None

    def get(self, variant: Variant) -> float | None:
        if variant is Variant.AVG:
            return self.ratio_avg
        if variant is Variant.MEDIAN:
            return self.ratio_median
        return self.ratio_winner

    @property
    def has_any_ratio(self) -> bool:
        return any(
            r is not None and r > 0
            for r in (self.ratio_avg, self.ratio_median, self.ratio_winner)
        )


@dataclass(frozen=True)
class EuRaceDetail:
    """Presentation details of an EU race (winner feed)."""

    event: str  # "UTMB"
    name: str | None = None  # "Ultra-Trail du Mont-Blanc"
    country: str | None = None  # "FRA"
    distance_km: float | None = None  # 171.0
    year: int | None = None  # 2023
    finishers: int | None = None  # 1700
    duration: str | None = None  # "19:37:43" as in the feed
    duration_s: int = 0  # 70663


@dataclass(frozen=True)
class RatioTable:
    """Ratio records of one data source, keyed by (source, target)."""

    mode: DataSourceMode
    records: dict[tuple[str, str], RatioRecord] = field(default_factory=dict)

    def get(self, source: str, target: str) -> RatioRecord | None:
        return self.records.get((source, target))

    def race_names(self) -> set[str]:
        names: set[str] = set()
        for source, target in self.records:
            names.add(source)
            names.add(target)
        return names

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class RatioSnapshot:
    """Immutable view of all loaded ratio data.

    Built once per refresh and replaced wholesale; readers holding an
    old snapshot keep a consistent view.
    """

    tables: dict[DataSourceMode, RatioTable]
    race_names: tuple[str, ...] = ()
    eu_details: dict[str, EuRaceDetail] = field(default_factory=dict)
    loaded_at: datetime | None = None

    def table(self, mode: DataSourceMode) -> RatioTable:
        return self.tables.get(mode) or RatioTable(mode=mode)

    @property
    def is_empty(self) -> bool:
        return all(len(t) == 0 for t in self.tables.values())


# =============================================================================
# Predictions
# =============================================================================

@dataclass(frozen=True)
class Predicted:
    """A variant with a numeric predicted time."""

    seconds: int


@dataclass(frozen=True)
class Unavailable:
    """A variant without a prediction, and why."""

    reason: UnavailableReason

    @property
    def message(self) -> str:
        return self.reason.value


VariantOutcome = Union[Predicted, Unavailable]


@dataclass(frozen=True)
class Observation:
    """A user-supplied (race, finish time) pair."""

    race: str
    time: str  # as entered: "2:05:30", "45:10", ...


@dataclass(frozen=True)
class PredictionResult:
    """Prediction for one observation, per variant."""

    avg: VariantOutcome | None = None
    median: VariantOutcome | None = None
    winner: VariantOutcome | None = None

    def get(self, variant: Variant) -> VariantOutcome | None:
        return getattr(self, variant.value)

    @property
    def is_empty(self) -> bool:
        return self.avg is None and self.median is None and self.winner is None

    @property
    def has_prediction(self) -> bool:
        return any(
            isinstance(o, Predicted) for o in (self.avg, self.median, self.winner)
        )


@dataclass(frozen=True)
class AggregatedVariant:
    """Central estimate and band over the usable observations."""

    time_s: int  # mean of predicted seconds (floored)
    min_s: int
    max_s: int
    used: int  # observations that contributed


AggregatedOutcome = Union[AggregatedVariant, Unavailable]


@dataclass
class AggregatedPrediction:
    """Aggregation of several observations towards one target race."""

    target: str
    mode: DataSourceMode
    avg: AggregatedOutcome | None = None
    median: AggregatedOutcome | None = None
    winner: AggregatedOutcome | None = None
    total: int = 0  # observations submitted
    excluded: int = 0  # observations without any predicted variant
    warnings: list[str] = field(default_factory=list)

    def get(self, variant: Variant) -> AggregatedOutcome | None:
        return getattr(self, variant.value)

    @property
    def is_empty(self) -> bool:
        return self.avg is None and self.median is None and self.winner is None
