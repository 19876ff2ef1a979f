"""Ratio lookup for an ordered race pair."""

from __future__ import annotations

from app.shared.constants import DataSourceMode

from .models import RatioRecord, RatioSnapshot


def resolve_ratio(
    snapshot: RatioSnapshot,
    source: str,
    target: str,
    mode: DataSourceMode = DataSourceMode.DEFAULT,
) -> RatioRecord | None:
    """Find the ratio record for (source, target) in the mode's table.

    Exact match only. No reverse-pair inversion and no chaining through
    an intermediate race: a missing pair is reported as missing.
    """
    return snapshot.table(mode).get(source, target)
