"""
Shared route dependencies.
"""

from fastapi import HTTPException

from app.features.ratios import RatioPredictionService, ratio_store


def get_ratio_service() -> RatioPredictionService:
    """Service over the current snapshot (503 until the first load succeeds)."""
    snapshot = ratio_store.snapshot
    if snapshot is None:
        raise HTTPException(
            status_code=503,
            detail="Race data not loaded. Please try again later.",
        )
    return RatioPredictionService(snapshot)
