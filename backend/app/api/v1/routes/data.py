"""
Data Routes

Ratio feed status and manual refresh.
"""

from fastapi import APIRouter, HTTPException

from app.features.ratios import RatioDataError, ratio_store
from app.features.ratios.schemas import DataStatusSchema
from app.shared.constants import DataSourceMode

router = APIRouter()


def _status() -> DataStatusSchema:
    snapshot = ratio_store.snapshot
    if snapshot is None:
        return DataStatusSchema(loaded=False)
    return DataStatusSchema(
        loaded=True,
        races=len(snapshot.race_names),
        default_ratios=len(snapshot.table(DataSourceMode.DEFAULT)),
        eu_ratios=len(snapshot.table(DataSourceMode.EU_WINNER)),
        eu_races=len(snapshot.eu_details),
        loaded_at=snapshot.loaded_at.isoformat() if snapshot.loaded_at else None,
    )


@router.get("/status", response_model=DataStatusSchema)
async def data_status():
    """What is currently loaded."""
    return _status()


@router.post("/refresh", response_model=DataStatusSchema)
async def refresh_data():
    """Re-fetch the ratio feeds. On failure the previous data stays active."""
    try:
        await ratio_store.refresh()
    except RatioDataError as e:
        raise HTTPException(
            status_code=502,
            detail=f"Failed to load race data: {e}",
        )
    return _status()
