"""
Races API Routes

Endpoints for race names, countries and EU race details.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.v1.dependencies import get_ratio_service
from app.features.ratios import RatioPredictionService
from app.features.ratios.schemas import EuRaceDetailSchema
from app.shared.constants import DataSourceMode

router = APIRouter()


@router.get("", response_model=list[str])
async def list_races(
    mode: Optional[DataSourceMode] = None,
    country: Optional[str] = Query(default=None, description="EU winner mode only"),
    service: RatioPredictionService = Depends(get_ratio_service),
):
    """Sorted race names (all, per data source, or per EU country)."""
    return service.list_race_names(mode=mode, country=country)


@router.get("/countries", response_model=list[str])
async def list_countries(
    service: RatioPredictionService = Depends(get_ratio_service),
):
    """Countries present in the EU winner feed."""
    return service.list_countries()


@router.get("/{name}", response_model=EuRaceDetailSchema)
async def get_race(
    name: str,
    service: RatioPredictionService = Depends(get_ratio_service),
):
    """EU race details (country, distance, winning time...)."""
    detail = service.get_race_detail(name)
    if not detail:
        raise HTTPException(status_code=404, detail=f"Race not found: {name}")
    return EuRaceDetailSchema.from_detail(detail)
