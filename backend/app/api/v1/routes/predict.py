"""
Prediction Routes

Endpoints for ratio-based time predictions.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.dependencies import get_ratio_service
from app.features.ratios import (
    InvalidObservationError,
    Observation,
    RatioPredictionService,
)
from app.features.ratios.schemas import (
    AggregatePredictRequest,
    AggregatePredictResponse,
    SinglePredictRequest,
    SinglePredictResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

NO_PREDICTION_MESSAGE = "No valid predictions available"


@router.post("", response_model=AggregatePredictResponse)
async def predict_aggregate(
    request: AggregatePredictRequest,
    service: RatioPredictionService = Depends(get_ratio_service),
):
    """Predict the target race from one or more known finish times."""
    observations = [Observation(race=o.race, time=o.time) for o in request.observations]
    try:
        result = service.predict_aggregate(observations, request.target, request.mode)
    except InvalidObservationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if result is None:
        raise HTTPException(status_code=404, detail=NO_PREDICTION_MESSAGE)

    for warning in result.warnings:
        logger.info(f"Prediction for {result.target}: {warning}")
    return AggregatePredictResponse.build(result)


@router.post("/single", response_model=SinglePredictResponse)
async def predict_single(
    request: SinglePredictRequest,
    service: RatioPredictionService = Depends(get_ratio_service),
):
    """Predict the target race from one known finish time."""
    try:
        result = service.predict_single(
            request.time, request.source, request.target, request.mode
        )
    except InvalidObservationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if result.is_empty:
        raise HTTPException(status_code=404, detail=NO_PREDICTION_MESSAGE)

    return SinglePredictResponse.build(
        result, request.source.strip(), request.target.strip(), request.mode
    )
