"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from app.api.v1.routes import races, predict, data

api_router = APIRouter()

api_router.include_router(races.router, prefix="/races", tags=["Races"])
api_router.include_router(predict.router, prefix="/predict", tags=["Prediction"])
api_router.include_router(data.router, prefix="/data", tags=["Data"])
