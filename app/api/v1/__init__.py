"""API v1 router aggregation."""

from fastapi import APIRouter

from app.api.v1.endpoints import bmi, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(bmi.router, prefix="/bmi", tags=["bmi"])
