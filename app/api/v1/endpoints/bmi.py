"""BMI endpoints: calculate, CRUD and similarity search."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import MAX_RECORD_ID
from app.core.exceptions import ValidationError
from app.db.bmi_store import SQLBMIStore
from app.db.session import get_db
from app.schemas.bmi import (
    BMICalculationRequest,
    BMIRead,
    BMIUpdate,
    MessageResponse,
    ScoredMatch,
    VectorQueryRequest,
)
from app.services.bmi import BMIService, is_valid_measurement

router = APIRouter()

# Ids outside the INTEGER primary key range are rejected as 400 before reaching the store
RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID, description="BMI record id")]


def get_bmi_service(request: Request, db: AsyncSession = Depends(get_db)) -> BMIService:
    """Per-request service: fresh SQL store on this session, shared vector store from app state."""
    vectors = getattr(request.app.state, "vector_store", None)
    return BMIService(SQLBMIStore(db), vectors)


@router.post("", response_model=BMIRead, response_model_exclude_none=True)
async def calculate_bmi(payload: BMICalculationRequest, service: BMIService = Depends(get_bmi_service)):
    """Calculate BMI and store it. Also writes the embedding when a vector store is configured."""
    if not is_valid_measurement(payload.height, payload.weight):
        raise ValidationError("Height and weight must be positive numbers.")
    if service.has_vector_store:
        return await service.store_with_embedding(payload.height, payload.weight)
    return await service.calculate_and_store(payload.height, payload.weight)


@router.post("/query", response_model=list[ScoredMatch])
async def query_bmi(payload: VectorQueryRequest, service: BMIService = Depends(get_bmi_service)):
    """Nearest stored records to a [height, weight, value] vector (top 10, cosine)."""
    return await service.query_by_vector(payload.query_vector)


@router.get("", response_model=list[BMIRead], response_model_exclude_none=True)
async def list_bmi(service: BMIService = Depends(get_bmi_service)):
    """All BMI records, each with category/risk derived from its value."""
    return await service.get_all()


@router.get("/{record_id}", response_model=BMIRead, response_model_exclude_none=True)
async def get_bmi(record_id: RecordId, service: BMIService = Depends(get_bmi_service)):
    """Get a single BMI record."""
    return await service.get_by_id(record_id)


@router.put("/{record_id}", response_model=MessageResponse)
async def update_bmi(record_id: RecordId, payload: BMIUpdate, service: BMIService = Depends(get_bmi_service)):
    """Replace height/weight; value is recomputed."""
    await service.update(record_id, payload.height, payload.weight)
    return MessageResponse(message="BMI record updated successfully")


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_bmi(record_id: RecordId, service: BMIService = Depends(get_bmi_service)):
    """Delete a BMI record (hard delete)."""
    await service.delete(record_id)
    return MessageResponse(message="BMI record deleted successfully")
