"""BMI Pydantic schemas: requests, records and vector matches."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BMICalculationRequest(BaseModel):
    height: float = Field(..., description="Height in metres")
    weight: float = Field(..., description="Weight in kilograms")


class BMIUpdate(BaseModel):
    height: float = Field(..., description="Height in metres")
    weight: float = Field(..., description="Weight in kilograms")


class BMIRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    height: float
    weight: float
    value: float
    category: Optional[str] = None
    risk: Optional[str] = None
    created_at: datetime


class VectorQueryRequest(BaseModel):
    query_vector: list[float] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Embedding to search with: [height, weight, value]",
    )


class ScoredMatch(BaseModel):
    id: int
    score: float
    payload: dict[str, Any] = Field(default_factory=dict)


class MessageResponse(BaseModel):
    message: str
