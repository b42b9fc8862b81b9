"""BMI calculation service.

Computes value = weight / height^2, classifies it, and orchestrates writes
and reads against the relational store and (optionally) the vector store.
Category and risk are never read back from storage: every read path derives
them from ``value`` again.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Protocol

from app.core.constants import (
    NORMAL_MAX,
    OBESE_MAX,
    OBESE_MIN,
    OBESE_SEVERE_ABOVE,
    OVERWEIGHT_MAX,
    OVERWEIGHT_MIN,
    QUERY_RESULT_LIMIT,
    UNDERWEIGHT_BELOW,
)
from app.core.exceptions import (
    DualWriteError,
    NotFound,
    StorageError,
    ValidationError,
    VectorStoreDisabled,
)
from app.schemas.bmi import BMIRead, ScoredMatch

logger = logging.getLogger(__name__)


class BMIRecordStore(Protocol):
    async def insert(self, height: float, weight: float, value: float, created_at: datetime) -> int: ...

    async def get_by_id(self, record_id: int) -> Any: ...

    async def get_all(self) -> list[Any]: ...

    async def update_by_id(self, record_id: int, height: float, weight: float, value: float) -> int: ...

    async def delete_by_id(self, record_id: int) -> int: ...


class BMIVectorStore(Protocol):
    async def create_collection(self) -> None: ...

    async def upsert(self, point_id: int, vector: list[float], payload: dict[str, Any]) -> None: ...

    async def nearest_neighbors(
        self, query_vector: list[float], limit: int = ..., include_payload: bool = ...
    ) -> list[ScoredMatch]: ...

    async def collection_info(self) -> dict[str, Any]: ...


# ── Pure helpers ─────────────────────────────────────────────────────────

def calculate_bmi(height: float, weight: float) -> float:
    """BMI = weight (kg) / height (m)^2."""
    return weight / (height * height)


def classify_bmi(value: float) -> tuple[str, str]:
    """Return (category, risk) for a BMI value.

    Bands are closed intervals; values in the gaps between them (22.9-23,
    24.9-25, 29.9-30 inclusive of 30) return empty strings.
    """
    if value < UNDERWEIGHT_BELOW:
        return "underweight", "above-normal risk"
    if UNDERWEIGHT_BELOW <= value <= NORMAL_MAX:
        return "normal", "normal risk"
    if OVERWEIGHT_MIN <= value <= OVERWEIGHT_MAX:
        return "overweight / obesity class 1", "elevated risk level 1"
    if OBESE_MIN <= value <= OBESE_MAX:
        return "obese / obesity class 2", "elevated risk level 2"
    if value > OBESE_SEVERE_ABOVE:
        return "obese / obesity class 3", "elevated risk level 3"
    return "", ""


def is_valid_measurement(height: float, weight: float) -> bool:
    """True when both are finite and strictly positive (NaN and inf are rejected)."""
    return all(math.isfinite(x) and x > 0 for x in (height, weight))


def _validate(height: float, weight: float) -> None:
    if not is_valid_measurement(height, weight):
        raise ValidationError("height and weight must be positive finite numbers")


def _to_read(row: Any) -> BMIRead:
    """Build BMIRead from a stored row and attach freshly derived category/risk."""
    read = BMIRead.model_validate(row)
    category, risk = classify_bmi(read.value)
    read.category = category or None
    read.risk = risk or None
    return read


# ── Service ──────────────────────────────────────────────────────────────

class BMIService:
    def __init__(self, records: BMIRecordStore, vectors: BMIVectorStore | None = None) -> None:
        self.records = records
        self.vectors = vectors

    @property
    def has_vector_store(self) -> bool:
        return self.vectors is not None

    async def calculate_and_store(self, height: float, weight: float) -> BMIRead:
        """Validate, compute and persist a new record in the relational store."""
        _validate(height, weight)
        value = calculate_bmi(height, weight)
        created_at = datetime.now(timezone.utc)
        record_id = await self.records.insert(height, weight, value, created_at)
        logger.info("Stored BMI record %s (value=%.2f)", record_id, value)
        category, risk = classify_bmi(value)
        return BMIRead(
            id=record_id,
            height=height,
            weight=weight,
            value=value,
            category=category or None,
            risk=risk or None,
            created_at=created_at,
        )

    async def store_with_embedding(self, height: float, weight: float) -> BMIRead:
        """
        Dual-write: relational insert first, then the embedding upsert.
        The two writes are not atomic; if the vector write fails the relational
        row stays and DualWriteError carries its id.
        """
        if self.vectors is None:
            raise VectorStoreDisabled("vector store is not configured")
        _validate(height, weight)
        value = calculate_bmi(height, weight)
        category, risk = classify_bmi(value)
        created_at = datetime.now(timezone.utc)

        record_id = await self.records.insert(height, weight, value, created_at)
        try:
            await self.vectors.upsert(
                record_id,
                [height, weight, value],
                {"category": category, "risk": risk, "created_at": created_at.isoformat()},
            )
        except StorageError as e:
            logger.exception("Vector write failed for BMI record %s", record_id)
            raise DualWriteError(
                f"BMI record {record_id} stored but vector write failed: {e.message}",
                record_id=record_id,
                detail=e.detail,
            ) from e

        logger.info("Stored BMI record %s with embedding (value=%.2f)", record_id, value)
        return BMIRead(
            id=record_id,
            height=height,
            weight=weight,
            value=value,
            category=category or None,
            risk=risk or None,
            created_at=created_at,
        )

    async def get_by_id(self, record_id: int) -> BMIRead:
        row = await self.records.get_by_id(record_id)
        return _to_read(row)

    async def get_all(self) -> list[BMIRead]:
        rows = await self.records.get_all()
        return [_to_read(row) for row in rows]

    async def update(self, record_id: int, height: float, weight: float) -> None:
        """Recompute value from the new height/weight and persist all three."""
        _validate(height, weight)
        value = calculate_bmi(height, weight)
        affected = await self.records.update_by_id(record_id, height, weight, value)
        if affected == 0:
            raise NotFound("no record found to update")
        logger.info("Updated BMI record %s (value=%.2f)", record_id, value)

    async def delete(self, record_id: int) -> None:
        affected = await self.records.delete_by_id(record_id)
        if affected == 0:
            raise NotFound("no record found to delete")
        logger.info("Deleted BMI record %s", record_id)

    async def query_by_vector(self, query_vector: list[float]) -> list[ScoredMatch]:
        if self.vectors is None:
            raise VectorStoreDisabled("vector store is not configured")
        try:
            return await self.vectors.nearest_neighbors(
                query_vector, limit=QUERY_RESULT_LIMIT, include_payload=True
            )
        except StorageError as e:
            raise StorageError(f"vector query failed: {e.message}", detail=e.detail) from e
