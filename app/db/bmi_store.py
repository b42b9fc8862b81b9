"""Relational store for BMI rows (SQLAlchemy async session)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFound, StorageError
from app.models.bmi_record import BMIRecord


class SQLBMIStore:
    """Persists and retrieves ``bmi_records`` rows. Never derives or validates.

    Every write commits on its own, so a record inserted here survives a later
    failure in the same request (e.g. the vector write of a dual-write).
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, height: float, weight: float, value: float, created_at: datetime) -> int:
        row = BMIRecord(height=height, weight=weight, value=value, created_at=created_at)
        try:
            self.db.add(row)
            await self.db.flush()
            record_id = row.id
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError("failed to insert BMI record", detail=str(e)) from e
        return record_id

    async def get_by_id(self, record_id: int) -> BMIRecord:
        try:
            result = await self.db.execute(
                select(BMIRecord)
                .where(BMIRecord.id == record_id)
                .execution_options(populate_existing=True)
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"failed to fetch BMI record {record_id}", detail=str(e)) from e
        if row is None:
            raise NotFound("BMI record not found")
        return row

    async def get_all(self) -> list[BMIRecord]:
        try:
            result = await self.db.execute(
                select(BMIRecord).order_by(BMIRecord.id).execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise StorageError("failed to list BMI records", detail=str(e)) from e
        return list(result.scalars().all())

    async def update_by_id(self, record_id: int, height: float, weight: float, value: float) -> int:
        """Return the number of rows affected (0 when the id does not exist)."""
        stmt = (
            update(BMIRecord)
            .where(BMIRecord.id == record_id)
            .values(height=height, weight=weight, value=value)
            .execution_options(synchronize_session=False)
        )
        return await self._execute_write(stmt, f"failed to update BMI record {record_id}")

    async def delete_by_id(self, record_id: int) -> int:
        """Return the number of rows affected (0 when the id does not exist)."""
        stmt = (
            delete(BMIRecord)
            .where(BMIRecord.id == record_id)
            .execution_options(synchronize_session=False)
        )
        return await self._execute_write(stmt, f"failed to delete BMI record {record_id}")

    async def _execute_write(self, stmt, error_message: str) -> int:
        try:
            result = await self.db.execute(stmt)
            affected = result.rowcount
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(error_message, detail=str(e)) from e
        return affected
