"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.bmi_record import BMIRecord

__all__ = [
    "BMIRecord",
]
