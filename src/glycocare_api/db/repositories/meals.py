"""Repository for the meals collection (analysis results)."""

from glycocare_api.models import MealRecord

from .base import BaseRepository


class MealRepository(BaseRepository):
    """Append-only meal history written after each analysis."""

    async def append(self, record: MealRecord) -> str:
        """
        Store a meal record.

        Args:
            record: Meal analysis to store

        Returns:
            Inserted document ID
        """
        document = record.model_dump()
        document["status"] = record.status.value
        return await self.insert_one(document)
