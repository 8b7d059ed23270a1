"""Repository for the vitals collection."""

from glycocare_api.models import VitalsRecord

from .base import BaseRepository


class VitalsRepository(BaseRepository):
    """Append-only vitals readings."""

    async def append(self, record: VitalsRecord) -> str:
        """Store a vitals snapshot and return its document ID."""
        document = record.model_dump()
        return await self.insert_one(document)
