"""Repository for the users collection (physiological profiles)."""

from typing import Any

from glycocare_api.models import UserProfile

from .base import BaseRepository


class ProfileRepository(BaseRepository):
    """
    Read-only access to user profiles.

    Documents use the app's column names (`has_bp`, `diabetes_type`, ...);
    missing or null attributes fall back to the neutral defaults.
    """

    async def get_profile(self, user_id: str) -> UserProfile | None:
        """
        Get the profile of a user.

        Args:
            user_id: User identifier

        Returns:
            UserProfile or None if the user has no profile document
        """
        doc = await self.collection.find_one({"user_id": user_id})
        if doc is None:
            return None
        return self._profile_from_doc(doc)

    @staticmethod
    def _profile_from_doc(doc: dict[str, Any]) -> UserProfile:
        defaults = UserProfile()
        return UserProfile(
            age=doc.get("age") or defaults.age,
            weight=doc.get("weight") or defaults.weight,
            diabetes_type=doc.get("diabetes_type") or None,
            has_blood_pressure_condition=bool(doc.get("has_bp", False)),
            has_heart_condition=bool(doc.get("has_heart_condition", False)),
        )
